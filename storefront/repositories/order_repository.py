from storefront.models.documents import OrderDocument
from storefront.repositories.base_repository import MongoRepository


class OrderRepository(MongoRepository):
    collection_name = "orders"
    document_cls = OrderDocument
    references = {"products": "products", "buyer": "users"}
