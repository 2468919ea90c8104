from storefront.models.documents import ProductDocument
from storefront.repositories.base_repository import MongoRepository


class ProductRepository(MongoRepository):
    collection_name = "products"
    document_cls = ProductDocument
    references = {"category": "categories"}
