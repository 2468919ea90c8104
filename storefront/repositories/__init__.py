from .base_repository import MongoRepository
from .category_repository import CategoryRepository
from .order_repository import OrderRepository
from .product_repository import ProductRepository
from .query import Populate, Query, parse_projection
from .user_repository import UserRepository

__all__ = [
    "CategoryRepository",
    "MongoRepository",
    "OrderRepository",
    "Populate",
    "ProductRepository",
    "Query",
    "UserRepository",
    "parse_projection",
]
