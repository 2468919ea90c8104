from .auth_service import AuthController, public_user
from .category_service import CategoryController
from .order_service import OrderController
from .product_service import ProductController

__all__ = [
    "AuthController",
    "CategoryController",
    "OrderController",
    "ProductController",
    "public_user",
]
