from .auth import ForgotPasswordPayload, LoginPayload, ProfileUpdatePayload, RegisterPayload
from .category import CategoryPayload
from .documents import CategoryDocument, OrderDocument, Photo, ProductDocument, UserDocument
from .order import CheckoutPayload, OrderStatusPayload
from .product import PhotoUpload, ProductFilterPayload, ProductForm

__all__ = [
    # Auth
    "ForgotPasswordPayload",
    "LoginPayload",
    "ProfileUpdatePayload",
    "RegisterPayload",
    # Category
    "CategoryPayload",
    # Orders
    "CheckoutPayload",
    "OrderStatusPayload",
    # Products
    "PhotoUpload",
    "ProductFilterPayload",
    "ProductForm",
    # Documents
    "CategoryDocument",
    "OrderDocument",
    "Photo",
    "ProductDocument",
    "UserDocument",
]
