from .auth import AuthGate, extract_token
from .exceptions import DocumentNotFoundError, GateRejection
from .logging import get_logger, setup_logger
from .security import Identity, TokenSigner, hash_password, verify_password
from .settings import StorefrontSettings, get_settings, reset_settings

__all__ = [
    "AuthGate",
    "DocumentNotFoundError",
    "GateRejection",
    "Identity",
    "StorefrontSettings",
    "TokenSigner",
    "extract_token",
    "get_logger",
    "get_settings",
    "hash_password",
    "reset_settings",
    "setup_logger",
    "verify_password",
]
