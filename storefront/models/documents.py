"""Pydantic models describing the documents persisted in each MongoDB collection.

Repositories validate inserts through these models. Reference fields hold ids as strings
here and are stored as ObjectIds by the repository layer.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from storefront.core.constants import CUSTOMER_ROLE, DEFAULT_ORDER_STATUS


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampedDocument(BaseModel):
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class UserDocument(TimestampedDocument):
    """Registered customer or admin."""

    name: str
    email: str
    password: str = Field(..., description="PBKDF2 password hash")
    phone: str
    address: str
    answer: str = Field(..., description="Security-question answer used for password resets")
    role: int = CUSTOMER_ROLE


class CategoryDocument(TimestampedDocument):
    name: str
    slug: str


class Photo(BaseModel):
    data: bytes
    content_type: str


class ProductDocument(TimestampedDocument):
    name: str
    slug: str
    description: str
    price: float
    category: str
    quantity: int
    shipping: Optional[bool] = None
    photo: Optional[Photo] = None


class OrderDocument(TimestampedDocument):
    products: List[str] = Field(default_factory=list)
    payment: Dict[str, Any] = Field(default_factory=dict)
    buyer: str
    status: str = DEFAULT_ORDER_STATUS


__all__ = [
    "CategoryDocument",
    "OrderDocument",
    "Photo",
    "ProductDocument",
    "TimestampedDocument",
    "UserDocument",
    "utcnow",
]
