"""Product request models."""

from typing import List, Optional, Protocol

from pydantic import BaseModel, Field


class ProductForm(BaseModel):
    """Multipart form fields sent when creating or updating a product."""

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = Field(None, description="Category id")
    quantity: Optional[int] = None
    shipping: Optional[bool] = None


class PhotoUpload(Protocol):
    """The part of an uploaded file the product controller relies on (FastAPI's UploadFile)."""

    size: Optional[int]
    content_type: Optional[str]

    async def read(self, size: int = -1) -> bytes: ...


class ProductFilterPayload(BaseModel):
    """Request model for filtering the catalog."""

    checked: List[str] = Field(default_factory=list, description="Category ids to match")
    radio: List[float] = Field(default_factory=list, description="Price range as [min, max]")
