from typing import Optional

from pydantic import BaseModel, Field


class CategoryPayload(BaseModel):
    """Request model for creating or renaming a category."""

    name: Optional[str] = Field(None, description="Category name")
