from typing import List, Optional

from pydantic import BaseModel, Field


class OrderStatusPayload(BaseModel):
    status: Optional[str] = Field(None, description="New order status, free text")


class CheckoutPayload(BaseModel):
    products: List[str] = Field(default_factory=list, description="Ids of the products in the cart")
