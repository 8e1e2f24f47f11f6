from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Any, List, Optional
from datetime import datetime


# One line of a checkout request. The SPA posts its cart lines, so the
# product reference may arrive as `product_id` or, in the bare form, as `id`.
# Any price fields on the line are ignored; the order is priced server-side.
class OrderItemIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int
    quantity: int = Field(ge=1)

    @model_validator(mode="before")
    @classmethod
    def _product_reference(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if data.get("product_id") is None:
                data["product_id"] = data.get("productId", data.get("id"))
        return data


# Input schema for placing an order
class OrderCreatePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    items: List[OrderItemIn] = Field(min_length=1)
    total: float = Field(gt=0)
    shipping_address: Optional[str] = Field(default=None, alias="shippingAddress")


# Snapshot line stored on the order
class OrderLineOut(BaseModel):
    product_id: int
    quantity: int
    price: float


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    items: List[OrderLineOut]
    total: float
    shipping_address: str
    status: str
    created_at: Optional[datetime] = None


class OrderCreatedResponse(BaseModel):
    success: bool = True
    message: str = "Order created"
    orderId: int


class OrderListResponse(BaseModel):
    success: bool = True
    orders: List[OrderOut]


class OrderResponse(BaseModel):
    success: bool = True
    order: OrderOut
