from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

# Request bodies use the SPA's camelCase keys; snake_case is accepted as well
class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

# Request schema for adding an item to the cart
class CartAddItem(CamelModel):
    user_id: int = Field(alias="userId")
    product_id: int = Field(alias="productId")
    quantity: int = Field(default=1, ge=1)

# Request schema for overwriting a line's quantity (< 1 removes the line)
class CartUpdateItem(CamelModel):
    user_id: int = Field(alias="userId")
    quantity: int

# A cart line joined with the current product data
class CartLineOut(BaseModel):
    id: int
    user_id: int
    product_id: int
    quantity: int
    updated_at: Optional[datetime] = None
    name: str
    price: float
    discount_percent: int = 0
    image: Optional[str] = None
    sale_price: Optional[float] = None

# Envelope for GET /cart
class CartOut(BaseModel):
    success: bool = True
    cart_items: List[CartLineOut]
    subtotal: float

# Result of an add/update/remove
class CartChangeData(BaseModel):
    itemId: Optional[int] = None
    userId: int
    productId: Optional[int] = None
    quantity: Optional[int] = None

class CartChangeResponse(BaseModel):
    success: bool = True
    message: str
    action: str
    data: CartChangeData
