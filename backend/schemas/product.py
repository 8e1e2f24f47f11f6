# backend/schemas/product.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict, computed_field
from typing import Optional, List

from services.catalog import sale_price as discounted_price


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Catalog entry as served to the storefront
class ProductOut(ORMBase):
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    price: float
    discount_percent: int = 0
    stock_quantity: int
    featured: bool = False
    created_at: Optional[datetime] = None

    @computed_field
    @property
    def sale_price(self) -> Optional[float]:
        value = discounted_price(self.price, self.discount_percent)
        return float(value) if value is not None else None


# Envelope for GET /products
class ProductListResponse(BaseModel):
    success: bool = True
    count: int
    products: List[ProductOut]


class ProductResponse(BaseModel):
    success: bool = True
    product: ProductOut


class CategoryListResponse(BaseModel):
    success: bool = True
    categories: List[str]
