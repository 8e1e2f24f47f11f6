# backend/models/product.py
from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, CheckConstraint, func
from database import Base

# Model Product
# A catalog entry: list price, optional percentage discount, stock level
# and the flags the storefront sorts on.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(String)
    category = Column(String, index=True)
    image = Column(String, nullable=True)

    # Pricing, guarded by check constraints.
    price = Column(Numeric(10, 2), CheckConstraint("price >= 0"), nullable=False)
    discount_percent = Column(
        Integer, CheckConstraint("discount_percent >= 0 AND discount_percent <= 100"),
        nullable=False, default=0, server_default="0",
    )

    stock_quantity = Column(Integer, CheckConstraint("stock_quantity >= 0"), nullable=False, default=0)

    featured = Column(Boolean, nullable=False, default=False, server_default="0")
    created_at = Column(DateTime, server_default=func.now(), index=True)
