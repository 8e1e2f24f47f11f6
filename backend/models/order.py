from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, JSON, func
from database import Base

# Placed order. `items` is a snapshot of the lines at checkout
# (product_id, quantity, price) and is never rewritten afterwards.
class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    items = Column(JSON, nullable=False)
    total = Column(Numeric(10, 2), nullable=False)
    shipping_address = Column(String, nullable=False, default="Address not provided")
    status = Column(String, nullable=False, default="placed")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
