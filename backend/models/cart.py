# backend/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint, CheckConstraint, func
from database import Base

# A single cart line: one product and its quantity for one user
class CartItem(Base):
    __tablename__ = "cart" # Table name

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False) # Owning user
    product_id = Column(Integer, ForeignKey("products.id"), index=True, nullable=False) # No cascade on product delete
    quantity = Column(Integer, CheckConstraint("quantity >= 1"), nullable=False, default=1)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        # One line per (user, product); repeated adds merge into it
        UniqueConstraint("user_id", "product_id", name="uq_cart_user_product"),
    )
