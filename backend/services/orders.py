# backend/services/orders.py
import logging
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import transaction
from models.cart import CartItem
from models.order import Order
from models.product import Product
from schemas.order import OrderItemIn
from services.accounts import get_user
from services.catalog import effective_price
from utils.errors import InsufficientStock, NotFound, StorageError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_SHIPPING_ADDRESS = "Address not provided"


def place_order(
    db: Session,
    user_id: int,
    items: Sequence[OrderItemIn],
    total,
    shipping_address: Optional[str] = None,
) -> Order:
    """
    Turns the user's cart into an order in one transaction: the order row is
    written, the user's cart is emptied and every ordered product's stock is
    decremented. A missing product or a decrement below zero aborts the whole
    commit and leaves order, cart and stock untouched.
    """
    if not user_id or not items or total is None:
        raise ValidationError("userId, items, and total are required")
    if Decimal(str(total)) <= 0:
        raise ValidationError("total must be greater than zero")

    try:
        with transaction(db):
            get_user(db, user_id)

            # 1. Order row
            order = Order(
                user_id=user_id,
                items=[],
                total=Decimal(str(total)),
                shipping_address=shipping_address or DEFAULT_SHIPPING_ADDRESS,
            )
            db.add(order)

            # 2. Empty the cart
            db.query(CartItem).filter(CartItem.user_id == user_id).delete(synchronize_session=False)

            # 3. Deduct stock; repeated lines of one product are checked against their sum.
            # Rows are locked in id order.
            needed = {}
            for line in items:
                needed[line.product_id] = needed.get(line.product_id, 0) + line.quantity

            products = {}
            for product_id in sorted(needed):
                product = db.query(Product).filter(Product.id == product_id).with_for_update().first()
                if not product:
                    raise NotFound(f"Product {product_id} not found")
                if product.stock_quantity < needed[product_id]:
                    raise InsufficientStock(
                        f"Only {product.stock_quantity} items of {product.name} in stock"
                    )
                product.stock_quantity -= needed[product_id]
                products[product_id] = product

            snapshot = []
            for line in items:
                snapshot.append({
                    "product_id": line.product_id,
                    "quantity": line.quantity,
                    "price": float(effective_price(products[line.product_id])),
                })
            order.items = snapshot
            db.flush()
    except SQLAlchemyError as e:
        logger.exception("Order commit failed for user %s: %s", user_id, e)
        raise StorageError("Order failed")

    logger.info("Order %s placed: user=%s lines=%s total=%s", order.id, user_id, len(snapshot), total)
    return order


def list_orders(db: Session, user_id: int) -> List[Order]:
    if not user_id:
        raise ValidationError("User ID required")
    try:
        return (
            db.query(Order)
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.exception("Order listing failed: %s", e)
        raise StorageError("Failed to fetch orders")


def get_order(db: Session, user_id: int, order_id: int) -> Order:
    if not user_id:
        raise ValidationError("User ID required")
    try:
        order = db.query(Order).filter(Order.id == order_id).first()
    except SQLAlchemyError as e:
        logger.exception("Order lookup failed: %s", e)
        raise StorageError("Failed to fetch order")
    # Another user's order is reported the same as a missing one
    if not order or order.user_id != user_id:
        raise NotFound("Order not found")
    return order
