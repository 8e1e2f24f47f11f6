# backend/services/cart.py
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from database import transaction
from models.cart import CartItem
from models.product import Product
from schemas.cart import CartLineOut
from services.accounts import get_user
from services.catalog import CENT, sale_price
from utils.errors import DuplicateEntry, InsufficientStock, NotFound, StorageError, ValidationError
from utils.locks import KeyedLock

logger = logging.getLogger(__name__)

# Serializes read-modify-write of a line per (user_id, product_id)
_line_locks = KeyedLock()


@dataclass
class CartResult:
    user_id: int
    item_id: Optional[int]
    product_id: Optional[int]
    quantity: Optional[int]
    action: str  # added | updated | removed | noop


def add_item(db: Session, user_id: int, product_id: int, quantity: int = 1,
             recheck_on_merge: Optional[bool] = None) -> CartResult:
    """Put `quantity` of a product in the user's cart, merging into an existing line.

    Stock is checked against the requested quantity. When the line already
    exists the quantities are summed; the sum is checked against stock as well
    unless ``recheck_on_merge`` (default: ``CART_MERGE_STOCK_CHECK``) is off.
    """
    if user_id is None or product_id is None:
        raise ValidationError("userId and productId are required")
    if quantity is None or quantity < 1:
        raise ValidationError("quantity must be at least 1")
    if recheck_on_merge is None:
        recheck_on_merge = settings.CART_MERGE_STOCK_CHECK

    with _line_locks.hold((user_id, product_id)):
        try:
            with transaction(db):
                get_user(db, user_id)
                product = db.query(Product).filter(Product.id == product_id).first()
                if not product:
                    raise NotFound("Product not found")
                if product.stock_quantity < quantity:
                    raise InsufficientStock(f"Only {product.stock_quantity} items in stock")

                item = (
                    db.query(CartItem)
                    .filter(CartItem.user_id == user_id, CartItem.product_id == product_id)
                    .with_for_update()
                    .first()
                )
                if item:
                    new_quantity = item.quantity + quantity
                    if recheck_on_merge and new_quantity > product.stock_quantity:
                        raise InsufficientStock(f"Only {product.stock_quantity} items in stock")
                    item.quantity = new_quantity
                    item.updated_at = func.now()
                    action = "updated"
                else:
                    item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
                    db.add(item)
                    action = "added"
        except IntegrityError:
            # User and product were checked above, so this is the (user, product) unique pair
            raise DuplicateEntry(
                "Item already in cart. Use update endpoint to change quantity.",
                details="DUPLICATE_ITEM",
            )
        except SQLAlchemyError as e:
            logger.exception("Add to cart failed: %s", e)
            raise StorageError("Failed to add to cart")

        logger.info("Cart %s: user=%s product=%s quantity=%s", action, user_id, product_id, item.quantity)
        return CartResult(user_id=user_id, item_id=item.id, product_id=product_id,
                          quantity=item.quantity, action=action)


def update_quantity(db: Session, user_id: int, item_id: int, quantity: int) -> CartResult:
    """Overwrite a line's quantity without a stock check; below 1 the line is removed."""
    if user_id is None or quantity is None:
        raise ValidationError("userId and quantity are required")

    try:
        with transaction(db):
            item = db.query(CartItem).filter(CartItem.id == item_id, CartItem.user_id == user_id).first()
            if not item:
                return CartResult(user_id=user_id, item_id=item_id, product_id=None,
                                  quantity=None, action="noop")
            product_id = item.product_id
            if quantity < 1:
                db.delete(item)
                action = "removed"
            else:
                item.quantity = quantity
                action = "updated"
    except SQLAlchemyError as e:
        logger.exception("Cart update failed: %s", e)
        raise StorageError("Failed to update cart")

    return CartResult(user_id=user_id, item_id=item_id, product_id=product_id,
                      quantity=quantity if action == "updated" else None, action=action)


def remove_item(db: Session, user_id: int, item_id: int) -> CartResult:
    # Removing a line that is not there is not an error
    if user_id is None:
        raise ValidationError("User ID required in query params")
    try:
        with transaction(db):
            db.query(CartItem).filter(
                CartItem.id == item_id, CartItem.user_id == user_id
            ).delete(synchronize_session=False)
    except SQLAlchemyError as e:
        logger.exception("Cart removal failed: %s", e)
        raise StorageError("Failed to remove item")
    return CartResult(user_id=user_id, item_id=item_id, product_id=None, quantity=None, action="removed")


def _line_to_out(item: CartItem, product: Product) -> CartLineOut:
    discounted = sale_price(product.price, product.discount_percent)
    return CartLineOut(
        id=item.id,
        user_id=item.user_id,
        product_id=item.product_id,
        quantity=item.quantity,
        updated_at=item.updated_at,
        name=product.name,
        price=float(product.price),
        discount_percent=product.discount_percent or 0,
        image=product.image,
        sale_price=float(discounted) if discounted is not None else None,
    )


def list_cart(db: Session, user_id: int) -> List[CartLineOut]:
    if user_id is None:
        raise ValidationError("User ID required")
    try:
        rows = (
            db.query(CartItem, Product)
            .join(Product, CartItem.product_id == Product.id)
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.id)
            .all()
        )
    except SQLAlchemyError as e:
        logger.exception("Cart fetch failed: %s", e)
        raise StorageError("Failed to fetch cart")
    return [_line_to_out(item, product) for item, product in rows]


def cart_subtotal(lines: List[CartLineOut]) -> Decimal:
    total = Decimal("0")
    for line in lines:
        unit = line.sale_price if line.sale_price is not None else line.price
        total += Decimal(str(unit)) * line.quantity
    return total.quantize(CENT)
