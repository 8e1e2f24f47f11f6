# backend/services/catalog.py
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.product import Product
from utils.errors import NotFound, StorageError

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def sale_price(price, discount_percent) -> Optional[Decimal]:
    """Price after the percentage discount, to the cent; None when there is no discount."""
    if not discount_percent or discount_percent <= 0:
        return None
    value = Decimal(str(price)) * (100 - Decimal(discount_percent)) / 100
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def effective_price(product: Product) -> Decimal:
    # What the customer pays per unit right now
    discounted = sale_price(product.price, product.discount_percent)
    return discounted if discounted is not None else Decimal(str(product.price))


def list_products(db: Session, category: Optional[str] = None) -> List[Product]:
    """Whole catalog, or one category (exact match), featured first then newest first."""
    query = db.query(Product)
    if category:
        query = query.filter(Product.category == category)
    query = query.order_by(Product.featured.desc(), Product.created_at.desc(), Product.id.desc())
    try:
        return query.all()
    except SQLAlchemyError as e:
        logger.exception("Product listing failed: %s", e)
        raise StorageError("Failed to fetch products")


def get_product(db: Session, product_id: int) -> Product:
    try:
        product = db.query(Product).filter(Product.id == product_id).first()
    except SQLAlchemyError as e:
        logger.exception("Product lookup failed: %s", e)
        raise StorageError("Failed to fetch product")
    if not product:
        raise NotFound("Product not found")
    return product


def list_categories(db: Session) -> List[str]:
    try:
        rows = db.query(Product.category).distinct().filter(Product.category != None, Product.category != "").all()  # noqa: E711
    except SQLAlchemyError as e:
        logger.exception("Category listing failed: %s", e)
        raise StorageError("Failed to fetch categories")
    return sorted(r[0] for r in rows)
