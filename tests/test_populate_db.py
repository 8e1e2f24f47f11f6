import pytest

from models.product import Product
from populate_db import PRODUCTS_CSV, load_products, read_products


def test_bundled_catalog_loads(db):
    added = load_products(db, PRODUCTS_CSV)
    assert added == db.query(Product).count()
    assert added > 0


def test_defaults_and_dedupe(db, tmp_path):
    csv = tmp_path / "products.csv"
    csv.write_text(
        "name,price,stock_quantity,discount_percent\n"
        "Kettle,30.00,4,\n"
        "Toaster,45.50,-2,120\n"
    )

    assert load_products(db, str(csv)) == 2
    assert load_products(db, str(csv)) == 0

    kettle = db.query(Product).filter(Product.name == "Kettle").one()
    toaster = db.query(Product).filter(Product.name == "Toaster").one()
    assert kettle.discount_percent == 0
    assert kettle.featured is False
    assert kettle.category is None
    assert toaster.stock_quantity == 0
    assert toaster.discount_percent == 100


def test_missing_columns(tmp_path):
    csv = tmp_path / "bad.csv"
    csv.write_text("name,category\nLamp,Home\n")
    with pytest.raises(ValueError):
        read_products(str(csv))
