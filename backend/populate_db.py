import os
import sys
import logging
import pandas as pd
from sqlalchemy.orm import Session

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from models.product import Product
from database import SessionLocal, init_db

logger = logging.getLogger(__name__)

# Configuration
DATA_DIR = os.path.join(os.path.dirname(__file__), "data_source")
PRODUCTS_CSV = os.path.join(DATA_DIR, "products.csv")
REQUIRED_COLUMNS = ["name", "price", "stock_quantity"]
# End Configuration

def read_products(csv_path: str) -> pd.DataFrame:
    """Loads the catalog CSV and fills optional columns with defaults."""
    df = pd.read_csv(csv_path)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing columns in {csv_path}: {', '.join(missing)}")

    df = df.dropna(subset=REQUIRED_COLUMNS).copy()
    for column, default in (("description", None), ("category", None), ("image", None),
                            ("discount_percent", 0), ("featured", 0)):
        if column not in df.columns:
            df[column] = default

    df["discount_percent"] = df["discount_percent"].fillna(0).astype(int).clip(0, 100)
    df["stock_quantity"] = df["stock_quantity"].astype(int).clip(lower=0)
    df["featured"] = df["featured"].fillna(0).astype(bool)
    df["price"] = df["price"].astype(float).round(2)
    # NaN -> None for nullable text columns
    return df.astype(object).where(pd.notnull(df), None)

def load_products(session: Session, csv_path: str = PRODUCTS_CSV) -> int:
    """Inserts products not yet in the catalog (matched by name). Returns how many were added."""
    df = read_products(csv_path)
    existing = {name for (name,) in session.query(Product.name).all()}

    added = 0
    for row in df.to_dict(orient="records"):
        if row["name"] in existing:
            continue
        session.add(Product(
            name=row["name"],
            description=row["description"],
            category=row["category"],
            image=row["image"],
            price=row["price"],
            discount_percent=row["discount_percent"],
            stock_quantity=row["stock_quantity"],
            featured=row["featured"],
        ))
        existing.add(row["name"])
        added += 1

    session.commit()
    return added

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    session = SessionLocal()
    try:
        count = load_products(session)
        logger.info("Dodano %s produktów", count)
    finally:
        session.close()
