# backend/routes/products.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from services import catalog
from schemas.product import ProductListResponse, ProductResponse, CategoryListResponse

router = APIRouter(prefix="/products", tags=["Products"])


# List the catalog, optionally one category, with computed sale prices
@router.get("", response_model=ProductListResponse)
def list_products(
    category: Optional[str] = Query(None, description="Exact category name"),
    db: Session = Depends(get_db),
):
    products = catalog.list_products(db, category)
    return {"success": True, "count": len(products), "products": products}


# Distinct product categories for the storefront filter
@router.get("/categories", response_model=CategoryListResponse)
def list_categories(db: Session = Depends(get_db)):
    return {"success": True, "categories": catalog.list_categories(db)}


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return {"success": True, "product": catalog.get_product(db, product_id)}
