# backend/routes/cart.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from services import cart as cart_service
from utils.audit import write_log, client_ip
from schemas.cart import CartAddItem, CartUpdateItem, CartOut, CartChangeResponse

router = APIRouter(prefix="/cart", tags=["Cart"])

_MESSAGES = {
    "added": "Added to cart",
    "updated": "Cart item quantity updated",
}

def _change_response(result: cart_service.CartResult, message: str) -> dict:
    return {
        "success": True,
        "message": message,
        "action": result.action,
        "data": {
            "itemId": result.item_id,
            "userId": result.user_id,
            "productId": result.product_id,
            "quantity": result.quantity,
        },
    }

@router.get("", response_model=CartOut)
def get_cart(
    user_id: Optional[int] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
):
    lines = cart_service.list_cart(db, user_id)
    return {
        "success": True,
        "cart_items": lines,
        "subtotal": float(cart_service.cart_subtotal(lines)),
    }

@router.post("", response_model=CartChangeResponse)
def add_to_cart(
    payload: CartAddItem,
    request: Request,
    db: Session = Depends(get_db),
):
    result = cart_service.add_item(db, payload.user_id, payload.product_id, payload.quantity)

    write_log(
        db,
        user_id=payload.user_id,
        action="CART_ADD",
        resource="cart",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"product_id": payload.product_id, "qty": payload.quantity, "action": result.action},
    )
    return _change_response(result, _MESSAGES[result.action])

@router.put("/{item_id}", response_model=CartChangeResponse)
def update_cart_item(
    item_id: int,
    payload: CartUpdateItem,
    request: Request,
    db: Session = Depends(get_db),
):
    result = cart_service.update_quantity(db, payload.user_id, item_id, payload.quantity)

    if result.action != "noop":
        write_log(
            db,
            user_id=payload.user_id,
            action="CART_UPDATE",
            resource="cart",
            status="SUCCESS",
            ip=client_ip(request),
            meta={"item_id": item_id, "qty": payload.quantity, "action": result.action},
        )
    return _change_response(result, "Cart updated")

@router.delete("/{item_id}", response_model=CartChangeResponse)
def delete_cart_item(
    item_id: int,
    request: Request,
    user_id: Optional[int] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
):
    result = cart_service.remove_item(db, user_id, item_id)

    write_log(
        db,
        user_id=user_id,
        action="CART_DELETE",
        resource="cart",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"item_id": item_id},
    )
    return _change_response(result, "Item removed")
