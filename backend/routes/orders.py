# backend/routes/orders.py
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from services import orders as order_service
from utils.audit import write_log, client_ip
from utils.errors import ShopError
from schemas.order import OrderCreatePayload, OrderCreatedResponse, OrderListResponse, OrderResponse

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger(__name__)

# Commit the cart as an order: all of it or nothing
@router.post("", response_model=OrderCreatedResponse)
def create_order(
    payload: OrderCreatePayload,
    request: Request,
    db: Session = Depends(get_db),
):
    try:
        order = order_service.place_order(
            db, payload.user_id, payload.items, payload.total, payload.shipping_address
        )
    except ShopError as e:
        write_log(
            db, user_id=payload.user_id, action="ORDER_CREATE", resource="orders", status="FAIL",
            ip=client_ip(request), meta={"reason": e.message, "lines": len(payload.items)},
        )
        raise

    write_log(
        db, user_id=payload.user_id, action="ORDER_CREATE", resource="orders", status="SUCCESS",
        ip=client_ip(request), meta={"order_id": order.id, "lines": len(payload.items), "total": payload.total},
    )
    return {"success": True, "message": "Order created", "orderId": order.id}

# Order history of one user, newest first
@router.get("", response_model=OrderListResponse)
def list_orders(
    user_id: Optional[int] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
):
    return {"success": True, "orders": order_service.list_orders(db, user_id)}

@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    user_id: Optional[int] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
):
    return {"success": True, "order": order_service.get_order(db, user_id, order_id)}
