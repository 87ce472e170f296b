"""
routes/orders.py
-----------------

Order creation and history for the calling user.
"""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends

from app.core.context import get_current_user_id, get_store
from app.db.store import Store
from app.logging_config import log_call, logger
from app.schemas.orders import CreateOrderRequest
from app.services.order_service import create_order, list_orders

router = APIRouter()


@router.post("/create-order", status_code=201)
@log_call
def post_create_order(
    data: CreateOrderRequest,
    store: Store = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    try:
        logger.info(json.dumps({
            "event": "create_order_request",
            "user": user_id,
            "num_items": len(data.orderItems),
        }))
    except Exception:
        pass
    return create_order(store, user_id, data)


@router.get("")
@log_call
def get_orders(
    store: Store = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    return list_orders(store, user_id)
