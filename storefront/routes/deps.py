"""Shared route dependencies"""

from typing import Optional

from fastapi import Header

from ..core.config import Settings
from ..database.orders import OrderDatabase, order_db
from ..database.products import ProductDatabase, product_db
from ..models.cart import CartResponse
from ..services.cart_service import CartView


def get_session_id(x_session_id: Optional[str] = Header(None)) -> Optional[str]:
    """Extract session ID from header"""
    return x_session_id


def get_catalog() -> ProductDatabase:
    return product_db


def get_orders() -> OrderDatabase:
    return order_db


def to_cart_response(view: CartView, settings: Settings, message: Optional[str] = None) -> CartResponse:
    return CartResponse(
        session_id=view.session_id,
        lines=list(view.cart.lines),
        subtotal=view.totals.subtotal,
        item_count=view.totals.item_count,
        currency=settings.currency,
        message=message,
    )
