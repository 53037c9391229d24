"""Checkout API routes"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from ..core.config import Settings, get_settings
from ..database.orders import OrderDatabase
from ..engine.checkout import CheckoutStatus
from ..engine.totals import compute_totals
from ..models.checkout import CheckoutRequest, CheckoutResponse, Order, OrderStatus
from ..services.cart_service import CartService, CartView, get_cart_service
from .deps import get_orders, get_session_id, to_cart_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])


@router.post("", response_model=CheckoutResponse, status_code=201)
async def checkout(
    request: CheckoutRequest,
    session_id: Optional[str] = Depends(get_session_id),
    service: CartService = Depends(get_cart_service),
    settings: Settings = Depends(get_settings),
):
    """
    Place an order from the session cart.

    - 201: order created, cart emptied
    - 400: cart is empty
    - 422: customer details or stored cart quantities are invalid
    - 409: the cart changed against the catalog and was corrected; review and resubmit
    - 503: the order could not be stored; the cart is kept for a retry
    """
    session_id, result = await service.checkout(
        session_id,
        request.customer,
        idempotency_key=request.idempotency_key,
    )

    if result.status == CheckoutStatus.EMPTY_CART:
        raise HTTPException(status_code=400, detail=result.error_message)

    if result.status in (CheckoutStatus.INVALID_CART, CheckoutStatus.INVALID_CUSTOMER_INFO):
        raise HTTPException(
            status_code=422,
            detail={"message": result.error_message, "field_errors": result.field_errors},
        )

    cart = to_cart_response(
        CartView(session_id=session_id, cart=result.cart, totals=compute_totals(result.cart)),
        settings,
    )
    response = CheckoutResponse(
        success=result.committed,
        receipt=result.receipt,
        cart=cart,
        issues=result.issues,
        unknown_outcome=result.unknown_outcome,
        error_message=result.error_message,
    )

    if result.status == CheckoutStatus.NEEDS_REVIEW:
        return JSONResponse(status_code=409, content=response.model_dump(mode="json"))

    if result.status == CheckoutStatus.PERSISTENCE_FAILED:
        logger.warning(f"Checkout failed for session {session_id}: {result.error_message}")
        return JSONResponse(status_code=503, content=response.model_dump(mode="json"))

    return response


@router.get("/orders/{order_number}", response_model=Order)
async def get_order(
    order_number: str,
    orders: OrderDatabase = Depends(get_orders),
):
    """Get order details"""
    order = await orders.find_by_order_number(order_number)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.get("/orders", response_model=list[Order])
async def list_orders(
    limit: int = Query(50, ge=1, le=200),
    status: Optional[OrderStatus] = Query(None, description="Filter by status"),
    orders: OrderDatabase = Depends(get_orders),
):
    """List recent orders"""
    return orders.list_orders(limit=limit, status=status)
