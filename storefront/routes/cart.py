"""Cart API routes"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..core.config import Settings, get_settings
from ..models.cart import AddToCartRequest, CartResponse, UpdateCartItemRequest
from ..services.cart_service import CartService, ProductNotFound, get_cart_service
from .deps import get_session_id, to_cart_response

router = APIRouter(prefix="/api/cart", tags=["Cart"])


@router.get("", response_model=CartResponse)
async def view_cart(
    session_id: Optional[str] = Depends(get_session_id),
    service: CartService = Depends(get_cart_service),
    settings: Settings = Depends(get_settings),
):
    """Get the session cart, dropping products that are gone or sold out"""
    view = await service.refresh_cart(session_id)
    message = None
    if view.removed:
        message = (
            "Some items were removed from your cart as they are no longer available: "
            + ", ".join(view.removed)
        )
    return to_cart_response(view, settings, message=message)


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddToCartRequest,
    session_id: Optional[str] = Depends(get_session_id),
    service: CartService = Depends(get_cart_service),
    settings: Settings = Depends(get_settings),
):
    """Add an item to the cart"""
    try:
        view = await service.add_item(session_id, request.product_id, request.quantity)
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")

    line = view.cart.get_line(request.product_id)
    return to_cart_response(
        view,
        settings,
        message=f"{line.product_name} added to cart" if line else None,
    )


@router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str,
    request: UpdateCartItemRequest,
    session_id: Optional[str] = Depends(get_session_id),
    service: CartService = Depends(get_cart_service),
    settings: Settings = Depends(get_settings),
):
    """Update item quantity in cart; zero removes the item"""
    view = service.set_quantity(session_id, product_id, request.quantity)
    return to_cart_response(view, settings, message="Cart updated")


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_from_cart(
    product_id: str,
    session_id: Optional[str] = Depends(get_session_id),
    service: CartService = Depends(get_cart_service),
    settings: Settings = Depends(get_settings),
):
    """Remove an item from the cart"""
    view = service.remove_item(session_id, product_id)
    return to_cart_response(view, settings, message="Item removed from cart")


@router.delete("", response_model=CartResponse)
async def clear_cart(
    session_id: Optional[str] = Depends(get_session_id),
    service: CartService = Depends(get_cart_service),
    settings: Settings = Depends(get_settings),
):
    """Clear all items from cart"""
    view = service.clear(session_id)
    return to_cart_response(view, settings, message="Cart cleared")
