# Service modules

from .cart_service import CartService, CartView, ProductNotFound, cart_service, get_cart_service

__all__ = ["CartService", "CartView", "ProductNotFound", "cart_service", "get_cart_service"]
