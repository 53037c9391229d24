# Storefront Models

from .product import Product, ProductCategory, ProductSearchResponse
from .cart import (
    Cart,
    CartLine,
    CartTotals,
    IssueKind,
    ReconciliationIssue,
    AddToCartRequest,
    UpdateCartItemRequest,
    CartResponse,
    coerce_quantity,
)
from .checkout import (
    Order,
    OrderItem,
    OrderDraft,
    OrderReceipt,
    OrderStatus,
    CheckoutRequest,
    CheckoutResponse,
    CustomerInfo,
    ShippingAddress,
    PaymentMethod,
    STATUS_TRANSITIONS,
)

__all__ = [
    "Product",
    "ProductCategory",
    "ProductSearchResponse",
    "Cart",
    "CartLine",
    "CartTotals",
    "IssueKind",
    "ReconciliationIssue",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartResponse",
    "coerce_quantity",
    "Order",
    "OrderItem",
    "OrderDraft",
    "OrderReceipt",
    "OrderStatus",
    "CheckoutRequest",
    "CheckoutResponse",
    "CustomerInfo",
    "ShippingAddress",
    "PaymentMethod",
    "STATUS_TRANSITIONS",
]
