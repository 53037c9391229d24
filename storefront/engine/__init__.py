# Cart and checkout engine

from .cart_ops import add_item, set_quantity, remove_item, clear_cart
from .totals import compute_totals
from .reconciliation import prune_unavailable, reconcile, ReconciliationResult
from .order_numbers import generate_order_number
from .checkout import (
    checkout,
    build_order_draft,
    validate_customer_info,
    CheckoutResult,
    CheckoutStatus,
)
from .protocols import CatalogLookup, OrderStore

__all__ = [
    "add_item",
    "set_quantity",
    "remove_item",
    "clear_cart",
    "compute_totals",
    "reconcile",
    "prune_unavailable",
    "ReconciliationResult",
    "generate_order_number",
    "checkout",
    "build_order_draft",
    "validate_customer_info",
    "CheckoutResult",
    "CheckoutStatus",
    "CatalogLookup",
    "OrderStore",
]
