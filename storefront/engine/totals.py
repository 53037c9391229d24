"""Derived cart values"""

from ..models.cart import Cart, CartTotals


def compute_totals(cart: Cart) -> CartTotals:
    # Recomputed on every read so totals never drift from the lines.
    return CartTotals(
        subtotal=sum(line.unit_price * line.quantity for line in cart.lines),
        item_count=sum(line.quantity for line in cart.lines),
    )
