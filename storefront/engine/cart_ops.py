"""Pure cart mutations: each takes a cart and returns a new one"""

from typing import Any

from ..models.cart import Cart, CartLine, coerce_quantity
from ..models.product import DEFAULT_PRODUCT_IMAGE, Product


def add_item(cart: Cart, product_id: str, quantity: Any, snapshot: Product) -> Cart:
    """
    Add `quantity` units of a product.

    A product already in the cart gets its quantity increased; stock is not
    checked here, only at reconciliation. Otherwise a new line is appended
    with the name, price and image copied from `snapshot`.
    """
    quantity = coerce_quantity(quantity)

    if cart.get_line(product_id):
        lines = tuple(
            line.model_copy(update={"quantity": line.quantity + quantity})
            if line.product_id == product_id
            else line
            for line in cart.lines
        )
    else:
        new_line = CartLine(
            product_id=product_id,
            product_name=snapshot.name,
            unit_price=snapshot.price,
            image=snapshot.image or DEFAULT_PRODUCT_IMAGE,
            quantity=quantity,
        )
        lines = cart.lines + (new_line,)

    return cart.model_copy(update={"lines": lines})


def set_quantity(cart: Cart, product_id: str, quantity: int) -> Cart:
    """Set a line's quantity; zero or less removes the line"""
    quantity = int(quantity)
    if quantity <= 0:
        return remove_item(cart, product_id)

    if not cart.get_line(product_id):
        return cart

    lines = tuple(
        line.model_copy(update={"quantity": quantity}) if line.product_id == product_id else line
        for line in cart.lines
    )
    return cart.model_copy(update={"lines": lines})


def remove_item(cart: Cart, product_id: str) -> Cart:
    """Drop a product's line if it is there"""
    lines = tuple(line for line in cart.lines if line.product_id != product_id)
    if len(lines) == len(cart.lines):
        return cart
    return cart.model_copy(update={"lines": lines})


def clear_cart(cart: Cart) -> Cart:
    return cart.model_copy(update={"lines": ()})
