"""Tests for the pure cart mutations."""

import pytest

from storefront.engine.cart_ops import add_item, clear_cart, remove_item, set_quantity
from storefront.models.cart import Cart, coerce_quantity

from fakes import make_product

P1 = make_product("P1", price=10.0)
P2 = make_product("P2", price=5.0)
P3 = make_product("P3", price=2.5)


def _cart(*pairs) -> Cart:
    cart = Cart()
    for product, quantity in pairs:
        cart = add_item(cart, product.id, quantity, product)
    return cart


class TestAddItem:
    def test_new_line_copies_snapshot(self, empty_cart):
        cart = add_item(empty_cart, "P1", 2, P1)

        assert len(cart.lines) == 1
        line = cart.lines[0]
        assert line.product_id == "P1"
        assert line.product_name == P1.name
        assert line.unit_price == 10.0
        assert line.image == "/images/P1.jpg"
        assert line.quantity == 2

    def test_same_product_merges_into_one_line(self, empty_cart):
        cart = add_item(empty_cart, "P1", 2, P1)
        cart = add_item(cart, "P1", 3, P1)

        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 5

    def test_merge_keeps_original_snapshot(self, empty_cart):
        cart = add_item(empty_cart, "P1", 1, P1)
        repriced = P1.model_copy(update={"price": 99.0})
        cart = add_item(cart, "P1", 1, repriced)

        assert cart.lines[0].unit_price == 10.0

    def test_no_stock_ceiling_at_add_time(self, empty_cart):
        scarce = make_product("P9", stock=1)
        cart = add_item(empty_cart, "P9", 50, scarce)
        assert cart.lines[0].quantity == 50

    def test_lines_keep_insertion_order(self):
        cart = _cart((P2, 1), (P1, 1), (P3, 1))
        assert [line.product_id for line in cart.lines] == ["P2", "P1", "P3"]

    @pytest.mark.parametrize("quantity", [0, -4, None, "abc", "", float("nan")])
    def test_invalid_quantity_becomes_one(self, empty_cart, quantity):
        cart = add_item(empty_cart, "P1", quantity, P1)
        assert cart.lines[0].quantity == 1

    def test_does_not_mutate_input(self, empty_cart):
        before = _cart((P1, 1))
        after = add_item(before, "P1", 1, P1)

        assert before.lines[0].quantity == 1
        assert after.lines[0].quantity == 2


class TestCoerceQuantity:
    @pytest.mark.parametrize(
        "value, expected",
        [(3, 3), ("3", 3), ("2.7", 2), (2.9, 2), (True, 1), ("0", 1), (float("inf"), 1), ([], 1)],
    )
    def test_coercion(self, value, expected):
        assert coerce_quantity(value) == expected


class TestSetQuantity:
    def test_sets_exact_quantity(self):
        cart = set_quantity(_cart((P1, 2)), "P1", 7)
        assert cart.lines[0].quantity == 7

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_removes_line(self, quantity):
        cart = set_quantity(_cart((P1, 2), (P2, 1)), "P1", quantity)
        assert [line.product_id for line in cart.lines] == ["P2"]

    def test_absent_product_is_noop(self):
        cart = _cart((P1, 2))
        assert set_quantity(cart, "missing", 5) == cart

    @pytest.mark.parametrize("quantity, expected", [(2.5, 2), (True, 1), ("4", 4)])
    def test_quantity_is_stored_as_int(self, quantity, expected):
        line = set_quantity(_cart((P1, 2)), "P1", quantity).lines[0]
        assert line.quantity == expected
        assert type(line.quantity) is int

    def test_zero_is_the_same_as_remove(self):
        cart = _cart((P1, 2), (P2, 1), (P3, 4))
        assert set_quantity(cart, "P2", 0) == remove_item(cart, "P2")


class TestRemoveItem:
    def test_removes_line(self):
        cart = remove_item(_cart((P1, 1), (P2, 1)), "P1")
        assert [line.product_id for line in cart.lines] == ["P2"]

    def test_missing_line_is_noop(self, empty_cart):
        assert remove_item(empty_cart, "P1") == empty_cart

    def test_clear_cart(self):
        assert clear_cart(_cart((P1, 1), (P2, 2))).is_empty


class TestUniqueness:
    def test_mixed_operations_never_duplicate_products(self, empty_cart):
        products = {"P1": P1, "P2": P2, "P3": P3}
        steps = [
            ("add", "P1", 1), ("add", "P2", 2), ("add", "P1", 3), ("set", "P2", 0),
            ("add", "P2", 1), ("remove", "P3", None), ("add", "P3", "x"), ("set", "P1", 4),
            ("add", "P3", 2), ("remove", "P1", None), ("add", "P1", -2), ("add", "P2", 5),
        ]

        cart = empty_cart
        for op, product_id, quantity in steps:
            if op == "add":
                cart = add_item(cart, product_id, quantity, products[product_id])
            elif op == "set":
                cart = set_quantity(cart, product_id, quantity)
            else:
                cart = remove_item(cart, product_id)

            ids = [line.product_id for line in cart.lines]
            assert len(ids) == len(set(ids))
            assert all(line.quantity >= 1 for line in cart.lines)

        assert {line.product_id: line.quantity for line in cart.lines} == {"P2": 6, "P3": 3, "P1": 1}
