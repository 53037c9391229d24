"""Tests for the checkout engine."""

import asyncio

import pytest

from storefront.database.errors import InsufficientStock
from storefront.engine.cart_ops import add_item
from storefront.engine.checkout import CheckoutStatus, checkout, validate_customer_info
from storefront.models.cart import Cart, CartLine
from storefront.models.checkout import CustomerInfo, OrderStatus, PaymentMethod

from fakes import FlakyCatalog, ScriptedOrderStore, SlowCommitOrderStore, YieldingCatalog, broken, duplicate, numbers


def _cart(catalog, *pairs) -> Cart:
    cart = Cart()
    for product_id, quantity in pairs:
        cart = add_item(cart, product_id, quantity, catalog.get_product(product_id))
    return cart


class TestValidateCustomerInfo:
    def test_valid(self, customer):
        assert validate_customer_info(customer) == {}

    def test_collects_every_problem(self):
        errors = validate_customer_info(CustomerInfo(name=" A ", email="not-an-email"))
        assert set(errors) == {"name", "email"}

    @pytest.mark.parametrize("email", ["", "a@b", "a b@c.d", "@c.d", "a@.d@"])
    def test_rejects_bad_emails(self, email):
        assert "email" in validate_customer_info(CustomerInfo(name="Ada", email=email))

    def test_name_is_trimmed_before_length_check(self):
        assert "name" in validate_customer_info(CustomerInfo(name="   x   ", email="a@b.co"))
        assert validate_customer_info(CustomerInfo(name=" Al ", email="a@b.co")) == {}


@pytest.mark.asyncio
class TestCheckout:
    async def test_empty_cart_never_reaches_store(self, catalog, order_store, customer):
        store = ScriptedOrderStore(order_store)

        result = await checkout(Cart(), customer, catalog, store)

        assert result.status == CheckoutStatus.EMPTY_CART
        assert store.drafts == []

    async def test_empty_cart_reported_before_bad_customer_info(self, catalog, order_store):
        result = await checkout(Cart(), CustomerInfo(), catalog, order_store)
        assert result.status == CheckoutStatus.EMPTY_CART

    async def test_invalid_customer_info(self, catalog, order_store):
        cart = _cart(catalog, ("P1", 1))
        store = ScriptedOrderStore(order_store)

        result = await checkout(cart, CustomerInfo(name="", email="x"), catalog, store)

        assert result.status == CheckoutStatus.INVALID_CUSTOMER_INFO
        assert set(result.field_errors) == {"name", "email"}
        assert result.cart == cart
        assert store.drafts == []

    async def test_successful_checkout(self, catalog, order_store, customer):
        cart = _cart(catalog, ("P1", 2), ("P3", 4))

        result = await checkout(cart, customer, catalog, order_store)

        assert result.status == CheckoutStatus.COMMITTED
        assert result.committed
        assert result.cart.is_empty
        assert result.receipt.order_number
        assert result.attempts == 1

        order = order_store.get_order(result.receipt.order_id)
        assert order.status == OrderStatus.PENDING
        assert order.order_number == result.receipt.order_number
        assert order.total_amount == 30.0
        assert order.total_items == 6
        assert catalog.get_product("P1").stock_quantity == 8
        assert catalog.get_product("P3").stock_quantity == 96

    async def test_draft_is_built_from_cart_and_customer(self, catalog, order_store):
        store = ScriptedOrderStore(order_store)
        customer = CustomerInfo(
            name="  Grace Hopper ",
            email=" Grace@Navy.MIL ",
            phone="  ",
            payment_method=PaymentMethod.PAYPAL,
            notes=" leave at door ",
        )
        cart = _cart(catalog, ("P1", 2))

        await checkout(cart, customer, catalog, store, order_number_factory=numbers("ORD-1"), currency="EUR")

        draft = store.drafts[0]
        assert draft.order_number == "ORD-1"
        assert draft.customer_name == "Grace Hopper"
        assert draft.customer_email == "grace@navy.mil"
        assert draft.customer_phone is None
        assert draft.notes == "leave at door"
        assert draft.payment_method == PaymentMethod.PAYPAL
        assert draft.subtotal == 20.0
        assert draft.currency == "EUR"
        assert [(i.product_id, i.quantity, i.unit_price) for i in draft.items] == [("P1", 2, 10.0)]

    async def test_price_change_needs_review(self, catalog, order_store, customer):
        cart = _cart(catalog, ("P1", 2))
        catalog.update_price("P1", 12.0)
        store = ScriptedOrderStore(order_store)

        result = await checkout(cart, customer, catalog, store)

        assert result.status == CheckoutStatus.NEEDS_REVIEW
        assert result.cart.lines[0].unit_price == 12.0
        assert result.issues[0].product_id == "P1"
        assert store.drafts == []

        retry = await checkout(result.cart, customer, catalog, store)
        assert retry.status == CheckoutStatus.COMMITTED
        assert store.drafts[0].subtotal == 24.0

    async def test_out_of_stock_needs_review(self, catalog, order_store, customer):
        cart = _cart(catalog, ("P2", 5), ("P1", 1))

        result = await checkout(cart, customer, catalog, order_store)

        assert result.status == CheckoutStatus.NEEDS_REVIEW
        assert [line.product_id for line in result.cart.lines] == ["P1"]
        assert order_store.orders == {}

    async def test_duplicate_numbers_exhaust_retries(self, catalog, order_store, customer):
        cart = _cart(catalog, ("P1", 2))
        store = ScriptedOrderStore(order_store, failures=[duplicate(), duplicate(), duplicate()])

        result = await checkout(
            cart, customer, catalog, store, order_number_factory=numbers("N-1", "N-2", "N-3")
        )

        assert result.status == CheckoutStatus.PERSISTENCE_FAILED
        assert result.cart == cart
        assert result.attempts == 3
        assert [d.order_number for d in store.drafts] == ["N-1", "N-2", "N-3"]
        assert order_store.orders == {}
        assert catalog.get_product("P1").stock_quantity == 10

    async def test_duplicate_number_retried_with_fresh_number(self, catalog, order_store, customer):
        cart = _cart(catalog, ("P1", 1))
        store = ScriptedOrderStore(order_store, failures=[duplicate()])

        result = await checkout(cart, customer, catalog, store, order_number_factory=numbers("N-1", "N-2"))

        assert result.status == CheckoutStatus.COMMITTED
        assert result.receipt.order_number == "N-2"
        assert result.attempts == 2

    async def test_store_error_keeps_cart(self, catalog, order_store, customer):
        cart = _cart(catalog, ("P1", 1))
        store = ScriptedOrderStore(order_store, failures=[broken("disk full")])

        result = await checkout(cart, customer, catalog, store)

        assert result.status == CheckoutStatus.PERSISTENCE_FAILED
        assert "disk full" in result.error_message
        assert not result.unknown_outcome
        assert result.cart == cart
        assert len(store.drafts) == 1

    async def test_stock_conflict_at_commit_keeps_cart(self, catalog, order_store, customer):
        cart = _cart(catalog, ("P1", 2))
        store = ScriptedOrderStore(order_store, failures=[InsufficientStock("P1", 2, 1)])

        result = await checkout(cart, customer, catalog, store)

        assert result.status == CheckoutStatus.PERSISTENCE_FAILED
        assert result.cart == cart

    async def test_timeout_without_order_is_unknown_outcome(self, catalog, order_store, customer):
        cart = _cart(catalog, ("P1", 1))
        store = ScriptedOrderStore(order_store, delay=0.5)

        result = await checkout(cart, customer, catalog, store, timeout=0.05)

        assert result.status == CheckoutStatus.PERSISTENCE_FAILED
        assert result.unknown_outcome
        assert result.cart == cart
        assert order_store.orders == {}

    async def test_timeout_after_write_is_committed(self, catalog, order_store, customer):
        cart = _cart(catalog, ("P1", 1))
        store = SlowCommitOrderStore(order_store, delay=0.5)

        result = await checkout(cart, customer, catalog, store, timeout=0.05, order_number_factory=numbers("N-9"))

        assert result.status == CheckoutStatus.COMMITTED
        assert result.receipt.order_number == "N-9"
        assert result.cart.is_empty

    async def test_same_idempotency_key_creates_one_order(self, catalog, order_store, customer):
        cart = _cart(catalog, ("P1", 2))

        first, second = await asyncio.gather(
            checkout(cart, customer, catalog, order_store, idempotency_key="k-1", order_number_factory=numbers("A")),
            checkout(cart, customer, catalog, order_store, idempotency_key="k-1", order_number_factory=numbers("B")),
        )

        assert first.committed and second.committed
        assert first.receipt == second.receipt
        assert len(order_store.orders) == 1
        assert catalog.get_product("P1").stock_quantity == 8

    async def test_concurrent_checkouts_do_not_oversell(self, catalog, order_store, customer):
        # Both carts pass reconciliation before either commits.
        cart = _cart(catalog, ("P2", 2))
        slow_catalog = YieldingCatalog(catalog)

        results = await asyncio.gather(
            checkout(cart, customer, slow_catalog, order_store, order_number_factory=numbers("A")),
            checkout(cart, customer, slow_catalog, order_store, order_number_factory=numbers("B")),
        )

        assert sorted(r.status.value for r in results) == ["committed", "persistence_failed"]
        failed = next(r for r in results if not r.committed)
        assert failed.cart == cart
        assert len(order_store.orders) == 1
        assert catalog.get_product("P2").stock_quantity == 1

    async def test_non_positive_stored_quantity_is_invalid_cart(self, catalog, order_store, customer):
        cart = Cart.model_construct(
            lines=(
                CartLine.model_construct(
                    product_id="P1", product_name="Product P1", unit_price=10.0, image="/i.jpg", quantity=0
                ),
            )
        )
        store = ScriptedOrderStore(order_store)

        result = await checkout(cart, customer, catalog, store)

        assert result.status == CheckoutStatus.INVALID_CART
        assert "P1" in result.field_errors["cart"]
        assert result.cart is cart
        assert store.drafts == []

    async def test_unexpected_catalog_error_needs_review(self, catalog, order_store, customer):
        cart = _cart(catalog, ("P1", 1), ("P3", 2))
        flaky = FlakyCatalog(catalog, failing={"P1"}, error=ConnectionError)

        result = await checkout(cart, customer, flaky, order_store)

        assert result.status == CheckoutStatus.NEEDS_REVIEW
        assert [line.product_id for line in result.cart.lines] == ["P1", "P3"]
        assert order_store.orders == {}
