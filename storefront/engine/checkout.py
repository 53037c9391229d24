"""
Checkout

Turns a session cart into a persisted order in one attempt:

    validating -> reconciling -> needs review
                              -> assembling -> persisting -> committed
                                                          -> failed

Every outcome comes back as a CheckoutResult; nothing in here raises for
bad input, catalog drift or store failures. The result always carries the
cart the caller should keep: emptied on commit, corrected on review, and
exactly the submitted cart on any failure.
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from ..database.errors import DuplicateOrderNumber, OrderStoreError
from ..models.cart import Cart, ReconciliationIssue
from ..models.checkout import CustomerInfo, Order, OrderDraft, OrderItem, OrderReceipt
from .cart_ops import clear_cart
from .order_numbers import generate_order_number
from .protocols import CatalogLookup, OrderStore
from .reconciliation import reconcile
from .totals import compute_totals

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_NAME_LENGTH = 2
DEFAULT_MAX_ATTEMPTS = 3


class CheckoutStatus(str, Enum):
    COMMITTED = "committed"
    EMPTY_CART = "empty_cart"
    INVALID_CART = "invalid_cart"
    INVALID_CUSTOMER_INFO = "invalid_customer_info"
    NEEDS_REVIEW = "needs_review"
    PERSISTENCE_FAILED = "persistence_failed"


@dataclass
class CheckoutResult:
    """Outcome of a checkout attempt"""
    status: CheckoutStatus
    cart: Cart
    receipt: Optional[OrderReceipt] = None
    issues: list[ReconciliationIssue] = field(default_factory=list)
    field_errors: dict[str, str] = field(default_factory=dict)
    error_message: Optional[str] = None
    unknown_outcome: bool = False
    attempts: int = 0

    @property
    def committed(self) -> bool:
        return self.status == CheckoutStatus.COMMITTED


def validate_customer_info(customer: CustomerInfo) -> dict[str, str]:
    """Check name and email, collecting every problem"""
    errors: dict[str, str] = {}

    if len((customer.name or "").strip()) < MIN_NAME_LENGTH:
        errors["name"] = "Please enter a valid name (minimum 2 characters)"

    if not EMAIL_PATTERN.match((customer.email or "").strip()):
        errors["email"] = "Please enter a valid email address"

    return errors


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def build_order_draft(
    cart: Cart,
    customer: CustomerInfo,
    order_number: str,
    idempotency_key: Optional[str] = None,
    currency: str = "USD",
) -> OrderDraft:
    """Freeze the cart and customer details into an order draft"""
    return OrderDraft(
        order_number=order_number,
        customer_name=customer.name.strip(),
        customer_email=customer.email.strip().lower(),
        customer_phone=_clean(customer.phone),
        shipping_address=customer.shipping_address,
        payment_method=customer.payment_method,
        notes=_clean(customer.notes),
        items=tuple(OrderItem.from_cart_line(line) for line in cart.lines),
        subtotal=compute_totals(cart).subtotal,
        currency=currency,
        idempotency_key=idempotency_key,
    )


async def checkout(
    cart: Cart,
    customer: CustomerInfo,
    catalog: CatalogLookup,
    order_store: OrderStore,
    *,
    idempotency_key: Optional[str] = None,
    timeout: Optional[float] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    order_number_factory: Callable[[], str] = generate_order_number,
    currency: str = "USD",
) -> CheckoutResult:
    """
    Check out a cart.

    Args:
        cart: The session cart as submitted
        customer: Contact, delivery and payment details
        catalog: Catalog used to reconcile the cart
        order_store: Where the order is committed
        idempotency_key: Client token; the store returns the existing order
            when the same key is submitted again
        timeout: Seconds to wait for the commit; on expiry the store is
            asked whether the order exists before giving up
        max_attempts: How many order numbers to try before failing
        order_number_factory: Produces a fresh order number per attempt
        currency: Currency recorded on the order
    """
    if cart.is_empty:
        return CheckoutResult(
            status=CheckoutStatus.EMPTY_CART,
            cart=cart,
            error_message="Your cart is empty",
        )

    bad_lines = [line.product_id for line in cart.lines if line.quantity < 1]
    if bad_lines:
        logger.warning(f"Rejecting cart with non-positive quantities: {bad_lines}")
        return CheckoutResult(
            status=CheckoutStatus.INVALID_CART,
            cart=cart,
            field_errors={"cart": f"Invalid quantity for: {', '.join(bad_lines)}"},
            error_message="Your cart contains invalid quantities; please update it",
        )

    field_errors = validate_customer_info(customer)
    if field_errors:
        return CheckoutResult(
            status=CheckoutStatus.INVALID_CUSTOMER_INFO,
            cart=cart,
            field_errors=field_errors,
            error_message="Please correct the highlighted fields",
        )

    reconciliation = await reconcile(cart, catalog)
    if not reconciliation.is_clean:
        return CheckoutResult(
            status=CheckoutStatus.NEEDS_REVIEW,
            cart=reconciliation.cleaned_cart,
            issues=reconciliation.issues,
            error_message="Please review your cart before checkout",
        )

    draft = build_order_draft(
        reconciliation.cleaned_cart,
        customer,
        order_number=order_number_factory(),
        idempotency_key=idempotency_key,
        currency=currency,
    )

    for attempt in range(1, max_attempts + 1):
        if attempt > 1:
            draft = draft.model_copy(update={"order_number": order_number_factory()})

        try:
            order = await asyncio.wait_for(order_store.create_order(draft), timeout)
        except DuplicateOrderNumber as exc:
            logger.warning(f"Order number collision on attempt {attempt}/{max_attempts}: {exc.order_number}")
            continue
        except asyncio.TimeoutError:
            logger.error(f"Order commit for {draft.order_number} timed out after {timeout}s")
            return await _resolve_timeout(cart, draft, order_store, attempt)
        except OrderStoreError as exc:
            logger.error(f"Order commit for {draft.order_number} failed: {exc}")
            return _failed(cart, f"We could not place your order: {exc}", attempt)

        return _committed(cart, order, attempt)

    return _failed(
        cart,
        f"Could not allocate a unique order number after {max_attempts} attempts",
        max_attempts,
    )


async def _resolve_timeout(
    cart: Cart, draft: OrderDraft, order_store: OrderStore, attempt: int
) -> CheckoutResult:
    # A timeout does not prove the write failed; look before reporting.
    try:
        if draft.idempotency_key:
            existing = await order_store.find_by_idempotency_key(draft.idempotency_key)
        else:
            existing = await order_store.find_by_order_number(draft.order_number)
    except OrderStoreError as exc:
        logger.error(f"Could not verify order {draft.order_number} after timeout: {exc}")
        existing = None

    if existing is not None:
        logger.info(f"Order {existing.order_number} was committed despite the timeout")
        return _committed(cart, existing, attempt)

    result = _failed(
        cart,
        "The order service did not answer in time; your order may or may not have been placed",
        attempt,
    )
    result.unknown_outcome = True
    return result


def _committed(cart: Cart, order: Order, attempt: int) -> CheckoutResult:
    logger.info(f"Order {order.order_number} created: {order.formatted_total}, {order.total_items} item(s)")
    return CheckoutResult(
        status=CheckoutStatus.COMMITTED,
        cart=clear_cart(cart),
        receipt=OrderReceipt(order_id=order.order_id, order_number=order.order_number),
        attempts=attempt,
    )


def _failed(cart: Cart, message: str, attempt: int) -> CheckoutResult:
    return CheckoutResult(
        status=CheckoutStatus.PERSISTENCE_FAILED,
        cart=cart,
        error_message=message,
        attempts=attempt,
    )
