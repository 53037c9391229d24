"""
Cart reconciliation

Brings the snapshot fields of a cart in line with the live catalog right
before checkout and reports every discrepancy found. Lines are checked one
by one, in cart order:

- product gone          -> NOT_FOUND, line dropped
- stock below quantity  -> OUT_OF_STOCK, line dropped (never clamped)
- price differs         -> PRICE_CHANGED, line kept at the catalog price
- catalog error         -> LOOKUP_FAILED, line kept untouched

A failing lookup only affects its own line, whatever the catalog raised.
"""

import logging
from dataclasses import dataclass, field

from ..database.errors import CatalogError
from ..models.cart import Cart, CartLine, IssueKind, ReconciliationIssue
from .protocols import CatalogLookup

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationResult:
    """Outcome of a reconciliation pass"""
    cleaned_cart: Cart
    issues: list[ReconciliationIssue] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.issues


async def reconcile(cart: Cart, catalog: CatalogLookup) -> ReconciliationResult:
    kept: list[CartLine] = []
    issues: list[ReconciliationIssue] = []

    for line in cart.lines:
        try:
            product = await catalog.find_by_id(line.product_id)
            has_stock = product is not None and await catalog.check_stock(
                line.product_id, line.quantity
            )
        except Exception as exc:
            if isinstance(exc, CatalogError):
                logger.warning(f"Catalog lookup failed for {line.product_id}: {exc}")
            else:
                logger.exception(f"Unexpected catalog error for {line.product_id}")
            issues.append(_issue(line, IssueKind.LOOKUP_FAILED, f"Could not check {line.product_name} right now"))
            kept.append(line)
            continue

        if product is None:
            issues.append(_issue(line, IssueKind.NOT_FOUND, f"{line.product_name} is no longer available"))
        elif not has_stock:
            issues.append(
                _issue(
                    line,
                    IssueKind.OUT_OF_STOCK,
                    f"{line.product_name} only has {product.stock_quantity} items in stock",
                )
            )
        elif product.price != line.unit_price:
            issues.append(
                _issue(
                    line,
                    IssueKind.PRICE_CHANGED,
                    f"Price for {line.product_name} has been updated from {line.unit_price:.2f} to {product.price:.2f}",
                )
            )
            kept.append(line.model_copy(update={"unit_price": product.price}))
        else:
            kept.append(line)

    if issues:
        logger.warning(f"Reconciliation found {len(issues)} issue(s): {[i.kind.value for i in issues]}")

    return ReconciliationResult(
        cleaned_cart=cart.model_copy(update={"lines": tuple(kept)}),
        issues=issues,
    )


def _issue(line: CartLine, kind: IssueKind, detail: str) -> ReconciliationIssue:
    return ReconciliationIssue(
        product_id=line.product_id,
        product_name=line.product_name,
        kind=kind,
        detail=detail,
    )


async def prune_unavailable(cart: Cart, catalog: CatalogLookup) -> tuple[Cart, list[str]]:
    """
    Drop lines whose product was deleted or has no stock left.

    Run whenever a cart is shown. Prices and requested quantities are not
    touched here; that is left to `reconcile` at checkout. A line whose
    lookup fails is kept.

    Returns:
        Tuple of (pruned cart, names of the removed products)
    """
    kept: list[CartLine] = []
    removed: list[str] = []

    for line in cart.lines:
        try:
            product = await catalog.find_by_id(line.product_id)
        except Exception:
            logger.exception(f"Could not check {line.product_id} while showing the cart")
            kept.append(line)
            continue

        if product is None or product.stock_quantity <= 0:
            logger.info(f"Product {line.product_id} not found or out of stock, removing from cart")
            removed.append(line.product_name)
        else:
            kept.append(line)

    if not removed:
        return cart, removed
    return cart.model_copy(update={"lines": tuple(kept)}), removed
