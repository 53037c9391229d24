"""Collaborators the checkout engine talks to"""

from typing import Optional, Protocol

from ..models.checkout import Order, OrderDraft
from ..models.product import Product


class CatalogLookup(Protocol):
    """
    Read-only view of the product catalog.

    Implementations raise CatalogError when a lookup cannot be answered.
    """

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        ...

    async def check_stock(self, product_id: str, quantity: int) -> bool:
        ...


class OrderStore(Protocol):
    """
    Durable order storage.

    create_order is the single commit point of a checkout. It must enforce
    order-number uniqueness itself (DuplicateOrderNumber) and must not
    oversell stock when several checkouts commit at once. Any other write
    failure is a PersistenceError.
    """

    async def create_order(self, draft: OrderDraft) -> Order:
        ...

    async def find_by_order_number(self, order_number: str) -> Optional[Order]:
        ...

    async def find_by_idempotency_key(self, key: str) -> Optional[Order]:
        ...
