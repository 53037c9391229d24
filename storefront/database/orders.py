"""Order storage for the storefront"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from ..models.checkout import Order, OrderDraft, OrderStatus, STATUS_TRANSITIONS
from .errors import DuplicateOrderNumber, InvalidStatusTransition
from .products import ProductDatabase, product_db

logger = logging.getLogger(__name__)


class OrderDatabase:
    """
    In-memory order storage.

    Order numbers are a unique index: a second order with the same number is
    rejected with DuplicateOrderNumber. When a catalog is attached, the stock
    for every item is reserved in the same critical section that inserts the
    order, so two concurrent checkouts cannot both take the last unit.
    """

    def __init__(self, catalog: Optional[ProductDatabase] = None):
        self.catalog = catalog
        self.orders: dict[str, Order] = {}
        self._by_number: dict[str, str] = {}
        self._by_idempotency_key: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def create_order(self, draft: OrderDraft) -> Order:
        """
        Persist a draft as a new pending order.

        A draft carrying an idempotency key that was already used returns the
        order created the first time instead of creating another one.

        Raises:
            DuplicateOrderNumber: the draft's order number is taken
            InsufficientStock: the catalog can no longer cover an item
        """
        async with self._lock:
            if draft.idempotency_key:
                existing = self._lookup(self._by_idempotency_key, draft.idempotency_key)
                if existing:
                    logger.info(
                        f"Idempotency key {draft.idempotency_key} already used by {existing.order_number}"
                    )
                    return existing

            if draft.order_number in self._by_number:
                raise DuplicateOrderNumber(draft.order_number)

            if self.catalog is not None:
                self.catalog.reserve_stock(draft.items)

            now = datetime.now(timezone.utc)
            order = Order(
                order_id=str(uuid.uuid4()),
                order_number=draft.order_number,
                status=OrderStatus.PENDING,
                customer_name=draft.customer_name,
                customer_email=draft.customer_email,
                customer_phone=draft.customer_phone,
                shipping_address=draft.shipping_address,
                payment_method=draft.payment_method,
                notes=draft.notes,
                items=list(draft.items),
                total_amount=draft.subtotal,
                currency=draft.currency,
                idempotency_key=draft.idempotency_key,
                created_at=now,
                updated_at=now,
            )

            self.orders[order.order_id] = order
            self._by_number[order.order_number] = order.order_id
            if order.idempotency_key:
                self._by_idempotency_key[order.idempotency_key] = order.order_id
            return order

    def get_order(self, order_id: str) -> Optional[Order]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    async def find_by_order_number(self, order_number: str) -> Optional[Order]:
        return self._lookup(self._by_number, order_number)

    async def find_by_idempotency_key(self, key: str) -> Optional[Order]:
        return self._lookup(self._by_idempotency_key, key)

    def _lookup(self, index: dict[str, str], key: str) -> Optional[Order]:
        order_id = index.get(key)
        return self.orders.get(order_id) if order_id else None

    def update_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        """
        Move an order along its lifecycle.

        Raises:
            InvalidStatusTransition: the move is not allowed from the current status
        """
        order = self.get_order(order_id)
        if not order:
            return None

        if status != order.status and status not in STATUS_TRANSITIONS[order.status]:
            raise InvalidStatusTransition(
                f"Cannot move order {order.order_number} from {order.status.value} to {status.value}"
            )

        order.status = status
        order.updated_at = datetime.now(timezone.utc)
        return order

    def list_orders(self, limit: int = 50, status: Optional[OrderStatus] = None) -> list[Order]:
        """List recent orders, newest first"""
        orders = list(self.orders.values())
        if status is not None:
            orders = [o for o in orders if o.status == status]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders[:limit]


# Singleton instance
order_db = OrderDatabase(catalog=product_db)
