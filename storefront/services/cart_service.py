"""
Cart Service

The caller-facing side of the cart engine. Each method is one user action:
it loads the session's cart, runs the matching pure engine function and
stores whatever cart comes back.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.config import Settings, get_settings
from ..core.session import SessionManager
from ..database import order_db, product_db
from ..engine import cart_ops
from ..engine.checkout import CheckoutResult, checkout
from ..engine.order_numbers import generate_order_number
from ..engine.reconciliation import prune_unavailable
from ..engine.protocols import CatalogLookup, OrderStore
from ..engine.totals import compute_totals
from ..models.cart import Cart, CartTotals
from ..models.checkout import CustomerInfo

logger = logging.getLogger(__name__)


class ProductNotFound(LookupError):
    """The requested product is not in the catalog"""

    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


@dataclass
class CartView:
    """A cart together with its derived totals"""
    session_id: str
    cart: Cart
    totals: CartTotals
    removed: list[str] = field(default_factory=list)


class CartService:
    """Cart and checkout actions for a session"""

    def __init__(
        self,
        catalog: CatalogLookup,
        orders: OrderStore,
        sessions: Optional[SessionManager] = None,
        settings: Optional[Settings] = None,
    ):
        self.catalog = catalog
        self.orders = orders
        self.sessions = sessions or SessionManager()
        self.settings = settings or get_settings()

    def view_cart(self, session_id: Optional[str] = None) -> CartView:
        """Get the session cart with fresh totals"""
        session = self.sessions.get_or_create_session(session_id)
        return self._view(session.session_id, session.cart)

    async def refresh_cart(self, session_id: Optional[str] = None) -> CartView:
        """
        Get the session cart after dropping products that are gone or sold out.

        The pruned cart is saved back; the names of removed products are
        listed on the returned view.
        """
        session = self.sessions.get_or_create_session(session_id)
        cart, removed = await prune_unavailable(session.cart, self.catalog)
        if removed:
            self.sessions.save_cart(session.session_id, cart)

        view = self._view(session.session_id, cart)
        view.removed = removed
        return view

    async def add_item(self, session_id: Optional[str], product_id: str, quantity: Any = 1) -> CartView:
        """
        Add a product to the session cart.

        Raises:
            ProductNotFound: the product is not in the catalog
        """
        product = await self.catalog.find_by_id(product_id)
        if not product:
            raise ProductNotFound(product_id)

        session = self.sessions.get_or_create_session(session_id)
        cart = cart_ops.add_item(session.cart, product_id, quantity, product)
        self.sessions.save_cart(session.session_id, cart)

        logger.info(f"Session {session.session_id}: added {product_id} ({product.name})")
        return self._view(session.session_id, cart)

    def set_quantity(self, session_id: Optional[str], product_id: str, quantity: int) -> CartView:
        """Change a line's quantity; zero or less removes it"""
        session = self.sessions.get_or_create_session(session_id)
        cart = cart_ops.set_quantity(session.cart, product_id, quantity)
        self.sessions.save_cart(session.session_id, cart)

        logger.info(f"Session {session.session_id}: set {product_id} quantity to {quantity}")
        return self._view(session.session_id, cart)

    def remove_item(self, session_id: Optional[str], product_id: str) -> CartView:
        """Remove a product from the session cart"""
        session = self.sessions.get_or_create_session(session_id)
        cart = cart_ops.remove_item(session.cart, product_id)
        self.sessions.save_cart(session.session_id, cart)

        logger.info(f"Session {session.session_id}: removed {product_id}")
        return self._view(session.session_id, cart)

    def clear(self, session_id: Optional[str]) -> CartView:
        """Empty the session cart"""
        session = self.sessions.get_or_create_session(session_id)
        cart = cart_ops.clear_cart(session.cart)
        self.sessions.save_cart(session.session_id, cart)
        return self._view(session.session_id, cart)

    async def checkout(
        self,
        session_id: Optional[str],
        customer: CustomerInfo,
        idempotency_key: Optional[str] = None,
    ) -> tuple[str, CheckoutResult]:
        """
        Check out the session cart.

        The cart in the result replaces the session cart: emptied when the
        order was committed, corrected when it needs review, and unchanged
        when anything failed.

        Returns:
            Tuple of (session ID, checkout result)
        """
        session = self.sessions.get_or_create_session(session_id)
        settings = self.settings

        result = await checkout(
            session.cart,
            customer,
            self.catalog,
            self.orders,
            idempotency_key=idempotency_key,
            timeout=settings.persistence_timeout_seconds,
            max_attempts=settings.order_number_max_attempts,
            order_number_factory=lambda: generate_order_number(settings.order_number_prefix),
            currency=settings.currency,
        )

        self.sessions.save_cart(session.session_id, result.cart)
        logger.info(f"Session {session.session_id}: checkout {result.status.value}")
        return session.session_id, result

    def cleanup_sessions(self) -> int:
        removed = self.sessions.cleanup_old_sessions(self.settings.session_max_age_hours)
        if removed:
            logger.info(f"Removed {removed} idle session(s)")
        return removed

    def _view(self, session_id: str, cart: Cart) -> CartView:
        return CartView(session_id=session_id, cart=cart, totals=compute_totals(cart))


# Singleton instance
cart_service = CartService(catalog=product_db, orders=order_db)


def get_cart_service() -> CartService:
    """FastAPI dependency returning the shared cart service"""
    return cart_service
