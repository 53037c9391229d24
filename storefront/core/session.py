"""Session-keyed cart storage"""

import uuid
from datetime import datetime, timezone
from typing import Optional
from dataclasses import dataclass, field

from ..models.cart import Cart


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CartSession:
    """A browsing session and the cart it owns"""
    session_id: str
    created_at: datetime
    updated_at: datetime
    cart: Cart = field(default_factory=Cart)

    def replace_cart(self, cart: Cart) -> None:
        """Swap in a new cart value"""
        self.cart = cart
        self.updated_at = _utcnow()


class SessionManager:
    """
    Holds one cart per session.

    Carts are immutable values; callers read the current cart, compute a
    new one with the engine functions and hand it back via save_cart.
    """

    def __init__(self):
        self.sessions: dict[str, CartSession] = {}

    def create_session(self, session_id: Optional[str] = None) -> CartSession:
        """Create a new session with an empty cart"""
        now = _utcnow()
        session = CartSession(
            session_id=session_id or str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
        )
        self.sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> Optional[CartSession]:
        """Get session by ID"""
        return self.sessions.get(session_id)

    def get_or_create_session(self, session_id: Optional[str] = None) -> CartSession:
        """Get existing session or create new one"""
        if session_id and session_id in self.sessions:
            return self.sessions[session_id]
        return self.create_session(session_id)

    def save_cart(self, session_id: str, cart: Cart) -> CartSession:
        """Store a cart for the session, creating the session if needed"""
        session = self.get_or_create_session(session_id)
        session.replace_cart(cart)
        return session

    def delete_session(self, session_id: str) -> bool:
        """Delete a session"""
        if session_id in self.sessions:
            del self.sessions[session_id]
            return True
        return False

    def cleanup_old_sessions(self, max_age_hours: int = 24) -> int:
        """Remove sessions idle for more than max_age_hours"""
        now = _utcnow()
        old_sessions = [
            sid for sid, session in self.sessions.items()
            if (now - session.updated_at).total_seconds() > max_age_hours * 3600
        ]
        for sid in old_sessions:
            del self.sessions[sid]
        return len(old_sessions)
