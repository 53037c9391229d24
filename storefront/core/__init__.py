# Core modules

from .config import Settings, get_settings
from .session import CartSession, SessionManager

__all__ = ["Settings", "get_settings", "CartSession", "SessionManager"]
