# Storage modules

from .products import product_db, ProductDatabase
from .orders import order_db, OrderDatabase
from .errors import (
    CatalogError,
    OrderStoreError,
    DuplicateOrderNumber,
    PersistenceError,
    InsufficientStock,
    InvalidStatusTransition,
)

__all__ = [
    "product_db",
    "ProductDatabase",
    "order_db",
    "OrderDatabase",
    "CatalogError",
    "OrderStoreError",
    "DuplicateOrderNumber",
    "PersistenceError",
    "InsufficientStock",
    "InvalidStatusTransition",
]
