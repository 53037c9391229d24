"""Errors raised by the catalog and order storage"""


class CatalogError(Exception):
    """The catalog could not answer a lookup"""


class OrderStoreError(Exception):
    """Base class for order store failures"""


class DuplicateOrderNumber(OrderStoreError):
    """An order with the same order number already exists"""

    def __init__(self, order_number: str):
        super().__init__(f"Order number {order_number} is already taken")
        self.order_number = order_number


class PersistenceError(OrderStoreError):
    """The order could not be written"""


class InsufficientStock(PersistenceError):
    """Stock ran out between reconciliation and commit"""

    def __init__(self, product_id: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for {product_id}: requested {requested}, available {available}"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidStatusTransition(ValueError):
    """An order cannot move from its current status to the requested one"""
