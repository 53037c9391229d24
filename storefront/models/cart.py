"""Cart models for the storefront"""

import math
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .product import DEFAULT_PRODUCT_IMAGE


def coerce_quantity(value: Any) -> int:
    """
    Turn a loosely-typed quantity into a positive integer.

    Anything missing, non-numeric or not positive becomes 1.
    Fractional input is truncated ("2.7" -> 2).
    """
    if isinstance(value, bool):
        return 1
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 1
    if not math.isfinite(number):
        return 1
    quantity = int(number)
    return quantity if quantity > 0 else 1


class CartLine(BaseModel):
    """One product's presence in a cart, with a snapshot of catalog fields"""
    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    unit_price: float = Field(ge=0)
    image: str = DEFAULT_PRODUCT_IMAGE
    quantity: int = Field(gt=0)

    @computed_field
    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


class Cart(BaseModel):
    """Shopping cart held by a single session"""
    model_config = ConfigDict(frozen=True)

    lines: tuple[CartLine, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def get_line(self, product_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.product_id == product_id), None)


class CartTotals(BaseModel):
    """Values derived from cart lines, never stored on the cart"""
    subtotal: float = 0.0
    item_count: int = 0


class IssueKind(str, Enum):
    NOT_FOUND = "not_found"
    OUT_OF_STOCK = "out_of_stock"
    PRICE_CHANGED = "price_changed"
    LOOKUP_FAILED = "lookup_failed"


class ReconciliationIssue(BaseModel):
    """A discrepancy between a cart line and the live catalog"""
    product_id: str
    product_name: str
    kind: IssueKind
    detail: str


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    product_id: str
    quantity: int = 1

    @field_validator("quantity", mode="before")
    @classmethod
    def _lenient_quantity(cls, value: Any) -> int:
        return coerce_quantity(value)


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity; zero or less removes the line"""
    quantity: int


class CartResponse(BaseModel):
    """Cart API response"""
    session_id: str
    lines: list[CartLine]
    subtotal: float
    item_count: int
    currency: str = "USD"
    message: Optional[str] = None
