"""Checkout and order models for the storefront"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from .cart import CartLine, CartResponse, ReconciliationIssue
from .product import DEFAULT_PRODUCT_IMAGE


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


# Allowed next states for each order status
STATUS_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


class PaymentMethod(str, Enum):
    CASH_ON_DELIVERY = "Cash on Delivery"
    CREDIT_CARD = "Credit Card"
    PAYPAL = "PayPal"
    BANK_TRANSFER = "Bank Transfer"


class ShippingAddress(BaseModel):
    """Shipping address for order"""
    model_config = ConfigDict(frozen=True)

    street: str
    city: str
    state: str = ""
    postal_code: str
    country: str = "US"


class CustomerInfo(BaseModel):
    """
    Customer contact and delivery details submitted at checkout.

    Fields are loose strings here; name and email rules are
    checked by the checkout engine so every problem is reported at once.
    """
    model_config = ConfigDict(frozen=True)

    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    shipping_address: Optional[ShippingAddress] = None
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    notes: Optional[str] = None


class CheckoutRequest(BaseModel):
    """Request to checkout the session cart"""
    customer: CustomerInfo
    idempotency_key: Optional[str] = Field(default=None, max_length=128)


class OrderItem(BaseModel):
    """Item in an order, copied from a reconciled cart line"""
    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)
    image: str = DEFAULT_PRODUCT_IMAGE

    @property
    def total_price(self) -> float:
        return self.unit_price * self.quantity

    @classmethod
    def from_cart_line(cls, line: CartLine) -> "OrderItem":
        return cls(
            product_id=line.product_id,
            product_name=line.product_name,
            quantity=line.quantity,
            unit_price=line.unit_price,
            image=line.image,
        )


class OrderDraft(BaseModel):
    """Immutable proposed order handed whole to the order store"""
    model_config = ConfigDict(frozen=True)

    order_number: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    shipping_address: Optional[ShippingAddress] = None
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    notes: Optional[str] = None
    items: tuple[OrderItem, ...]
    subtotal: float = Field(ge=0)
    currency: str = "USD"
    idempotency_key: Optional[str] = None


class Order(BaseModel):
    """Persisted order"""
    order_id: str
    order_number: str
    status: OrderStatus = OrderStatus.PENDING
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    shipping_address: Optional[ShippingAddress] = None
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    notes: Optional[str] = None
    items: list[OrderItem]
    total_amount: float
    currency: str = "USD"
    idempotency_key: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def formatted_total(self) -> str:
        return f"${self.total_amount:.2f}"


class OrderReceipt(BaseModel):
    """What the customer gets back from a committed checkout"""
    order_id: str
    order_number: str


class CheckoutResponse(BaseModel):
    """Response from checkout"""
    success: bool
    receipt: Optional[OrderReceipt] = None
    cart: Optional[CartResponse] = None
    issues: list[ReconciliationIssue] = []
    field_errors: dict[str, str] = {}
    unknown_outcome: bool = False
    error_message: Optional[str] = None
