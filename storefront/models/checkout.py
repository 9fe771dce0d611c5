"""Checkout and order models for the storefront"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, ConfigDict, Field

from .cart import CamelModel


class DeliveryZone(str, Enum):
    INSIDE_DHAKA = "inside_dhaka"
    OUTSIDE_DHAKA = "outside_dhaka"


# Flat fee per zone, in the same currency units as product prices
DELIVERY_FEES: dict[DeliveryZone, float] = {
    DeliveryZone.INSIDE_DHAKA: 60.0,
    DeliveryZone.OUTSIDE_DHAKA: 120.0,
}


class PaymentMethod(str, Enum):
    CASH_ON_DELIVERY = "cash_on_delivery"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class CustomerForm(CamelModel):
    """Shipping details as typed into the checkout form"""
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    postal_code: str = ""


class OrderItem(CamelModel):
    """Value copy of a cart line inside an order"""
    product_id: str
    name: str
    unit_price: float = Field(alias="price")
    quantity: int
    image: Optional[str] = None


class OrderDraft(CamelModel):
    """Order payload built from a cart snapshot at checkout time"""
    items: list[OrderItem]
    customer: CustomerForm
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    delivery_option: DeliveryZone
    delivery_fee: float
    subtotal: float
    total: float
    notes: str = ""
    status: OrderStatus = OrderStatus.PENDING


class CheckoutRequest(CamelModel):
    """Request to checkout a cart"""
    cart_id: str
    customer: CustomerForm
    delivery_option: DeliveryZone = DeliveryZone.INSIDE_DHAKA
    notes: str = ""


class OrderConfirmation(CamelModel):
    """Order as acknowledged by order intake"""
    model_config = ConfigDict(extra="allow")

    order_id: str = Field(
        validation_alias=AliasChoices("id", "_id", "orderId"),
        serialization_alias="orderId",
    )
    status: OrderStatus = OrderStatus.PENDING
    total: Optional[float] = None


class CheckoutResponse(CamelModel):
    """Response from checkout"""
    success: bool
    order: Optional[OrderConfirmation] = None
    message: Optional[str] = None
    errors: dict[str, str] = {}


class StoredOrder(OrderDraft):
    """Order held by the bundled order-intake endpoint"""
    id: str
    tracking_number: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OrderIntakeRequest(CamelModel):
    """
    Body accepted by the order-intake endpoint.

    Everything is optional so missing fields produce the endpoint's own
    400 responses instead of framework validation errors.
    """
    items: Optional[list[OrderItem]] = None
    customer: Optional[dict[str, Any]] = None
    payment_method: Optional[PaymentMethod] = None
    delivery_option: Optional[DeliveryZone] = None
    delivery_fee: Optional[float] = None
    subtotal: Optional[float] = None
    total: Optional[float] = None
    notes: Optional[str] = None
    status: Optional[OrderStatus] = None


class OrderStatusUpdate(CamelModel):
    """Fields an order can change as it moves through fulfilment"""
    status: Optional[OrderStatus] = None
    tracking_number: Optional[str] = None
    notes: Optional[str] = None


class OrderIntakeResponse(CamelModel):
    """Response from the order-intake endpoint"""
    success: bool
    message: Optional[str] = None
    order: Optional[StoredOrder] = None


class Pagination(CamelModel):
    total: int
    limit: int
    skip: int
    has_more: bool


class OrderListResponse(CamelModel):
    success: bool = True
    orders: list[StoredOrder] = []
    pagination: Pagination
