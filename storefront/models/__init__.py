# Storefront Models

from .cart import (
    DEFAULT_STOCK_CEILING,
    AddToCartRequest,
    Cart,
    CartItemStatus,
    CartLine,
    CartResponse,
    CartTotals,
    UpdateCartItemRequest,
)
from .checkout import (
    DELIVERY_FEES,
    CheckoutRequest,
    CheckoutResponse,
    CustomerForm,
    DeliveryZone,
    OrderConfirmation,
    OrderDraft,
    OrderItem,
    OrderStatus,
    PaymentMethod,
)

__all__ = [
    "DEFAULT_STOCK_CEILING",
    "AddToCartRequest",
    "Cart",
    "CartItemStatus",
    "CartLine",
    "CartResponse",
    "CartTotals",
    "UpdateCartItemRequest",
    "DELIVERY_FEES",
    "CheckoutRequest",
    "CheckoutResponse",
    "CustomerForm",
    "DeliveryZone",
    "OrderConfirmation",
    "OrderDraft",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
]
