"""Cart models for the storefront"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Ceiling used when the catalog does not supply a stock level
DEFAULT_STOCK_CEILING = 99


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, accepting either form on input"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CartLine(CamelModel):
    """One product entry in a cart"""
    product_id: str
    name: str
    unit_price: float = Field(default=0.0, ge=0)
    quantity: int = Field(ge=1)
    stock_ceiling: int = Field(default=DEFAULT_STOCK_CEILING, ge=0)
    image: Optional[str] = None

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


class CartTotals(CamelModel):
    """Aggregates derived from the cart lines"""
    total_items: int = 0
    total_price: float = 0.0


class Cart(CamelModel):
    """Point-in-time view of a cart"""
    cart_id: Optional[str] = None
    items: list[CartLine] = []
    total_items: int = 0
    total_price: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.items


class AddToCartRequest(CamelModel):
    """
    Request to add an item to the cart.

    Price and stock come from the catalog as-is; the cart store sanitizes
    them, so nothing here is type or range checked.
    """
    product_id: str
    name: str = ""
    unit_price: Any = None
    image: Any = None
    stock_ceiling: Any = None
    quantity: Any = 1


class UpdateCartItemRequest(CamelModel):
    """Request to update cart item quantity. Zero or less removes the line."""
    quantity: int


class CartResponse(CamelModel):
    """Cart API response"""
    cart: Cart
    message: Optional[str] = None


class CartItemStatus(CamelModel):
    """Whether a product is in the cart and how many"""
    product_id: str
    in_cart: bool
    quantity: int
