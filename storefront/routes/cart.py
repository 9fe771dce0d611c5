"""Cart API routes for the storefront"""

from fastapi import APIRouter, Depends, HTTPException

from ..core.deps import get_cart_db
from ..database.carts import CartDatabase, CartStore
from ..models.cart import (
    AddToCartRequest,
    CartItemStatus,
    CartResponse,
    UpdateCartItemRequest,
)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def _require_cart(cart_db: CartDatabase, cart_id: str) -> CartStore:
    store = cart_db.get_cart(cart_id)
    if store is None:
        raise HTTPException(status_code=404, detail="Cart not found")
    return store


@router.post("", response_model=CartResponse)
async def create_cart(cart_db: CartDatabase = Depends(get_cart_db)):
    """Create a new shopping cart"""
    cart_id, store = cart_db.create_cart()
    return CartResponse(cart=store.snapshot(cart_id), message="Cart created")


@router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str, cart_db: CartDatabase = Depends(get_cart_db)):
    """Get cart by ID"""
    store = _require_cart(cart_db, cart_id)
    return CartResponse(cart=store.snapshot(cart_id))


@router.post("/{cart_id}/items", response_model=CartResponse)
async def add_to_cart(
    cart_id: str,
    request: AddToCartRequest,
    cart_db: CartDatabase = Depends(get_cart_db),
):
    """Add an item to the cart. Quantities above the stock ceiling are clamped."""
    store = _require_cart(cart_db, cart_id)
    store.add_item(
        product_id=request.product_id,
        name=request.name,
        unit_price=request.unit_price,
        image=request.image,
        stock_ceiling=request.stock_ceiling,
        quantity=request.quantity,
    )
    return CartResponse(
        cart=store.snapshot(cart_id),
        message=f"Added {request.name or request.product_id} to cart",
    )


@router.get("/{cart_id}/items/{product_id}", response_model=CartItemStatus)
async def get_cart_item(
    cart_id: str,
    product_id: str,
    cart_db: CartDatabase = Depends(get_cart_db),
):
    """Check whether a product is in the cart"""
    store = _require_cart(cart_db, cart_id)
    return CartItemStatus(
        product_id=product_id,
        in_cart=store.is_in_cart(product_id),
        quantity=store.quantity_of(product_id),
    )


@router.put("/{cart_id}/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    cart_id: str,
    product_id: str,
    request: UpdateCartItemRequest,
    cart_db: CartDatabase = Depends(get_cart_db),
):
    """Update item quantity in cart; zero removes the item"""
    store = _require_cart(cart_db, cart_id)
    if not store.is_in_cart(product_id):
        raise HTTPException(status_code=404, detail="Item not in cart")

    store.update_quantity(product_id, request.quantity)
    message = "Cart updated" if store.is_in_cart(product_id) else "Item removed"
    return CartResponse(cart=store.snapshot(cart_id), message=message)


@router.delete("/{cart_id}/items/{product_id}", response_model=CartResponse)
async def remove_from_cart(
    cart_id: str,
    product_id: str,
    cart_db: CartDatabase = Depends(get_cart_db),
):
    """Remove an item from the cart"""
    store = _require_cart(cart_db, cart_id)
    store.remove_item(product_id)
    return CartResponse(cart=store.snapshot(cart_id), message="Item removed")


@router.delete("/{cart_id}", response_model=CartResponse)
async def clear_cart(cart_id: str, cart_db: CartDatabase = Depends(get_cart_db)):
    """Clear all items from cart"""
    store = _require_cart(cart_db, cart_id)
    store.clear_cart()
    return CartResponse(cart=store.snapshot(cart_id), message="Cart cleared")
