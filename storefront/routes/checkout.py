"""Checkout API routes for the storefront"""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from ..core.deps import get_cart_db, get_materializer, get_order_client
from ..database.carts import CartDatabase
from ..models.checkout import CheckoutRequest, CheckoutResponse
from ..services.checkout import OrderMaterializer
from ..services.errors import CheckoutValidationError, SubmissionError
from ..services.order_client import OrderIntakeClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])


def _failure(status_code: int, response: CheckoutResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json", by_alias=True),
    )


@router.post("", response_model=CheckoutResponse)
async def checkout(
    request: CheckoutRequest,
    cart_db: CartDatabase = Depends(get_cart_db),
    materializer: OrderMaterializer = Depends(get_materializer),
):
    """
    Place a cash-on-delivery order for a cart.

    The ordered lines leave the cart only after order intake confirms the
    order, so a failed submission can be retried without rebuilding the cart.
    Lines added while the order was in flight stay in the cart.
    """
    store = cart_db.get_cart(request.cart_id)
    if store is None:
        raise HTTPException(status_code=404, detail="Cart not found")

    snapshot = store.snapshot(request.cart_id)
    if snapshot.is_empty:
        raise HTTPException(status_code=400, detail="Cart is empty")

    try:
        confirmation = await materializer.build_and_submit(
            snapshot,
            request.customer,
            request.delivery_option,
            request.notes,
        )
    except CheckoutValidationError as e:
        return _failure(
            422,
            CheckoutResponse(
                success=False,
                message="Please fill in all required fields correctly",
                errors=e.errors,
            ),
        )
    except SubmissionError as e:
        return _failure(502, CheckoutResponse(success=False, message=e.message))

    store.remove_items([line.product_id for line in snapshot.items])

    return CheckoutResponse(
        success=True,
        order=confirmation,
        message="Order placed successfully",
    )


@router.get("/orders/{order_id}")
async def get_order(
    order_id: str,
    client: OrderIntakeClient = Depends(get_order_client),
):
    """Get order details from order intake"""
    try:
        data = await client.get_order(order_id)
    except httpx.HTTPError as e:
        logger.error(f"Order lookup for {order_id} failed: {e}")
        raise HTTPException(status_code=502, detail="Order service unavailable")

    if not data.get("success"):
        raise HTTPException(status_code=404, detail=data.get("message") or "Order not found")
    return data
