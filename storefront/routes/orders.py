"""
Order intake API routes.

Accepts orders built at checkout and keeps them in memory. Responses use
the ``{success, message, order}`` envelope that the checkout client reads.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..core.deps import get_order_db
from ..database.orders import OrderDatabase
from ..models.checkout import (
    CustomerForm,
    DeliveryZone,
    OrderDraft,
    OrderIntakeRequest,
    OrderIntakeResponse,
    OrderListResponse,
    OrderStatus,
    OrderStatusUpdate,
    Pagination,
    PaymentMethod,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["Orders"])

REQUIRED_CUSTOMER_FIELDS = ("name", "email", "phone", "address")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _has_customer(customer: Optional[dict]) -> bool:
    if not customer:
        return False
    for field in REQUIRED_CUSTOMER_FIELDS:
        value = customer.get(field)
        if not isinstance(value, str) or not value.strip():
            return False
    return True


@router.post("", response_model=OrderIntakeResponse)
async def create_order(
    request: OrderIntakeRequest,
    order_db: OrderDatabase = Depends(get_order_db),
):
    """Create an order"""
    if not request.items:
        return _error(400, "Items are required")

    if not _has_customer(request.customer):
        return _error(400, "Customer information is required")

    customer = CustomerForm(
        name=request.customer["name"],
        email=request.customer["email"],
        phone=request.customer["phone"],
        address=request.customer["address"],
        city=request.customer.get("city") or "",
        postal_code=request.customer.get("postalCode") or request.customer.get("postal_code") or "",
    )

    draft = OrderDraft(
        items=request.items,
        customer=customer,
        payment_method=request.payment_method or PaymentMethod.CASH_ON_DELIVERY,
        delivery_option=request.delivery_option or DeliveryZone.INSIDE_DHAKA,
        delivery_fee=request.delivery_fee or 0,
        subtotal=request.subtotal or 0,
        total=request.total or 0,
        notes=request.notes or "",
        status=request.status or OrderStatus.PENDING,
    )
    order = order_db.create_order(draft)
    logger.info(f"Order {order.id} received: {order.total} for {customer.name}")

    return OrderIntakeResponse(success=True, message="Order created successfully", order=order)


@router.get("", response_model=OrderListResponse)
async def list_orders(
    status: Optional[str] = None,
    limit: int = Query(default=50, ge=0),
    skip: int = Query(default=0, ge=0),
    order_db: OrderDatabase = Depends(get_order_db),
):
    """List orders newest first; ``status=all`` lists every status"""
    status_filter = None
    if status and status != "all":
        try:
            status_filter = OrderStatus(status)
        except ValueError:
            return _error(400, f"Unknown order status: {status}")

    orders, total = order_db.list_orders(status=status_filter, limit=limit, skip=skip)
    return OrderListResponse(
        orders=orders,
        pagination=Pagination(total=total, limit=limit, skip=skip, has_more=skip + limit < total),
    )


@router.get("/{order_id}", response_model=OrderIntakeResponse)
async def get_order(order_id: str, order_db: OrderDatabase = Depends(get_order_db)):
    """Get order details"""
    order = order_db.get_order(order_id)
    if not order:
        return _error(404, "Order not found")
    return OrderIntakeResponse(success=True, order=order)


@router.put("/{order_id}", response_model=OrderIntakeResponse)
async def update_order(
    order_id: str,
    request: OrderIntakeRequest,
    order_db: OrderDatabase = Depends(get_order_db),
):
    """Replace the fields given in the body; omitted or null fields are kept"""
    order = order_db.get_order(order_id)
    if not order:
        return _error(404, "Order not found")

    changes = {
        field: value
        for field, value in request
        if field not in ("items", "customer") and value is not None
    }
    if request.items is not None:
        if not request.items:
            return _error(400, "Items are required")
        changes["items"] = request.items
    if request.customer is not None:
        try:
            customer = CustomerForm.model_validate(
                {**order.customer.model_dump(by_alias=True), **request.customer}
            )
        except ValidationError:
            return _error(400, "Customer information is invalid")
        changes["customer"] = customer

    order = order_db.update_order(order_id, changes)
    return OrderIntakeResponse(success=True, message="Order updated successfully", order=order)


@router.patch("/{order_id}", response_model=OrderIntakeResponse)
async def update_order_status(
    order_id: str,
    request: OrderStatusUpdate,
    order_db: OrderDatabase = Depends(get_order_db),
):
    """Move an order to a new status, or record tracking details and notes"""
    changes = {field: value for field, value in request if value}
    order = order_db.update_order(order_id, changes)
    if not order:
        return _error(404, "Order not found")
    logger.info(f"Order {order_id} updated: {', '.join(changes) or 'no changes'}")
    return OrderIntakeResponse(success=True, message="Order updated successfully", order=order)


@router.delete("/{order_id}")
async def delete_order(order_id: str, order_db: OrderDatabase = Depends(get_order_db)):
    """Delete an order"""
    if not order_db.delete_order(order_id):
        return _error(404, "Order not found")
    logger.info(f"Order {order_id} deleted")
    return {"success": True, "message": "Order deleted successfully"}
