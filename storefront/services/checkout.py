"""
Order materialization.

Turns a cart snapshot and a checkout form into an order draft and hands it
to order intake. Nothing here touches cart state: the caller removes the
ordered lines once submission succeeds.
"""

import logging
import re

import httpx
from pydantic import ValidationError

from ..models.cart import Cart
from ..models.checkout import (
    DELIVERY_FEES,
    CustomerForm,
    DeliveryZone,
    OrderConfirmation,
    OrderDraft,
    OrderItem,
    OrderStatus,
    PaymentMethod,
)
from .errors import CheckoutValidationError, SubmissionError
from .order_client import OrderIntakeClient

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
# Bangladeshi mobile numbers, optionally prefixed with the +88 country code
PHONE_PATTERN = re.compile(r"(\+88)?01[3-9]\d{8}")

REQUIRED_FIELDS = {
    "name": "Name is required",
    "email": "Email is required",
    "phone": "Phone is required",
    "address": "Address is required",
    "city": "City is required",
}

GENERIC_FAILURE = "Failed to place order. Please try again."


def validate_customer(form: CustomerForm) -> dict[str, str]:
    """Return a message per invalid field; empty when the form is valid"""
    errors: dict[str, str] = {}

    for field, message in REQUIRED_FIELDS.items():
        if not getattr(form, field).strip():
            errors[field] = message

    if "email" not in errors and not EMAIL_PATTERN.search(form.email):
        errors["email"] = "Email is invalid"

    if "phone" not in errors:
        phone = re.sub(r"\s", "", form.phone)
        if not PHONE_PATTERN.fullmatch(phone):
            errors["phone"] = "Please enter a valid Bangladeshi phone number"

    return errors


def delivery_fee(zone: DeliveryZone) -> float:
    return DELIVERY_FEES[DeliveryZone(zone)]


def build_draft(
    cart: Cart,
    customer: CustomerForm,
    zone: DeliveryZone,
    notes: str = "",
) -> OrderDraft:
    """Copy the cart into an order draft and price it for the delivery zone"""
    items = [
        OrderItem(
            product_id=line.product_id,
            name=line.name,
            unit_price=line.unit_price,
            quantity=line.quantity,
            image=line.image,
        )
        for line in cart.items
    ]
    subtotal = sum(item.unit_price * item.quantity for item in items)
    fee = delivery_fee(zone)

    return OrderDraft(
        items=items,
        customer=customer.model_copy(),
        payment_method=PaymentMethod.CASH_ON_DELIVERY,
        delivery_option=DeliveryZone(zone),
        delivery_fee=fee,
        subtotal=subtotal,
        total=subtotal + fee,
        notes=notes,
        status=OrderStatus.PENDING,
    )


class OrderMaterializer:
    """Builds orders from carts and submits them to order intake"""

    def __init__(self, client: OrderIntakeClient):
        self.client = client

    async def build_and_submit(
        self,
        cart: Cart,
        customer: CustomerForm,
        zone: DeliveryZone,
        notes: str = "",
    ) -> OrderConfirmation:
        """
        Validate the form, build the draft and submit it.

        Raises:
            CheckoutValidationError: a form field is missing or malformed.
                Order intake is not contacted.
            SubmissionError: the cart is empty, or order intake rejected the
                order or could not be reached.
        """
        errors = validate_customer(customer)
        if errors:
            raise CheckoutValidationError(errors)

        if cart.is_empty:
            raise SubmissionError("Cart is empty")

        draft = build_draft(cart, customer, zone, notes)
        return await self.submit(draft)

    async def submit(self, draft: OrderDraft) -> OrderConfirmation:
        """Send a draft to order intake and return its confirmation"""
        try:
            data = await self.client.create_order(draft)
        except httpx.TimeoutException as e:
            logger.error(f"Order submission timed out: {e}")
            raise SubmissionError("Order service timed out. Please try again.") from e
        except httpx.HTTPStatusError as e:
            raise SubmissionError(GENERIC_FAILURE, e.response.status_code) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Order submission failed: {e}")
            raise SubmissionError(GENERIC_FAILURE) from e

        if not isinstance(data, dict) or not data.get("success"):
            message = (data.get("message") if isinstance(data, dict) else None) or GENERIC_FAILURE
            logger.warning(f"Order intake rejected order: {message}")
            raise SubmissionError(message)

        try:
            confirmation = OrderConfirmation.model_validate(data.get("order") or {})
        except ValidationError as e:
            logger.error(f"Order intake returned an unusable order: {e}")
            raise SubmissionError(GENERIC_FAILURE) from e

        logger.info(
            f"Order {confirmation.order_id} submitted: {draft.total} "
            f"({len(draft.items)} item(s), {draft.delivery_option.value})"
        )
        return confirmation
