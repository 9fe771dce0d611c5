"""Tests for order materialization and submission."""

import asyncio
import json

import httpx
import pytest

from storefront.models.checkout import CustomerForm, DeliveryZone, OrderStatus, PaymentMethod
from storefront.services.checkout import OrderMaterializer, build_draft, delivery_fee, validate_customer
from storefront.services.errors import CheckoutValidationError, SubmissionError
from storefront.services.order_client import OrderIntakeClient


class RecordingIntake:
    """Order-intake stand-in that records requests and replies with a canned response"""

    def __init__(self, status_code=200, body=None, raises=None):
        self.status_code = status_code
        self.body = body if body is not None else {
            "success": True,
            "message": "Order created successfully",
            "order": {"_id": "665f1c2a9b1e", "status": "pending", "total": 1360},
        }
        self.raises = raises
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raises:
            raise self.raises(request)
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    def materializer(self) -> OrderMaterializer:
        client = OrderIntakeClient("http://orders.test", transport=httpx.MockTransport(self))
        return OrderMaterializer(client)


@pytest.fixture()
def cart(store):
    store.add_item("p1", "Boat", 500, image="boat.jpg", stock_ceiling=10, quantity=2)
    store.add_item("p2", "Truck", 300, image="truck.jpg", stock_ceiling=10)
    return store.snapshot()


class TestValidateCustomer:
    def test_valid_form(self, customer):
        assert validate_customer(customer) == {}

    def test_blank_fields_reported_individually(self):
        errors = validate_customer(CustomerForm(name="  ", email="", phone="", address="", city=""))
        assert set(errors) == {"name", "email", "phone", "address", "city"}
        assert errors["email"] == "Email is required"

    def test_postal_code_is_optional(self, customer):
        assert validate_customer(customer.model_copy(update={"postal_code": ""})) == {}

    @pytest.mark.parametrize("email", ["not-an-email", "user@domain", "@example.com", "a b@c"])
    def test_invalid_email(self, customer, email):
        errors = validate_customer(customer.model_copy(update={"email": email}))
        assert errors == {"email": "Email is invalid"}

    @pytest.mark.parametrize("email", ["a b@c.de", "Email: rahim@example.com", " rahim@example.com "])
    def test_email_found_inside_value(self, customer, email):
        assert validate_customer(customer.model_copy(update={"email": email})) == {}

    @pytest.mark.parametrize("phone", ["01812345678", "+8801912345678", "017 1234 5678"])
    def test_valid_phone_numbers(self, customer, phone):
        assert validate_customer(customer.model_copy(update={"phone": phone})) == {}

    @pytest.mark.parametrize("phone", ["01212345678", "0171234567", "+9101712345678", "phone"])
    def test_invalid_phone_numbers(self, customer, phone):
        errors = validate_customer(customer.model_copy(update={"phone": phone}))
        assert list(errors) == ["phone"]


class TestBuildDraft:
    def test_delivery_fees(self):
        assert delivery_fee(DeliveryZone.INSIDE_DHAKA) == 60
        assert delivery_fee(DeliveryZone.OUTSIDE_DHAKA) == 120
        assert delivery_fee("outside_dhaka") == 120

    def test_inside_zone_totals(self, cart, customer):
        draft = build_draft(cart, customer, DeliveryZone.INSIDE_DHAKA)

        assert draft.subtotal == 1300
        assert draft.delivery_fee == 60
        assert draft.total == 1360

    def test_outside_zone_totals(self, cart, customer):
        draft = build_draft(cart, customer, DeliveryZone.OUTSIDE_DHAKA)
        assert draft.total == 1420

    @pytest.mark.parametrize("zone", list(DeliveryZone))
    def test_total_is_subtotal_plus_fee(self, cart, customer, zone):
        draft = build_draft(cart, customer, zone)
        assert draft.total == draft.subtotal + delivery_fee(zone)
        assert draft.subtotal == cart.total_price

    def test_draft_copies_lines(self, cart, customer):
        draft = build_draft(cart, customer, DeliveryZone.INSIDE_DHAKA, notes="Call first")

        assert [(i.product_id, i.name, i.unit_price, i.quantity, i.image) for i in draft.items] == [
            ("p1", "Boat", 500, 2, "boat.jpg"),
            ("p2", "Truck", 300, 1, "truck.jpg"),
        ]
        assert draft.payment_method == PaymentMethod.CASH_ON_DELIVERY
        assert draft.status == OrderStatus.PENDING
        assert draft.notes == "Call first"

    def test_draft_unaffected_by_later_cart_changes(self, store, customer):
        store.add_item("p1", "Boat", 500, stock_ceiling=10, quantity=2)
        draft = build_draft(store.snapshot(), customer, DeliveryZone.INSIDE_DHAKA)

        store.update_quantity("p1", 7)
        store.add_item("p9", "Heli", 9000)
        store.clear_cart()

        assert len(draft.items) == 1
        assert draft.items[0].quantity == 2
        assert draft.subtotal == 1000
        assert draft.total == 1060

    def test_wire_format(self, cart, customer):
        payload = build_draft(cart, customer, DeliveryZone.OUTSIDE_DHAKA).model_dump(mode="json", by_alias=True)

        assert payload["items"][0] == {
            "productId": "p1",
            "name": "Boat",
            "price": 500.0,
            "quantity": 2,
            "image": "boat.jpg",
        }
        assert payload["customer"]["postalCode"] == "1205"
        assert payload["paymentMethod"] == "cash_on_delivery"
        assert payload["deliveryOption"] == "outside_dhaka"
        assert payload["deliveryFee"] == 120
        assert payload["subtotal"] == 1300
        assert payload["total"] == 1420
        assert payload["status"] == "pending"


class TestBuildAndSubmit:
    def test_successful_submission(self, cart, customer):
        intake = RecordingIntake()
        confirmation = asyncio.run(
            intake.materializer().build_and_submit(cart, customer, DeliveryZone.INSIDE_DHAKA)
        )

        assert confirmation.order_id == "665f1c2a9b1e"
        assert confirmation.status == OrderStatus.PENDING

        assert len(intake.requests) == 1
        request = intake.requests[0]
        assert request.method == "POST"
        assert request.url == "http://orders.test/api/orders"
        body = json.loads(request.content)
        assert body["total"] == 1360
        assert body["customer"]["email"] == "rahim@example.com"

    def test_invalid_form_is_not_submitted(self, cart, customer):
        intake = RecordingIntake()
        bad_customer = customer.model_copy(update={"email": "not-an-email"})

        with pytest.raises(CheckoutValidationError) as exc_info:
            asyncio.run(intake.materializer().build_and_submit(cart, bad_customer, DeliveryZone.INSIDE_DHAKA))

        assert exc_info.value.errors == {"email": "Email is invalid"}
        assert intake.requests == []

    def test_empty_cart_is_not_submitted(self, store, customer):
        intake = RecordingIntake()

        with pytest.raises(SubmissionError):
            asyncio.run(intake.materializer().build_and_submit(store.snapshot(), customer, DeliveryZone.INSIDE_DHAKA))

        assert intake.requests == []

    def test_rejected_order(self, cart, customer):
        intake = RecordingIntake(
            status_code=400,
            body={"success": False, "message": "Customer information is required"},
        )

        with pytest.raises(SubmissionError) as exc_info:
            asyncio.run(intake.materializer().build_and_submit(cart, customer, DeliveryZone.INSIDE_DHAKA))

        assert exc_info.value.message == "Customer information is required"

    def test_server_error_without_json(self, cart, customer):
        intake = RecordingIntake(status_code=500, body="Internal Server Error")

        with pytest.raises(SubmissionError) as exc_info:
            asyncio.run(intake.materializer().build_and_submit(cart, customer, DeliveryZone.INSIDE_DHAKA))

        assert exc_info.value.status_code == 500

    def test_timeout(self, cart, customer):
        intake = RecordingIntake(raises=lambda request: httpx.ReadTimeout("timed out", request=request))

        with pytest.raises(SubmissionError) as exc_info:
            asyncio.run(intake.materializer().build_and_submit(cart, customer, DeliveryZone.INSIDE_DHAKA))

        assert "timed out" in exc_info.value.message

    def test_connection_failure(self, cart, customer):
        intake = RecordingIntake(raises=lambda request: httpx.ConnectError("refused", request=request))

        with pytest.raises(SubmissionError):
            asyncio.run(intake.materializer().build_and_submit(cart, customer, DeliveryZone.INSIDE_DHAKA))

    def test_success_without_order_id(self, cart, customer):
        intake = RecordingIntake(body={"success": True, "order": {"status": "pending"}})

        with pytest.raises(SubmissionError):
            asyncio.run(intake.materializer().build_and_submit(cart, customer, DeliveryZone.INSIDE_DHAKA))

    def test_submission_does_not_touch_cart(self, store, customer):
        store.add_item("p1", "Boat", 500, stock_ceiling=10, quantity=2)
        intake = RecordingIntake()

        asyncio.run(intake.materializer().build_and_submit(store.snapshot(), customer, DeliveryZone.INSIDE_DHAKA))

        assert store.quantity_of("p1") == 2
