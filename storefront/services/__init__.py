# Services

from .checkout import OrderMaterializer, build_draft, delivery_fee, validate_customer
from .errors import CheckoutValidationError, SubmissionError
from .order_client import OrderIntakeClient

__all__ = [
    "OrderMaterializer",
    "build_draft",
    "delivery_fee",
    "validate_customer",
    "CheckoutValidationError",
    "SubmissionError",
    "OrderIntakeClient",
]
