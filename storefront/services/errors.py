"""Checkout errors"""

from typing import Optional


class CheckoutValidationError(Exception):
    """The checkout form has one or more invalid fields"""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid checkout fields: {fields}")


class SubmissionError(Exception):
    """Order intake did not accept the order"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
