from decimal import Decimal
from typing import Any, Dict, List, Optional


class PaymentError(Exception):
    """Base class for every failure the payment flow reports to a caller."""

    status_code = 500
    message = "Payment error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "message": self.message}


class InvalidAmount(PaymentError):
    status_code = 400
    message = "Amount must be a positive number"


class BelowMinimum(PaymentError):
    status_code = 400

    def __init__(self, required: Decimal, actual: Decimal):
        self.required = required
        self.actual = actual
        self.shortfall = required - actual
        super().__init__(f"Minimum amount is {required}, add {self.shortfall} more")

    def to_dict(self):
        body = super().to_dict()
        body.update(
            required=float(self.required),
            actual=float(self.actual),
            shortfall=float(self.shortfall),
        )
        return body


class ConfigMissing(PaymentError):
    status_code = 500

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__("LG-Pay configuration missing: " + ", ".join(self.missing))

    def to_dict(self):
        body = super().to_dict()
        body["missing"] = self.missing
        return body


class GatewayError(PaymentError):
    """The gateway answered but reported a failure."""

    status_code = 502
    message = "Order creation failed"

    def __init__(self, message: Optional[str] = None, body: Any = None):
        self.body = body
        super().__init__(message)

    def to_dict(self):
        data = super().to_dict()
        data["error"] = self.body
        return data


class NetworkError(GatewayError):
    """The request never produced a usable gateway answer (timeout, refused, HTTP error)."""

    message = "Could not reach the payment gateway"


class InvalidSignature(PaymentError):
    status_code = 400
    message = "Invalid signature"


class InvalidParameter(PaymentError, ValueError):
    """A parameter map carried something other than a flat scalar."""

    status_code = 400
    message = "Parameters must be flat scalar values"
