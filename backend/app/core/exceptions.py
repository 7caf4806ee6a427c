"""
Application exceptions.

Every error carries the client-facing message and HTTP status it maps to.
`error` holds internal detail that may be echoed to the client; it is left
unset for failures whose detail must stay server-side.
"""
from typing import Any, Optional


class AppError(Exception):
    """Base class for errors rendered as `{success: false, message, error?}`."""

    status_code: int = 500
    message: str = "Internal Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        error: Optional[Any] = None,
    ) -> None:
        self.message = message or self.message
        self.error = error
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": False, "message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class InvalidParameterError(AppError):
    """Unusable query value on a dashboard endpoint. Detail is never echoed."""

    status_code = 500
    message = "Internal Server Error"

    def __init__(self, parameter: str, value: Any) -> None:
        super().__init__()
        self.parameter = parameter
        self.value = value


class InvalidRangeError(InvalidParameterError):
    """Unrecognized range selector."""

    def __init__(self, value: Any) -> None:
        super().__init__("range", value)


class OrderValidationError(AppError):
    """Malformed order payload."""

    status_code = 400
    message = "Items are required"


class ProductNotFoundError(AppError):
    """An order item references a product that does not exist."""

    status_code = 500
    message = "Failed to create order"

    def __init__(self, product_ids: list[int]) -> None:
        ids = ", ".join(str(product_id) for product_id in product_ids)
        super().__init__(error=f"Product ID {ids} not found")
        self.product_ids = product_ids


class AggregationError(AppError):
    """A dashboard aggregation query failed. Detail is never echoed."""

    status_code = 500
    message = "Internal Server Error"

    def __init__(self, operation: str) -> None:
        super().__init__()
        self.operation = operation


class ServiceError(AppError):
    """Listing or persistence failure; the cause is echoed in `error`."""

    status_code = 500
