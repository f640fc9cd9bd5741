"""Error taxonomy shared by every storefront context.

The transport layer maps these onto status codes:

- ValidationError        -> 400
- NotFoundError          -> 404
- ConflictError          -> 409 (InsufficientStockError is a conflict)
- InternalError          -> 500
"""

from __future__ import annotations

from typing import Any

DATABASE_ERROR_MESSAGE = "Database error"
INSUFFICIENT_STOCK_MESSAGE = "Insufficient stock available"


class StorefrontError(Exception):
    """Base class for errors the core raises on purpose."""

    def __init__(self, message: str, data: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data or {}


class ValidationError(StorefrontError):
    """Malformed or empty input, detected before any write.

    ``messages`` maps a field path to its list of problems, e.g.
    ``{"items.0.quantity": ["Input should be greater than 0"]}``.
    """

    def __init__(self, messages: dict[str, list[str]]) -> None:
        super().__init__("Validation error")
        self.messages = messages

    def __str__(self) -> str:
        return f"{self.message}: {self.messages}"


class NotFoundError(StorefrontError):
    def __init__(self, resource: str, identifier: Any) -> None:
        super().__init__(f"{resource} with ID {identifier} not found")
        self.resource = resource
        self.identifier = identifier


class ConflictError(StorefrontError):
    pass


class InsufficientStockError(ConflictError):
    """Requested quantity exceeds the stock available right now."""

    def __init__(self, product_id: int, requested: int, available: int) -> None:
        super().__init__(
            INSUFFICIENT_STOCK_MESSAGE,
            data={
                "product_id": product_id,
                "requested": requested,
                "available": available,
            },
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InternalError(StorefrontError):
    """Storage or infrastructure fault. The message never carries driver details."""

    def __init__(self, message: str = DATABASE_ERROR_MESSAGE) -> None:
        super().__init__(message)
