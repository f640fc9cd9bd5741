"""Order records: the header, its line items and the placement result.

An Order is written once per successful placement. Its total is the sum of
``quantity * unit_price`` over its line items and never changes afterwards;
the status is the only field an administrator may later update.

Line items carry the unit price captured at placement time, so later
catalogue price changes never alter past orders.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Normalize a price or amount to two decimal places."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(str, Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# ---------------------------------------------------------------------------
# Placement input
# ---------------------------------------------------------------------------
class LineItemRequest(BaseModel):
    """One requested (product, quantity) pair."""

    model_config = ConfigDict(frozen=True)

    product_id: int
    quantity: int = Field(gt=0)


class LineItemDraft(BaseModel):
    """A priced line item about to be written for a new order."""

    model_config = ConfigDict(frozen=True)

    product_id: int
    quantity: int = Field(gt=0)
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return to_money(self.unit_price * self.quantity)


# ---------------------------------------------------------------------------
# Stored records
# ---------------------------------------------------------------------------
class Order(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    total_amount: Decimal
    status: OrderStatus
    created_at: datetime


class OrderLineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    name: str


class OrderDetails(BaseModel):
    """An order header together with its line items."""

    model_config = ConfigDict(frozen=True)

    order: Order
    items: list[OrderLineItem]


# The placement result has the same shape as any other order read
PlacedOrder = OrderDetails
