"""Pydantic request/response schemas for the Ordering API.

These are external contracts, separate from the internal order and cart
records, which the responses wrap.
"""

from pydantic import BaseModel, Field

from ordering.cart.cart import CartView
from ordering.order.order import Order, OrderDetails, OrderStatus


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class LineItemSchema(BaseModel):
    product_id: int
    quantity: int = Field(ge=1)


class PlaceOrderRequest(BaseModel):
    items: list[LineItemSchema] = Field(min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {"product_id": 1, "quantity": 2},
                        {"product_id": 3, "quantity": 1},
                    ]
                }
            ]
        }
    }


class UpdateStatusRequest(BaseModel):
    status: OrderStatus


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: int
    quantity: int = Field(ge=1, default=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderResponse(BaseModel):
    data: OrderDetails


class OrderListResponse(BaseModel):
    data: list[OrderDetails]
    total: int


class OrderHeaderResponse(BaseModel):
    data: Order


class CartResponse(BaseModel):
    data: CartView
