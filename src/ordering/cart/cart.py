"""Shopping cart records.

A cart is simply the set of a user's pending selections, one row per
product. Selections are ephemeral: placing an order deletes them, and
nothing else in the ordering flow reads them.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, computed_field

from ordering.order.order import to_money


class CartItem(BaseModel):
    """A cart selection joined with the product's current name, price and stock."""

    model_config = ConfigDict(frozen=True)

    id: int
    product_id: int
    quantity: int
    name: str
    price: Decimal
    stock: int


class CartView(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: list[CartItem]

    @computed_field
    @property
    def total(self) -> Decimal:
        """Value of the cart at current catalogue prices."""
        return to_money(sum((item.price * item.quantity for item in self.items), Decimal("0")))

    @computed_field
    @property
    def item_count(self) -> int:
        return len(self.items)
