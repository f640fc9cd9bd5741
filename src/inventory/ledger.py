"""Inventory ledger: stock snapshots and the guarded decrement.

Stock only ever moves down through ``decrement``, which checks sufficiency
in the same statement that writes the new value:

    UPDATE products SET stock = stock - :qty
    WHERE id = :product_id AND stock >= :qty

An earlier ``read`` is advisory. Two placements that both saw enough stock
cannot both succeed, because the second conditional UPDATE matches no row.
"""

from decimal import Decimal
from typing import Protocol

import structlog
from pydantic import BaseModel, ConfigDict
from sqlalchemy import select, update

from shared.db import products
from shared.errors import InsufficientStockError, NotFoundError, ValidationError
from shared.transaction import Transaction

logger = structlog.get_logger(__name__)


class StockSnapshot(BaseModel):
    """Price and stock of a product as seen inside the current transaction."""

    model_config = ConfigDict(frozen=True)

    product_id: int
    name: str
    price: Decimal
    stock: int


class InventoryLedger(Protocol):
    def read(self, tx: Transaction, product_id: int) -> StockSnapshot: ...

    def decrement(self, tx: Transaction, product_id: int, quantity: int) -> None: ...


class SqlInventoryLedger:
    def read(self, tx: Transaction, product_id: int) -> StockSnapshot:
        row = tx.connection.execute(
            select(products.c.id, products.c.name, products.c.price, products.c.stock).where(
                products.c.id == product_id
            )
        ).first()
        if row is None:
            raise NotFoundError("Product", product_id)

        return StockSnapshot(product_id=row.id, name=row.name, price=row.price, stock=row.stock)

    def decrement(self, tx: Transaction, product_id: int, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        result = tx.connection.execute(
            update(products)
            .where(products.c.id == product_id, products.c.stock >= quantity)
            .values(stock=products.c.stock - quantity)
        )
        if result.rowcount == 1:
            return

        # Nothing matched: either the product vanished or stock ran short
        available = tx.connection.execute(select(products.c.stock).where(products.c.id == product_id)).scalar()
        if available is None:
            raise NotFoundError("Product", product_id)

        logger.warning(
            "Stock decrement refused",
            product_id=product_id,
            requested=quantity,
            available=available,
        )
        raise InsufficientStockError(product_id, quantity, available)
