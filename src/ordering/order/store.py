"""Order store: persistence for order headers and their line items."""

from collections.abc import Sequence
from decimal import Decimal
from typing import Protocol

from sqlalchemy import Row, insert, select, update

from ordering.order.order import (
    LineItemDraft,
    Order,
    OrderLineItem,
    OrderStatus,
    to_money,
)
from shared.db import order_items, orders, products, utcnow
from shared.transaction import Transaction


class OrderStore(Protocol):
    def insert_header(
        self,
        tx: Transaction,
        user_id: int,
        total_amount: Decimal,
        status: OrderStatus = OrderStatus.PENDING,
    ) -> int: ...

    def insert_line_items(self, tx: Transaction, order_id: int, items: Sequence[LineItemDraft]) -> None: ...

    def find_by_id(self, tx: Transaction, order_id: int) -> Order | None: ...

    def find_by_id_and_user(self, tx: Transaction, order_id: int, user_id: int) -> Order | None: ...

    def find_by_user(self, tx: Transaction, user_id: int) -> list[Order]: ...

    def find_all(self, tx: Transaction) -> list[Order]: ...

    def find_line_items(self, tx: Transaction, order_id: int) -> list[OrderLineItem]: ...

    def update_status(self, tx: Transaction, order_id: int, status: OrderStatus) -> bool: ...


def _to_order(row: Row) -> Order:
    return Order(
        id=row.id,
        user_id=row.user_id,
        total_amount=to_money(row.total_amount),
        status=OrderStatus(row.status),
        created_at=row.created_at,
    )


_newest_first = (orders.c.created_at.desc(), orders.c.id.desc())


class SqlOrderStore:
    def insert_header(
        self,
        tx: Transaction,
        user_id: int,
        total_amount: Decimal,
        status: OrderStatus = OrderStatus.PENDING,
    ) -> int:
        result = tx.connection.execute(
            insert(orders).values(
                user_id=user_id,
                total_amount=to_money(total_amount),
                status=OrderStatus(status).value,
                created_at=utcnow(),
            )
        )
        return result.inserted_primary_key[0]

    def insert_line_items(self, tx: Transaction, order_id: int, items: Sequence[LineItemDraft]) -> None:
        if not items:
            raise ValueError("An order needs at least one line item")

        tx.connection.execute(
            insert(order_items),
            [
                {
                    "order_id": order_id,
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "unit_price": to_money(item.unit_price),
                }
                for item in items
            ],
        )

    def find_by_id(self, tx: Transaction, order_id: int) -> Order | None:
        row = tx.connection.execute(select(orders).where(orders.c.id == order_id)).first()
        return _to_order(row) if row else None

    def find_by_id_and_user(self, tx: Transaction, order_id: int, user_id: int) -> Order | None:
        row = tx.connection.execute(
            select(orders).where(orders.c.id == order_id, orders.c.user_id == user_id)
        ).first()
        return _to_order(row) if row else None

    def find_by_user(self, tx: Transaction, user_id: int) -> list[Order]:
        rows = tx.connection.execute(select(orders).where(orders.c.user_id == user_id).order_by(*_newest_first))
        return [_to_order(row) for row in rows]

    def find_all(self, tx: Transaction) -> list[Order]:
        rows = tx.connection.execute(select(orders).order_by(*_newest_first))
        return [_to_order(row) for row in rows]

    def find_line_items(self, tx: Transaction, order_id: int) -> list[OrderLineItem]:
        rows = tx.connection.execute(
            select(
                order_items.c.order_id,
                order_items.c.product_id,
                order_items.c.quantity,
                order_items.c.unit_price,
                products.c.name,
            )
            .join(products, products.c.id == order_items.c.product_id)
            .where(order_items.c.order_id == order_id)
            .order_by(order_items.c.id)
        )
        return [
            OrderLineItem(
                order_id=row.order_id,
                product_id=row.product_id,
                quantity=row.quantity,
                unit_price=to_money(row.unit_price),
                name=row.name,
            )
            for row in rows
        ]

    def update_status(self, tx: Transaction, order_id: int, status: OrderStatus) -> bool:
        # Any status may follow any other; there is no transition graph
        result = tx.connection.execute(
            update(orders).where(orders.c.id == order_id).values(status=OrderStatus(status).value)
        )
        return result.rowcount == 1
