"""Cart store: per-user cart rows."""

from typing import Protocol

from sqlalchemy import delete, insert, select, update

from ordering.cart.cart import CartItem
from ordering.order.order import to_money
from shared.db import cart_items, products, utcnow
from shared.transaction import Transaction


class CartStore(Protocol):
    def clear_all(self, tx: Transaction, user_id: int) -> int: ...

    def add_item(self, tx: Transaction, user_id: int, product_id: int, quantity: int) -> None: ...

    def list_items(self, tx: Transaction, user_id: int) -> list[CartItem]: ...

    def update_quantity(self, tx: Transaction, user_id: int, cart_item_id: int, quantity: int) -> bool: ...

    def remove_item(self, tx: Transaction, user_id: int, cart_item_id: int) -> bool: ...


class SqlCartStore:
    def clear_all(self, tx: Transaction, user_id: int) -> int:
        """Delete every cart row of the user. Clearing an empty cart is a no-op."""
        result = tx.connection.execute(delete(cart_items).where(cart_items.c.user_id == user_id))
        return result.rowcount

    def add_item(self, tx: Transaction, user_id: int, product_id: int, quantity: int) -> None:
        """Add a selection, or grow the quantity if the product is already in the cart."""
        existing = tx.connection.execute(
            select(cart_items.c.id).where(
                cart_items.c.user_id == user_id,
                cart_items.c.product_id == product_id,
            )
        ).first()

        if existing:
            tx.connection.execute(
                update(cart_items)
                .where(cart_items.c.id == existing.id)
                .values(quantity=cart_items.c.quantity + quantity)
            )
        else:
            tx.connection.execute(
                insert(cart_items).values(
                    user_id=user_id,
                    product_id=product_id,
                    quantity=quantity,
                    created_at=utcnow(),
                )
            )

    def list_items(self, tx: Transaction, user_id: int) -> list[CartItem]:
        rows = tx.connection.execute(
            select(
                cart_items.c.id,
                cart_items.c.product_id,
                cart_items.c.quantity,
                products.c.name,
                products.c.price,
                products.c.stock,
            )
            .join(products, products.c.id == cart_items.c.product_id)
            .where(cart_items.c.user_id == user_id)
            .order_by(cart_items.c.id)
        )
        return [
            CartItem(
                id=row.id,
                product_id=row.product_id,
                quantity=row.quantity,
                name=row.name,
                price=to_money(row.price),
                stock=row.stock,
            )
            for row in rows
        ]

    def update_quantity(self, tx: Transaction, user_id: int, cart_item_id: int, quantity: int) -> bool:
        result = tx.connection.execute(
            update(cart_items)
            .where(cart_items.c.id == cart_item_id, cart_items.c.user_id == user_id)
            .values(quantity=quantity)
        )
        return result.rowcount == 1

    def remove_item(self, tx: Transaction, user_id: int, cart_item_id: int) -> bool:
        result = tx.connection.execute(
            delete(cart_items).where(cart_items.c.id == cart_item_id, cart_items.c.user_id == user_id)
        )
        return result.rowcount == 1
