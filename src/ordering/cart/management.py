"""Cart management: add, update, remove and clear cart selections.

Adding or updating checks the product's current stock, but nothing is
reserved: stock is only claimed when an order is placed.
"""

import structlog

from inventory.ledger import InventoryLedger
from ordering.cart.cart import CartView
from ordering.cart.store import CartStore
from shared.errors import InsufficientStockError, NotFoundError, ValidationError
from shared.transaction import Transaction, TransactionCoordinator

logger = structlog.get_logger(__name__)


def _require_positive(quantity: int) -> None:
    if quantity <= 0:
        raise ValidationError({"quantity": ["Quantity must be positive"]})


class CartService:
    def __init__(self, coordinator: TransactionCoordinator, carts: CartStore, ledger: InventoryLedger) -> None:
        self.coordinator = coordinator
        self.carts = carts
        self.ledger = ledger

    def _view(self, tx: Transaction, user_id: int) -> CartView:
        return CartView(items=self.carts.list_items(tx, user_id))

    def view(self, user_id: int) -> CartView:
        with self.coordinator.transaction() as tx:
            return self._view(tx, user_id)

    def add_item(self, user_id: int, product_id: int, quantity: int) -> CartView:
        _require_positive(quantity)

        with self.coordinator.transaction() as tx:
            snapshot = self.ledger.read(tx, product_id)
            if snapshot.stock < quantity:
                raise InsufficientStockError(product_id, quantity, snapshot.stock)

            self.carts.add_item(tx, user_id, product_id, quantity)
            view = self._view(tx, user_id)

        logger.info("Item added to cart", user_id=user_id, product_id=product_id, quantity=quantity)
        return view

    def update_item(self, user_id: int, cart_item_id: int, quantity: int) -> CartView:
        _require_positive(quantity)

        with self.coordinator.transaction() as tx:
            item = next((i for i in self.carts.list_items(tx, user_id) if i.id == cart_item_id), None)
            if item is None:
                raise NotFoundError("Cart item", cart_item_id)
            if item.stock < quantity:
                raise InsufficientStockError(item.product_id, quantity, item.stock)

            self.carts.update_quantity(tx, user_id, cart_item_id, quantity)
            return self._view(tx, user_id)

    def remove_item(self, user_id: int, cart_item_id: int) -> CartView:
        with self.coordinator.transaction() as tx:
            if not self.carts.remove_item(tx, user_id, cart_item_id):
                raise NotFoundError("Cart item", cart_item_id)
            return self._view(tx, user_id)

    def clear(self, user_id: int) -> CartView:
        with self.coordinator.transaction() as tx:
            removed = self.carts.clear_all(tx, user_id)
            view = self._view(tx, user_id)

        logger.info("Cart cleared", user_id=user_id, removed=removed)
        return view
