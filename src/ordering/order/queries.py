"""Read-side order operations: a customer's orders and the admin listing."""

from ordering.order.order import Order, OrderDetails
from ordering.order.store import OrderStore
from shared.errors import NotFoundError
from shared.transaction import Transaction, TransactionCoordinator


class OrderQueryService:
    def __init__(self, coordinator: TransactionCoordinator, orders: OrderStore) -> None:
        self.coordinator = coordinator
        self.orders = orders

    def _with_items(self, tx: Transaction, order: Order) -> OrderDetails:
        return OrderDetails(order=order, items=self.orders.find_line_items(tx, order.id))

    def get_order(self, user_id: int, order_id: int) -> OrderDetails:
        """Return one of the user's orders. Other users' orders count as missing."""
        with self.coordinator.transaction() as tx:
            order = self.orders.find_by_id_and_user(tx, order_id, user_id)
            if order is None:
                raise NotFoundError("Order", order_id)
            return self._with_items(tx, order)

    def list_orders_for_user(self, user_id: int) -> list[OrderDetails]:
        with self.coordinator.transaction() as tx:
            return [self._with_items(tx, order) for order in self.orders.find_by_user(tx, user_id)]

    def list_all_orders(self) -> list[OrderDetails]:
        with self.coordinator.transaction() as tx:
            return [self._with_items(tx, order) for order in self.orders.find_all(tx)]
