"""Administrative order status update.

Statuses are not a state machine here: an administrator may move an order
from any status to any other, including back to ``pending`` after
``delivered``. Only the target value itself is validated.
"""

import structlog

from ordering.order.order import Order, OrderStatus
from ordering.order.store import OrderStore
from shared.errors import NotFoundError, ValidationError
from shared.transaction import TransactionCoordinator

logger = structlog.get_logger(__name__)

VALID_STATUSES = [status.value for status in OrderStatus]


class OrderStatusService:
    def __init__(self, coordinator: TransactionCoordinator, orders: OrderStore) -> None:
        self.coordinator = coordinator
        self.orders = orders

    def update_status(self, order_id: int, status: OrderStatus | str) -> Order:
        try:
            new_status = OrderStatus(status)
        except ValueError:
            raise ValidationError(
                {"status": [f"Invalid order status. Valid statuses: {', '.join(VALID_STATUSES)}"]}
            ) from None

        with self.coordinator.transaction() as tx:
            current = self.orders.find_by_id(tx, order_id)
            if current is None:
                raise NotFoundError("Order", order_id)

            self.orders.update_status(tx, order_id, new_status)
            updated = self.orders.find_by_id(tx, order_id)

        logger.info(
            "Order status updated",
            order_id=order_id,
            previous_status=current.status.value,
            new_status=new_status.value,
        )
        return updated
