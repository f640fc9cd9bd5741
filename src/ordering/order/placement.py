"""Order placement: turns requested (product, quantity) pairs into an order.

One placement is one transaction:

1. validate the request (no storage touched)
2. snapshot price and stock of each product, in submission order
3. write the order header and its line items at the snapshot prices
4. decrement stock with the guarded ledger operation, in product id order
5. clear the user's cart
6. commit

Any error between 2 and 6 rolls the whole transaction back, so a failed
placement leaves no order, no line items, no stock change and the cart as
it was.
"""

from collections.abc import Mapping, Sequence
from decimal import Decimal

import structlog
from pydantic import ValidationError as PydanticValidationError

from inventory.ledger import InventoryLedger
from ordering.cart.store import CartStore
from ordering.order.order import LineItemDraft, LineItemRequest, OrderStatus, PlacedOrder, to_money
from ordering.order.store import OrderStore
from shared.errors import InsufficientStockError, NotFoundError, StorefrontError, ValidationError
from shared.transaction import Transaction, TransactionCoordinator

logger = structlog.get_logger(__name__)


def validate_items(items: Sequence[LineItemRequest | Mapping]) -> list[LineItemRequest]:
    """Check the shape of a placement request.

    Raises ValidationError listing every problem found, keyed by field path.
    """
    if not items:
        raise ValidationError({"items": ["At least one item is required"]})

    errors: dict[str, list[str]] = {}
    requests: list[LineItemRequest] = []
    seen: set[int] = set()

    for index, item in enumerate(items):
        try:
            request = item if isinstance(item, LineItemRequest) else LineItemRequest.model_validate(item)
        except PydanticValidationError as exc:
            for error in exc.errors():
                path = ".".join(["items", str(index), *(str(part) for part in error["loc"])])
                errors.setdefault(path, []).append(error["msg"])
            continue

        if request.product_id in seen:
            errors.setdefault(f"items.{index}.product_id", []).append(
                f"Product {request.product_id} is listed more than once"
            )
            continue

        seen.add(request.product_id)
        requests.append(request)

    if errors:
        raise ValidationError(errors)
    return requests


class OrderPlacementService:
    def __init__(
        self,
        coordinator: TransactionCoordinator,
        ledger: InventoryLedger,
        orders: OrderStore,
        carts: CartStore,
    ) -> None:
        self.coordinator = coordinator
        self.ledger = ledger
        self.orders = orders
        self.carts = carts

    def _price(self, tx: Transaction, requests: list[LineItemRequest]) -> list[LineItemDraft]:
        drafts = []
        for request in requests:
            snapshot = self.ledger.read(tx, request.product_id)
            if snapshot.stock < request.quantity:
                raise InsufficientStockError(request.product_id, request.quantity, snapshot.stock)

            drafts.append(
                LineItemDraft(
                    product_id=request.product_id,
                    quantity=request.quantity,
                    unit_price=to_money(snapshot.price),
                )
            )
        return drafts

    def place_order(self, user_id: int, items: Sequence[LineItemRequest | Mapping]) -> PlacedOrder:
        requests = validate_items(items)

        try:
            with self.coordinator.transaction() as tx:
                drafts = self._price(tx, requests)
                total_amount = to_money(sum((draft.subtotal for draft in drafts), Decimal("0")))

                order_id = self.orders.insert_header(tx, user_id, total_amount, OrderStatus.PENDING)
                self.orders.insert_line_items(tx, order_id, drafts)

                # Row locks are taken in one global order so concurrent placements cannot deadlock
                for draft in sorted(drafts, key=lambda d: d.product_id):
                    self.ledger.decrement(tx, draft.product_id, draft.quantity)

                cleared = self.carts.clear_all(tx, user_id)

                order = self.orders.find_by_id(tx, order_id)
                line_items = self.orders.find_line_items(tx, order_id)
        except (NotFoundError, InsufficientStockError) as exc:
            logger.info(
                "Order placement rejected",
                user_id=user_id,
                reason=type(exc).__name__,
                product_id=getattr(exc, "product_id", getattr(exc, "identifier", None)),
            )
            raise
        except StorefrontError as exc:
            logger.warning("Order placement failed", user_id=user_id, reason=type(exc).__name__)
            raise

        logger.info(
            "Order placed",
            order_id=order.id,
            user_id=user_id,
            total_amount=str(order.total_amount),
            item_count=len(line_items),
            cart_items_cleared=cleared,
        )
        return PlacedOrder(order=order, items=line_items)
