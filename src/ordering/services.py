"""Wiring of the ordering services onto one database engine."""

from dataclasses import dataclass

from sqlalchemy import Engine

from inventory.ledger import SqlInventoryLedger
from ordering.cart.management import CartService
from ordering.cart.store import SqlCartStore
from ordering.order.placement import OrderPlacementService
from ordering.order.queries import OrderQueryService
from ordering.order.status import OrderStatusService
from ordering.order.store import SqlOrderStore
from shared.transaction import TransactionCoordinator


@dataclass(frozen=True)
class OrderingServices:
    coordinator: TransactionCoordinator
    placement: OrderPlacementService
    queries: OrderQueryService
    status: OrderStatusService
    carts: CartService


def build_services(engine: Engine, lock_timeout_ms: int | None = None) -> OrderingServices:
    coordinator = TransactionCoordinator(engine, lock_timeout_ms=lock_timeout_ms)
    ledger = SqlInventoryLedger()
    order_store = SqlOrderStore()
    cart_store = SqlCartStore()

    return OrderingServices(
        coordinator=coordinator,
        placement=OrderPlacementService(coordinator, ledger, order_store, cart_store),
        queries=OrderQueryService(coordinator, order_store),
        status=OrderStatusService(coordinator, order_store),
        carts=CartService(coordinator, cart_store, ledger),
    )
