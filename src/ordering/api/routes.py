"""FastAPI routes for the Ordering domain: orders and carts.

Identity comes from the upstream gateway, which authenticates the bearer
token and forwards ``X-User-Id`` and ``X-User-Role``. Routes trust these
headers as given.
"""

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from ordering.api.schemas import (
    AddToCartRequest,
    CartResponse,
    OrderHeaderResponse,
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    UpdateCartItemRequest,
    UpdateStatusRequest,
)
from ordering.order.order import LineItemRequest
from ordering.services import OrderingServices

ADMIN_ROLE = "admin"


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------
def get_services(request: Request) -> OrderingServices:
    return request.app.state.services


def current_user_id(x_user_id: str | None = Header(default=None)) -> int:
    try:
        return int(x_user_id)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Unauthorized access") from None


def require_admin(
    user_id: int = Depends(current_user_id),
    x_user_role: str | None = Header(default=None),
) -> int:
    if x_user_role != ADMIN_ROLE:
        raise HTTPException(status_code=403, detail="Forbidden access")
    return user_id


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
def place_order(
    body: PlaceOrderRequest,
    user_id: int = Depends(current_user_id),
    services: OrderingServices = Depends(get_services),
) -> OrderResponse:
    items = [LineItemRequest(product_id=item.product_id, quantity=item.quantity) for item in body.items]
    placed = services.placement.place_order(user_id, items)
    return OrderResponse(data=placed)


@order_router.get("/mine", response_model=OrderListResponse)
def list_my_orders(
    user_id: int = Depends(current_user_id),
    services: OrderingServices = Depends(get_services),
) -> OrderListResponse:
    orders = services.queries.list_orders_for_user(user_id)
    return OrderListResponse(data=orders, total=len(orders))


@order_router.get("", response_model=OrderListResponse)
def list_all_orders(
    _admin_id: int = Depends(require_admin),
    services: OrderingServices = Depends(get_services),
) -> OrderListResponse:
    orders = services.queries.list_all_orders()
    return OrderListResponse(data=orders, total=len(orders))


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    user_id: int = Depends(current_user_id),
    services: OrderingServices = Depends(get_services),
) -> OrderResponse:
    return OrderResponse(data=services.queries.get_order(user_id, order_id))


@order_router.put("/{order_id}/status", response_model=OrderHeaderResponse)
def update_order_status(
    order_id: int,
    body: UpdateStatusRequest,
    _admin_id: int = Depends(require_admin),
    services: OrderingServices = Depends(get_services),
) -> OrderHeaderResponse:
    return OrderHeaderResponse(data=services.status.update_status(order_id, body.status))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
def view_cart(
    user_id: int = Depends(current_user_id),
    services: OrderingServices = Depends(get_services),
) -> CartResponse:
    return CartResponse(data=services.carts.view(user_id))


@cart_router.post("/items", response_model=CartResponse)
def add_cart_item(
    body: AddToCartRequest,
    user_id: int = Depends(current_user_id),
    services: OrderingServices = Depends(get_services),
) -> CartResponse:
    return CartResponse(data=services.carts.add_item(user_id, body.product_id, body.quantity))


@cart_router.put("/items/{cart_item_id}", response_model=CartResponse)
def update_cart_item(
    cart_item_id: int,
    body: UpdateCartItemRequest,
    user_id: int = Depends(current_user_id),
    services: OrderingServices = Depends(get_services),
) -> CartResponse:
    return CartResponse(data=services.carts.update_item(user_id, cart_item_id, body.quantity))


@cart_router.delete("/items/{cart_item_id}", response_model=CartResponse)
def remove_cart_item(
    cart_item_id: int,
    user_id: int = Depends(current_user_id),
    services: OrderingServices = Depends(get_services),
) -> CartResponse:
    return CartResponse(data=services.carts.remove_item(user_id, cart_item_id))


@cart_router.delete("", response_model=CartResponse)
def clear_cart(
    user_id: int = Depends(current_user_id),
    services: OrderingServices = Depends(get_services),
) -> CartResponse:
    return CartResponse(data=services.carts.clear(user_id))
