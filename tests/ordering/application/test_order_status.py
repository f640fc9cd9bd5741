"""Application tests for the administrative order status update."""

import pytest
from ordering.order.order import OrderStatus
from shared.errors import NotFoundError, ValidationError


@pytest.fixture()
def order_id(services, add_product):
    product_id = add_product(stock=5)
    return services.placement.place_order(1, [{"product_id": product_id, "quantity": 1}]).order.id


class TestUpdateStatus:
    def test_returns_updated_header(self, services, order_id):
        updated = services.status.update_status(order_id, "shipped")

        assert updated.id == order_id
        assert updated.status == OrderStatus.SHIPPED

    def test_accepts_enum_values(self, services, order_id):
        updated = services.status.update_status(order_id, OrderStatus.DELIVERED)
        assert updated.status == OrderStatus.DELIVERED

    def test_total_is_unchanged(self, services, order_id):
        before = services.queries.get_order(1, order_id).order
        updated = services.status.update_status(order_id, "cancelled")
        assert updated.total_amount == before.total_amount

    @pytest.mark.parametrize("current", list(OrderStatus))
    def test_shipped_is_reachable_from_any_status(self, services, order_id, current):
        services.status.update_status(order_id, current)

        updated = services.status.update_status(order_id, "shipped")

        assert updated.status == OrderStatus.SHIPPED

    def test_transitions_are_not_restricted(self, services, order_id):
        # Permissive on purpose for now: no transition graph is enforced, so a
        # delivered or cancelled order can go back to pending. Tighten this
        # test together with the service if a policy is ever introduced.
        services.status.update_status(order_id, "delivered")
        assert services.status.update_status(order_id, "pending").status == OrderStatus.PENDING

        services.status.update_status(order_id, "cancelled")
        assert services.status.update_status(order_id, "shipped").status == OrderStatus.SHIPPED

    def test_same_status_again_is_allowed(self, services, order_id):
        assert services.status.update_status(order_id, "pending").status == OrderStatus.PENDING

    def test_unknown_status_is_rejected(self, services, order_id):
        with pytest.raises(ValidationError) as exc_info:
            services.status.update_status(order_id, "refunded")
        assert "status" in exc_info.value.messages

    def test_unknown_order_is_not_found(self, services):
        with pytest.raises(NotFoundError):
            services.status.update_status(999, "shipped")
