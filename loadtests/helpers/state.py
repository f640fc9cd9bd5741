"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state with no cross-user sharing.
State tracks the ids returned by the API so follow-up requests can
reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks one simulated shopper between requests."""

    user_id: int
    cart_item_ids: list[int] = field(default_factory=list)
    order_ids: list[int] = field(default_factory=list)

    @property
    def headers(self) -> dict[str, str]:
        return {"X-User-Id": str(self.user_id)}


@dataclass
class ContentionTally:
    """Outcomes of placements against the contended product."""

    placed: int = 0
    sold_out: int = 0
