"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; no cross-user sharing.
State tracks ids and tokens returned by the API so follow-up requests can
reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks state for a single simulated shopper."""

    user_id: str | None = None
    token: str | None = None
    product_ids: list[str] = field(default_factory=list)
    cart_item_ids: list[str] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}


@dataclass
class ProviderState:
    """Tracks state for a customer offering services."""

    user_id: str | None = None
    token: str | None = None
    service_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}
