from __future__ import annotations

from typing import Protocol

from author_dashboard.domain.entities.subscription import Subscription


class SubscriptionPort(Protocol):
    def get_current_subscription(self, *, user_id: str) -> Subscription | None:
        """Raises SubscriptionUnavailableError on transport failure."""
        ...
