from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


SubscriptionStatus = Literal[
    "active",
    "trialing",
    "expired",
    "canceled",
]


@dataclass(frozen=True)
class Subscription:
    id: str | None
    user_id: str
    plan_id: str
    status: SubscriptionStatus
    trial_ends_at: datetime | None
    current_period_end: datetime | None


def no_plan_subscription(*, user_id: str, default_plan_id: str) -> Subscription:
    return Subscription(
        id=None,
        user_id=user_id,
        plan_id=default_plan_id,
        status="expired",
        trial_ends_at=None,
        current_period_end=None,
    )
