from __future__ import annotations

import math
from datetime import datetime

from author_dashboard.domain.entities.subscription import Subscription


SECONDS_PER_DAY = 86400


def is_trial_running(subscription: Subscription, *, now: datetime) -> bool:
    return (
        subscription.status == "trialing"
        and subscription.trial_ends_at is not None
        and subscription.trial_ends_at > now
    )


def is_subscription_in_effect(subscription: Subscription, *, now: datetime) -> bool:
    if subscription.status == "active":
        return True
    return is_trial_running(subscription, now=now)


def is_pro(subscription: Subscription, *, free_plan_id: str, now: datetime) -> bool:
    if subscription.plan_id == free_plan_id:
        return False
    return is_subscription_in_effect(subscription, now=now)


def is_free(subscription: Subscription, *, free_plan_id: str, now: datetime) -> bool:
    return not is_pro(subscription, free_plan_id=free_plan_id, now=now)


def trial_days_left(subscription: Subscription, *, now: datetime) -> int:
    if not is_trial_running(subscription, now=now):
        return 0
    remaining = (subscription.trial_ends_at - now).total_seconds()
    return max(0, math.ceil(remaining / SECONDS_PER_DAY))


def effective_plan_id(subscription: Subscription, *, default_plan_id: str, now: datetime) -> str:
    """Plan whose grants apply; a lapsed subscription falls back to the default plan."""
    if is_subscription_in_effect(subscription, now=now):
        return subscription.plan_id
    return default_plan_id
