from __future__ import annotations

from typing import Any, Mapping

from author_dashboard.domain.entities.feature import UNLIMITED, FeatureGrant, Limit
from author_dashboard.domain.entities.plan import Plan
from author_dashboard.domain.entities.subscription import Subscription
from author_dashboard.domain.entities.user import User


LEGACY_UNLIMITED = -1
SUBSCRIPTION_STATUSES = {"active", "trialing", "expired", "canceled"}


def _as_str(value: Any) -> str:
    return str(value)


def _as_limit(value: Any) -> Limit | None:
    if value is None:
        return None
    value = int(value)
    if value == LEGACY_UNLIMITED:
        return UNLIMITED
    return value


def _as_status(value: Any) -> str:
    status = str(value).strip().lower()
    if status in SUBSCRIPTION_STATUSES:
        return status
    # past_due, unpaid, inactive and friends no longer grant access.
    return "expired"


def map_row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=_as_str(row["id"]),
        name=row["name"],
        email=row["email"],
        is_active=bool(row["is_active"]),
        created_at=row["created_at"],
    )


def map_row_to_plan(row: Mapping[str, Any]) -> Plan:
    return Plan(
        id=_as_str(row["id"]),
        name=row["name"],
        is_active=bool(row["is_active"]),
        sort_order=int(row["sort_order"]),
    )


def map_row_to_feature_grant(row: Mapping[str, Any]) -> FeatureGrant:
    return FeatureGrant(
        feature_code=row["feature_code"],
        is_enabled=bool(row["is_enabled"]),
        limit=_as_limit(row.get("limit_value")),
    )


def map_row_to_subscription(row: Mapping[str, Any]) -> Subscription:
    return Subscription(
        id=_as_str(row["id"]),
        user_id=_as_str(row["user_id"]),
        plan_id=_as_str(row["plan_id"]),
        status=_as_status(row["status"]),
        trial_ends_at=row.get("trial_ends_at"),
        current_period_end=row.get("current_period_end"),
    )
