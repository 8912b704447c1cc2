from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi import HTTPException

from author_dashboard.api.deps import require_feature
from author_dashboard.application.dto.entitlements import UserEntitlementsOutput
from author_dashboard.application.use_cases.dashboard_sessions import DashboardSession
from author_dashboard.application.use_cases.subscription_state import SubscriptionStateProvider


class FakeSubscriptionPort:
    def get_current_subscription(self, *, user_id: str):
        return None


class FakeEntitlementsUseCaseDenied:
    def execute(self, *, subscription_state) -> UserEntitlementsOutput:
        _ = subscription_state
        return UserEntitlementsOutput(
            user_id="user-1",
            plan_id="free",
            subscription_status="expired",
            is_pro=False,
            is_free=True,
            is_on_trial=False,
            trial_days_left=0,
            grants=(),
            boolean_features={"advanced_analytics": False},
            limits={"max_books": 1},
        )


class FakeEntitlementsUseCaseAllowed:
    def execute(self, *, subscription_state) -> UserEntitlementsOutput:
        _ = subscription_state
        return UserEntitlementsOutput(
            user_id="user-1",
            plan_id="pro",
            subscription_status="active",
            is_pro=True,
            is_free=False,
            is_on_trial=False,
            trial_days_left=0,
            grants=(),
            boolean_features={"advanced_analytics": True},
            limits={},
        )


def _fake_session() -> DashboardSession:
    state = SubscriptionStateProvider(
        subscription_port=FakeSubscriptionPort(),
        user_id="user-1",
        clock=lambda: datetime.now(timezone.utc),
    )
    return DashboardSession(user_id="user-1", subscription_state=state, coordinator=None)


def test_require_feature_blocks_when_feature_missing():
    dependency = require_feature("advanced_analytics")

    with pytest.raises(HTTPException) as exc_info:
        dependency(
            session=_fake_session(),
            entitlements_use_case=FakeEntitlementsUseCaseDenied(),
        )

    assert exc_info.value.status_code == 403


def test_require_feature_allows_when_feature_enabled():
    dependency = require_feature("advanced_analytics")

    session = dependency(
        session=_fake_session(),
        entitlements_use_case=FakeEntitlementsUseCaseAllowed(),
    )

    assert session.user_id == "user-1"


def test_require_feature_blocks_unknown_feature():
    dependency = require_feature("white_label")

    with pytest.raises(HTTPException) as exc_info:
        dependency(
            session=_fake_session(),
            entitlements_use_case=FakeEntitlementsUseCaseAllowed(),
        )

    assert exc_info.value.status_code == 403
