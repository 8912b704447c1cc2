from __future__ import annotations

from pydantic import BaseModel

from author_dashboard.api.schemas.dashboard import FeatureGrantResponse, LimitValue


class MeUserResponse(BaseModel):
    id: str
    name: str
    email: str


class EntitlementsResponse(BaseModel):
    plan_id: str
    subscription_status: str
    is_pro: bool
    is_free: bool
    is_on_trial: bool
    trial_days_left: int
    grants: list[FeatureGrantResponse]
    features: dict[str, bool]
    limits: dict[str, LimitValue]


class MeResponse(BaseModel):
    user: MeUserResponse
    plan_name: str | None
    entitlements: EntitlementsResponse
