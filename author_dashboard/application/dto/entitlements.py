from __future__ import annotations

from dataclasses import dataclass

from author_dashboard.domain.entities.feature import FeatureGrant, Limit


@dataclass(frozen=True)
class UserEntitlementsOutput:
    user_id: str
    plan_id: str
    subscription_status: str
    is_pro: bool
    is_free: bool
    is_on_trial: bool
    trial_days_left: int
    grants: tuple[FeatureGrant, ...]
    boolean_features: dict[str, bool]
    limits: dict[str, Limit]

    def has_feature(self, feature_code: str) -> bool:
        return self.boolean_features.get(feature_code, False)
