from __future__ import annotations

from author_dashboard.application.dto.entitlements import UserEntitlementsOutput
from author_dashboard.application.use_cases.resolve_entitlements import EntitlementResolver
from author_dashboard.application.use_cases.subscription_state import SubscriptionStateProvider
from author_dashboard.domain.services.entitlements import limits_by_feature


class GetUserEntitlementsUseCase:
    def __init__(self, *, entitlement_resolver: EntitlementResolver):
        self._entitlement_resolver = entitlement_resolver

    def execute(self, *, subscription_state: SubscriptionStateProvider) -> UserEntitlementsOutput:
        subscription = subscription_state.current()
        plan_id = subscription_state.effective_plan_id(subscription)
        grants = tuple(self._entitlement_resolver.resolve(plan_id))

        return UserEntitlementsOutput(
            user_id=subscription.user_id,
            plan_id=plan_id,
            subscription_status=subscription.status,
            is_pro=subscription_state.is_pro(),
            is_free=subscription_state.is_free(),
            is_on_trial=subscription_state.is_on_trial(),
            trial_days_left=subscription_state.trial_days_left(),
            grants=grants,
            boolean_features={grant.feature_code: grant.is_enabled for grant in grants},
            limits=limits_by_feature(grants),
        )
