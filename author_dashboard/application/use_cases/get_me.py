from __future__ import annotations

from author_dashboard.application.dto.me import MeOutput
from author_dashboard.application.ports.plan_config_port import PlanConfigPort
from author_dashboard.application.use_cases.get_user_entitlements import GetUserEntitlementsUseCase
from author_dashboard.application.use_cases.subscription_state import SubscriptionStateProvider
from author_dashboard.domain.entities.user import User


class GetMeUseCase:
    def __init__(
        self,
        *,
        get_user_entitlements_use_case: GetUserEntitlementsUseCase,
        plan_config_port: PlanConfigPort,
    ):
        self._get_user_entitlements_use_case = get_user_entitlements_use_case
        self._plan_config_port = plan_config_port

    def execute(self, *, user: User, subscription_state: SubscriptionStateProvider) -> MeOutput:
        entitlements = self._get_user_entitlements_use_case.execute(subscription_state=subscription_state)
        plan = self._plan_config_port.get_plan(plan_id=entitlements.plan_id)
        return MeOutput(
            user_id=user.id,
            name=user.name,
            email=user.email,
            plan_name=plan.name if plan is not None else None,
            entitlements=entitlements,
        )
