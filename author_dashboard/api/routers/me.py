from __future__ import annotations

from fastapi import APIRouter, Depends

from author_dashboard.api.deps import (
    get_current_user,
    get_dashboard_session,
    get_get_me_use_case,
    get_get_user_entitlements_use_case,
)
from author_dashboard.api.schemas.me import EntitlementsResponse, MeResponse
from author_dashboard.api.schemas.presenters import present_entitlements
from author_dashboard.application.use_cases.dashboard_sessions import DashboardSession
from author_dashboard.application.use_cases.get_me import GetMeUseCase
from author_dashboard.application.use_cases.get_user_entitlements import GetUserEntitlementsUseCase
from author_dashboard.domain.entities.user import User


router = APIRouter()


@router.get("/v1/me", response_model=MeResponse)
def get_me(
    current_user: User = Depends(get_current_user),
    session: DashboardSession = Depends(get_dashboard_session),
    use_case: GetMeUseCase = Depends(get_get_me_use_case),
):
    output = use_case.execute(user=current_user, subscription_state=session.subscription_state)
    return MeResponse(
        user={
            "id": output.user_id,
            "name": output.name,
            "email": output.email,
        },
        plan_name=output.plan_name,
        entitlements=present_entitlements(output.entitlements),
    )


@router.get("/v1/me/entitlements", response_model=EntitlementsResponse)
def get_entitlements(
    session: DashboardSession = Depends(get_dashboard_session),
    use_case: GetUserEntitlementsUseCase = Depends(get_get_user_entitlements_use_case),
):
    return present_entitlements(use_case.execute(subscription_state=session.subscription_state))
