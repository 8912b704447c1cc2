from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from author_dashboard.api.deps import get_dashboard_session, require_feature
from author_dashboard.api.schemas.dashboard import DashboardResponse, ViewsAnalyticsResponse
from author_dashboard.api.schemas.presenters import present_dashboard
from author_dashboard.application.use_cases.dashboard_sessions import DashboardSession
from author_dashboard.domain.entities.dashboard import DashboardSnapshot
from author_dashboard.domain.exceptions import (
    IdentityUnavailableError,
    MandatoryDomainFetchFailedError,
)


router = APIRouter()
logger = logging.getLogger(__name__)

REFRESH_WAIT_SECONDS = 30.0


def _settled_snapshot(session: DashboardSession, *, force: bool) -> DashboardSnapshot:
    coordinator = session.coordinator
    if force or (coordinator.latest is None and coordinator.latest_error is None):
        coordinator.refresh_and_wait(timeout=REFRESH_WAIT_SECONDS)

    error = coordinator.latest_error
    if isinstance(error, IdentityUnavailableError):
        raise HTTPException(status_code=401, detail=str(error))
    if isinstance(error, MandatoryDomainFetchFailedError):
        logger.warning("dashboard_router: mandatory domain failed user=%s detail=%s", session.user_id, error)
        raise HTTPException(status_code=503, detail=str(error))
    if coordinator.latest is None:
        raise HTTPException(status_code=503, detail="Dashboard is not available yet.")
    return coordinator.latest


@router.get("/v1/dashboard", response_model=DashboardResponse)
def get_dashboard(session: DashboardSession = Depends(get_dashboard_session)):
    return present_dashboard(_settled_snapshot(session, force=False))


@router.post("/v1/dashboard/refresh", response_model=DashboardResponse)
def refresh_dashboard(session: DashboardSession = Depends(get_dashboard_session)):
    return present_dashboard(_settled_snapshot(session, force=True))


@router.get("/v1/dashboard/views", response_model=ViewsAnalyticsResponse)
def get_views_analytics(session: DashboardSession = Depends(require_feature("advanced_analytics"))):
    stats = _settled_snapshot(session, force=False).stats
    return ViewsAnalyticsResponse(
        total_views=stats.total_views,
        this_month_views=stats.this_month_views,
        published_books=stats.published_books,
    )
