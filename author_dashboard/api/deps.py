from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from author_dashboard.application.fetchers.awards import AwardsFetcher
from author_dashboard.application.fetchers.base import DomainFetcher
from author_dashboard.application.fetchers.blog import BlogFetcher
from author_dashboard.application.fetchers.books import BooksFetcher
from author_dashboard.application.fetchers.contact import ContactFetcher
from author_dashboard.application.fetchers.events import EventsFetcher
from author_dashboard.application.fetchers.faq import FaqFetcher
from author_dashboard.application.fetchers.newsletter import NewsletterFetcher
from author_dashboard.application.use_cases.aggregate_dashboard import AggregateDashboardUseCase
from author_dashboard.application.use_cases.dashboard_refresh import DashboardRefreshCoordinator
from author_dashboard.application.use_cases.dashboard_sessions import (
    DashboardSession,
    DashboardSessionRegistry,
)
from author_dashboard.application.use_cases.get_me import GetMeUseCase
from author_dashboard.application.use_cases.get_user_entitlements import GetUserEntitlementsUseCase
from author_dashboard.application.use_cases.resolve_entitlements import EntitlementResolver
from author_dashboard.application.use_cases.subscription_state import SubscriptionStateProvider
from author_dashboard.domain.entities.user import User
from author_dashboard.domain.exceptions import FeatureAccessDeniedError
from author_dashboard.infrastructure.db.engine import get_engine
from author_dashboard.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from author_dashboard.infrastructure.db.repositories.content_repository import SqlContentRepository
from author_dashboard.infrastructure.db.repositories.plan_config_repository import (
    SqlPlanConfigRepository,
)
from author_dashboard.infrastructure.notifications.polling_channel import PollingChangeChannel
from author_dashboard.infrastructure.security.bearer_identity import BearerTokenIdentity, FixedIdentity
from author_dashboard.infrastructure.security.token_service import JwtTokenService
from author_dashboard.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


def _get_accounts_repository() -> SqlAccountsRepository:
    return SqlAccountsRepository(_get_db_engine())


def _get_plan_config_repository() -> SqlPlanConfigRepository:
    return SqlPlanConfigRepository(_get_db_engine())


@lru_cache(maxsize=1)
def _get_token_service() -> JwtTokenService:
    settings = get_settings()
    if not settings.jwt_secret:
        raise HTTPException(status_code=500, detail="JWT_SECRET is required.")
    return JwtTokenService(jwt_secret=settings.jwt_secret)


@lru_cache(maxsize=1)
def get_entitlement_resolver() -> EntitlementResolver:
    return EntitlementResolver(plan_config_port=_get_plan_config_repository())


@lru_cache(maxsize=1)
def get_change_channel() -> PollingChangeChannel:
    settings = get_settings()
    accounts = _get_accounts_repository()
    plan_config = _get_plan_config_repository()
    return PollingChangeChannel(
        read_subscription_changes=lambda since: accounts.list_subscription_changes(since=since),
        read_config_version=plan_config.get_config_version,
        interval_seconds=settings.change_poll_interval_seconds,
    )


def build_fetchers(content_repository: SqlContentRepository) -> list[DomainFetcher]:
    return [
        BooksFetcher(books_port=content_repository),
        BlogFetcher(blog_port=content_repository),
        EventsFetcher(events_port=content_repository),
        AwardsFetcher(awards_port=content_repository),
        FaqFetcher(faq_port=content_repository),
        NewsletterFetcher(newsletter_port=content_repository),
        ContactFetcher(contact_port=content_repository),
    ]


def _build_dashboard_session(user: User) -> DashboardSession:
    settings = get_settings()
    resolver = get_entitlement_resolver()
    channel = get_change_channel()

    subscription_state = SubscriptionStateProvider(
        subscription_port=_get_accounts_repository(),
        user_id=user.id,
        default_plan_id=settings.default_plan_id,
    )
    subscription_state.refresh()
    subscription_state.attach(channel)

    coordinator = DashboardRefreshCoordinator(
        aggregate_use_case=AggregateDashboardUseCase(
            identity_port=FixedIdentity(user),
            subscription_state=subscription_state,
            entitlement_resolver=resolver,
            fetchers=build_fetchers(SqlContentRepository(_get_db_engine())),
            fetch_timeout_seconds=settings.domain_fetch_timeout_seconds,
        ),
        subscription_state=subscription_state,
        entitlement_resolver=resolver,
        debounce_seconds=settings.refresh_debounce_seconds,
    )
    coordinator.attach(plan_channel=channel)
    return DashboardSession(
        user_id=user.id,
        subscription_state=subscription_state,
        coordinator=coordinator,
    )


@lru_cache(maxsize=1)
def get_dashboard_session_registry() -> DashboardSessionRegistry:
    return DashboardSessionRegistry(
        session_factory=_build_dashboard_session,
        idle_seconds=get_settings().session_idle_seconds,
    )


def get_get_user_entitlements_use_case() -> GetUserEntitlementsUseCase:
    return GetUserEntitlementsUseCase(entitlement_resolver=get_entitlement_resolver())


def get_get_me_use_case() -> GetMeUseCase:
    return GetMeUseCase(
        get_user_entitlements_use_case=get_get_user_entitlements_use_case(),
        plan_config_port=_get_plan_config_repository(),
    )


def get_current_user(
    authorization: str = Header(...),
) -> User:
    identity = BearerTokenIdentity(
        authorization=authorization,
        token_port=_get_token_service(),
        user_port=_get_accounts_repository(),
    )
    user = identity.get_current_user()
    if user is None:
        raise HTTPException(status_code=401, detail="Could not establish identity.")
    return user


def get_dashboard_session(
    user: User = Depends(get_current_user),
    registry: DashboardSessionRegistry = Depends(get_dashboard_session_registry),
) -> DashboardSession:
    return registry.get_or_create(user)


def require_feature(feature_code: str):
    def _dependency(
        session: DashboardSession = Depends(get_dashboard_session),
        entitlements_use_case: GetUserEntitlementsUseCase = Depends(get_get_user_entitlements_use_case),
    ) -> DashboardSession:
        entitlements = entitlements_use_case.execute(subscription_state=session.subscription_state)
        if not entitlements.has_feature(feature_code):
            raise HTTPException(
                status_code=403,
                detail=str(FeatureAccessDeniedError(f"Feature '{feature_code}' is required.")),
            )
        return session

    return _dependency
