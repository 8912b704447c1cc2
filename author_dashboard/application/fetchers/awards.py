from __future__ import annotations

from datetime import datetime

from author_dashboard.application.fetchers.base import BaseDomainFetcher
from author_dashboard.application.ports.content_port import AwardsContentPort
from author_dashboard.domain.entities.dashboard import AWARDS, ActivityItem, DomainFetchResult, DomainStat


class AwardsFetcher(BaseDomainFetcher):
    domain_id = AWARDS
    feature_code = AWARDS

    def __init__(self, *, awards_port: AwardsContentPort, **kwargs):
        super().__init__(**kwargs)
        self._awards_port = awards_port

    def _load(self, *, user_id: str, now: datetime) -> DomainFetchResult:
        awards = self._awards_port.list_awards(user_id=user_id)
        return DomainFetchResult(
            domain_id=AWARDS,
            stat=DomainStat(total_count=len(awards)),
            recent_items=tuple(
                ActivityItem(
                    domain_id=AWARDS,
                    title=award.title,
                    timestamp=award.created_at,
                    target_ref="/user-awards-management",
                )
                for award in awards[: self.recent_limit]
            ),
        )
