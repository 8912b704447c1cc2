from __future__ import annotations

from datetime import datetime

from author_dashboard.application.fetchers.base import BaseDomainFetcher
from author_dashboard.application.ports.content_port import NewsletterContentPort
from author_dashboard.domain.entities.dashboard import NEWSLETTER, DomainFetchResult, DomainStat


class NewsletterFetcher(BaseDomainFetcher):
    domain_id = NEWSLETTER
    feature_code = NEWSLETTER
    recent_limit = 0

    def __init__(self, *, newsletter_port: NewsletterContentPort, **kwargs):
        super().__init__(**kwargs)
        self._newsletter_port = newsletter_port

    def _load(self, *, user_id: str, now: datetime) -> DomainFetchResult:
        subscribers = self._newsletter_port.list_newsletter_subscribers(user_id=user_id)
        return DomainFetchResult(
            domain_id=NEWSLETTER,
            stat=DomainStat(
                total_count=len(subscribers),
                secondary_count=sum(1 for subscriber in subscribers if subscriber.status == "active"),
            ),
        )
