from __future__ import annotations

from datetime import datetime

from author_dashboard.application.fetchers.base import BaseDomainFetcher
from author_dashboard.application.ports.content_port import FaqContentPort
from author_dashboard.domain.entities.dashboard import FAQ, ActivityItem, DomainFetchResult, DomainStat


class FaqFetcher(BaseDomainFetcher):
    domain_id = FAQ
    feature_code = FAQ

    def __init__(self, *, faq_port: FaqContentPort, **kwargs):
        super().__init__(**kwargs)
        self._faq_port = faq_port

    def _load(self, *, user_id: str, now: datetime) -> DomainFetchResult:
        faqs = self._faq_port.list_faqs(user_id=user_id)
        return DomainFetchResult(
            domain_id=FAQ,
            stat=DomainStat(
                total_count=len(faqs),
                secondary_count=sum(1 for faq in faqs if faq.is_published),
            ),
            recent_items=tuple(
                ActivityItem(
                    domain_id=FAQ,
                    title=faq.question,
                    timestamp=faq.created_at,
                    status="published" if faq.is_published else "draft",
                    target_ref="/user-faq-management",
                )
                for faq in faqs[: self.recent_limit]
            ),
        )
