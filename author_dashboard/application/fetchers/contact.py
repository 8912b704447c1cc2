from __future__ import annotations

from datetime import datetime

from author_dashboard.application.fetchers.base import BaseDomainFetcher
from author_dashboard.application.ports.content_port import ContactContentPort
from author_dashboard.domain.entities.dashboard import (
    CONTACT_FORMS,
    ActivityItem,
    DomainFetchResult,
    DomainStat,
)
from author_dashboard.shared.clock import month_start


class ContactFetcher(BaseDomainFetcher):
    domain_id = CONTACT_FORMS
    feature_code = CONTACT_FORMS

    def __init__(self, *, contact_port: ContactContentPort, **kwargs):
        super().__init__(**kwargs)
        self._contact_port = contact_port

    def _load(self, *, user_id: str, now: datetime) -> DomainFetchResult:
        submissions = self._contact_port.list_contact_submissions(user_id=user_id)
        since = month_start(now)
        return DomainFetchResult(
            domain_id=CONTACT_FORMS,
            stat=DomainStat(
                total_count=len(submissions),
                secondary_count=sum(1 for item in submissions if item.created_at >= since),
            ),
            recent_items=tuple(
                ActivityItem(
                    domain_id=CONTACT_FORMS,
                    title=f"Message from {item.name}",
                    timestamp=item.created_at,
                    status=item.status,
                    target_ref="/contact-management",
                )
                for item in submissions[: self.recent_limit]
            ),
        )
