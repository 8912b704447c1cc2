from __future__ import annotations

from datetime import datetime

from author_dashboard.application.fetchers.base import BaseDomainFetcher
from author_dashboard.application.ports.content_port import EventsContentPort
from author_dashboard.domain.entities.dashboard import EVENTS, ActivityItem, DomainFetchResult, DomainStat


class EventsFetcher(BaseDomainFetcher):
    domain_id = EVENTS
    feature_code = EVENTS

    def __init__(self, *, events_port: EventsContentPort, **kwargs):
        super().__init__(**kwargs)
        self._events_port = events_port

    def _load(self, *, user_id: str, now: datetime) -> DomainFetchResult:
        # Ordered by event date; the feed still ranks them by creation time.
        events = self._events_port.list_events(user_id=user_id)
        return DomainFetchResult(
            domain_id=EVENTS,
            stat=DomainStat(
                total_count=len(events),
                secondary_count=sum(1 for event in events if event.event_date > now),
            ),
            recent_items=tuple(
                ActivityItem(
                    domain_id=EVENTS,
                    title=event.title,
                    timestamp=event.created_at,
                    status=event.status,
                    target_ref="/user-events-management",
                )
                for event in events[: self.recent_limit]
            ),
        )
