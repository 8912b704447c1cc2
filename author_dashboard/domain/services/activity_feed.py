from __future__ import annotations

from typing import Iterable

from author_dashboard.domain.entities.dashboard import DOMAIN_ORDER, FEED_SIZE, ActivityItem


_DOMAIN_RANK = {domain_id: rank for rank, domain_id in enumerate(DOMAIN_ORDER)}


def _domain_rank(domain_id: str) -> int:
    return _DOMAIN_RANK.get(domain_id, len(DOMAIN_ORDER))


def merge_activity(items: Iterable[ActivityItem], *, size: int = FEED_SIZE) -> tuple[ActivityItem, ...]:
    """Most recent first; equal timestamps fall back to domain declaration order."""
    if size <= 0:
        return ()
    # Stable sorts: secondary key first, then primary.
    ordered = sorted(items, key=lambda item: _domain_rank(item.domain_id))
    ordered.sort(key=lambda item: item.timestamp, reverse=True)
    return tuple(ordered[:size])
