"""
Feed assembly: read-state overlay, urgency ordering and truncation.
"""

from collections.abc import Collection, Sequence

from pawcare.domain.models import URGENCY_RANK, NotificationCandidate, NotificationItem

MAX_FEED_ITEMS = 10


def apply_read_state(
    candidates: Sequence[NotificationCandidate], read_ids: Collection[str]
) -> list[NotificationItem]:
    return [
        NotificationItem(**candidate.model_dump(), read=candidate.id in read_ids)
        for candidate in candidates
    ]


def sort_feed(items: Sequence[NotificationItem]) -> list[NotificationItem]:
    """
    Order by urgency rank, then newest ``created_at`` first.

    Candidates from one request share a ``created_at``, so within a rank the
    stable sort keeps generation order.
    """
    by_newest = sorted(items, key=lambda item: item.created_at, reverse=True)
    return sorted(by_newest, key=lambda item: URGENCY_RANK[item.type])


def assemble_feed(
    candidates: Sequence[NotificationCandidate],
    read_ids: Collection[str],
    limit: int = MAX_FEED_ITEMS,
) -> list[NotificationItem]:
    """Overlay read flags, sort, and keep at most ``limit`` (never above 10) items."""
    limit = max(0, min(limit, MAX_FEED_ITEMS))
    return sort_feed(apply_read_state(candidates, read_ids))[:limit]
