"""
Health intelligence service: the operations exposed to the request layer.

Key patterns:
- Protocol-based dependency injection for storage collaborators
- Injected clock so scoring and synthesis stay pure and repeatable
- Structured concurrency with asyncio.TaskGroup for independent reads
- Fail whole: the first storage error aborts the request, no partial results
"""

import asyncio
import time
from collections.abc import Awaitable, Sequence
from datetime import datetime, timedelta
from typing import Any

import structlog

from pawcare.config import AppConfig, get_config
from pawcare.domain.models import HealthStatusResult, NotificationItem, TrainingSessionEntry
from pawcare.services.clock import Clock, ensure_utc, utc_now
from pawcare.services.feed_assembler import assemble_feed
from pawcare.services.health_score import calculate_health_status
from pawcare.services.notification_synthesizer import (
    DogNotificationSources,
    synthesize_notifications,
)
from pawcare.services.repositories import ReadStateStore, RecordRepository

logger = structlog.get_logger(__name__)


async def gather_all(*aws: Awaitable[Any]) -> list[Any]:
    """
    Await every read concurrently and return results in argument order.

    The TaskGroup cancels siblings on the first failure; that failure is
    re-raised as-is rather than wrapped in an ExceptionGroup.
    """
    try:
        async with asyncio.TaskGroup() as task_group:
            tasks = [task_group.create_task(aw) for aw in aws]  # type: ignore[arg-type]
    except ExceptionGroup as group:
        raise group.exceptions[0]
    return [task.result() for task in tasks]


class HealthIntelligenceService:
    """
    Computes derived health views for dogs and their owners.

    Nothing is cached between calls: every read re-fetches records and
    recomputes results against the injected clock.
    """

    def __init__(
        self,
        records: RecordRepository,
        read_state: ReadStateStore,
        config: AppConfig | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.records = records
        self.read_state = read_state
        self.config = config or get_config()
        self.clock = clock
        self.logger = logger.bind(component="health_intelligence")

    async def compute_health_status(self, dog_id: str) -> HealthStatusResult:
        """Fetch a dog's three record streams concurrently and score them."""
        log = self.logger.bind(dog_id=dog_id)
        now = ensure_utc(self.clock())

        try:
            vaccinations, health_records, appointments = await gather_all(
                self.records.list_vaccinations(dog_id),
                self.records.list_health_records(dog_id),
                self.records.list_appointments(dog_id),
            )
        except Exception as e:
            log.error("record_fetch_failed", operation="compute_health_status", error=str(e))
            raise

        result = calculate_health_status(
            vaccinations, health_records, appointments, now, self.config.scoring
        )

        if result.has_enough_data:
            log.info(
                "health_status_computed",
                score=result.score,
                status=result.status.value if result.status else None,
            )
        else:
            log.info(
                "health_status_insufficient_data",
                total_records=len(vaccinations) + len(health_records) + len(appointments),
            )
        return result

    async def list_notifications(self, user_id: str) -> list[NotificationItem]:
        """
        Build the user's notification feed.

        Returns:
            At most ``feed_max_items`` notifications, most urgent first, each
            carrying its persisted read flag.
        """
        log = self.logger.bind(user_id=user_id)
        policy = self.config.notifications
        now = ensure_utc(self.clock())
        start_time = time.perf_counter()

        try:
            sources, training_sessions = await self._load_notification_sources(user_id, now)
        except Exception as e:
            log.error("record_fetch_failed", operation="list_notifications", error=str(e))
            raise

        candidates = synthesize_notifications(sources, training_sessions, now, policy)
        log.debug("notifications_synthesized", candidates=len(candidates), dogs=len(sources))

        read_ids: set[str] = set()
        if candidates:
            try:
                read_ids = await self.read_state.has_read(user_id, [c.id for c in candidates])
            except Exception as e:
                log.error("read_state_lookup_failed", error=str(e))
                raise
        else:
            log.debug("read_state_lookup_skipped")

        feed = assemble_feed(candidates, read_ids, policy.feed_max_items)

        log.info(
            "notification_feed_assembled",
            candidates=len(candidates),
            returned=len(feed),
            unread=sum(1 for item in feed if not item.read),
            duration_seconds=round(time.perf_counter() - start_time, 3),
        )
        return feed

    async def mark_notification_read(self, user_id: str, key: str) -> None:
        """Persist a read mark; marking an already-read key again is a no-op."""
        log = self.logger.bind(user_id=user_id, key=key)
        try:
            await self.read_state.mark_read(user_id, key)
        except Exception as e:
            log.error("read_state_mark_failed", error=str(e))
            raise
        log.info("notification_marked_read")

    async def _load_notification_sources(
        self, user_id: str, now: datetime
    ) -> tuple[list[DogNotificationSources], Sequence[TrainingSessionEntry]]:
        dogs = await self.records.list_dogs(user_id)
        if not dogs:
            return [], []

        since = now.date() - timedelta(days=self.config.notifications.training_lookback_days)
        per_dog_reads = []
        for dog in dogs:
            per_dog_reads.append(self.records.list_vaccinations(dog.id))
            per_dog_reads.append(self.records.list_appointments(dog.id))

        *per_dog_results, training_sessions = await gather_all(
            *per_dog_reads,
            self.records.list_training_sessions(user_id, since),
        )

        sources = [
            DogNotificationSources(
                dog=dog,
                vaccinations=per_dog_results[2 * i],
                appointments=per_dog_results[2 * i + 1],
            )
            for i, dog in enumerate(dogs)
        ]
        return sources, training_sessions
