"""
In-memory storage adapters.

Dict-backed implementations of the record repository and read-state store,
used by the test suite and the demo script. ``fail_with`` lets callers
simulate a storage outage on every call.
"""

import asyncio
from collections import defaultdict
from collections.abc import Sequence
from datetime import date

from pawcare.domain.models import (
    AppointmentEntry,
    DogProfile,
    HealthRecordEntry,
    TrainingSessionEntry,
    VaccinationRecord,
)


class InMemoryRecordRepository:
    """Record repository backed by plain lists."""

    def __init__(self) -> None:
        self.dogs: dict[str, DogProfile] = {}
        self.vaccinations: list[VaccinationRecord] = []
        self.health_records: list[HealthRecordEntry] = []
        self.appointments: list[AppointmentEntry] = []
        self.training_sessions: list[TrainingSessionEntry] = []
        self.fail_with: Exception | None = None
        self.calls: list[str] = []

    def add_dog(self, dog: DogProfile) -> None:
        self.dogs[dog.id] = dog

    async def _touch(self, operation: str) -> None:
        self.calls.append(operation)
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with

    async def list_dogs(self, owner_id: str) -> Sequence[DogProfile]:
        await self._touch("list_dogs")
        return [d for d in self.dogs.values() if d.owner_id == owner_id]

    async def list_vaccinations(self, dog_id: str) -> Sequence[VaccinationRecord]:
        await self._touch("list_vaccinations")
        return [v for v in self.vaccinations if v.dog_id == dog_id]

    async def list_health_records(self, dog_id: str) -> Sequence[HealthRecordEntry]:
        await self._touch("list_health_records")
        return [r for r in self.health_records if r.dog_id == dog_id]

    async def list_appointments(self, dog_id: str) -> Sequence[AppointmentEntry]:
        await self._touch("list_appointments")
        return [a for a in self.appointments if a.dog_id == dog_id]

    async def list_training_sessions(
        self, owner_id: str, since: date
    ) -> Sequence[TrainingSessionEntry]:
        await self._touch("list_training_sessions")
        owned = {d.id for d in self.dogs.values() if d.owner_id == owner_id}
        return [s for s in self.training_sessions if s.dog_id in owned and s.date >= since]


class InMemoryReadStateStore:
    """Read marks held in a per-user set; duplicate marks collapse."""

    def __init__(self) -> None:
        self.marks: dict[str, set[str]] = defaultdict(set)
        self.lookups: list[tuple[str, tuple[str, ...]]] = []
        self.fail_with: Exception | None = None

    async def has_read(self, user_id: str, keys: Sequence[str]) -> set[str]:
        self.lookups.append((user_id, tuple(keys)))
        if self.fail_with is not None:
            raise self.fail_with
        return self.marks.get(user_id, set()).intersection(keys)

    async def mark_read(self, user_id: str, key: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.marks[user_id].add(key)
