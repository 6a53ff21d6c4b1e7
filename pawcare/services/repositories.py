"""
Collaborator contracts for record access and read-state persistence.

Why Protocol over ABC: structural typing, easy in-memory fakes in tests.
Ownership filtering is the repository's job; this package never decides who
may see a dog's data.
"""

from collections.abc import Sequence
from datetime import date
from typing import Protocol

from pawcare.domain.models import (
    AppointmentEntry,
    DogProfile,
    HealthRecordEntry,
    TrainingSessionEntry,
    VaccinationRecord,
)


class StorageError(Exception):
    """A collaborator failed to read or write its backing store."""


class RecordRepository(Protocol):
    """Read-only access to a user's dogs and their care records."""

    async def list_dogs(self, owner_id: str) -> Sequence[DogProfile]: ...

    async def list_vaccinations(self, dog_id: str) -> Sequence[VaccinationRecord]: ...

    async def list_health_records(self, dog_id: str) -> Sequence[HealthRecordEntry]: ...

    async def list_appointments(self, dog_id: str) -> Sequence[AppointmentEntry]: ...

    async def list_training_sessions(
        self, owner_id: str, since: date
    ) -> Sequence[TrainingSessionEntry]:
        """Sessions on or after ``since`` for every dog the owner has."""
        ...


class ReadStateStore(Protocol):
    """Persisted set of ``(user_id, notif_key)`` read marks."""

    async def has_read(self, user_id: str, keys: Sequence[str]) -> set[str]:
        """Return the subset of ``keys`` the user has marked read."""
        ...

    async def mark_read(self, user_id: str, key: str) -> None:
        """Record a read mark. Marking the same key twice is a no-op."""
        ...
