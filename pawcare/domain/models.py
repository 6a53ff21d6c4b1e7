"""
Domain models for pet health intelligence.

Source records are owned by the record-keeping side of the service and are
read-only here. Computed models (health status, notifications) are rebuilt on
every read and serialize with camelCase aliases for the wire.
"""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class HealthRecordType(str, Enum):
    """Kinds of health record entries."""

    VET_VISIT = "vet-visit"
    MEDICATION = "medication"
    ILLNESS = "illness"
    INJURY = "injury"
    OTHER = "other"


class TrainingProgress(str, Enum):
    """Trainer's assessment of a single session."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    NEEDS_WORK = "needs-work"


class HealthStatus(str, Enum):
    """Wellness bands, best first."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    NEEDS_ATTENTION = "Needs Attention"
    POOR = "Poor"


class StatusColor(str, Enum):
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"


class NotificationType(str, Enum):
    """Notification urgency, most urgent first."""

    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


URGENCY_RANK: dict[NotificationType, int] = {
    NotificationType.WARNING: 0,
    NotificationType.INFO: 1,
    NotificationType.SUCCESS: 2,
}


# Source records


class SourceRecord(BaseModel):
    """Base for rows read from the record repository."""

    model_config = ConfigDict(frozen=True)

    id: str
    dog_id: str


class DogProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    owner_id: str
    name: str


class VaccinationRecord(SourceRecord):
    vaccine_name: str
    next_due_date: dt.date | None = None


class HealthRecordEntry(SourceRecord):
    date: dt.date
    type: HealthRecordType = HealthRecordType.OTHER


class AppointmentEntry(SourceRecord):
    title: str
    date: dt.date
    time: dt.time = dt.time(0, 0)


class TrainingSessionEntry(SourceRecord):
    date: dt.date
    progress: TrainingProgress


# Computed views


class WireModel(BaseModel):
    """Computed model exposed to the request layer with camelCase keys."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class HealthSummary(WireModel):
    """Raw counts behind a health score, for client display."""

    total_vaccinations: int = Field(ge=0)
    up_to_date_vaccinations: int = Field(ge=0)
    total_health_records: int = Field(ge=0)
    recent_health_records: int = Field(ge=0)
    total_appointments: int = Field(ge=0)
    upcoming_appointments: int = Field(ge=0)


class HealthStatusResult(WireModel):
    """
    Composite wellness score for one dog.

    When ``has_enough_data`` is false every other field stays ``None``;
    callers branch on the flag rather than on an exception.
    """

    has_enough_data: bool
    score: int | None = Field(default=None, ge=0, le=100)
    status: HealthStatus | None = None
    status_color: StatusColor | None = None
    next_action: str | None = None
    factors: list[str] | None = None
    summary: HealthSummary | None = None


class NotificationCandidate(WireModel):
    """A synthesized notification before the read-state overlay is applied."""

    id: str = Field(description="Content-addressed notification key")
    title: str
    message: str
    time: str = Field(description="Relative time text, e.g. 'tomorrow'")
    type: NotificationType
    created_at: dt.datetime


class NotificationItem(NotificationCandidate):
    read: bool = False
