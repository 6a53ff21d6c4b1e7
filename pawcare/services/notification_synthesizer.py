"""
Notification synthesis from a user's care records.

Three independent builders turn vaccination, appointment and training rows
into ``NotificationCandidate``s with content-addressed ids. Candidates are
emitted in a fixed generation order (vaccinations, appointments, training)
which the feed keeps as the tie-break within an urgency rank.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from pawcare.config import NotificationConfig
from pawcare.domain.models import (
    AppointmentEntry,
    DogProfile,
    NotificationCandidate,
    NotificationType,
    TrainingProgress,
    TrainingSessionEntry,
    VaccinationRecord,
)
from pawcare.services.clock import ensure_utc, start_of_day
from pawcare.services.notification_keys import appointment_key, training_key, vaccination_key

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class DogNotificationSources:
    """Per-dog record streams that feed the notification builders."""

    dog: DogProfile
    vaccinations: Sequence[VaccinationRecord] = field(default_factory=tuple)
    appointments: Sequence[AppointmentEntry] = field(default_factory=tuple)


def pluralize_days(count: int) -> str:
    return f"{count} day{'' if count == 1 else 's'}"


def days_until_text(days: int) -> str:
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    return f"in {days} days"


def days_ago_text(days: int) -> str:
    if days == 0:
        return "today"
    if days == 1:
        return "yesterday"
    return f"{days} days ago"


def build_vaccination_notifications(
    sources: Sequence[DogNotificationSources],
    now: datetime,
    policy: NotificationConfig,
) -> list[NotificationCandidate]:
    """Vaccinations whose due date starts between now and the end of the window."""
    window_end = now + timedelta(days=policy.vaccination_window_days)

    due: list[tuple[date, DogProfile, VaccinationRecord]] = [
        (v.next_due_date, s.dog, v)
        for s in sources
        for v in s.vaccinations
        if v.next_due_date is not None and now <= start_of_day(v.next_due_date) <= window_end
    ]
    due.sort(key=lambda item: item[0])

    candidates = []
    for due_date, dog, vaccination in due:
        days_until = math.ceil((start_of_day(due_date) - now) / ONE_DAY)
        days_text = pluralize_days(days_until)
        candidates.append(
            NotificationCandidate(
                id=vaccination_key(dog.id, vaccination.vaccine_name, due_date),
                title=f"Vaccination due for {dog.name}",
                message=f"{vaccination.vaccine_name} vaccination due in {days_text}",
                time=f"{days_text} from now",
                type=(
                    NotificationType.WARNING
                    if days_until <= policy.vaccination_warning_days
                    else NotificationType.INFO
                ),
                created_at=now,
            )
        )
    return candidates


def build_appointment_notifications(
    sources: Sequence[DogNotificationSources],
    now: datetime,
    policy: NotificationConfig,
) -> list[NotificationCandidate]:
    """Appointments from today through the appointment window, day granularity."""
    today = now.date()
    window_end = today + timedelta(days=policy.appointment_window_days)

    upcoming = [
        (s.dog, a) for s in sources for a in s.appointments if today <= a.date <= window_end
    ]
    upcoming.sort(key=lambda item: (item[1].date, item[1].time))

    candidates = []
    for dog, appointment in upcoming:
        days_until = (appointment.date - today).days
        when = days_until_text(days_until)
        candidates.append(
            NotificationCandidate(
                id=appointment_key(dog.id, appointment.title, appointment.date, appointment.time),
                title="Appointment reminder",
                message=(
                    f"{appointment.title} for {dog.name} {when} "
                    f"at {appointment.time.strftime('%H:%M')}"
                ),
                time=when,
                type=(
                    NotificationType.WARNING
                    if days_until <= policy.appointment_warning_days
                    else NotificationType.INFO
                ),
                created_at=now,
            )
        )
    return candidates


def build_training_notifications(
    sessions: Sequence[TrainingSessionEntry],
    dogs: Mapping[str, DogProfile],
    now: datetime,
    policy: NotificationConfig,
) -> list[NotificationCandidate]:
    """The most recent excellent sessions within the lookback window."""
    today = now.date()
    since = today - timedelta(days=policy.training_lookback_days)

    excellent = [
        s
        for s in sessions
        if s.progress == TrainingProgress.EXCELLENT
        and since <= s.date <= today
        and s.dog_id in dogs
    ]
    excellent.sort(key=lambda s: s.date, reverse=True)

    candidates = []
    for session in excellent[: policy.training_max_items]:
        when = days_ago_text((today - session.date).days)
        candidates.append(
            NotificationCandidate(
                id=training_key(session.dog_id, session.date),
                title="Training milestone",
                message=f"{dogs[session.dog_id].name} had an excellent training session {when}!",
                time=when,
                type=NotificationType.SUCCESS,
                created_at=now,
            )
        )
    return candidates


def synthesize_notifications(
    sources: Sequence[DogNotificationSources],
    training_sessions: Sequence[TrainingSessionEntry],
    now: datetime,
    policy: NotificationConfig | None = None,
) -> list[NotificationCandidate]:
    """
    Build every notification candidate for one user, unsorted.

    Args:
        sources: One entry per dog the user owns
        training_sessions: The owner's recent training sessions
        now: Reference time; also stamped as every candidate's ``created_at``
        policy: Windows and limits

    Returns:
        Candidates in generation order: vaccinations, appointments, training.
    """
    policy = policy or NotificationConfig()
    now = ensure_utc(now)
    dogs = {s.dog.id: s.dog for s in sources}

    candidates = [
        *build_vaccination_notifications(sources, now, policy),
        *build_appointment_notifications(sources, now, policy),
        *build_training_notifications(training_sessions, dogs, now, policy),
    ]
    return deduplicate(candidates)


def deduplicate(candidates: Sequence[NotificationCandidate]) -> list[NotificationCandidate]:
    """Drop repeated ids, keeping the first occurrence."""
    seen: set[str] = set()
    unique = []
    for candidate in candidates:
        if candidate.id not in seen:
            seen.add(candidate.id)
            unique.append(candidate)
    return unique
