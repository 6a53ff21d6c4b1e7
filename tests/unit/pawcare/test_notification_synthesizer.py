"""
Tests for notification synthesis.

Covers the three builders (windows, urgency, text), generation order, the
training cap, deduplication and id determinism.
"""

from datetime import UTC, datetime, time, timedelta

import pytest

from pawcare.config import NotificationConfig
from pawcare.domain.models import (
    AppointmentEntry,
    DogProfile,
    NotificationType,
    TrainingProgress,
    TrainingSessionEntry,
    VaccinationRecord,
)
from pawcare.services.health_score import is_vaccination_current
from pawcare.services.notification_keys import appointment_key, training_key, vaccination_key
from pawcare.services.notification_synthesizer import (
    DogNotificationSources,
    build_appointment_notifications,
    build_training_notifications,
    build_vaccination_notifications,
    synthesize_notifications,
)

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)
TODAY = NOW.date()
POLICY = NotificationConfig()

BISCUIT = DogProfile(id="dog-1", owner_id="owner-1", name="Biscuit")
PEPPER = DogProfile(id="dog-2", owner_id="owner-1", name="Pepper")
DOGS = {BISCUIT.id: BISCUIT, PEPPER.id: PEPPER}


def vaccination(days: int | None, name: str = "Rabies", dog: DogProfile = BISCUIT):
    due = None if days is None else TODAY + timedelta(days=days)
    return VaccinationRecord(id=f"v-{name}", dog_id=dog.id, vaccine_name=name, next_due_date=due)


def appointment(days: int, title: str = "Checkup", at: time = time(15, 0), dog=BISCUIT):
    return AppointmentEntry(
        id=f"a-{title}-{days}",
        dog_id=dog.id,
        title=title,
        date=TODAY + timedelta(days=days),
        time=at,
    )


def training(days_ago: int, progress=TrainingProgress.EXCELLENT, dog=BISCUIT):
    return TrainingSessionEntry(
        id=f"t-{dog.id}-{days_ago}",
        dog_id=dog.id,
        date=TODAY - timedelta(days=days_ago),
        progress=progress,
    )


class TestVaccinationNotifications:
    def test_due_in_five_days_is_a_warning(self) -> None:
        sources = [DogNotificationSources(BISCUIT, vaccinations=[vaccination(5)])]

        [candidate] = build_vaccination_notifications(sources, NOW, POLICY)

        assert candidate.type == NotificationType.WARNING
        assert candidate.title == "Vaccination due for Biscuit"
        assert candidate.message == "Rabies vaccination due in 5 days"
        assert candidate.time == "5 days from now"
        assert candidate.id == vaccination_key("dog-1", "Rabies", TODAY + timedelta(days=5))
        assert candidate.created_at == NOW

    def test_singular_day(self) -> None:
        sources = [DogNotificationSources(BISCUIT, vaccinations=[vaccination(1)])]

        [candidate] = build_vaccination_notifications(sources, NOW, POLICY)

        assert candidate.message == "Rabies vaccination due in 1 day"
        assert candidate.time == "1 day from now"

    @pytest.mark.parametrize(
        ("days", "expected"),
        [
            (1, NotificationType.WARNING),
            (7, NotificationType.WARNING),
            (8, NotificationType.INFO),
            (30, NotificationType.INFO),
        ],
    )
    def test_urgency_threshold(self, days: int, expected: NotificationType) -> None:
        sources = [DogNotificationSources(BISCUIT, vaccinations=[vaccination(days)])]

        [candidate] = build_vaccination_notifications(sources, NOW, POLICY)

        assert candidate.type == expected

    @pytest.mark.parametrize("days", [None, -1, 0, 31, 365])
    def test_outside_window_is_skipped(self, days: int | None) -> None:
        sources = [DogNotificationSources(BISCUIT, vaccinations=[vaccination(days)])]
        assert build_vaccination_notifications(sources, NOW, POLICY) == []

    def test_due_today_agrees_with_health_score(self) -> None:
        record = vaccination(0)

        assert not is_vaccination_current(record, NOW)
        assert build_vaccination_notifications(
            [DogNotificationSources(BISCUIT, vaccinations=[record])], NOW, POLICY
        ) == []

    def test_due_today_is_listed_at_midnight(self) -> None:
        midnight = datetime(2025, 3, 10, tzinfo=UTC)
        sources = [DogNotificationSources(BISCUIT, vaccinations=[vaccination(0)])]

        [candidate] = build_vaccination_notifications(sources, midnight, POLICY)

        assert candidate.message == "Rabies vaccination due in 0 days"

    def test_sorted_by_due_date_across_dogs(self) -> None:
        sources = [
            DogNotificationSources(BISCUIT, vaccinations=[vaccination(20, "DHPP")]),
            DogNotificationSources(PEPPER, vaccinations=[vaccination(3, "Rabies", PEPPER)]),
        ]

        candidates = build_vaccination_notifications(sources, NOW, POLICY)

        assert [c.title for c in candidates] == [
            "Vaccination due for Pepper",
            "Vaccination due for Biscuit",
        ]


class TestAppointmentNotifications:
    def test_today_is_a_warning(self) -> None:
        sources = [DogNotificationSources(BISCUIT, appointments=[appointment(0)])]

        [candidate] = build_appointment_notifications(sources, NOW, POLICY)

        assert candidate.type == NotificationType.WARNING
        assert candidate.time == "today"
        assert candidate.title == "Appointment reminder"
        assert candidate.message == "Checkup for Biscuit today at 15:00"
        assert candidate.id == appointment_key("dog-1", "Checkup", TODAY, time(15, 0))

    def test_earlier_today_still_counts(self) -> None:
        sources = [DogNotificationSources(BISCUIT, appointments=[appointment(0, at=time(8, 0))])]

        [candidate] = build_appointment_notifications(sources, NOW, POLICY)

        assert candidate.time == "today"

    @pytest.mark.parametrize(
        ("days", "text", "expected"),
        [
            (1, "tomorrow", NotificationType.WARNING),
            (2, "in 2 days", NotificationType.INFO),
            (7, "in 7 days", NotificationType.INFO),
        ],
    )
    def test_relative_text_and_urgency(
        self, days: int, text: str, expected: NotificationType
    ) -> None:
        sources = [DogNotificationSources(BISCUIT, appointments=[appointment(days)])]

        [candidate] = build_appointment_notifications(sources, NOW, POLICY)

        assert candidate.time == text
        assert candidate.type == expected

    @pytest.mark.parametrize("days", [-1, 8])
    def test_outside_window_is_skipped(self, days: int) -> None:
        sources = [DogNotificationSources(BISCUIT, appointments=[appointment(days)])]
        assert build_appointment_notifications(sources, NOW, POLICY) == []

    def test_time_strings_normalize_to_the_same_key(self) -> None:
        short = AppointmentEntry(id="a1", dog_id="dog-1", title="Vet", date=TODAY, time="09:30")
        full = AppointmentEntry(id="a2", dog_id="dog-1", title="Vet", date=TODAY, time="09:30:00")

        first = build_appointment_notifications(
            [DogNotificationSources(BISCUIT, appointments=[short])], NOW, POLICY
        )
        second = build_appointment_notifications(
            [DogNotificationSources(BISCUIT, appointments=[full])], NOW, POLICY
        )

        assert first[0].id == second[0].id

    def test_ordered_by_date_then_time(self) -> None:
        sources = [
            DogNotificationSources(
                BISCUIT,
                appointments=[
                    appointment(2, "Grooming"),
                    appointment(0, "Late vet", at=time(17, 0)),
                    appointment(0, "Early vet", at=time(9, 0)),
                ],
            )
        ]

        candidates = build_appointment_notifications(sources, NOW, POLICY)

        assert [c.message.split(" for ")[0] for c in candidates] == [
            "Early vet",
            "Late vet",
            "Grooming",
        ]


class TestTrainingNotifications:
    def test_recent_excellent_session(self) -> None:
        [candidate] = build_training_notifications([training(1)], DOGS, NOW, POLICY)

        assert candidate.type == NotificationType.SUCCESS
        assert candidate.title == "Training milestone"
        assert candidate.message == "Biscuit had an excellent training session yesterday!"
        assert candidate.time == "yesterday"
        assert candidate.id == training_key("dog-1", TODAY - timedelta(days=1))

    @pytest.mark.parametrize(
        ("days_ago", "text"), [(0, "today"), (1, "yesterday"), (6, "6 days ago")]
    )
    def test_days_ago_text(self, days_ago: int, text: str) -> None:
        [candidate] = build_training_notifications([training(days_ago)], DOGS, NOW, POLICY)
        assert candidate.time == text

    def test_only_excellent_within_lookback(self) -> None:
        sessions = [
            training(2, TrainingProgress.GOOD),
            training(3, TrainingProgress.NEEDS_WORK),
            training(8),
            training(-1),
            training(7),
        ]

        candidates = build_training_notifications(sessions, DOGS, NOW, POLICY)

        assert [c.time for c in candidates] == ["7 days ago"]

    def test_capped_at_three_most_recent(self) -> None:
        sessions = [training(d) for d in (5, 0, 3, 1, 6)]

        candidates = build_training_notifications(sessions, DOGS, NOW, POLICY)

        assert [c.time for c in candidates] == ["today", "yesterday", "3 days ago"]

    def test_sessions_for_unknown_dogs_are_ignored(self) -> None:
        stranger = DogProfile(id="dog-9", owner_id="someone-else", name="Rex")
        assert build_training_notifications([training(1, dog=stranger)], DOGS, NOW, POLICY) == []


class TestSynthesize:
    def sources(self) -> list[DogNotificationSources]:
        return [
            DogNotificationSources(
                BISCUIT, vaccinations=[vaccination(12)], appointments=[appointment(3)]
            ),
            DogNotificationSources(PEPPER, vaccinations=[vaccination(2, "DHPP", PEPPER)]),
        ]

    def test_generation_order_is_vaccinations_appointments_training(self) -> None:
        candidates = synthesize_notifications(self.sources(), [training(1)], NOW)

        assert [c.title for c in candidates] == [
            "Vaccination due for Pepper",
            "Vaccination due for Biscuit",
            "Appointment reminder",
            "Training milestone",
        ]

    def test_all_candidates_share_created_at(self) -> None:
        candidates = synthesize_notifications(self.sources(), [training(1)], NOW)
        assert {c.created_at for c in candidates} == {NOW}

    def test_ids_are_deterministic(self) -> None:
        first = synthesize_notifications(self.sources(), [training(1)], NOW)
        later = synthesize_notifications(self.sources(), [training(1)], NOW + timedelta(hours=3))

        assert {c.id for c in first} == {c.id for c in later}

    def test_duplicate_events_are_collapsed(self) -> None:
        duplicated = [
            DogNotificationSources(
                BISCUIT, vaccinations=[vaccination(4), vaccination(4)], appointments=[]
            )
        ]

        candidates = synthesize_notifications(duplicated, [], NOW)

        assert len(candidates) == 1

    def test_nothing_to_report(self) -> None:
        assert synthesize_notifications([], [], NOW) == []
