"""
Composite wellness score for a single dog.

The score is a sum of four independently capped factors:

- Vaccination currency: share of vaccinations that are not overdue
- Health-record recency: records within the recency window, capped
- Appointment scheduling: upcoming appointments, capped
- Care consistency: a little credit for every record on file

Everything here is a pure function of its inputs and ``now``; there is no
shared state, so concurrent calls for different dogs are safe.
"""

import math
from collections.abc import Sequence
from datetime import datetime

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel

from pawcare.config import ScoringConfig
from pawcare.domain.models import (
    AppointmentEntry,
    HealthRecordEntry,
    HealthStatus,
    HealthStatusResult,
    HealthSummary,
    StatusColor,
    VaccinationRecord,
)
from pawcare.services.clock import at_time, ensure_utc, start_of_day

NEXT_ACTIONS: dict[HealthStatus, str] = {
    HealthStatus.EXCELLENT: "Keep up the great care routine!",
    HealthStatus.GOOD: "Consider scheduling a routine checkup",
    HealthStatus.FAIR: "Update vaccinations and schedule vet visit",
    HealthStatus.NEEDS_ATTENTION: "Schedule vet visit and update records",
    HealthStatus.POOR: "Immediate vet attention recommended",
}

STATUS_COLORS: dict[HealthStatus, StatusColor] = {
    HealthStatus.EXCELLENT: StatusColor.GREEN,
    HealthStatus.GOOD: StatusColor.BLUE,
    HealthStatus.FAIR: StatusColor.YELLOW,
    HealthStatus.NEEDS_ATTENTION: StatusColor.ORANGE,
    HealthStatus.POOR: StatusColor.RED,
}


class FactorScores(BaseModel):
    """Per-factor contributions before rounding."""

    vaccination: float
    health_records: float
    appointments: float
    care: float

    @property
    def total(self) -> float:
        return self.vaccination + self.health_records + self.appointments + self.care


def is_vaccination_current(record: VaccinationRecord, now: datetime) -> bool:
    """No due date, or due strictly after ``now``."""
    if record.next_due_date is None:
        return True
    return start_of_day(record.next_due_date) > now


def is_health_record_recent(record: HealthRecordEntry, now: datetime, window_months: int) -> bool:
    return start_of_day(record.date) > now - relativedelta(months=window_months)


def is_appointment_upcoming(appointment: AppointmentEntry, now: datetime) -> bool:
    return at_time(appointment.date, appointment.time) > now


def vaccination_score(current: int, total: int, weight: float) -> float:
    if total == 0:
        return 0.0
    return current / total * weight


def capped_score(count: int, total: int, target: int, weight: float) -> float:
    """``count / target`` of the weight, never more than the weight."""
    if total == 0:
        return 0.0
    return min(count / target * weight, weight)


def care_score(total_records: int, policy: ScoringConfig) -> float:
    return min(total_records * policy.care_points_per_record, policy.care_weight)


def round_score(value: float) -> int:
    """Round half up and clamp into [0, 100]."""
    return max(0, min(100, math.floor(value + 0.5)))


def band_for(score: int, policy: ScoringConfig) -> HealthStatus:
    if score >= policy.excellent_threshold:
        return HealthStatus.EXCELLENT
    if score >= policy.good_threshold:
        return HealthStatus.GOOD
    if score >= policy.fair_threshold:
        return HealthStatus.FAIR
    if score >= policy.needs_attention_threshold:
        return HealthStatus.NEEDS_ATTENTION
    return HealthStatus.POOR


def explain_factors(scores: FactorScores, policy: ScoringConfig) -> list[str]:
    factors: list[str] = []

    if scores.vaccination >= policy.vaccination_up_to_date_threshold:
        factors.append("Vaccinations up to date")
    elif scores.vaccination >= policy.vaccination_some_due_threshold:
        factors.append("Some vaccinations due")
    else:
        factors.append("Vaccinations need attention")

    if scores.health_records >= policy.health_regular_threshold:
        factors.append("Regular health monitoring")
    elif scores.health_records >= policy.health_some_threshold:
        factors.append("Some health tracking")
    else:
        factors.append("More health monitoring needed")

    if scores.appointments >= policy.appointments_scheduled_threshold:
        factors.append("Appointments scheduled")
    else:
        factors.append("Schedule regular checkups")

    return factors


def calculate_health_status(
    vaccinations: Sequence[VaccinationRecord],
    health_records: Sequence[HealthRecordEntry],
    appointments: Sequence[AppointmentEntry],
    now: datetime,
    policy: ScoringConfig | None = None,
) -> HealthStatusResult:
    """
    Score one dog's care records as of ``now``.

    Returns ``has_enough_data=False`` (and nothing else) when there are fewer
    than ``policy.min_records`` records in total; too little evidence is not
    reported as a low score.
    """
    policy = policy or ScoringConfig()
    now = ensure_utc(now)

    total_records = len(vaccinations) + len(health_records) + len(appointments)
    if total_records < policy.min_records:
        return HealthStatusResult(has_enough_data=False)

    current = sum(1 for v in vaccinations if is_vaccination_current(v, now))
    recent = sum(
        1
        for r in health_records
        if is_health_record_recent(r, now, policy.health_record_window_months)
    )
    upcoming = sum(1 for a in appointments if is_appointment_upcoming(a, now))

    scores = FactorScores(
        vaccination=vaccination_score(current, len(vaccinations), policy.vaccination_weight),
        health_records=capped_score(
            recent, len(health_records), policy.recent_records_target, policy.health_record_weight
        ),
        appointments=capped_score(
            upcoming,
            len(appointments),
            policy.upcoming_appointments_target,
            policy.appointment_weight,
        ),
        care=care_score(total_records, policy),
    )

    score = round_score(scores.total)
    status = band_for(score, policy)

    return HealthStatusResult(
        has_enough_data=True,
        score=score,
        status=status,
        status_color=STATUS_COLORS[status],
        next_action=NEXT_ACTIONS[status],
        factors=explain_factors(scores, policy),
        summary=HealthSummary(
            total_vaccinations=len(vaccinations),
            up_to_date_vaccinations=current,
            total_health_records=len(health_records),
            recent_health_records=recent,
            total_appointments=len(appointments),
            upcoming_appointments=upcoming,
        ),
    )
