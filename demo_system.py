"""
End-to-end demo of the health intelligence pipeline.

This script shows:
1. Configuration loading and validation
2. Health status scoring for dogs with different care histories
3. Notification feed synthesis with read-state overlay
4. Read marks surviving feed regeneration

Run with: uv run python demo_system.py
"""

import asyncio
import tempfile
from datetime import UTC, datetime, time, timedelta
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from adapters.memory.store import InMemoryRecordRepository
from adapters.sqlite.read_state import SqliteReadStateStore
from pawcare.config import get_config, print_config_summary, validate_config
from pawcare.domain.models import (
    AppointmentEntry,
    DogProfile,
    HealthRecordEntry,
    HealthRecordType,
    TrainingProgress,
    TrainingSessionEntry,
    VaccinationRecord,
)
from pawcare.observability import configure_logging
from pawcare.services.health_intelligence import HealthIntelligenceService

console = Console()

OWNER_ID = "owner-1"
NOW = datetime(2025, 3, 10, 9, 30, tzinfo=UTC)

STATUS_STYLES = {
    "green": "bold green",
    "blue": "bold blue",
    "yellow": "bold yellow",
    "orange": "bold dark_orange",
    "red": "bold red",
}
TYPE_STYLES = {"warning": "yellow", "info": "cyan", "success": "green"}


def seed_records() -> InMemoryRecordRepository:
    """Two dogs: one well cared for, one with overdue vaccinations."""
    repo = InMemoryRecordRepository()
    today = NOW.date()

    repo.add_dog(DogProfile(id="dog-1", owner_id=OWNER_ID, name="Biscuit"))
    repo.add_dog(DogProfile(id="dog-2", owner_id=OWNER_ID, name="Pepper"))

    repo.vaccinations += [
        VaccinationRecord(
            id="v1", dog_id="dog-1", vaccine_name="Rabies", next_due_date=today + timedelta(days=5)
        ),
        VaccinationRecord(
            id="v2", dog_id="dog-1", vaccine_name="DHPP", next_due_date=today + timedelta(days=21)
        ),
        VaccinationRecord(
            id="v3", dog_id="dog-2", vaccine_name="Rabies", next_due_date=today - timedelta(days=40)
        ),
        VaccinationRecord(
            id="v4",
            dog_id="dog-2",
            vaccine_name="Bordetella",
            next_due_date=today - timedelta(days=3),
        ),
    ]
    repo.health_records += [
        HealthRecordEntry(
            id="h1",
            dog_id="dog-1",
            date=today - timedelta(days=30),
            type=HealthRecordType.VET_VISIT,
        ),
        HealthRecordEntry(
            id="h2",
            dog_id="dog-1",
            date=today - timedelta(days=90),
            type=HealthRecordType.MEDICATION,
        ),
        HealthRecordEntry(
            id="h3",
            dog_id="dog-2",
            date=today - timedelta(days=400),
            type=HealthRecordType.ILLNESS,
        ),
    ]
    repo.appointments += [
        AppointmentEntry(
            id="a1", dog_id="dog-1", title="Annual checkup", date=today, time=time(15, 0)
        ),
        AppointmentEntry(
            id="a2",
            dog_id="dog-2",
            title="Grooming",
            date=today + timedelta(days=4),
            time=time(10, 30),
        ),
    ]
    repo.training_sessions += [
        TrainingSessionEntry(
            id="t1",
            dog_id="dog-1",
            date=today - timedelta(days=1),
            progress=TrainingProgress.EXCELLENT,
        ),
        TrainingSessionEntry(
            id="t2", dog_id="dog-2", date=today - timedelta(days=2), progress=TrainingProgress.GOOD
        ),
    ]
    return repo


def render_health_table(results: dict[str, dict]) -> Table:
    table = Table(title="Health Status")
    table.add_column("Dog")
    table.add_column("Score", justify="right")
    table.add_column("Status")
    table.add_column("Next Action")
    table.add_column("Factors")

    for name, wire in results.items():
        if not wire["hasEnoughData"]:
            table.add_row(name, "-", "not enough data", "-", "-")
            continue
        style = STATUS_STYLES[wire["statusColor"]]
        table.add_row(
            name,
            str(wire["score"]),
            f"[{style}]{wire['status']}[/{style}]",
            wire["nextAction"],
            "\n".join(wire["factors"]),
        )
    return table


def render_feed_table(feed: list[dict], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Message")
    table.add_column("When")
    table.add_column("Read")
    table.add_column("Key", style="dim")

    for item in feed:
        style = TYPE_STYLES[item["type"]]
        table.add_row(
            f"[{style}]{item['type']}[/{style}]",
            item["title"],
            item["message"],
            item["time"],
            "✅" if item["read"] else "•",
            item["id"][:12],
        )
    return table


async def run_demo(read_state_path: Path) -> None:
    config = get_config()
    repo = seed_records()
    read_state = SqliteReadStateStore(str(read_state_path))
    service = HealthIntelligenceService(repo, read_state, config=config, clock=lambda: NOW)

    console.print(Panel.fit("🩺 Health status", style="bold"))
    results = {}
    for dog in await repo.list_dogs(OWNER_ID):
        status = await service.compute_health_status(dog.id)
        results[dog.name] = status.to_wire()
    console.print(render_health_table(results))

    console.print(Panel.fit("🔔 Notification feed", style="bold"))
    feed = await service.list_notifications(OWNER_ID)
    console.print(render_feed_table([item.to_wire() for item in feed], "Before marking read"))

    if feed:
        first = feed[0]
        await service.mark_notification_read(OWNER_ID, first.id)
        # Marking twice is a no-op
        await service.mark_notification_read(OWNER_ID, first.id)
        console.print(f"Marked [bold]{first.title}[/bold] as read")

    regenerated = await service.list_notifications(OWNER_ID)
    console.print(render_feed_table([item.to_wire() for item in regenerated], "After marking read"))

    same_ids = [item.id for item in feed] == [item.id for item in regenerated]
    console.print(f"Stable ids across regeneration: {'✅' if same_ids else '❌'}")
    console.print(f"Persisted marks: {await read_state.count_marks(OWNER_ID)}")


def main() -> None:
    validate_config()
    print_config_summary()
    configure_logging(get_config().logging)

    with tempfile.TemporaryDirectory() as tmp:
        asyncio.run(run_demo(Path(tmp) / "read_state.db"))


if __name__ == "__main__":
    main()
