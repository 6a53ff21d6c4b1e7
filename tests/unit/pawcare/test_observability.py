"""Tests for structlog setup."""

import logging
from collections.abc import Iterator

import pytest
import structlog

from pawcare.config import LoggingConfig
from pawcare.observability import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.mark.parametrize("fmt", ["json", "console"])
def test_configure_logging_installs_renderer(fmt: str) -> None:
    configure_logging(LoggingConfig(level="DEBUG", format=fmt))

    assert structlog.is_configured()
    renderer = structlog.get_config()["processors"][-1]
    expected = structlog.processors.JSONRenderer if fmt == "json" else structlog.dev.ConsoleRenderer
    assert isinstance(renderer, expected)


def test_json_events_are_emitted(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(LoggingConfig(level="INFO", format="json"))

    structlog.get_logger("pawcare.test").info("notification_marked_read", user_id="u1")

    out = capsys.readouterr().out
    assert '"event": "notification_marked_read"' in out
    assert '"user_id": "u1"' in out
