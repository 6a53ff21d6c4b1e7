"""
Content-addressed notification keys.

Notifications are regenerated on every request, so their identity is derived
from the fields that define the underlying event. The read-state store keys
on these strings: the digest algorithm may change, but the field order and
the date/time formatting below may not without orphaning stored read marks.
"""

import hashlib
from datetime import date, time

KEY_SEPARATOR = "|"


def iso_date(value: date) -> str:
    """Format a calendar date as ``YYYY-MM-DD``."""
    return value.isoformat()


def format_time(value: time) -> str:
    """Format a time of day as ``HH:MM:SS``."""
    return value.strftime("%H:%M:%S")


def make_notification_key(*parts: str) -> str:
    """SHA-1 hex digest of the ``|``-joined parts."""
    return hashlib.sha1(KEY_SEPARATOR.join(parts).encode("utf-8")).hexdigest()


def vaccination_key(dog_id: str, vaccine_name: str, due_date: date) -> str:
    return make_notification_key("vaccination", dog_id, vaccine_name, iso_date(due_date))


def appointment_key(dog_id: str, title: str, on: date, at: time) -> str:
    return make_notification_key("appointment", dog_id, title, iso_date(on), format_time(at))


def training_key(dog_id: str, on: date) -> str:
    return make_notification_key("training", dog_id, iso_date(on), "excellent")
