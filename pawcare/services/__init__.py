"""
Core services for the application.

This package contains the scoring and notification logic plus the
orchestrating service the request layer calls.
"""

from .feed_assembler import assemble_feed
from .health_intelligence import HealthIntelligenceService
from .health_score import calculate_health_status
from .notification_synthesizer import DogNotificationSources, synthesize_notifications
from .repositories import ReadStateStore, RecordRepository, StorageError

__all__ = [
    "HealthIntelligenceService",
    "RecordRepository",
    "ReadStateStore",
    "StorageError",
    "DogNotificationSources",
    "assemble_feed",
    "calculate_health_status",
    "synthesize_notifications",
]
