"""
Configuration management with environment variable support and validation.

Design principles:
- Scoring weights and thresholds are policy, kept out of the algorithms
- Validation at startup (fail fast)
- Type safety with Pydantic
- Environment overrides through .env for local tuning
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Load environment variables from .env file
load_dotenv()


class ScoringConfig(BaseModel):
    """Weights and thresholds for the composite wellness score."""

    min_records: int = Field(
        default=2, ge=1, description="Minimum combined records before a score is produced"
    )

    # Factor weights (sum must stay within 100)
    vaccination_weight: float = Field(default=40.0, ge=0.0)
    health_record_weight: float = Field(default=30.0, ge=0.0)
    appointment_weight: float = Field(default=20.0, ge=0.0)
    care_weight: float = Field(default=10.0, ge=0.0)

    # Factor inputs
    health_record_window_months: int = Field(
        default=6, gt=0, description="Health records newer than this count as recent"
    )
    recent_records_target: int = Field(
        default=2, gt=0, description="Recent health records needed for the full health weight"
    )
    upcoming_appointments_target: int = Field(
        default=1, gt=0, description="Upcoming appointments needed for the full appointment weight"
    )
    care_points_per_record: float = Field(default=2.0, ge=0.0)

    # Band thresholds, best first
    excellent_threshold: int = Field(default=85, ge=0, le=100)
    good_threshold: int = Field(default=70, ge=0, le=100)
    fair_threshold: int = Field(default=55, ge=0, le=100)
    needs_attention_threshold: int = Field(default=40, ge=0, le=100)

    # Explanatory factor thresholds (applied to sub-scores)
    vaccination_up_to_date_threshold: float = 35.0
    vaccination_some_due_threshold: float = 20.0
    health_regular_threshold: float = 25.0
    health_some_threshold: float = 15.0
    appointments_scheduled_threshold: float = 15.0

    @model_validator(mode="after")
    def weights_fit_in_score_range(self) -> "ScoringConfig":
        total = (
            self.vaccination_weight
            + self.health_record_weight
            + self.appointment_weight
            + self.care_weight
        )
        if total > 100:
            raise ValueError(f"scoring weights must sum to at most 100, got {total}")
        return self

    @model_validator(mode="after")
    def bands_descend(self) -> "ScoringConfig":
        thresholds = [
            self.excellent_threshold,
            self.good_threshold,
            self.fair_threshold,
            self.needs_attention_threshold,
        ]
        if any(a <= b for a, b in zip(thresholds, thresholds[1:], strict=False)):
            raise ValueError("band thresholds must be strictly descending")
        return self


class NotificationConfig(BaseModel):
    """Windows and limits for the notification feed."""

    vaccination_window_days: int = Field(default=30, ge=0)
    vaccination_warning_days: int = Field(default=7, ge=0)
    appointment_window_days: int = Field(default=7, ge=0)
    appointment_warning_days: int = Field(default=1, ge=0)
    training_lookback_days: int = Field(default=7, ge=0)
    training_max_items: int = Field(default=3, ge=0)
    feed_max_items: int = Field(
        default=10, gt=0, le=10, description="Maximum notifications returned to a user"
    )


class DatabaseConfig(BaseModel):
    """Read-state persistence settings."""

    read_state_path: str = Field(
        default="./read_state.db", description="SQLite file holding notification read marks"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Component configs
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    # Detect environment
    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    # Scoring policy overrides
    scoring_config = ScoringConfig(
        vaccination_weight=float(os.getenv("SCORE_WEIGHT_VACCINATION", "40")),
        health_record_weight=float(os.getenv("SCORE_WEIGHT_HEALTH_RECORDS", "30")),
        appointment_weight=float(os.getenv("SCORE_WEIGHT_APPOINTMENTS", "20")),
        care_weight=float(os.getenv("SCORE_WEIGHT_CARE", "10")),
        health_record_window_months=int(os.getenv("HEALTH_RECORD_WINDOW_MONTHS", "6")),
    )

    # Notification feed overrides
    notification_config = NotificationConfig(
        vaccination_window_days=int(os.getenv("VACCINATION_WINDOW_DAYS", "30")),
        appointment_window_days=int(os.getenv("APPOINTMENT_WINDOW_DAYS", "7")),
        feed_max_items=int(os.getenv("NOTIFICATION_FEED_MAX_ITEMS", "10")),
    )

    database_config = DatabaseConfig(
        read_state_path=os.getenv("READ_STATE_DB_PATH", "./read_state.db"),
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        scoring=scoring_config,
        notifications=notification_config,
        database=database_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def validate_config() -> None:
    """Validate configuration at startup."""
    try:
        config = get_config()
        print(f"✅ Configuration loaded for {config.environment} environment")
    except Exception as e:
        print(f"❌ Configuration validation failed: {e}")
        raise


def print_config_summary() -> None:
    """Print configuration summary for debugging."""
    config = get_config()

    print("\n🔧 CONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level}")

    print("\n🩺 SCORING CONFIGURATION")
    print(
        "Weights: "
        f"vaccinations={config.scoring.vaccination_weight} "
        f"health_records={config.scoring.health_record_weight} "
        f"appointments={config.scoring.appointment_weight} "
        f"care={config.scoring.care_weight}"
    )
    print(f"Health Record Window: {config.scoring.health_record_window_months} months")

    print("\n🔔 NOTIFICATION CONFIGURATION")
    print(f"Vaccination Window: {config.notifications.vaccination_window_days}d")
    print(f"Appointment Window: {config.notifications.appointment_window_days}d")
    print(f"Feed Size: {config.notifications.feed_max_items}")

    print("\n💾 STORAGE")
    print(f"Read State DB: {config.database.read_state_path}")


if __name__ == "__main__":
    # Test configuration loading
    validate_config()
    print_config_summary()
