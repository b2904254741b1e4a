"""Monthly body measurement tracking."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from wellness_tracker.domain.body_metrics import BodyMeasurements, BodyMetrics

MAX_HISTORY_MONTHS = 60

_CIRCUMFERENCES = (
    "waist_circumference",
    "abdominal_circumference",
    "hip_circumference",
)
_PERCENTAGES = ("body_fat_percentage", "lean_mass_percentage")


class BodyMetricsRepository(Protocol):
    """Persistence interface for monthly body metrics."""

    def upsert_metrics(
        self, user_id: UUID, month: date, measurements: BodyMeasurements
    ) -> BodyMetrics:
        """Insert or replace the row of one month."""

    def get_metrics(self, user_id: UUID, month: date) -> BodyMetrics | None:
        """Return the row of one month, if any."""

    def list_metrics(self, user_id: UUID, limit: int) -> list[BodyMetrics]:
        """Return the newest months first."""


@dataclass
class BodyMetricsService:
    """Service keeping one set of body measurements per month."""

    repository: BodyMetricsRepository

    def save(
        self,
        user_id: UUID,
        measurements: BodyMeasurements,
        day: date | None = None,
    ) -> BodyMetrics:
        """Store measurements for the month containing ``day``, default today."""
        validate_measurements(measurements)
        month = month_start(day or datetime.now(tz=UTC).date())
        return self.repository.upsert_metrics(user_id, month, measurements)

    def get_month(self, user_id: UUID, year: int, month: int) -> BodyMetrics | None:
        return self.repository.get_metrics(user_id, date(year, month, 1))

    def get_history(self, user_id: UUID, limit: int = 12) -> list[BodyMetrics]:
        if not 1 <= limit <= MAX_HISTORY_MONTHS:
            raise ValueError(f"limit must be between 1 and {MAX_HISTORY_MONTHS}")
        return self.repository.list_metrics(user_id, limit)


def month_start(day: date) -> date:
    return day.replace(day=1)


def validate_measurements(measurements: BodyMeasurements) -> None:
    """Reject non-positive sizes and percentages outside 0-100."""
    if measurements.weight <= 0:
        raise ValueError("Weight must be positive")
    for name in _CIRCUMFERENCES:
        value = getattr(measurements, name)
        if value is not None and value <= 0:
            raise ValueError(f"{name} must be positive")
    for name in _PERCENTAGES:
        value = getattr(measurements, name)
        if value is not None and not 0 <= value <= 100:
            raise ValueError(f"{name} must be between 0 and 100")
