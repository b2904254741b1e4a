"""Domain models for monthly body measurements."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class BodyMeasurements:
    """Measurements entered for one month."""

    weight: float
    waist_circumference: float | None = None
    abdominal_circumference: float | None = None
    hip_circumference: float | None = None
    body_fat_percentage: float | None = None
    lean_mass_percentage: float | None = None
    notes: str | None = None


@dataclass(frozen=True)
class BodyMetrics:
    """Stored measurements; ``month`` is always the first day of the month."""

    month: date
    measurements: BodyMeasurements
    updated_at: datetime | None = None

    @property
    def waist_to_hip_ratio(self) -> float | None:
        waist = self.measurements.waist_circumference
        hip = self.measurements.hip_circumference
        if not waist or not hip:
            return None
        return round(waist / hip, 2)
