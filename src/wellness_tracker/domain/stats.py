"""Domain models for nutrition totals."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyTotals:
    """Macros summed over one local calendar day."""

    day: date
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class PeriodSummary:
    """Per-day totals of a week or month, averaged over every day."""

    daily: list[DailyTotals]
    avg_calories: float
    avg_protein: float
    avg_carbs: float
    avg_fat: float
