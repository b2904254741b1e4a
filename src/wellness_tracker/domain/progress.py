"""Domain models for progress analytics."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class ProgressMetric:
    """Daily nutrition metrics computed by the database."""

    day: date
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    meal_count: int
    completed_meals: int
    adherence_rate: float
    avg_calories_7d: float | None = None
    avg_protein_7d: float | None = None
    avg_calories_30d: float | None = None


@dataclass(frozen=True)
class WeekdayAverage:
    """Average intake for one weekday over a range."""

    weekday: int
    weekday_name: str
    avg_calories: float
    avg_protein: float
    avg_carbs: float
    avg_fat: float
    avg_adherence: float


@dataclass(frozen=True)
class NutritionInsight:
    """Text insight produced from stored metrics."""

    insight_type: str
    text: str
    relevance_score: float
    generated_at: datetime | None


@dataclass(frozen=True)
class MetricChange:
    """Average of one metric in two periods and the relative change."""

    previous: float
    current: float
    difference: float
    change_pct: float


@dataclass(frozen=True)
class PeriodComparison:
    """Side by side averages for two periods."""

    previous_label: str
    current_label: str
    calories: MetricChange
    protein: MetricChange
    carbs: MetricChange
    fat: MetricChange
    adherence_rate: MetricChange
