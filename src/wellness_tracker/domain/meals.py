"""Domain models for meal logging."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID

MEAL_TYPES: tuple[str, ...] = (
    "breakfast",
    "morning_snack",
    "lunch",
    "afternoon_snack",
    "dinner",
    "supper",
)

MEAL_STATUSES: tuple[str, ...] = ("upcoming", "completed")


@dataclass(frozen=True)
class MealDraft:
    """Meal data submitted by a user before it is stored."""

    meal_type: str
    description: str
    calories: float
    protein: float
    carbs: float
    fat: float
    foods: list[str] = field(default_factory=list)
    photo_url: str | None = None
    logged_at: datetime | None = None


@dataclass(frozen=True)
class MealRecord:
    """Stored meal row."""

    id: UUID
    user_id: UUID
    meal_type: str
    description: str
    foods: list[str]
    calories: float
    protein: float
    carbs: float
    fat: float
    photo_url: str | None
    logged_at: datetime


@dataclass(frozen=True)
class MealStatus:
    """Per-day status of a planned meal slot."""

    meal_id: str
    day: date
    status: str
    meal_data: dict[str, object]


@dataclass(frozen=True)
class MealStatistics:
    """Aggregated meal statistics for a trailing window of days."""

    days: int
    meal_count: int
    meals_by_type: dict[str, int]
    avg_calories: int
    avg_protein: int
    avg_carbs: int
    avg_fat: int
    completion_rate: float


@dataclass(frozen=True)
class DailyNutritionSummary:
    """Per-day totals and meal completion read by adherence analytics."""

    user_id: UUID
    day: date
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    meal_count: int
    completed_meals: int

    @property
    def adherence_rate(self) -> float:
        if self.meal_count <= 0:
            return 0.0
        return round(self.completed_meals / self.meal_count * 100, 1)
