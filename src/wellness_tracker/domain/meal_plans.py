"""Domain models for generated meal plans."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class PlanFood:
    """Food option with its portion and macros."""

    name: str
    portion: str
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class PlannedMeal:
    """One meal slot in a plan."""

    meal_number: int
    meal_type: str
    name: str
    time: str
    foods: list[PlanFood]
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class SupplementRecommendation:
    """Supplement suggested alongside a plan."""

    supplement_name: str
    dosage: str
    timing: str
    reason: str


@dataclass(frozen=True)
class MealPlanRequest:
    """Targets and preferences for plan generation."""

    meal_count: int = 5
    calorie_target: float = 2000
    protein_target: float = 150
    carb_target: float = 200
    fat_target: float = 70
    exclude_foods: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MealPlan:
    """Stored meal plan."""

    id: UUID | None
    user_id: UUID
    plan_name: str
    start_date: date
    end_date: date
    meals: list[PlannedMeal]
    supplement_recommendations: list[SupplementRecommendation]
    nutrition_summary: dict[str, float]
    created_at: datetime | None = None
