"""Rule-based meal plan generation."""

import random
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from wellness_tracker.domain.meal_plans import (
    MealPlan,
    MealPlanRequest,
    PlanFood,
    PlannedMeal,
    SupplementRecommendation,
)
from wellness_tracker.domain.profiles import NutritionProfile
from wellness_tracker.services.onboarding import OnboardingService
from wellness_tracker.services.recommendations import map_recommendation_profile

PLAN_NAME = "Personalized Meal Plan"
PLAN_DAYS = 30
MIN_MEALS = 3
MAX_MEALS = 6
FAST_METABOLISM_FACTOR = 1.1
SLOW_METABOLISM_FACTOR = 0.9
HIGH_ACTIVITY_PROTEIN_FACTOR = 1.2

MEAL_SLOTS: tuple[tuple[str, str, str], ...] = (
    ("breakfast", "Breakfast", "07:00"),
    ("morning_snack", "Morning snack", "10:00"),
    ("lunch", "Lunch", "13:00"),
    ("afternoon_snack", "Afternoon snack", "16:00"),
    ("dinner", "Dinner", "19:00"),
    ("supper", "Supper", "21:30"),
)

PROTEIN_OPTIONS = (
    PlanFood("Chicken breast", "100g", 165, 31, 0, 3.6),
    PlanFood("Fish fillet", "100g", 136, 26, 0, 3),
    PlanFood("Eggs", "2 units", 155, 13, 1, 11),
    PlanFood("Tofu", "100g", 144, 17, 3, 8),
    PlanFood("Beans", "100g cooked", 127, 9, 23, 0.5),
)
CARB_OPTIONS = (
    PlanFood("Brown rice", "100g cooked", 111, 2.6, 23, 0.9),
    PlanFood("Sweet potato", "100g", 86, 1.6, 20, 0.1),
    PlanFood("Wholegrain bread", "2 slices", 138, 7, 24, 2),
    PlanFood("Oats", "40g", 150, 5, 27, 3),
    PlanFood("Wholegrain pasta", "100g cooked", 158, 6, 30, 2),
)
FAT_OPTIONS = (
    PlanFood("Avocado", "1/2 unit", 160, 2, 8, 15),
    PlanFood("Olive oil", "1 tablespoon", 119, 0, 0, 14),
    PlanFood("Mixed nuts", "30g", 196, 5, 5, 19),
    PlanFood("Chia seeds", "15g", 80, 4, 6, 5),
    PlanFood("Peanut butter", "1 tablespoon", 94, 4, 3, 8),
)
VEGETABLE_OPTIONS = (
    PlanFood("Broccoli", "100g", 34, 2.8, 7, 0.4),
    PlanFood("Spinach", "100g", 23, 2.9, 3.6, 0.4),
    PlanFood("Zucchini", "100g", 17, 1.2, 3.1, 0.3),
    PlanFood("Carrot", "100g", 41, 0.9, 10, 0.2),
    PlanFood("Bell pepper", "100g", 31, 1, 6, 0.3),
)
FRUIT_OPTIONS = (
    PlanFood("Apple", "1 unit", 95, 0.5, 25, 0.3),
    PlanFood("Banana", "1 unit", 105, 1.3, 27, 0.4),
    PlanFood("Orange", "1 unit", 62, 1.2, 15, 0.2),
    PlanFood("Strawberries", "100g", 32, 0.7, 7.7, 0.3),
    PlanFood("Pineapple", "100g", 50, 0.5, 13, 0.1),
)
BREAKFAST_OPTIONS = (
    PlanFood("Greek yogurt", "170g", 100, 17, 6, 0),
    PlanFood("Omelette", "2 eggs", 155, 13, 1, 11),
    PlanFood("Tapioca", "1 medium unit", 133, 0, 33, 0),
)
SNACK_OPTIONS = (
    PlanFood("Cottage cheese", "100g", 98, 11, 3, 4),
    PlanFood("Whey protein", "30g", 120, 24, 3, 2),
    PlanFood("Plain yogurt", "170g", 100, 10, 4, 4),
)

WHEY = SupplementRecommendation(
    supplement_name="Whey Protein",
    dosage="25-30g",
    timing="After training",
    reason="A high activity level needs more protein for muscle recovery.",
)
CREATINE = SupplementRecommendation(
    supplement_name="Creatine",
    dosage="5g",
    timing="Daily, any time",
    reason="Supports strength and power gains for hypertrophy goals.",
)
VITAMIN_D = SupplementRecommendation(
    supplement_name="Vitamin D3",
    dosage="2000 IU",
    timing="In the morning with a meal that contains fat",
    reason="Supports bone and immune health, especially with little sun exposure.",
)
OMEGA_3 = SupplementRecommendation(
    supplement_name="Omega 3",
    dosage="2g",
    timing="With main meals",
    reason="Helps reduce inflammation and supports cardiovascular health.",
)


class MealPlanRepository(Protocol):
    """Persistence interface for meal plans."""

    def create_plan(self, plan: MealPlan) -> MealPlan:
        """Insert a plan and return the stored row."""

    def list_plans(self, user_id: UUID) -> list[MealPlan]:
        """Return plans newest first."""


@dataclass(frozen=True)
class PlanProfile:
    """Profile traits that change plan targets and supplements."""

    metabolic_type: str | None = None
    high_activity: bool = False
    hypertrophy: bool = False
    vegetarian: bool = False
    inflammation: bool = False
    supplements: tuple[str, ...] = ()


@dataclass
class MealPlanService:
    """Generates meal plans from option tables and stores them."""

    repository: MealPlanRepository
    onboarding_service: OnboardingService
    rng: random.Random = field(default_factory=random.Random)

    def generate(self, user_id: UUID, request: MealPlanRequest) -> MealPlan:
        """Build a plan for the user, store it and return the stored row."""
        if not MIN_MEALS <= request.meal_count <= MAX_MEALS:
            raise ValueError(
                f"meal_count must be between {MIN_MEALS} and {MAX_MEALS}"
            )
        if request.calorie_target <= 0:
            raise ValueError("calorie_target must be positive")
        profile = plan_profile(self.onboarding_service.get_profile(user_id))
        plan = build_plan(user_id, request, profile, self.rng)
        return self.repository.create_plan(plan)

    def list_plans(self, user_id: UUID) -> list[MealPlan]:
        return self.repository.list_plans(user_id)

    def get_latest(self, user_id: UUID) -> MealPlan | None:
        plans = self.repository.list_plans(user_id)
        return plans[0] if plans else None


def build_plan(
    user_id: UUID,
    request: MealPlanRequest,
    profile: PlanProfile,
    rng: random.Random,
    today: datetime | None = None,
) -> MealPlan:
    """Assemble meals, targets and supplements without touching storage."""
    calorie_target = float(request.calorie_target)
    protein_target = float(request.protein_target)
    if profile.metabolic_type == "fast":
        calorie_target = round(calorie_target * FAST_METABOLISM_FACTOR)
    elif profile.metabolic_type == "slow":
        calorie_target = round(calorie_target * SLOW_METABOLISM_FACTOR)
    if profile.high_activity:
        protein_target = round(protein_target * HIGH_ACTIVITY_PROTEIN_FACTOR)

    excluded = [item.lower() for item in request.exclude_foods if item.strip()]
    meals = [
        _build_meal(index, excluded, rng) for index in range(request.meal_count)
    ]
    start = (today or datetime.now(tz=UTC)).date()
    count = request.meal_count
    summary = {
        "daily_calories": sum(meal.calories for meal in meals),
        "daily_protein": sum(meal.protein for meal in meals),
        "daily_carbs": sum(meal.carbs for meal in meals),
        "daily_fat": sum(meal.fat for meal in meals),
        "target_calories": calorie_target,
        "target_protein": protein_target,
        "target_carbs": float(request.carb_target),
        "target_fat": float(request.fat_target),
        "calories_per_meal": round(calorie_target / count),
        "protein_per_meal": round(protein_target / count),
        "carbs_per_meal": round(request.carb_target / count),
        "fat_per_meal": round(request.fat_target / count),
    }
    return MealPlan(
        id=None,
        user_id=user_id,
        plan_name=PLAN_NAME,
        start_date=start,
        end_date=start + timedelta(days=PLAN_DAYS),
        meals=meals,
        supplement_recommendations=recommend_supplements(profile),
        nutrition_summary=summary,
    )


def recommend_supplements(profile: PlanProfile) -> list[SupplementRecommendation]:
    """Suggest supplements the user does not already take."""

    def takes(*names: str) -> bool:
        return any(name in item for item in profile.supplements for name in names)

    recommendations = []
    if profile.high_activity and not takes("protein", "proteína"):
        recommendations.append(WHEY)
    if profile.hypertrophy and not takes("creatin"):
        recommendations.append(CREATINE)
    if not profile.vegetarian and not takes("vitamin d", "vitamina d"):
        recommendations.append(VITAMIN_D)
    if profile.inflammation and not takes("omega", "ômega"):
        recommendations.append(OMEGA_3)
    return recommendations


def plan_profile(profile: NutritionProfile | None) -> PlanProfile:
    """Extract plan traits from a stored profile."""
    if profile is None:
        return PlanProfile()
    data = profile.onboarding_data
    metabolic = str(data.get("metabolic_type") or "").lower()
    metabolic_type = None
    if metabolic in ("fast", "rápido", "rapido"):
        metabolic_type = "fast"
    elif metabolic in ("slow", "lento"):
        metabolic_type = "slow"

    goal_text = " ".join(
        [str(profile.goal or "")] + _as_strings(data.get("secondary_goals"))
    ).lower()
    conditions = " ".join(
        _as_strings(data.get("health_conditions"))
        + _as_strings(data.get("main_complaint"))
    ).lower()
    restrictions = " ".join(profile.dietary_restrictions).lower()
    return PlanProfile(
        metabolic_type=metabolic_type,
        high_activity=map_recommendation_profile(profile).activity_level == "high",
        hypertrophy=any(
            word in goal_text for word in ("hypertrophy", "hipertrofia", "muscle")
        ),
        vegetarian="veget" in restrictions or "vegan" in restrictions,
        inflammation="inflam" in conditions,
        supplements=tuple(
            item.lower() for item in _as_strings(data.get("supplements"))
        ),
    )


def _build_meal(index: int, excluded: list[str], rng: random.Random) -> PlannedMeal:
    meal_type, label, time = MEAL_SLOTS[min(index, len(MEAL_SLOTS) - 1)]

    def pick(options: tuple[PlanFood, ...]) -> PlanFood | None:
        allowed = [
            food
            for food in options
            if not any(word in food.name.lower() for word in excluded)
        ]
        return rng.choice(allowed) if allowed else None

    if meal_type == "breakfast":
        choices = [pick(BREAKFAST_OPTIONS), pick(FRUIT_OPTIONS)]
        if rng.random() > 0.5:
            choices.append(pick(FAT_OPTIONS))
    elif meal_type in ("lunch", "dinner"):
        choices = [
            pick(PROTEIN_OPTIONS),
            pick(CARB_OPTIONS),
            pick(VEGETABLE_OPTIONS),
            pick(VEGETABLE_OPTIONS),
        ]
        if rng.random() > 0.5:
            choices.append(pick(FAT_OPTIONS))
    else:
        source = PROTEIN_OPTIONS if rng.random() > 0.5 else SNACK_OPTIONS
        choices = [pick(source), pick(FRUIT_OPTIONS)]
        if rng.random() > 0.7:
            choices.append(pick(FAT_OPTIONS))
    foods = [food for food in choices if food is not None]

    if len(foods) > 1:
        name = f"{label} - {foods[0].name} with {foods[1].name}"
    elif foods:
        name = f"{label} - {foods[0].name}"
    else:
        name = label
    return PlannedMeal(
        meal_number=index + 1,
        meal_type=meal_type,
        name=name,
        time=time,
        foods=foods,
        calories=sum(food.calories for food in foods),
        protein=sum(food.protein for food in foods),
        carbs=sum(food.carbs for food in foods),
        fat=sum(food.fat for food in foods),
    )


def _as_strings(value: object) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return [str(item) for item in value]
    return [str(value)]
