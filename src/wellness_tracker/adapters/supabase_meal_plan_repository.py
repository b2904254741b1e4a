"""Supabase repository for meal plans."""

from dataclasses import asdict, dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.meal_plans import (
    MealPlan,
    PlanFood,
    PlannedMeal,
    SupplementRecommendation,
)
from wellness_tracker.services.meal_plans import MealPlanRepository

_COLUMNS = (
    "id, user_id, plan_name, start_date, end_date, meals, "
    "supplement_recommendations, nutrition_summary, created_at"
)


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase implementation for meal plans."""

    client: Client

    def create_plan(self, plan: MealPlan) -> MealPlan:
        """Insert a plan and return the stored row."""
        response = (
            self.client.table("meal_plans")
            .insert(
                {
                    "user_id": str(plan.user_id),
                    "plan_name": plan.plan_name,
                    "start_date": plan.start_date.isoformat(),
                    "end_date": plan.end_date.isoformat(),
                    "meals": [_serialize_meal(meal) for meal in plan.meals],
                    "supplement_recommendations": [
                        asdict(item) for item in plan.supplement_recommendations
                    ],
                    "nutrition_summary": plan.nutrition_summary,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal plan")
        return _parse_plan(response.data[0])

    def list_plans(self, user_id: UUID) -> list[MealPlan]:
        """Return plans newest first."""
        response = (
            self.client.table("meal_plans")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_plan(row) for row in response.data or []]


def _serialize_meal(meal: PlannedMeal) -> dict[str, object]:
    return {
        "meal_number": meal.meal_number,
        "meal_type": meal.meal_type,
        "name": meal.name,
        "time": meal.time,
        "foods": [asdict(food) for food in meal.foods],
        "nutrition": {
            "calories": meal.calories,
            "protein": meal.protein,
            "carbs": meal.carbs,
            "fat": meal.fat,
        },
    }


def _parse_meal(raw: dict[str, object]) -> PlannedMeal:
    nutrition = raw.get("nutrition") or {}
    return PlannedMeal(
        meal_number=int(raw.get("meal_number") or 0),
        meal_type=str(raw.get("meal_type") or ""),
        name=str(raw.get("name") or ""),
        time=str(raw.get("time") or ""),
        foods=[
            PlanFood(
                name=str(food.get("name") or ""),
                portion=str(food.get("portion") or ""),
                calories=float(food.get("calories") or 0.0),
                protein=float(food.get("protein") or 0.0),
                carbs=float(food.get("carbs") or 0.0),
                fat=float(food.get("fat") or 0.0),
            )
            for food in raw.get("foods") or []
        ],
        calories=float(nutrition.get("calories") or 0.0),
        protein=float(nutrition.get("protein") or 0.0),
        carbs=float(nutrition.get("carbs") or 0.0),
        fat=float(nutrition.get("fat") or 0.0),
    )


def _parse_plan(row: dict[str, object]) -> MealPlan:
    created_at = row.get("created_at")
    return MealPlan(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        plan_name=str(row.get("plan_name") or ""),
        start_date=date.fromisoformat(str(row["start_date"])[:10]),
        end_date=date.fromisoformat(str(row["end_date"])[:10]),
        meals=[_parse_meal(meal) for meal in row.get("meals") or []],
        supplement_recommendations=[
            SupplementRecommendation(
                supplement_name=str(item.get("supplement_name") or ""),
                dosage=str(item.get("dosage") or ""),
                timing=str(item.get("timing") or ""),
                reason=str(item.get("reason") or ""),
            )
            for item in row.get("supplement_recommendations") or []
        ],
        nutrition_summary={
            key: float(value)
            for key, value in (row.get("nutrition_summary") or {}).items()
        },
        created_at=datetime.fromisoformat(created_at)
        if isinstance(created_at, str) and created_at
        else None,
    )
