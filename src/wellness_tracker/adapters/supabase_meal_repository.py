"""Supabase repositories for meals and daily meal status."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.meals import (
    DailyNutritionSummary,
    MealDraft,
    MealRecord,
    MealStatus,
)
from wellness_tracker.services.meals import MealRepository, MealStatusRepository
from wellness_tracker.services.stats import StatsRepository

_MEAL_COLUMNS = (
    "id, user_id, meal_type, description, foods, calories, protein, carbs, fat, "
    "photo_url, logged_at"
)


@dataclass
class SupabaseMealRepository(MealRepository, StatsRepository):
    """Supabase implementation for meal records."""

    client: Client

    def create_meal(
        self, user_id: UUID, draft: MealDraft, logged_at: datetime
    ) -> MealRecord:
        """Insert a meal row and return it."""
        response = (
            self.client.table("meal_records")
            .insert(
                {
                    "user_id": str(user_id),
                    "meal_type": draft.meal_type,
                    "description": draft.description,
                    "foods": draft.foods,
                    "calories": draft.calories,
                    "protein": draft.protein,
                    "carbs": draft.carbs,
                    "fat": draft.fat,
                    "photo_url": draft.photo_url,
                    "logged_at": logged_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal record")
        return _parse_meal(response.data[0])

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[MealRecord]:
        """Return the newest meals first."""
        response = (
            self.client.table("meal_records")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .order("logged_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals in the time range."""
        response = (
            self.client.table("meal_records")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=False)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal owned by the user."""
        response = (
            self.client.table("meal_records")
            .delete()
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)

    def upsert_daily_summary(self, summary: DailyNutritionSummary) -> None:
        """Insert or replace the summary row keyed by user and date."""
        self.client.table("daily_nutrition_summary").upsert(
            {
                "user_id": str(summary.user_id),
                "date": summary.day.isoformat(),
                "total_calories": summary.total_calories,
                "total_protein": summary.total_protein,
                "total_carbs": summary.total_carbs,
                "total_fat": summary.total_fat,
                "meal_count": summary.meal_count,
                "completed_meals": summary.completed_meals,
                "adherence_rate": summary.adherence_rate,
            },
            on_conflict="user_id,date",
        ).execute()


@dataclass
class SupabaseMealStatusRepository(MealStatusRepository):
    """Supabase implementation for per-day meal status."""

    client: Client

    def list_statuses(self, user_id: UUID, day: date) -> list[MealStatus]:
        """Return statuses for a day."""
        response = (
            self.client.table("daily_meal_status")
            .select("meal_id, date, status, meal_data")
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .execute()
        )
        return [_parse_status(row) for row in response.data or []]

    def upsert_status(
        self,
        user_id: UUID,
        day: date,
        meal_id: str,
        status: str,
        meal_data: dict[str, object],
    ) -> MealStatus:
        """Insert or update the status of one meal slot."""
        response = (
            self.client.table("daily_meal_status")
            .upsert(
                {
                    "user_id": str(user_id),
                    "date": day.isoformat(),
                    "meal_id": meal_id,
                    "status": status,
                    "meal_data": meal_data,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id,date,meal_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save meal status")
        return _parse_status(response.data[0])

    def delete_statuses(self, user_id: UUID, day: date) -> None:
        """Remove all statuses for a day."""
        self.client.table("daily_meal_status").delete().eq(
            "user_id", str(user_id)
        ).eq("date", day.isoformat()).execute()

    def save_history(
        self, user_id: UUID, day: date, statuses: list[MealStatus]
    ) -> None:
        """Insert the day's statuses into ``meal_status_history``."""
        self.client.table("meal_status_history").insert(
            {
                "user_id": str(user_id),
                "date": day.isoformat(),
                "meal_status_data": [
                    {
                        "meal_id": status.meal_id,
                        "status": status.status,
                        "meal_data": status.meal_data,
                    }
                    for status in statuses
                ],
                "created_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()


def _parse_meal(row: dict[str, object]) -> MealRecord:
    foods = row.get("foods") or []
    return MealRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        meal_type=str(row.get("meal_type", "")),
        description=str(row.get("description") or ""),
        foods=[str(food) for food in foods] if isinstance(foods, list) else [],
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        photo_url=row.get("photo_url") or None,
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
    )


def _parse_status(row: dict[str, object]) -> MealStatus:
    meal_data = row.get("meal_data")
    return MealStatus(
        meal_id=str(row["meal_id"]),
        day=date.fromisoformat(str(row["date"])),
        status=str(row.get("status", "upcoming")),
        meal_data=meal_data if isinstance(meal_data, dict) else {},
    )
