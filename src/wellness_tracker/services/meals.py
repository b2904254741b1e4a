"""Meal logging, daily meal status and meal statistics."""

from collections import Counter
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID

from wellness_tracker.domain.meals import (
    MEAL_STATUSES,
    MEAL_TYPES,
    DailyNutritionSummary,
    MealDraft,
    MealRecord,
    MealStatistics,
    MealStatus,
)
from wellness_tracker.services.completions import detect_mime_type, extension_for
from wellness_tracker.services.storage import FileStorage

MEAL_PHOTO_BUCKET = "user-content"
MEALS_PER_DAY = 3


class MealRepository(Protocol):
    """Persistence interface for meal records."""

    def create_meal(
        self, user_id: UUID, draft: MealDraft, logged_at: datetime
    ) -> MealRecord:
        """Insert a meal and return the stored row."""

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[MealRecord]:
        """Return the newest meals first."""

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals logged in ``[start, end)``."""

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal owned by the user; return whether a row was removed."""

    def upsert_daily_summary(self, summary: DailyNutritionSummary) -> None:
        """Insert or replace the summary row of one user and day."""


class MealStatusRepository(Protocol):
    """Persistence interface for per-day meal status."""

    def list_statuses(self, user_id: UUID, day: date) -> list[MealStatus]:
        """Return statuses for a day."""

    def upsert_status(
        self,
        user_id: UUID,
        day: date,
        meal_id: str,
        status: str,
        meal_data: dict[str, object],
    ) -> MealStatus:
        """Insert or update the status of one meal slot."""

    def delete_statuses(self, user_id: UUID, day: date) -> None:
        """Remove all statuses for a day."""

    def save_history(
        self, user_id: UUID, day: date, statuses: list[MealStatus]
    ) -> None:
        """Archive a day's statuses before they are cleared."""


@dataclass
class MealService:
    """Service for storing meals and summarising them."""

    repository: MealRepository
    status_repository: MealStatusRepository
    storage: FileStorage

    def save_meal(self, user_id: UUID, draft: MealDraft) -> MealRecord:
        """Validate and store a meal."""
        if draft.meal_type not in MEAL_TYPES:
            raise ValueError(f"Unknown meal type: {draft.meal_type}")
        if min(draft.calories, draft.protein, draft.carbs, draft.fat) < 0:
            raise ValueError("Nutrition values must not be negative")
        if not draft.description.strip() and not draft.foods:
            raise ValueError("Describe the meal or list its foods")
        logged_at = draft.logged_at or datetime.now(tz=UTC)
        meal = self.repository.create_meal(user_id, draft, logged_at)
        self.generate_daily_summary(user_id, logged_at.astimezone(UTC).date())
        return meal

    def get_history(self, user_id: UUID, limit: int = 20) -> list[MealRecord]:
        """Return recent meals."""
        return self.repository.list_recent_meals(user_id, limit)

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        return self.repository.delete_meal(user_id, meal_id)

    def upload_photo(self, user_id: UUID, image_bytes: bytes) -> str:
        """Store a meal photo and return its public URL."""
        if not image_bytes:
            raise ValueError("Image is empty")
        timestamp = int(datetime.now(tz=UTC).timestamp() * 1000)
        path = f"meal-photos/{user_id}/{timestamp}.{extension_for(image_bytes)}"
        return self.storage.upload(
            MEAL_PHOTO_BUCKET, path, image_bytes, detect_mime_type(image_bytes)
        )

    def get_statistics(self, user_id: UUID, days: int = 7) -> MealStatistics:
        """Summarise the meals logged over the trailing ``days`` days."""
        if days <= 0:
            raise ValueError("days must be positive")
        end = datetime.now(tz=UTC)
        start = end - timedelta(days=days)
        meals = self.repository.list_meals(user_id, start, end)
        return summarize_meals(meals, days)

    def get_day_status(self, user_id: UUID, day: date) -> list[MealStatus]:
        return self.status_repository.list_statuses(user_id, day)

    def set_status(
        self,
        user_id: UUID,
        day: date,
        meal_id: str,
        status: str,
        meal_data: dict[str, object] | None = None,
    ) -> MealStatus:
        """Mark a meal slot as upcoming or completed."""
        if status not in MEAL_STATUSES:
            raise ValueError(f"Unknown meal status: {status}")
        saved = self.status_repository.upsert_status(
            user_id, day, meal_id, status, meal_data or {}
        )
        self.generate_daily_summary(user_id, day)
        return saved

    def reset_day(
        self, user_id: UUID, day: date, meals: list[dict[str, object]]
    ) -> list[MealStatus]:
        """Start a day over with every planned meal marked upcoming.

        Existing statuses of the day are archived before they are removed.
        """
        previous = self.status_repository.list_statuses(user_id, day)
        if previous:
            self.status_repository.save_history(user_id, day, previous)
        self.status_repository.delete_statuses(user_id, day)
        statuses = []
        for index, meal in enumerate(meals):
            meal_id = str(meal.get("id") or f"meal-{index + 1}")
            statuses.append(
                self.status_repository.upsert_status(
                    user_id, day, meal_id, "upcoming", meal
                )
            )
        self.generate_daily_summary(user_id, day)
        return statuses

    def generate_daily_summary(
        self, user_id: UUID, day: date
    ) -> DailyNutritionSummary:
        """Total the day's meals and meal completion and store the summary.

        Planned meals are the day's status slots when any exist, otherwise
        the logged meals, each of which then counts as completed.
        """
        start = datetime.combine(day, time.min, tzinfo=UTC)
        meals = self.repository.list_meals(user_id, start, start + timedelta(days=1))
        statuses = self.status_repository.list_statuses(user_id, day)
        if statuses:
            planned = len(statuses)
            completed = sum(1 for s in statuses if s.status == "completed")
        else:
            planned = completed = len(meals)
        summary = DailyNutritionSummary(
            user_id=user_id,
            day=day,
            total_calories=round(sum(meal.calories for meal in meals), 1),
            total_protein=round(sum(meal.protein for meal in meals), 1),
            total_carbs=round(sum(meal.carbs for meal in meals), 1),
            total_fat=round(sum(meal.fat for meal in meals), 1),
            meal_count=planned,
            completed_meals=completed,
        )
        self.repository.upsert_daily_summary(summary)
        return summary


def summarize_meals(meals: list[MealRecord], days: int) -> MealStatistics:
    """Count meals by type and average their macros."""
    count = len(meals)
    by_type = dict(Counter(meal.meal_type for meal in meals))
    divisor = count or 1
    completion = min(100.0, count / (days * MEALS_PER_DAY) * 100)
    return MealStatistics(
        days=days,
        meal_count=count,
        meals_by_type=by_type,
        avg_calories=round(sum(meal.calories for meal in meals) / divisor),
        avg_protein=round(sum(meal.protein for meal in meals) / divisor),
        avg_carbs=round(sum(meal.carbs for meal in meals) / divisor),
        avg_fat=round(sum(meal.fat for meal in meals) / divisor),
        completion_rate=round(completion, 1),
    )
