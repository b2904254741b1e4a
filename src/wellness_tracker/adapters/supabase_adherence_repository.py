"""Supabase repositories for adherence and progress analytics."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.adherence import AdherenceStreaks, DailyAdherence
from wellness_tracker.domain.progress import (
    NutritionInsight,
    ProgressMetric,
    WeekdayAverage,
)
from wellness_tracker.services.adherence import AdherenceRepository
from wellness_tracker.services.progress import ProgressRepository

SUNDAY_FIRST_WEEKDAYS: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

_METRIC_COLUMNS = (
    "date, total_calories, total_protein, total_carbs, total_fat, meal_count, "
    "completed_meals, adherence_rate, avg_calories_7d, avg_protein_7d, "
    "avg_calories_30d"
)


@dataclass
class SupabaseAdherenceRepository(AdherenceRepository):
    """Reads daily nutrition summaries and streaks."""

    client: Client

    def list_daily(self, user_id: UUID, start: date, end: date) -> list[DailyAdherence]:
        """Return summaries in the date range."""
        response = (
            self.client.table("daily_nutrition_summary")
            .select("date, meal_count, completed_meals")
            .eq("user_id", str(user_id))
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=False)
            .execute()
        )
        return [
            DailyAdherence(
                day=date.fromisoformat(str(row["date"])),
                planned_meals=int(row.get("meal_count") or 0),
                completed_meals=int(row.get("completed_meals") or 0),
            )
            for row in response.data or []
        ]

    def get_streaks(self, user_id: UUID, min_adherence: int) -> AdherenceStreaks:
        """Return streaks computed by the database."""
        return fetch_streaks(self.client, user_id, min_adherence)


@dataclass
class SupabaseProgressRepository(ProgressRepository):
    """Reads progress metrics and calls analytics database functions."""

    client: Client

    def list_metrics(
        self, user_id: UUID, start: date, end: date
    ) -> list[ProgressMetric]:
        """Return metrics in the date range."""
        response = (
            self.client.table("nutrition_progress_metrics")
            .select(_METRIC_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=False)
            .execute()
        )
        return [_parse_metric(row) for row in response.data or []]

    def get_streaks(self, user_id: UUID, min_adherence: int) -> AdherenceStreaks:
        """Return streaks computed by the database."""
        return fetch_streaks(self.client, user_id, min_adherence)

    def generate_insights(self, user_id: UUID, days: int) -> list[NutritionInsight]:
        """Return insights produced by the database."""
        response = self.client.rpc(
            "generate_nutrition_insights",
            {"p_user_id": str(user_id), "p_days_to_analyze": days},
        ).execute()
        insights = []
        for row in response.data or []:
            generated_at = row.get("generated_at")
            insights.append(
                NutritionInsight(
                    insight_type=str(row.get("insight_type") or "general"),
                    text=str(row.get("insight_text") or ""),
                    relevance_score=float(row.get("relevance_score") or 0.0),
                    generated_at=datetime.fromisoformat(generated_at)
                    if isinstance(generated_at, str) and generated_at
                    else None,
                )
            )
        return insights

    def weekday_averages(
        self, user_id: UUID, start: date, end: date
    ) -> list[WeekdayAverage]:
        """Return averages grouped by weekday, Sunday being 0."""
        response = self.client.rpc(
            "calculate_weekday_averages",
            {
                "p_user_id": str(user_id),
                "p_start_date": start.isoformat(),
                "p_end_date": end.isoformat(),
            },
        ).execute()
        averages = []
        for row in response.data or []:
            weekday = int(row.get("weekday") or 0) % 7
            averages.append(
                WeekdayAverage(
                    weekday=weekday,
                    weekday_name=SUNDAY_FIRST_WEEKDAYS[weekday],
                    avg_calories=float(row.get("avg_calories") or 0.0),
                    avg_protein=float(row.get("avg_protein") or 0.0),
                    avg_carbs=float(row.get("avg_carbs") or 0.0),
                    avg_fat=float(row.get("avg_fat") or 0.0),
                    avg_adherence=float(row.get("avg_adherence") or 0.0),
                )
            )
        return averages


def fetch_streaks(
    client: Client, user_id: UUID, min_adherence: int
) -> AdherenceStreaks:
    """Call the streak function; no rows means no streaks yet."""
    response = client.rpc(
        "calculate_adherence_streaks",
        {"p_user_id": str(user_id), "p_min_adherence": min_adherence},
    ).execute()
    if not response.data:
        return AdherenceStreaks(
            current_streak=0, longest_streak=0, last_perfect_date=None
        )
    row = response.data[0]
    last_perfect = row.get("last_perfect_date")
    return AdherenceStreaks(
        current_streak=int(row.get("current_streak") or 0),
        longest_streak=int(row.get("longest_streak") or 0),
        last_perfect_date=date.fromisoformat(last_perfect[:10])
        if isinstance(last_perfect, str) and last_perfect
        else None,
    )


def _parse_metric(row: dict[str, object]) -> ProgressMetric:
    return ProgressMetric(
        day=date.fromisoformat(str(row["date"])),
        total_calories=float(row.get("total_calories") or 0.0),
        total_protein=float(row.get("total_protein") or 0.0),
        total_carbs=float(row.get("total_carbs") or 0.0),
        total_fat=float(row.get("total_fat") or 0.0),
        meal_count=int(row.get("meal_count") or 0),
        completed_meals=int(row.get("completed_meals") or 0),
        adherence_rate=float(row.get("adherence_rate") or 0.0),
        avg_calories_7d=_optional_float(row.get("avg_calories_7d")),
        avg_protein_7d=_optional_float(row.get("avg_protein_7d")),
        avg_calories_30d=_optional_float(row.get("avg_calories_30d")),
    )


def _optional_float(value: object) -> float | None:
    return None if value is None else float(value)
