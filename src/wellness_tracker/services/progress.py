"""Progress analytics over stored daily nutrition metrics."""

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from wellness_tracker.domain.adherence import AdherenceStreaks
from wellness_tracker.domain.progress import (
    MetricChange,
    NutritionInsight,
    PeriodComparison,
    ProgressMetric,
    WeekdayAverage,
)

DEFAULT_INSIGHT_DAYS = 30
DEFAULT_STREAK_THRESHOLD = 80

CSV_HEADERS: tuple[str, ...] = (
    "Date",
    "Total calories",
    "Total protein (g)",
    "Total carbs (g)",
    "Total fat (g)",
    "Planned meals",
    "Completed meals",
    "Adherence rate (%)",
    "7d avg calories",
    "7d avg protein",
)


class ProgressRepository(Protocol):
    """Persistence interface for progress metrics and database functions."""

    def list_metrics(
        self, user_id: UUID, start: date, end: date
    ) -> list[ProgressMetric]:
        """Return metrics with ``start <= day <= end`` ordered by day."""

    def get_streaks(self, user_id: UUID, min_adherence: int) -> AdherenceStreaks:
        """Return adherence streaks."""

    def generate_insights(self, user_id: UUID, days: int) -> list[NutritionInsight]:
        """Return insights generated by the database."""

    def weekday_averages(
        self, user_id: UUID, start: date, end: date
    ) -> list[WeekdayAverage]:
        """Return averages grouped by weekday."""


@dataclass
class ProgressService:
    """Service exposing progress metrics, exports and comparisons."""

    repository: ProgressRepository

    def get_metrics(
        self, user_id: UUID, start: date, end: date
    ) -> list[ProgressMetric]:
        if start > end:
            raise ValueError("start must not be after end")
        return self.repository.list_metrics(user_id, start, end)

    def get_streaks(
        self, user_id: UUID, min_adherence: int = DEFAULT_STREAK_THRESHOLD
    ) -> AdherenceStreaks:
        if not 0 <= min_adherence <= 100:
            raise ValueError("min_adherence must be between 0 and 100")
        return self.repository.get_streaks(user_id, min_adherence)

    def generate_insights(
        self, user_id: UUID, days: int = DEFAULT_INSIGHT_DAYS
    ) -> list[NutritionInsight]:
        if days <= 0:
            raise ValueError("days must be positive")
        return self.repository.generate_insights(user_id, days)

    def get_weekday_averages(
        self, user_id: UUID, start: date, end: date
    ) -> list[WeekdayAverage]:
        if start > end:
            raise ValueError("start must not be after end")
        return self.repository.weekday_averages(user_id, start, end)

    def export_csv(self, user_id: UUID, start: date, end: date) -> str:
        return metrics_to_csv(self.get_metrics(user_id, start, end))

    def compare_periods(
        self,
        user_id: UUID,
        previous: tuple[date, date],
        current: tuple[date, date],
    ) -> PeriodComparison | None:
        """Compare average intake of two periods, or None if either is empty."""
        before = self.get_metrics(user_id, *previous)
        after = self.get_metrics(user_id, *current)
        if not before or not after:
            return None
        return PeriodComparison(
            previous_label=f"{previous[0].isoformat()} to {previous[1].isoformat()}",
            current_label=f"{current[0].isoformat()} to {current[1].isoformat()}",
            calories=_change(before, after, "total_calories"),
            protein=_change(before, after, "total_protein"),
            carbs=_change(before, after, "total_carbs"),
            fat=_change(before, after, "total_fat"),
            adherence_rate=_change(before, after, "adherence_rate"),
        )


def metrics_to_csv(metrics: list[ProgressMetric]) -> str:
    """Render metrics as CSV text; empty input gives an empty string."""
    if not metrics:
        return ""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for item in metrics:
        writer.writerow(
            [
                item.day.isoformat(),
                f"{item.total_calories:.0f}",
                f"{item.total_protein:.1f}",
                f"{item.total_carbs:.1f}",
                f"{item.total_fat:.1f}",
                item.meal_count,
                item.completed_meals,
                f"{item.adherence_rate:.1f}",
                _optional(item.avg_calories_7d, "{:.0f}"),
                _optional(item.avg_protein_7d, "{:.1f}"),
            ]
        )
    return buffer.getvalue().rstrip("\n")


def percent_change(old: float, new: float) -> float:
    if old == 0:
        return 100.0 if new > 0 else 0.0
    return (new - old) / abs(old) * 100


def _change(
    before: list[ProgressMetric], after: list[ProgressMetric], field: str
) -> MetricChange:
    previous = sum(getattr(item, field) for item in before) / len(before)
    current = sum(getattr(item, field) for item in after) / len(after)
    return MetricChange(
        previous=previous,
        current=current,
        difference=current - previous,
        change_pct=percent_change(previous, current),
    )


def _optional(value: float | None, template: str) -> str:
    return "N/A" if value is None else template.format(value)
