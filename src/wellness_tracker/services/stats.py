"""Daily, weekly and monthly nutrition totals."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from wellness_tracker.domain.meals import MealRecord
from wellness_tracker.domain.stats import DailyTotals, PeriodSummary

DECEMBER = 12


class StatsRepository(Protocol):
    """Persistence interface for meal statistics."""

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals within a time range."""


@dataclass
class StatsService:
    """Service for computing user stats by timezone."""

    repository: StatsRepository

    def get_today(self, user_id: UUID, timezone_name: str) -> DailyTotals:
        """Return today's totals in the user's timezone."""
        tz = ZoneInfo(timezone_name)
        start = _start_of_day(datetime.now(tz=tz))
        meals = self._meals_between(user_id, start, start + timedelta(days=1))
        return _aggregate_day(start.date(), meals, tz)

    def get_week(self, user_id: UUID, timezone_name: str) -> PeriodSummary:
        """Return totals and averages for the week starting Monday."""
        tz = ZoneInfo(timezone_name)
        now = datetime.now(tz=tz)
        start = _start_of_day(now - timedelta(days=now.weekday()))
        meals = self._meals_between(user_id, start, start + timedelta(days=7))
        return _aggregate_period(start, 7, meals, tz)

    def get_month(self, user_id: UUID, timezone_name: str) -> PeriodSummary:
        """Return totals and averages for the calendar month."""
        tz = ZoneInfo(timezone_name)
        start = _start_of_day(datetime.now(tz=tz)).replace(day=1)
        if start.month == DECEMBER:
            end = start.replace(year=start.year + 1, month=1)
        else:
            end = start.replace(month=start.month + 1)
        meals = self._meals_between(user_id, start, end)
        return _aggregate_period(start, (end - start).days, meals, tz)

    def _meals_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        return self.repository.list_meals(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _aggregate_day(day: date, meals: list[MealRecord], tz: ZoneInfo) -> DailyTotals:
    total = DailyTotals(day=day, calories=0, protein=0, carbs=0, fat=0)
    for meal in meals:
        if meal.logged_at.astimezone(tz).date() != day:
            continue
        total = DailyTotals(
            day=day,
            calories=total.calories + meal.calories,
            protein=total.protein + meal.protein,
            carbs=total.carbs + meal.carbs,
            fat=total.fat + meal.fat,
        )
    return total


def _aggregate_period(
    start: datetime, days: int, meals: list[MealRecord], tz: ZoneInfo
) -> PeriodSummary:
    daily = [
        _aggregate_day((start + timedelta(days=offset)).date(), meals, tz)
        for offset in range(days)
    ]
    total_days = max(len(daily), 1)
    return PeriodSummary(
        daily=daily,
        avg_calories=sum(entry.calories for entry in daily) / total_days,
        avg_protein=sum(entry.protein for entry in daily) / total_days,
        avg_carbs=sum(entry.carbs for entry in daily) / total_days,
        avg_fat=sum(entry.fat for entry in daily) / total_days,
    )
