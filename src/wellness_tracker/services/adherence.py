"""Meal plan adherence metrics, levels and insights."""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from wellness_tracker.domain.adherence import (
    AdherenceLevel,
    AdherenceMetrics,
    AdherenceStreaks,
    DailyAdherence,
)

PERFECT_DAY_RATE = 100.0
STREAK_MIN_ADHERENCE = 80
INSIGHT_MIN_DAYS = 7
TREND_MIN_DAYS = 14
WEEKDAY_SPREAD_THRESHOLD = 15
TREND_THRESHOLD = 5

WEEKDAY_NAMES: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


class AdherenceRepository(Protocol):
    """Persistence interface for daily nutrition summaries."""

    def list_daily(self, user_id: UUID, start: date, end: date) -> list[DailyAdherence]:
        """Return rows with ``start <= day <= end`` ordered by day."""

    def get_streaks(self, user_id: UUID, min_adherence: int) -> AdherenceStreaks:
        """Return streaks computed by the database."""


@dataclass
class AdherenceService:
    """Service summarising how closely a user follows their meal plan."""

    repository: AdherenceRepository

    def get_daily(self, user_id: UUID, start: date, end: date) -> list[DailyAdherence]:
        _check_range(start, end)
        return self.repository.list_daily(user_id, start, end)

    def calculate_metrics(
        self, user_id: UUID, start: date, end: date
    ) -> AdherenceMetrics | None:
        """Aggregate adherence for a range, or None when nothing was logged."""
        daily = self.get_daily(user_id, start, end)
        if not daily:
            return None
        planned = sum(day.planned_meals for day in daily)
        completed = sum(day.completed_meals for day in daily)
        exact_rate = completed / planned * 100 if planned > 0 else 0.0
        streaks = self.repository.get_streaks(user_id, STREAK_MIN_ADHERENCE)
        return AdherenceMetrics(
            total_days=len(daily),
            total_planned=planned,
            total_completed=completed,
            adherence_rate=round(exact_rate, 1),
            consistency_score=consistency_score(exact_rate),
            perfect_days=sum(
                1 for day in daily if day.adherence_rate >= PERFECT_DAY_RATE
            ),
            current_streak=streaks.current_streak,
            longest_streak=streaks.longest_streak,
            last_perfect_date=streaks.last_perfect_date,
        )


def consistency_score(rate: float) -> int:
    """Map an adherence rate to a 1-5 score."""
    for threshold, score in ((90, 5), (80, 4), (70, 3), (60, 2)):
        if rate >= threshold:
            return score
    return 1


def adherence_level(rate: float) -> AdherenceLevel:
    if rate >= 90:
        return AdherenceLevel(
            "exemplary", "You are among the most dedicated. Keep it up!", None
        )
    if rate >= 75:
        return AdherenceLevel(
            "dedicated", "Great discipline! Keep going for even better results.", 90
        )
    if rate >= 60:
        return AdherenceLevel(
            "consistent", "You are on track. A little extra effort goes a long way.", 75
        )
    return AdherenceLevel(
        "beginner", "Small consistent steps lead to big results.", 60
    )


def motivational_message(metrics: AdherenceMetrics) -> str:
    rate = metrics.adherence_rate
    if rate >= 90:
        return (
            f"Amazing! You completed {rate}% of your planned meals. "
            "Your dedication is making the difference."
        )
    if rate >= 75:
        return (
            f"Great work! {rate}% adherence shows real commitment. "
            f"Only {90 - rate:.1f}% more to reach the exemplary level."
        )
    if rate >= 60:
        return (
            f"Good progress at {rate}% adherence. A small push gets you to 75% "
            "and the next level."
        )
    if rate >= 40:
        return (
            f"You are on your way with {rate}% adherence. Try logging a few more "
            "meals to build consistency."
        )
    return (
        f"Every start is hard. At {rate}% you have taken the first step. "
        "Set small daily goals to improve gradually."
    )


def generate_insights(daily: list[DailyAdherence]) -> list[str]:
    """Find weekday and weekly trend patterns in daily adherence."""
    if len(daily) < INSIGHT_MIN_DAYS:
        return ["Keep logging your meals to unlock personalised insights."]

    insights: list[str] = []
    by_weekday: dict[int, list[float]] = defaultdict(list)
    for day in daily:
        by_weekday[day.day.weekday()].append(day.adherence_rate)
    averages = {
        weekday: sum(rates) / len(rates) for weekday, rates in by_weekday.items()
    }
    worst = min(averages, key=averages.__getitem__)
    best = max(averages, key=averages.__getitem__)
    if averages[best] - averages[worst] > WEEKDAY_SPREAD_THRESHOLD:
        insights.append(
            f"You find it hardest to follow your plan on {WEEKDAY_NAMES[worst]}s "
            f"({averages[worst]:.1f}%). Try preparing meals ahead for that day."
        )
        insights.append(
            f"Your best day is {WEEKDAY_NAMES[best]} with {averages[best]:.1f}% "
            "adherence. Apply the same strategy to other days."
        )

    if len(daily) >= TREND_MIN_DAYS:
        recent = sum(day.adherence_rate for day in daily[-7:]) / 7
        previous = sum(day.adherence_rate for day in daily[-14:-7]) / 7
        difference = recent - previous
        if difference >= TREND_THRESHOLD:
            insights.append(
                f"You improved {difference:.1f}% over the last week. Keep it up!"
            )
        elif difference <= -TREND_THRESHOLD:
            insights.append(
                f"Your adherence dropped {abs(difference):.1f}% last week. "
                "It happens, get back on track!"
            )

    if len(insights) < 2:
        insights.append("A regular meal routine helps you stick to your plan.")
        insights.append("Prepare meals ahead for days when you know time is short.")
    return insights


def _check_range(start: date, end: date) -> None:
    if start > end:
        raise ValueError("start must not be after end")
