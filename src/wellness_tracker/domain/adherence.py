"""Domain models for meal plan adherence."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyAdherence:
    """Planned versus completed meals on one day."""

    day: date
    planned_meals: int
    completed_meals: int

    @property
    def adherence_rate(self) -> float:
        if self.planned_meals <= 0:
            return 0.0
        return round(self.completed_meals / self.planned_meals * 100, 1)


@dataclass(frozen=True)
class AdherenceStreaks:
    """Streaks of days at or above the adherence threshold."""

    current_streak: int
    longest_streak: int
    last_perfect_date: date | None


@dataclass(frozen=True)
class AdherenceMetrics:
    """Aggregate adherence for a date range."""

    total_days: int
    total_planned: int
    total_completed: int
    adherence_rate: float
    consistency_score: int
    perfect_days: int
    current_streak: int
    longest_streak: int
    last_perfect_date: date | None


@dataclass(frozen=True)
class AdherenceLevel:
    """Named tier for an adherence rate."""

    level: str
    label: str
    next_milestone: int | None
