"""Domain models for exercise tracking."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class ExerciseType:
    """Selectable exercise with its metabolic equivalent."""

    key: str
    label: str
    met: float


@dataclass(frozen=True)
class ExerciseRecord:
    """Stored exercise entry."""

    id: UUID
    user_id: UUID
    exercise_type: str
    minutes: int
    calories_burned: float
    intensity: str
    recorded_date: date
    notes: str | None


@dataclass(frozen=True)
class WeeklyExerciseSummary:
    """Totals for one Sunday-to-Saturday week."""

    week_start: date
    week_end: date
    total_minutes: int
    calories_burned: float
    goal_minutes: int
    goal_achieved: bool
    last_updated: datetime | None = None

    @property
    def progress_pct(self) -> float:
        if self.goal_minutes <= 0:
            return 0.0
        return round(min(100.0, self.total_minutes / self.goal_minutes * 100), 1)
