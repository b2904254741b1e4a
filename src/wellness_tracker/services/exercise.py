"""Exercise logging and weekly goal tracking."""

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from wellness_tracker.domain.exercise import (
    ExerciseRecord,
    ExerciseType,
    WeeklyExerciseSummary,
)
from wellness_tracker.services.energy import (
    EXERCISE_TYPES,
    EnergyService,
    calories_per_minute,
)
from wellness_tracker.services.onboarding import OnboardingService

INTENSITIES: tuple[str, ...] = ("light", "moderate", "intense")
DEFAULT_INTENSITY = "moderate"
HISTORY_LIMIT = 100


class ExerciseRepository(Protocol):
    """Persistence interface for exercise records and weekly summaries."""

    def create_record(  # noqa: PLR0913
        self,
        user_id: UUID,
        exercise_type: str,
        minutes: int,
        calories_burned: float,
        intensity: str,
        recorded_date: date,
        notes: str | None,
    ) -> ExerciseRecord:
        """Insert an exercise record and return it."""

    def list_records(self, user_id: UUID, limit: int) -> list[ExerciseRecord]:
        """Return the newest records first."""

    def get_weekly_summary(
        self, user_id: UUID, week_start: date
    ) -> WeeklyExerciseSummary | None:
        """Return the stored summary for a week, if any."""

    def upsert_weekly_summary(
        self, user_id: UUID, summary: WeeklyExerciseSummary
    ) -> WeeklyExerciseSummary:
        """Insert or replace the summary for its week."""


@dataclass
class ExerciseService:
    """Service for recording workouts against a weekly minutes goal."""

    repository: ExerciseRepository
    energy_service: EnergyService
    onboarding_service: OnboardingService

    def exercise_types(self) -> list[ExerciseType]:
        return list(EXERCISE_TYPES)

    def log_exercise(  # noqa: PLR0913
        self,
        user_id: UUID,
        exercise_type: str,
        minutes: int,
        intensity: str = DEFAULT_INTENSITY,
        notes: str | None = None,
        recorded_date: date | None = None,
    ) -> ExerciseRecord:
        """Store a workout and add it to the current week's totals."""
        if minutes <= 0:
            raise ValueError("Exercise minutes must be positive")
        if intensity not in INTENSITIES:
            raise ValueError(f"Unknown intensity: {intensity}")
        if not exercise_type.strip():
            raise ValueError("Exercise type is required")
        day = recorded_date or _today()
        physical = self.onboarding_service.get_physical_data(user_id)
        weight = physical.weight_kg if physical else None
        burned = round(calories_per_minute(weight, exercise_type) * minutes, 1)
        record = self.repository.create_record(
            user_id, exercise_type, minutes, burned, intensity, day, notes
        )

        summary = self.get_weekly_summary(user_id, day)
        total_minutes = summary.total_minutes + minutes
        self.repository.upsert_weekly_summary(
            user_id,
            replace(
                summary,
                total_minutes=total_minutes,
                calories_burned=round(summary.calories_burned + burned, 1),
                goal_achieved=total_minutes >= summary.goal_minutes,
                last_updated=datetime.now(tz=UTC),
            ),
        )
        return record

    def get_history(self, user_id: UUID, limit: int = 30) -> list[ExerciseRecord]:
        """Return recent workouts, capped at the retained history size."""
        return self.repository.list_records(user_id, min(limit, HISTORY_LIMIT))

    def get_weekly_summary(
        self, user_id: UUID, day: date | None = None
    ) -> WeeklyExerciseSummary:
        """Return the week's summary, creating an empty one when missing."""
        week_start = week_start_for(day or _today())
        stored = self.repository.get_weekly_summary(user_id, week_start)
        if stored is not None:
            return stored
        goal = self.energy_service.get_energy_metrics(user_id).weekly_exercise_target
        return WeeklyExerciseSummary(
            week_start=week_start,
            week_end=week_start + timedelta(days=6),
            total_minutes=0,
            calories_burned=0.0,
            goal_minutes=goal,
            goal_achieved=False,
        )

    def set_weekly_goal(self, user_id: UUID, minutes: int) -> WeeklyExerciseSummary:
        """Override the current week's minutes goal."""
        if minutes <= 0:
            raise ValueError("Weekly goal must be positive")
        summary = self.get_weekly_summary(user_id)
        return self.repository.upsert_weekly_summary(
            user_id,
            replace(
                summary,
                goal_minutes=minutes,
                goal_achieved=summary.total_minutes >= minutes,
                last_updated=datetime.now(tz=UTC),
            ),
        )

    def reset_week(self, user_id: UUID) -> WeeklyExerciseSummary:
        """Zero the current week's totals, keeping its goal."""
        summary = self.get_weekly_summary(user_id)
        return self.repository.upsert_weekly_summary(
            user_id,
            replace(
                summary,
                total_minutes=0,
                calories_burned=0.0,
                goal_achieved=False,
                last_updated=datetime.now(tz=UTC),
            ),
        )


def week_start_for(day: date) -> date:
    """Return the Sunday that starts the week containing ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _today() -> date:
    return datetime.now(tz=UTC).date()
