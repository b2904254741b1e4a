"""Supabase repository for exercise records and weekly summaries."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.exercise import ExerciseRecord, WeeklyExerciseSummary
from wellness_tracker.services.exercise import ExerciseRepository

_RECORD_COLUMNS = (
    "id, user_id, exercise_type, minutes, calories_burned, intensity, "
    "recorded_date, notes"
)
_SUMMARY_COLUMNS = (
    "week_start_date, week_end_date, total_minutes, calories_burned, "
    "goal_minutes, goal_achieved, last_updated"
)


@dataclass
class SupabaseExerciseRepository(ExerciseRepository):
    """Supabase implementation for exercise tracking."""

    client: Client

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
        response = (
            self.client.table("exercise_records")
            .insert(
                {
                    "user_id": str(user_id),
                    "exercise_type": exercise_type,
                    "minutes": minutes,
                    "calories_burned": calories_burned,
                    "intensity": intensity,
                    "recorded_date": recorded_date.isoformat(),
                    "notes": notes,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create exercise record")
        return _parse_record(response.data[0])

    def list_records(self, user_id: UUID, limit: int) -> list[ExerciseRecord]:
        """Return the newest records first."""
        response = (
            self.client.table("exercise_records")
            .select(_RECORD_COLUMNS)
            .eq("user_id", str(user_id))
            .order("recorded_date", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_record(row) for row in response.data or []]

    def get_weekly_summary(
        self, user_id: UUID, week_start: date
    ) -> WeeklyExerciseSummary | None:
        """Return the stored summary for a week."""
        response = (
            self.client.table("weekly_exercise_summary")
            .select(_SUMMARY_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("week_start_date", week_start.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_summary(response.data[0])

    def upsert_weekly_summary(
        self, user_id: UUID, summary: WeeklyExerciseSummary
    ) -> WeeklyExerciseSummary:
        """Insert or replace the summary for its week."""
        last_updated = summary.last_updated or datetime.now(tz=UTC)
        response = (
            self.client.table("weekly_exercise_summary")
            .upsert(
                {
                    "user_id": str(user_id),
                    "week_start_date": summary.week_start.isoformat(),
                    "week_end_date": summary.week_end.isoformat(),
                    "total_minutes": summary.total_minutes,
                    "calories_burned": summary.calories_burned,
                    "goal_minutes": summary.goal_minutes,
                    "goal_achieved": summary.goal_achieved,
                    "last_updated": last_updated.isoformat(),
                },
                on_conflict="user_id,week_start_date",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save weekly exercise summary")
        return _parse_summary(response.data[0])


def _parse_record(row: dict[str, object]) -> ExerciseRecord:
    return ExerciseRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        exercise_type=str(row.get("exercise_type", "other")),
        minutes=int(row.get("minutes") or 0),
        calories_burned=float(row.get("calories_burned") or 0.0),
        intensity=str(row.get("intensity") or "moderate"),
        recorded_date=date.fromisoformat(str(row["recorded_date"])[:10]),
        notes=row.get("notes") or None,
    )


def _parse_summary(row: dict[str, object]) -> WeeklyExerciseSummary:
    last_updated = row.get("last_updated")
    return WeeklyExerciseSummary(
        week_start=date.fromisoformat(str(row["week_start_date"])),
        week_end=date.fromisoformat(str(row["week_end_date"])),
        total_minutes=int(row.get("total_minutes") or 0),
        calories_burned=float(row.get("calories_burned") or 0.0),
        goal_minutes=int(row.get("goal_minutes") or 0),
        goal_achieved=bool(row.get("goal_achieved")),
        last_updated=datetime.fromisoformat(last_updated)
        if isinstance(last_updated, str) and last_updated
        else None,
    )
