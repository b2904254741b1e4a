"""Supabase repository for water intake."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.water import WaterIntake
from wellness_tracker.services.water import WaterRepository


@dataclass
class SupabaseWaterRepository(WaterRepository):
    """Supabase implementation for daily water intake."""

    client: Client

    def get_intake(self, user_id: UUID, day: date) -> WaterIntake | None:
        """Return the row for a day."""
        response = (
            self.client.table("water_intake")
            .select("date, target_ml, consumed_ml")
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def upsert_intake(self, user_id: UUID, intake: WaterIntake) -> WaterIntake:
        """Insert or update the row for the intake's day."""
        response = (
            self.client.table("water_intake")
            .upsert(
                {
                    "user_id": str(user_id),
                    "date": intake.day.isoformat(),
                    "target_ml": intake.target_ml,
                    "consumed_ml": intake.consumed_ml,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id,date",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save water intake")
        return _parse_row(response.data[0])

    def list_intake(self, user_id: UUID, start: date, end: date) -> list[WaterIntake]:
        """Return rows in the date range."""
        response = (
            self.client.table("water_intake")
            .select("date, target_ml, consumed_ml")
            .eq("user_id", str(user_id))
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> WaterIntake:
    return WaterIntake(
        day=date.fromisoformat(str(row["date"])),
        target_ml=int(row.get("target_ml") or 0),
        consumed_ml=int(row.get("consumed_ml") or 0),
    )
