"""Supabase repository for monthly body metrics."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.body_metrics import BodyMeasurements, BodyMetrics
from wellness_tracker.services.body_metrics import BodyMetricsRepository

_COLUMNS = (
    "date, weight, waist_circumference, abdominal_circumference, "
    "hip_circumference, body_fat_percentage, lean_mass_percentage, notes, "
    "updated_at"
)


@dataclass
class SupabaseBodyMetricsRepository(BodyMetricsRepository):
    """Supabase implementation backed by ``body_metrics``."""

    client: Client

    def upsert_metrics(
        self, user_id: UUID, month: date, measurements: BodyMeasurements
    ) -> BodyMetrics:
        """Insert or update the row keyed by user and month."""
        response = (
            self.client.table("body_metrics")
            .upsert(
                {
                    "user_id": str(user_id),
                    "date": month.isoformat(),
                    "weight": measurements.weight,
                    "waist_circumference": measurements.waist_circumference,
                    "abdominal_circumference": measurements.abdominal_circumference,
                    "hip_circumference": measurements.hip_circumference,
                    "body_fat_percentage": measurements.body_fat_percentage,
                    "lean_mass_percentage": measurements.lean_mass_percentage,
                    "notes": measurements.notes,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id,date",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save body metrics")
        return _parse_row(response.data[0])

    def get_metrics(self, user_id: UUID, month: date) -> BodyMetrics | None:
        response = (
            self.client.table("body_metrics")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("date", month.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_metrics(self, user_id: UUID, limit: int) -> list[BodyMetrics]:
        response = (
            self.client.table("body_metrics")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("date", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _optional_float(value: object) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def _parse_row(row: dict[str, object]) -> BodyMetrics:
    updated_at = row.get("updated_at")
    return BodyMetrics(
        month=date.fromisoformat(str(row["date"])[:10]),
        measurements=BodyMeasurements(
            weight=float(row.get("weight") or 0.0),
            waist_circumference=_optional_float(row.get("waist_circumference")),
            abdominal_circumference=_optional_float(
                row.get("abdominal_circumference")
            ),
            hip_circumference=_optional_float(row.get("hip_circumference")),
            body_fat_percentage=_optional_float(row.get("body_fat_percentage")),
            lean_mass_percentage=_optional_float(row.get("lean_mass_percentage")),
            notes=row.get("notes") or None,
        ),
        updated_at=datetime.fromisoformat(str(updated_at)) if updated_at else None,
    )
