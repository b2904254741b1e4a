"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.profiles import NutritionProfile
from wellness_tracker.services.onboarding import ProfileRepository

_COLUMNS = (
    "id, name, age, gender, height, weight, goal, activity_level, "
    "dietary_restrictions, onboarding_data, updated_at"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for the profile table."""

    client: Client

    def get_profile(self, user_id: UUID) -> NutritionProfile | None:
        """Return the stored profile."""
        response = (
            self.client.table("nutri_users")
            .select(_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def upsert_profile(
        self, user_id: UUID, payload: dict[str, object]
    ) -> NutritionProfile:
        """Insert or update the profile row."""
        response = (
            self.client.table("nutri_users")
            .upsert({"id": str(user_id), **payload}, on_conflict="id")
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save profile")
        return _parse_profile(response.data[0])

    def list_profiles(self) -> list[NutritionProfile]:
        """Return all profiles, most recently updated first."""
        response = (
            self.client.table("nutri_users")
            .select(_COLUMNS)
            .order("updated_at", desc=True)
            .execute()
        )
        return [_parse_profile(row) for row in response.data or []]


def _parse_profile(row: dict[str, object]) -> NutritionProfile:
    restrictions = row.get("dietary_restrictions")
    if isinstance(restrictions, str):
        restrictions = [
            item.strip() for item in restrictions.split(",") if item.strip()
        ]
    onboarding_data = row.get("onboarding_data")
    updated_at = row.get("updated_at")
    return NutritionProfile(
        id=UUID(str(row["id"])),
        name=row.get("name") or None,
        age=_number(row.get("age"), int),
        gender=row.get("gender") or None,
        height=_number(row.get("height"), float),
        weight=_number(row.get("weight"), float),
        goal=row.get("goal") or None,
        activity_level=row.get("activity_level") or None,
        dietary_restrictions=[str(item) for item in restrictions or []],
        onboarding_data=onboarding_data if isinstance(onboarding_data, dict) else {},
        updated_at=datetime.fromisoformat(updated_at)
        if isinstance(updated_at, str) and updated_at
        else None,
    )


def _number(value: object, kind: type) -> int | float | None:
    if value is None or value == "":
        return None
    try:
        return kind(float(value))
    except (TypeError, ValueError):
        return None
