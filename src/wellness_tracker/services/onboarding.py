"""Onboarding questionnaire and profile access."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from wellness_tracker.domain.profiles import NutritionProfile, PhysicalData
from wellness_tracker.services.cache import Cache
from wellness_tracker.services.supplements import SupplementService

_logger = logging.getLogger(__name__)

PROFILE_TTL_SECONDS = 300
DEFAULT_ACTIVITY_LEVEL = "moderately active"

PROFILE_COLUMNS: tuple[str, ...] = (
    "name",
    "email",
    "phone",
    "age",
    "gender",
    "height",
    "weight",
    "goal",
    "activity_level",
    "sleep_quality",
    "stress_level",
    "sun_exposure",
    "main_complaint",
    "dietary_restrictions",
    "medications",
    "supplements",
)


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> NutritionProfile | None:
        """Return the stored profile, if any."""

    def upsert_profile(
        self, user_id: UUID, payload: dict[str, object]
    ) -> NutritionProfile:
        """Insert or update the profile row and return it."""

    def list_profiles(self) -> list[NutritionProfile]:
        """Return all profiles."""


@dataclass
class OnboardingService:
    """Stores onboarding answers and serves cached profiles."""

    repository: ProfileRepository
    cache: Cache
    supplement_service: SupplementService | None = None

    def get_profile(self, user_id: UUID) -> NutritionProfile | None:
        """Return the user's profile, served from cache when fresh."""
        key = _cache_key(user_id)
        cached = self.cache.get(key)
        if isinstance(cached, NutritionProfile):
            return cached
        profile = self.repository.get_profile(user_id)
        if profile is not None:
            self.cache.set(key, profile, PROFILE_TTL_SECONDS)
        return profile

    def has_completed(self, user_id: UUID) -> bool:
        """Return true once name, gender, weight and height are filled in."""
        profile = self.get_profile(user_id)
        if profile is None:
            return False
        return bool(
            profile.name and profile.gender and profile.weight and profile.height
        )

    def save(self, user_id: UUID, form: dict[str, object]) -> NutritionProfile:
        """Merge new answers into the stored onboarding data and upsert."""
        now = datetime.now(tz=UTC)
        existing = self.repository.get_profile(user_id)
        merged: dict[str, object] = dict(existing.onboarding_data) if existing else {}
        merged.update(form)
        merged["last_updated"] = now.isoformat()

        payload: dict[str, object] = {
            column: form.get(column) or None for column in PROFILE_COLUMNS
        }
        payload["onboarding_data"] = merged
        payload["updated_at"] = now.isoformat()
        if existing is None:
            payload["created_at"] = now.isoformat()

        profile = self.repository.upsert_profile(user_id, payload)
        self.cache.delete(_cache_key(user_id))
        supplements = form.get("supplement_list")
        if self.supplement_service is not None and isinstance(supplements, list):
            try:
                self.supplement_service.save_onboarding_supplements(
                    user_id, supplements
                )
            except Exception:
                _logger.exception(
                    "Failed to save onboarding supplements",
                    extra={"user_id": str(user_id)},
                )
        return profile

    def get_physical_data(self, user_id: UUID) -> PhysicalData | None:
        """Return the values needed for energy calculations."""
        profile = self.get_profile(user_id)
        if profile is None:
            return None
        data = profile.onboarding_data
        activity = (
            profile.activity_level
            or _str_or_none(data.get("activity_level"))
            or activity_from_frequency(
                _str_or_none(data.get("activity_frequency")),
                bool(data.get("physical_activity")),
            )
            or DEFAULT_ACTIVITY_LEVEL
        )
        goal = profile.goal or _str_or_none(data.get("fitness_goal"))
        if goal is None:
            selected = data.get("selected_goals")
            if isinstance(selected, list) and selected:
                goal = str(selected[0])
        return PhysicalData(
            age=profile.age or _int_or_none(data.get("age")),
            gender=profile.gender or _str_or_none(data.get("gender")),
            height_cm=profile.height or _float_or_none(data.get("height")),
            weight_kg=profile.weight or _float_or_none(data.get("weight")),
            activity_level=activity,
            goal=goal,
        )

    def list_profiles(self) -> list[NutritionProfile]:
        """Return all stored profiles."""
        return self.repository.list_profiles()


def activity_from_frequency(
    frequency: str | None, physically_active: bool = False
) -> str | None:
    """Derive an activity level from a weekly exercise frequency answer."""
    if not frequency:
        return None
    value = frequency.lower()
    if any(word in value for word in ("0", "never", "rarely", "nunca", "raramente")):
        return "sedentary"
    if "1x" in value or "once" in value or "1 vez" in value:
        return "lightly active"
    if any(word in value for word in ("2x", "3x", "2 to 3", "2 a 3")):
        return "moderately active"
    if any(word in value for word in ("4x", "5x", "4 to 5", "4 a 5")):
        return "very active"
    if any(word in value for word in ("6x", "7x", "daily", "diariamente")):
        return "extremely active"
    return "moderately active" if physically_active else "lightly active"


def _cache_key(user_id: UUID) -> str:
    return f"profile:{user_id}"


def _str_or_none(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _int_or_none(value: object) -> int | None:
    try:
        return int(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


def _float_or_none(value: object) -> float | None:
    try:
        return float(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None
