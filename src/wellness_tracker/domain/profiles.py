"""Domain models for user nutrition profiles."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class NutritionProfile:
    """Row from the user profile table plus the onboarding answers."""

    id: UUID
    name: str | None = None
    age: int | None = None
    gender: str | None = None
    height: float | None = None
    weight: float | None = None
    goal: str | None = None
    activity_level: str | None = None
    dietary_restrictions: list[str] = field(default_factory=list)
    onboarding_data: dict[str, object] = field(default_factory=dict)
    updated_at: datetime | None = None


@dataclass(frozen=True)
class PhysicalData:
    """Values needed for energy calculations."""

    age: int | None
    gender: str | None
    height_cm: float | None
    weight_kg: float | None
    activity_level: str
    goal: str | None


@dataclass(frozen=True)
class RecommendationProfile:
    """Normalised profile used to personalise food recommendations."""

    weight_goal: str
    activity_level: str
    goals: tuple[str, ...]
    dietary_preferences: tuple[str, ...]
    weight: float | None = None
