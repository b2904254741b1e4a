"""Daily water intake tracking."""

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from wellness_tracker.domain.water import GLASS_ML, WaterIntake
from wellness_tracker.services.onboarding import OnboardingService

ML_PER_KG = 35
DEFAULT_TARGET_ML = 2000


class WaterRepository(Protocol):
    """Persistence interface for water intake."""

    def get_intake(self, user_id: UUID, day: date) -> WaterIntake | None:
        """Return the row for a day, if any."""

    def upsert_intake(self, user_id: UUID, intake: WaterIntake) -> WaterIntake:
        """Insert or update the row for the intake's day."""

    def list_intake(self, user_id: UUID, start: date, end: date) -> list[WaterIntake]:
        """Return rows with ``start <= day <= end`` ordered by day."""


@dataclass
class WaterService:
    """Service counting glasses of water against a weight-based target."""

    repository: WaterRepository
    onboarding_service: OnboardingService

    def get_today(self, user_id: UUID, day: date | None = None) -> WaterIntake:
        """Return the day's intake, defaulting to zero against the profile target."""
        day = day or _today()
        stored = self.repository.get_intake(user_id, day)
        if stored is not None:
            return stored
        physical = self.onboarding_service.get_physical_data(user_id)
        target = target_for_weight(physical.weight_kg if physical else None)
        return WaterIntake(day=day, target_ml=target, consumed_ml=0)

    def add_glass(self, user_id: UUID, day: date | None = None) -> WaterIntake:
        current = self.get_today(user_id, day)
        return self.repository.upsert_intake(
            user_id, replace(current, consumed_ml=current.consumed_ml + GLASS_ML)
        )

    def remove_glass(self, user_id: UUID, day: date | None = None) -> WaterIntake:
        """Take one glass off the day's count without going below zero."""
        current = self.get_today(user_id, day)
        consumed = max(0, current.consumed_ml - GLASS_ML)
        return self.repository.upsert_intake(
            user_id, replace(current, consumed_ml=consumed)
        )

    def set_target_from_weight(self, user_id: UUID, weight_kg: float) -> WaterIntake:
        if weight_kg <= 0:
            raise ValueError("Weight must be positive")
        current = self.get_today(user_id)
        return self.repository.upsert_intake(
            user_id, replace(current, target_ml=target_for_weight(weight_kg))
        )

    def get_history(self, user_id: UUID, days: int = 7) -> list[WaterIntake]:
        """Return stored intake for the trailing ``days`` days."""
        if days <= 0:
            raise ValueError("days must be positive")
        end = _today()
        return self.repository.list_intake(user_id, end - timedelta(days=days - 1), end)


def target_for_weight(weight_kg: float | None) -> int:
    """Daily target of 35 ml per kg of body weight."""
    if not weight_kg:
        return DEFAULT_TARGET_ML
    return round(weight_kg * ML_PER_KG)


def _today() -> date:
    return datetime.now(tz=UTC).date()
