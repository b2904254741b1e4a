"""Admin reporting models."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class AdminUserSummary:
    """Profile row with its recent meal activity."""

    id: UUID
    name: str | None
    updated_at: datetime | None
    meals_last_7d: int
    avg_calories_7d: int
