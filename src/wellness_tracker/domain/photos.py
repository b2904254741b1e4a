"""Domain models for progress photos."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

PHOTO_TYPES: tuple[str, ...] = ("front", "side", "back")


@dataclass(frozen=True)
class ProgressPhoto:
    """Stored body progress photo with its AI analysis."""

    id: UUID
    user_id: UUID
    photo_url: str
    storage_path: str
    photo_type: str
    notes: str | None
    ai_analysis: dict[str, object] | None
    created_at: datetime | None
