"""Supabase repository for progress photos."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.photos import ProgressPhoto
from wellness_tracker.services.progress_photos import ProgressPhotoRepository

_COLUMNS = "id, user_id, photo_url, storage_path, type, notes, ai_analysis, created_at"


@dataclass
class SupabaseProgressPhotoRepository(ProgressPhotoRepository):
    """Supabase implementation for progress photo metadata."""

    client: Client

    def create_photo(  # noqa: PLR0913
        self,
        user_id: UUID,
        photo_url: str,
        storage_path: str,
        photo_type: str,
        notes: str | None,
        ai_analysis: dict[str, object],
    ) -> ProgressPhoto:
        """Insert a photo row and return it."""
        response = (
            self.client.table("progress_photos")
            .insert(
                {
                    "user_id": str(user_id),
                    "photo_url": photo_url,
                    "storage_path": storage_path,
                    "type": photo_type,
                    "notes": notes,
                    "ai_analysis": ai_analysis,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create progress photo")
        return _parse_photo(response.data[0])

    def list_photos(self, user_id: UUID, limit: int) -> list[ProgressPhoto]:
        """Return the newest photos first."""
        response = (
            self.client.table("progress_photos")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_photo(row) for row in response.data or []]

    def get_photo(self, photo_id: UUID) -> ProgressPhoto | None:
        """Return a photo by id."""
        response = (
            self.client.table("progress_photos")
            .select(_COLUMNS)
            .eq("id", str(photo_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_photo(response.data[0])

    def update_analysis(self, photo_id: UUID, ai_analysis: dict[str, object]) -> None:
        """Replace the stored analysis."""
        self.client.table("progress_photos").update({"ai_analysis": ai_analysis}).eq(
            "id", str(photo_id)
        ).execute()

    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo row."""
        self.client.table("progress_photos").delete().eq("id", str(photo_id)).execute()


def _parse_photo(row: dict[str, object]) -> ProgressPhoto:
    created_at = row.get("created_at")
    analysis = row.get("ai_analysis")
    return ProgressPhoto(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        photo_url=str(row.get("photo_url") or ""),
        storage_path=str(row.get("storage_path") or ""),
        photo_type=str(row.get("type") or "front"),
        notes=row.get("notes") or None,
        ai_analysis=analysis if isinstance(analysis, dict) else None,
        created_at=datetime.fromisoformat(created_at)
        if isinstance(created_at, str) and created_at
        else None,
    )
