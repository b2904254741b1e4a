"""Supabase repository for admin reference materials."""

from dataclasses import dataclass

from supabase import Client

from wellness_tracker.services.references import ReferenceRepository


@dataclass
class SupabaseReferenceRepository(ReferenceRepository):
    """Reads active reference materials."""

    client: Client

    def list_active_materials(self) -> list[dict[str, object]]:
        """Return active materials, newest first."""
        response = (
            self.client.table("admin_reference_materials")
            .select("title, content_text")
            .eq("is_active", True)
            .order("created_at", desc=True)
            .execute()
        )
        return list(response.data or [])
