"""Supabase repository for user supplements and supplement recommendations."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.supplements import (
    SupplementAdvice,
    SupplementDraft,
    UserSupplement,
)
from wellness_tracker.services.supplements import SupplementRepository

_SUPPLEMENT_COLUMNS = (
    "id, user_id, supplement_name, dosage, frequency, timing, purpose, notes"
)
_ADVICE_COLUMNS = (
    "id, supplement_name, reason, priority, dosage_recommendation, "
    "specific_considerations"
)


@dataclass
class SupabaseSupplementRepository(SupplementRepository):
    """Supabase implementation backed by ``user_supplements``."""

    client: Client

    def create_supplements(
        self, user_id: UUID, drafts: list[SupplementDraft]
    ) -> list[UserSupplement]:
        """Insert all drafts in one request."""
        response = (
            self.client.table("user_supplements")
            .insert([_supplement_payload(user_id, draft) for draft in drafts])
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save supplements")
        return [_parse_supplement(row) for row in response.data]

    def update_supplement(
        self, user_id: UUID, supplement_id: UUID, draft: SupplementDraft
    ) -> UserSupplement | None:
        response = (
            self.client.table("user_supplements")
            .update(_supplement_payload(user_id, draft))
            .eq("id", str(supplement_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_supplement(response.data[0])

    def delete_supplement(self, user_id: UUID, supplement_id: UUID) -> bool:
        response = (
            self.client.table("user_supplements")
            .delete()
            .eq("id", str(supplement_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)

    def list_supplements(self, user_id: UUID) -> list[UserSupplement]:
        response = (
            self.client.table("user_supplements")
            .select(_SUPPLEMENT_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_supplement(row) for row in response.data or []]

    def create_recommendations(
        self, user_id: UUID, advice: list[SupplementAdvice]
    ) -> list[SupplementAdvice]:
        response = (
            self.client.table("supplement_recommendations")
            .insert(
                [
                    {
                        "user_id": str(user_id),
                        "supplement_name": item.supplement_name,
                        "reason": item.reason,
                        "priority": item.priority,
                        "dosage_recommendation": item.dosage_recommendation,
                        "specific_considerations": item.specific_considerations,
                    }
                    for item in advice
                ]
            )
            .execute()
        )
        return [_parse_advice(row) for row in response.data or []]

    def list_recommendations(self, user_id: UUID) -> list[SupplementAdvice]:
        response = (
            self.client.table("supplement_recommendations")
            .select(_ADVICE_COLUMNS)
            .eq("user_id", str(user_id))
            .order("priority", desc=False)
            .execute()
        )
        return [_parse_advice(row) for row in response.data or []]


def _supplement_payload(user_id: UUID, draft: SupplementDraft) -> dict[str, object]:
    return {
        "user_id": str(user_id),
        "supplement_name": draft.supplement_name,
        "dosage": draft.dosage,
        "frequency": draft.frequency,
        "timing": draft.timing,
        "purpose": draft.purpose,
        "notes": draft.notes,
    }


def _parse_supplement(row: dict[str, object]) -> UserSupplement:
    return UserSupplement(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        supplement_name=str(row.get("supplement_name") or ""),
        dosage=str(row.get("dosage") or ""),
        frequency=str(row.get("frequency") or ""),
        timing=str(row.get("timing") or ""),
        purpose=str(row.get("purpose") or ""),
        notes=row.get("notes") or None,
    )


def _parse_advice(row: dict[str, object]) -> SupplementAdvice:
    return SupplementAdvice(
        id=UUID(str(row["id"])) if row.get("id") else None,
        supplement_name=str(row.get("supplement_name") or ""),
        reason=str(row.get("reason") or ""),
        priority=int(row.get("priority") or 1),
        dosage_recommendation=row.get("dosage_recommendation") or None,
        specific_considerations=row.get("specific_considerations") or None,
    )
