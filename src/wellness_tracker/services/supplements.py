"""Supplement tracking and stored supplement recommendations."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from wellness_tracker.domain.supplements import (
    SupplementAdvice,
    SupplementDraft,
    UserSupplement,
)

_logger = logging.getLogger(__name__)

MAX_PRIORITY = 5


class SupplementRepository(Protocol):
    """Persistence interface for supplements and recommendations."""

    def create_supplements(
        self, user_id: UUID, drafts: list[SupplementDraft]
    ) -> list[UserSupplement]:
        """Insert supplements and return the stored rows."""

    def update_supplement(
        self, user_id: UUID, supplement_id: UUID, draft: SupplementDraft
    ) -> UserSupplement | None:
        """Replace a supplement owned by the user; None when it does not exist."""

    def delete_supplement(self, user_id: UUID, supplement_id: UUID) -> bool:
        """Delete a supplement owned by the user."""

    def list_supplements(self, user_id: UUID) -> list[UserSupplement]:
        """Return the user's supplements, newest first."""

    def create_recommendations(
        self, user_id: UUID, advice: list[SupplementAdvice]
    ) -> list[SupplementAdvice]:
        """Insert recommendations and return the stored rows."""

    def list_recommendations(self, user_id: UUID) -> list[SupplementAdvice]:
        """Return recommendations, most important first."""


@dataclass
class SupplementService:
    """Service for the supplements a user takes and the ones suggested."""

    repository: SupplementRepository

    def list_supplements(self, user_id: UUID) -> list[UserSupplement]:
        return self.repository.list_supplements(user_id)

    def add_supplement(self, user_id: UUID, draft: SupplementDraft) -> UserSupplement:
        [created] = self.repository.create_supplements(user_id, [_clean(draft)])
        return created

    def update_supplement(
        self, user_id: UUID, supplement_id: UUID, draft: SupplementDraft
    ) -> UserSupplement | None:
        return self.repository.update_supplement(user_id, supplement_id, _clean(draft))

    def delete_supplement(self, user_id: UUID, supplement_id: UUID) -> bool:
        return self.repository.delete_supplement(user_id, supplement_id)

    def save_onboarding_supplements(
        self, user_id: UUID, entries: list[object]
    ) -> list[UserSupplement]:
        """Store the supplement list of an onboarding form.

        Entries use the form's ``name`` key; entries without a name are skipped.
        """
        drafts = [
            SupplementDraft(
                supplement_name=str(entry.get("name") or "").strip(),
                dosage=str(entry.get("dosage") or ""),
                frequency=str(entry.get("frequency") or ""),
                timing=str(entry.get("timing") or ""),
                purpose=str(entry.get("purpose") or ""),
            )
            for entry in entries
            if isinstance(entry, dict)
        ]
        drafts = [draft for draft in drafts if draft.supplement_name]
        if not drafts:
            return []
        _logger.info(
            "Saving onboarding supplements",
            extra={"user_id": str(user_id), "count": len(drafts)},
        )
        return self.repository.create_supplements(user_id, drafts)

    def add_recommendations(
        self, user_id: UUID, advice: list[SupplementAdvice]
    ) -> list[SupplementAdvice]:
        """Store recommendations after checking name and priority."""
        if not advice:
            return []
        for item in advice:
            if not item.supplement_name.strip():
                raise ValueError("Supplement name is required")
            if not 1 <= item.priority <= MAX_PRIORITY:
                raise ValueError(f"Priority must be between 1 and {MAX_PRIORITY}")
        return self.repository.create_recommendations(user_id, advice)

    def list_recommendations(self, user_id: UUID) -> list[SupplementAdvice]:
        return self.repository.list_recommendations(user_id)


def _clean(draft: SupplementDraft) -> SupplementDraft:
    name = draft.supplement_name.strip()
    if not name:
        raise ValueError("Supplement name is required")
    return replace(draft, supplement_name=name)
