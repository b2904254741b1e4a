"""Domain models for supplement tracking."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class SupplementDraft:
    """Supplement details entered by a user."""

    supplement_name: str
    dosage: str = ""
    frequency: str = ""
    timing: str = ""
    purpose: str = ""
    notes: str | None = None


@dataclass(frozen=True)
class UserSupplement:
    """Supplement a user reports taking."""

    id: UUID
    user_id: UUID
    supplement_name: str
    dosage: str
    frequency: str
    timing: str
    purpose: str
    notes: str | None


@dataclass(frozen=True)
class SupplementAdvice:
    """Stored supplement recommendation; priority 1 is the most important."""

    supplement_name: str
    reason: str
    priority: int
    dosage_recommendation: str | None = None
    specific_considerations: str | None = None
    id: UUID | None = None
