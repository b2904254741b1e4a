"""Domain models for medical exams."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

EXAM_STATUSES: tuple[str, ...] = ("pending", "analyzing", "analyzed")


@dataclass(frozen=True)
class MedicalExam:
    """Uploaded exam file and its analysis state."""

    id: UUID
    user_id: UUID
    name: str
    exam_type: str
    exam_date: date | None
    file_url: str | None
    storage_path: str | None
    status: str
    analysis: dict[str, object] | None
    analyzed_at: datetime | None
