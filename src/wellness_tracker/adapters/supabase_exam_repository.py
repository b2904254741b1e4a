"""Supabase repository for medical exams."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.exams import MedicalExam
from wellness_tracker.services.exams import ExamRepository

_COLUMNS = (
    "id, user_id, name, exam_type, exam_date, file_url, storage_path, status, "
    "analysis, analyzed_at"
)


@dataclass
class SupabaseExamRepository(ExamRepository):
    """Supabase implementation for medical exams."""

    client: Client

    def create_exam(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        exam_type: str,
        exam_date: date | None,
        file_url: str,
        storage_path: str,
    ) -> MedicalExam:
        """Insert a pending exam row."""
        response = (
            self.client.table("medical_exams")
            .insert(
                {
                    "user_id": str(user_id),
                    "name": name,
                    "exam_type": exam_type,
                    "exam_date": exam_date.isoformat() if exam_date else None,
                    "file_url": file_url,
                    "storage_path": storage_path,
                    "status": "pending",
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create medical exam")
        return _parse_exam(response.data[0])

    def get_exam(self, exam_id: UUID) -> MedicalExam | None:
        """Return an exam by id."""
        response = (
            self.client.table("medical_exams")
            .select(_COLUMNS)
            .eq("id", str(exam_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_exam(response.data[0])

    def list_exams(self, user_id: UUID, limit: int) -> list[MedicalExam]:
        """Return the user's newest exams first."""
        response = (
            self.client.table("medical_exams")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_exam(row) for row in response.data or []]

    def list_analyzed_exams(self, user_id: UUID) -> list[MedicalExam]:
        """Return analysed exams, most recent first."""
        response = (
            self.client.table("medical_exams")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("status", "analyzed")
            .order("analyzed_at", desc=True)
            .execute()
        )
        return [_parse_exam(row) for row in response.data or []]

    def update_status(self, exam_id: UUID, status: str) -> None:
        """Set the exam status."""
        self.client.table("medical_exams").update({"status": status}).eq(
            "id", str(exam_id)
        ).execute()

    def save_analysis(
        self,
        exam_id: UUID,
        analysis: dict[str, object],
        raw_text: str,
        analyzed_at: datetime,
    ) -> None:
        """Store the analysis and mark the exam analysed."""
        self.client.table("medical_exams").update(
            {
                "analysis": analysis,
                "raw_analysis_text": raw_text,
                "status": "analyzed",
                "analyzed_at": analyzed_at.isoformat(),
            }
        ).eq("id", str(exam_id)).execute()


def _parse_exam(row: dict[str, object]) -> MedicalExam:
    exam_date = row.get("exam_date")
    analyzed_at = row.get("analyzed_at")
    analysis = row.get("analysis")
    return MedicalExam(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name") or ""),
        exam_type=str(row.get("exam_type") or "other"),
        exam_date=date.fromisoformat(exam_date[:10])
        if isinstance(exam_date, str) and exam_date
        else None,
        file_url=row.get("file_url") or None,
        storage_path=row.get("storage_path") or None,
        status=str(row.get("status") or "pending"),
        analysis=analysis if isinstance(analysis, dict) else None,
        analyzed_at=datetime.fromisoformat(analyzed_at)
        if isinstance(analyzed_at, str) and analyzed_at
        else None,
    )
