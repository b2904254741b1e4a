"""Medical exam and progress photo endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Request, status

from wellness_tracker.api.dependencies import get_container, require_user
from wellness_tracker.api.schemas import ExamUploadIn, ProgressPhotoIn, decode_base64

if TYPE_CHECKING:
    from wellness_tracker.containers import AppContainer
    from wellness_tracker.domain.exams import MedicalExam

router = APIRouter(tags=["records"])


@router.get("/exams")
async def list_exams(
    request: Request, limit: int = 20, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return {"exams": container.exam_service.list_exams(user_id, limit)}


@router.post("/exams", status_code=status.HTTP_201_CREATED)
async def upload_exam(
    body: ExamUploadIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Store an exam file and analyse it unless asked not to."""
    container: AppContainer = get_container(request)
    exam = container.exam_service.upload_exam(
        user_id,
        body.name,
        body.exam_type,
        decode_base64(body.content_base64),
        extension=body.extension,
        exam_date=body.exam_date,
    )
    if body.analyze:
        await container.exam_service.process_exam(exam.id)
        exam = container.exam_service.get_exam(exam.id) or exam
    return {"exam": exam}


@router.get("/exams/insights")
async def exam_insights(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return nutrition advice merged from all analysed exams."""
    container: AppContainer = get_container(request)
    insights = container.exam_service.get_nutrition_insights(user_id)
    return {
        "recommendations": insights.recommendations,
        "foods_to_increase": [a.model_dump() for a in insights.foods_to_increase],
        "foods_to_reduce": [a.model_dump() for a in insights.foods_to_reduce],
    }


@router.get("/exams/{exam_id}")
async def get_exam(
    exam_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return {"exam": _owned_exam(container, exam_id, user_id)}


@router.post("/exams/{exam_id}/analyze")
async def analyze_exam(
    exam_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Run or re-run the analysis of a pending exam."""
    container: AppContainer = get_container(request)
    _owned_exam(container, exam_id, user_id)
    processed = await container.exam_service.process_exam(exam_id)
    return {
        "processed": processed,
        "exam": container.exam_service.get_exam(exam_id),
    }


@router.get("/progress-photos")
async def list_photos(
    request: Request, limit: int = 20, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return {"photos": container.progress_photo_service.list_photos(user_id, limit)}


@router.post("/progress-photos", status_code=status.HTTP_201_CREATED)
async def upload_photo(
    body: ProgressPhotoIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Store a body photo together with its analysis."""
    container: AppContainer = get_container(request)
    photo = await container.progress_photo_service.upload_photo(
        user_id, decode_base64(body.image_base64), body.photo_type, body.notes
    )
    return {"photo": photo}


@router.post("/progress-photos/{photo_id}/analyze")
async def reanalyze_photo(
    photo_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    photo = await container.progress_photo_service.reanalyze(user_id, photo_id)
    if photo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"photo": photo}


@router.delete("/progress-photos/{photo_id}")
async def delete_photo(
    photo_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    container: AppContainer = get_container(request)
    if not container.progress_photo_service.delete_photo(user_id, photo_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "deleted"}


def _owned_exam(container: AppContainer, exam_id: UUID, user_id: UUID) -> MedicalExam:
    exam = container.exam_service.get_exam(exam_id)
    if exam is None or exam.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return exam
