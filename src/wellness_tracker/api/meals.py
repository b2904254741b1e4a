"""Meal logging, food analysis and nutrition stats endpoints."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, HTTPException, Request, status

from wellness_tracker.api.dependencies import get_container, require_user
from wellness_tracker.api.schemas import (
    ImageIn,
    MealIn,
    MealStatusIn,
    ResetDayIn,
    TextAnalysisIn,
    decode_base64,
)
from wellness_tracker.domain.meals import MealDraft

if TYPE_CHECKING:
    from wellness_tracker.containers import AppContainer

router = APIRouter(tags=["meals"])


@router.post("/meals/analyze-image")
async def analyze_image(
    body: ImageIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Estimate the nutrition of a food photo."""
    container: AppContainer = get_container(request)
    analysis = await container.food_analysis_service.analyze_image(
        decode_base64(body.image_base64), user_id=user_id
    )
    return {"analysis": analysis.model_dump(by_alias=True)}


@router.post("/meals/analyze-text")
async def analyze_text(
    body: TextAnalysisIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Estimate macros from a meal description."""
    container: AppContainer = get_container(request)
    estimate = await container.food_analysis_service.analyze_text(
        body.description, body.foods
    )
    return {"estimate": estimate.model_dump()}


@router.post("/meals/photos")
async def upload_meal_photo(
    body: ImageIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Store a meal photo and return its URL."""
    container: AppContainer = get_container(request)
    url = container.meal_service.upload_photo(
        user_id, decode_base64(body.image_base64)
    )
    return {"photo_url": url}


@router.post("/meals", status_code=status.HTTP_201_CREATED)
async def save_meal(
    body: MealIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Store a meal."""
    container: AppContainer = get_container(request)
    meal = container.meal_service.save_meal(
        user_id, MealDraft(**body.model_dump())
    )
    return {"meal": meal}


@router.get("/meals")
async def meal_history(
    request: Request, limit: int = 20, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return the newest meals."""
    container: AppContainer = get_container(request)
    return {"meals": container.meal_service.get_history(user_id, limit)}


@router.get("/meals/statistics")
async def meal_statistics(
    request: Request, days: int = 7, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return meal counts and average macros."""
    container: AppContainer = get_container(request)
    return {"statistics": container.meal_service.get_statistics(user_id, days)}


@router.get("/meals/status")
async def day_status(
    request: Request,
    day: date | None = None,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Return the status of each planned meal for a day."""
    container: AppContainer = get_container(request)
    resolved = day or datetime.now(tz=UTC).date()
    return {
        "date": resolved,
        "statuses": container.meal_service.get_day_status(user_id, resolved),
    }


@router.put("/meals/status")
async def set_status(
    body: MealStatusIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Mark a planned meal as upcoming or completed."""
    container: AppContainer = get_container(request)
    result = container.meal_service.set_status(
        user_id,
        body.day or datetime.now(tz=UTC).date(),
        body.meal_id,
        body.status,
        body.meal_data,
    )
    return {"status": result}


@router.post("/meals/status/reset")
async def reset_day(
    body: ResetDayIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Reset every meal of a day back to upcoming."""
    container: AppContainer = get_container(request)
    statuses = container.meal_service.reset_day(
        user_id, body.day or datetime.now(tz=UTC).date(), body.meals
    )
    return {"statuses": statuses}


@router.post("/meals/summary")
async def generate_summary(
    request: Request, day: date | None = None, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Recompute the stored nutrition summary of a day."""
    container: AppContainer = get_container(request)
    summary = container.meal_service.generate_daily_summary(
        user_id, day or datetime.now(tz=UTC).date()
    )
    return {"summary": summary, "adherence_rate": summary.adherence_rate}


@router.delete("/meals/{meal_id}")
async def delete_meal(
    meal_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    """Delete one of the user's meals."""
    container: AppContainer = get_container(request)
    if not container.meal_service.delete_meal(user_id, meal_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "deleted"}


@router.get("/stats/today")
async def stats_today(
    request: Request, timezone: str = "UTC", user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    _check_timezone(timezone)
    return {"today": container.stats_service.get_today(user_id, timezone)}


@router.get("/stats/week")
async def stats_week(
    request: Request, timezone: str = "UTC", user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    _check_timezone(timezone)
    return {"week": container.stats_service.get_week(user_id, timezone)}


@router.get("/stats/month")
async def stats_month(
    request: Request, timezone: str = "UTC", user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    _check_timezone(timezone)
    return {"month": container.stats_service.get_month(user_id, timezone)}


def _check_timezone(value: str) -> None:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown timezone: {value}",
        ) from exc
