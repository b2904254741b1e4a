"""Adherence and progress analytics endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, Response

from wellness_tracker.api.dependencies import get_container, require_user
from wellness_tracker.services.adherence import (
    adherence_level,
    generate_insights,
    motivational_message,
)

if TYPE_CHECKING:
    from wellness_tracker.containers import AppContainer

DEFAULT_RANGE_DAYS = 30

router = APIRouter(tags=["analytics"])


@router.get("/adherence")
async def adherence_metrics(
    request: Request,
    start: date | None = None,
    end: date | None = None,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Return adherence totals, level, message and insights for a range."""
    container: AppContainer = get_container(request)
    start, end = _resolve_range(start, end)
    metrics = container.adherence_service.calculate_metrics(user_id, start, end)
    if metrics is None:
        return {"metrics": None, "level": None, "message": None, "insights": []}
    daily = container.adherence_service.get_daily(user_id, start, end)
    return {
        "metrics": metrics,
        "level": adherence_level(metrics.adherence_rate),
        "message": motivational_message(metrics),
        "insights": generate_insights(daily),
    }


@router.get("/adherence/daily")
async def adherence_daily(
    request: Request,
    start: date | None = None,
    end: date | None = None,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    start, end = _resolve_range(start, end)
    daily = container.adherence_service.get_daily(user_id, start, end)
    return {
        "days": [
            {**asdict(day), "adherence_rate": day.adherence_rate} for day in daily
        ]
    }


@router.get("/progress/metrics")
async def progress_metrics(
    request: Request,
    start: date | None = None,
    end: date | None = None,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    start, end = _resolve_range(start, end)
    return {"metrics": container.progress_service.get_metrics(user_id, start, end)}


@router.get("/progress/streaks")
async def progress_streaks(
    request: Request, min_adherence: int = 80, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return {"streaks": container.progress_service.get_streaks(user_id, min_adherence)}


@router.get("/progress/insights")
async def progress_insights(
    request: Request, days: int = 30, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return {"insights": container.progress_service.generate_insights(user_id, days)}


@router.get("/progress/weekdays")
async def weekday_averages(
    request: Request,
    start: date | None = None,
    end: date | None = None,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    start, end = _resolve_range(start, end)
    averages = container.progress_service.get_weekday_averages(user_id, start, end)
    return {"weekdays": averages}


@router.get("/progress/export")
async def export_csv(
    request: Request,
    start: date | None = None,
    end: date | None = None,
    user_id: UUID = Depends(require_user),
) -> Response:
    """Download metrics for a range as CSV."""
    container: AppContainer = get_container(request)
    start, end = _resolve_range(start, end)
    content = container.progress_service.export_csv(user_id, start, end)
    filename = f"nutrition-progress-{start.isoformat()}-{end.isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/progress/compare")
async def compare_periods(  # noqa: PLR0913
    request: Request,
    previous_start: date,
    previous_end: date,
    current_start: date,
    current_end: date,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Compare average intake between two periods."""
    container: AppContainer = get_container(request)
    comparison = container.progress_service.compare_periods(
        user_id, (previous_start, previous_end), (current_start, current_end)
    )
    return {"comparison": comparison}


def _resolve_range(start: date | None, end: date | None) -> tuple[date, date]:
    resolved_end = end or datetime.now(tz=UTC).date()
    resolved_start = start or resolved_end - timedelta(days=DEFAULT_RANGE_DAYS - 1)
    return resolved_start, resolved_end
