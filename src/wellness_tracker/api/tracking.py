"""Exercise, energy, hydration and body measurement endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Request, status

from wellness_tracker.api.dependencies import get_container, require_user
from wellness_tracker.api.schemas import (
    BodyMetricsIn,
    ExerciseIn,
    WaterTargetIn,
    WeeklyGoalIn,
)
from wellness_tracker.domain.body_metrics import BodyMeasurements

if TYPE_CHECKING:
    from wellness_tracker.containers import AppContainer
    from wellness_tracker.domain.body_metrics import BodyMetrics
    from wellness_tracker.domain.exercise import WeeklyExerciseSummary
    from wellness_tracker.domain.water import WaterIntake

router = APIRouter(tags=["tracking"])


@router.get("/exercise/types")
async def exercise_types(request: Request) -> dict[str, object]:
    """Return selectable exercises with their MET values."""
    container: AppContainer = get_container(request)
    return {"types": container.exercise_service.exercise_types()}


@router.post("/exercise", status_code=status.HTTP_201_CREATED)
async def log_exercise(
    body: ExerciseIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Record an exercise session."""
    container: AppContainer = get_container(request)
    record = container.exercise_service.log_exercise(
        user_id,
        body.exercise_type,
        body.minutes,
        intensity=body.intensity,
        notes=body.notes,
        recorded_date=body.recorded_date,
    )
    return {"record": record}


@router.get("/exercise")
async def exercise_history(
    request: Request, limit: int = 30, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return {"records": container.exercise_service.get_history(user_id, limit)}


@router.get("/exercise/weekly")
async def weekly_summary(
    request: Request,
    day: date | None = None,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Return minutes and calories for the week containing ``day``."""
    container: AppContainer = get_container(request)
    summary = container.exercise_service.get_weekly_summary(user_id, day)
    return {"summary": _summary_payload(summary)}


@router.put("/exercise/weekly/goal")
async def set_weekly_goal(
    body: WeeklyGoalIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    summary = container.exercise_service.set_weekly_goal(user_id, body.minutes)
    return {"summary": _summary_payload(summary)}


@router.post("/exercise/weekly/reset")
async def reset_week(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    summary = container.exercise_service.reset_week(user_id)
    return {"summary": _summary_payload(summary)}


@router.get("/energy")
async def energy_metrics(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return the daily calorie target and weekly exercise target."""
    container: AppContainer = get_container(request)
    return {"energy": container.energy_service.get_energy_metrics(user_id)}


@router.get("/water")
async def water_today(
    request: Request,
    day: date | None = None,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return {"water": _water_payload(container.water_service.get_today(user_id, day))}


@router.post("/water/glasses")
async def add_glass(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return {"water": _water_payload(container.water_service.add_glass(user_id))}


@router.delete("/water/glasses")
async def remove_glass(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return {"water": _water_payload(container.water_service.remove_glass(user_id))}


@router.put("/water/target")
async def set_water_target(
    body: WaterTargetIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    intake = container.water_service.set_target_from_weight(user_id, body.weight_kg)
    return {"water": _water_payload(intake)}


@router.get("/water/history")
async def water_history(
    request: Request, days: int = 7, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    history = container.water_service.get_history(user_id, days)
    return {"history": [_water_payload(item) for item in history]}


@router.put("/body-metrics")
async def save_body_metrics(
    body: BodyMetricsIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Store the measurements of the month containing ``day``."""
    container: AppContainer = get_container(request)
    measurements = BodyMeasurements(**body.model_dump(exclude={"day"}))
    metrics = container.body_metrics_service.save(user_id, measurements, body.day)
    return {"metrics": _metrics_payload(metrics)}


@router.get("/body-metrics/history")
async def body_metrics_history(
    request: Request, limit: int = 12, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    history = container.body_metrics_service.get_history(user_id, limit)
    return {"history": [_metrics_payload(item) for item in history]}


@router.get("/body-metrics/{year}/{month}")
async def body_metrics_for_month(
    year: int, month: int, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    metrics = container.body_metrics_service.get_month(user_id, year, month)
    if metrics is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"metrics": _metrics_payload(metrics)}

def _summary_payload(summary: WeeklyExerciseSummary) -> dict[str, object]:
    return {**asdict(summary), "progress_pct": summary.progress_pct}


def _metrics_payload(metrics: BodyMetrics) -> dict[str, object]:
    return {**asdict(metrics), "waist_to_hip_ratio": metrics.waist_to_hip_ratio}


def _water_payload(intake: WaterIntake) -> dict[str, object]:
    return {
        **asdict(intake),
        "glasses": intake.glasses,
        "target_glasses": intake.target_glasses,
        "progress_pct": intake.progress_pct,
    }
