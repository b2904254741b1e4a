"""Onboarding, supplement and meal plan endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from wellness_tracker.api.dependencies import get_container, require_user
from wellness_tracker.api.schemas import MealPlanIn, SupplementAdviceIn, SupplementIn
from wellness_tracker.domain.meal_plans import MealPlanRequest
from wellness_tracker.domain.supplements import SupplementAdvice, SupplementDraft

if TYPE_CHECKING:
    from wellness_tracker.containers import AppContainer

router = APIRouter(tags=["profiles"])


@router.get("/onboarding")
async def onboarding_status(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return the stored profile and whether onboarding is complete."""
    container: AppContainer = get_container(request)
    return {
        "completed": container.onboarding_service.has_completed(user_id),
        "profile": container.onboarding_service.get_profile(user_id),
    }


@router.put("/onboarding")
async def save_onboarding(
    request: Request,
    form: dict[str, object] = Body(...),
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Merge questionnaire answers into the user's profile."""
    container: AppContainer = get_container(request)
    if not form:
        raise HTTPException(status_code=422, detail="Form is empty")
    profile = container.onboarding_service.save(user_id, form)
    return {
        "completed": container.onboarding_service.has_completed(user_id),
        "profile": profile,
    }


@router.get("/onboarding/physical")
async def physical_data(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return {"physical": container.onboarding_service.get_physical_data(user_id)}


@router.post("/meal-plans", status_code=status.HTTP_201_CREATED)
async def generate_plan(
    body: MealPlanIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Generate and store a meal plan."""
    container: AppContainer = get_container(request)
    plan = container.meal_plan_service.generate(
        user_id, MealPlanRequest(**body.model_dump())
    )
    return {"plan": plan}


@router.get("/meal-plans")
async def list_plans(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return {"plans": container.meal_plan_service.list_plans(user_id)}


@router.get("/meal-plans/latest")
async def latest_plan(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    plan = container.meal_plan_service.get_latest(user_id)
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"plan": plan}


@router.get("/supplements")
async def list_supplements(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return {"supplements": container.supplement_service.list_supplements(user_id)}


@router.post("/supplements", status_code=status.HTTP_201_CREATED)
async def add_supplement(
    body: SupplementIn, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Record a supplement the user takes."""
    container: AppContainer = get_container(request)
    supplement = container.supplement_service.add_supplement(
        user_id, SupplementDraft(**body.model_dump())
    )
    return {"supplement": supplement}


@router.put("/supplements/{supplement_id}")
async def update_supplement(
    supplement_id: UUID,
    body: SupplementIn,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    supplement = container.supplement_service.update_supplement(
        user_id, supplement_id, SupplementDraft(**body.model_dump())
    )
    if supplement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"supplement": supplement}


@router.delete("/supplements/{supplement_id}")
async def delete_supplement(
    supplement_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    container: AppContainer = get_container(request)
    if not container.supplement_service.delete_supplement(user_id, supplement_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "deleted"}


@router.get("/supplements/recommendations")
async def list_supplement_recommendations(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return {
        "recommendations": container.supplement_service.list_recommendations(user_id)
    }


@router.post("/supplements/recommendations", status_code=status.HTTP_201_CREATED)
async def add_supplement_recommendations(
    body: list[SupplementAdviceIn],
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Store supplement suggestions, lowest priority number first when listed."""
    container: AppContainer = get_container(request)
    stored = container.supplement_service.add_recommendations(
        user_id, [SupplementAdvice(**item.model_dump()) for item in body]
    )
    return {"recommendations": stored}
