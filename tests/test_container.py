"""Tests for container wiring."""

import asyncio

from wellness_tracker.config import Settings
from wellness_tracker.containers import build_container


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert container.settings is settings
    assert container.meal_plan_service is not None
    assert container.exam_service.model == settings.openai_text_model
    assert container.food_analysis_service.model == settings.openai_model
    assert container.auth_service.allowed_user_ids is None
    assert (
        container.onboarding_service.supplement_service
        is container.supplement_service
    )
    assert container.body_metrics_service is not None
    asyncio.run(container.close_resources())
