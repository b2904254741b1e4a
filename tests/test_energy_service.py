"""Tests for energy calculations."""

from uuid import uuid4

import pytest

from wellness_tracker.domain.profiles import NutritionProfile, PhysicalData
from wellness_tracker.services.energy import (
    DEFAULT_DAILY_CALORIES,
    WHO_WEEKLY_MINUTES,
    EnergyService,
    calculate_adjusted_calories,
    calculate_bmr,
    calculate_tdee,
    calculate_weekly_exercise_target,
    calories_per_minute,
    met_for,
)
from tests.conftest import make_onboarding_service


def _data(**overrides: object) -> PhysicalData:
    values: dict[str, object] = {
        "age": 30,
        "gender": "male",
        "height_cm": 180,
        "weight_kg": 80,
        "activity_level": "moderately active",
        "goal": None,
    }
    values.update(overrides)
    return PhysicalData(**values)


def test_bmr_uses_mifflin_st_jeor() -> None:
    assert calculate_bmr(_data()) == 1780
    female = _data(gender="Female", weight_kg=60, height_cm=165, age=25)
    assert calculate_bmr(female) == pytest.approx(1345.25)


def test_bmr_requires_complete_data() -> None:
    assert calculate_bmr(_data(age=None)) is None
    assert calculate_tdee(_data(gender=None)) is None


def test_tdee_and_goal_adjustment() -> None:
    assert calculate_tdee(_data()) == 2759
    assert calculate_adjusted_calories(_data(goal="lose weight")) == 2345
    assert calculate_adjusted_calories(_data(goal="something else")) == 2759


def test_unknown_activity_level_uses_sedentary_factor() -> None:
    assert calculate_tdee(_data(activity_level="couch")) == round(1780 * 1.2)


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({"goal": "lose weight", "activity_level": "lightly active"}, 265),
        ({"goal": "lose weight"}, 225),
        ({"goal": "lose weight", "activity_level": "sedentary"}, WHO_WEEKLY_MINUTES),
        ({"goal": "muscle gain", "age": 25, "activity_level": "very active"}, 200),
        ({"weight_kg": 110, "age": 65}, 120),
        ({"activity_level": "athlete"}, 250),
    ],
)
def test_weekly_exercise_target(overrides: dict[str, object], expected: int) -> None:
    assert calculate_weekly_exercise_target(_data(**overrides)) == expected


def test_met_lookup_by_key_or_label() -> None:
    assert met_for("running") == 9.8
    assert met_for("Strength training") == 5.0
    assert met_for("underwater hockey") == 4.0


def test_calories_per_minute() -> None:
    assert calories_per_minute(70, "running") == 12.0
    assert calories_per_minute(None, "running") == 0.0


def test_energy_metrics_default_without_profile() -> None:
    metrics = EnergyService(make_onboarding_service()).get_energy_metrics(uuid4())

    assert metrics.daily_calories == DEFAULT_DAILY_CALORIES
    assert metrics.weekly_exercise_target == WHO_WEEKLY_MINUTES
    assert metrics.physical_data is None


def test_energy_metrics_from_profile() -> None:
    user_id = uuid4()
    profile = NutritionProfile(
        id=user_id,
        age=30,
        gender="male",
        height=180,
        weight=80,
        goal="lose weight",
        activity_level="moderately active",
    )
    service = EnergyService(make_onboarding_service({user_id: profile}))

    metrics = service.get_energy_metrics(user_id)

    assert metrics.daily_calories == 2345
    assert metrics.weekly_exercise_target == 225
    assert metrics.activity_level == "moderately active"
