"""Energy expenditure and exercise target calculations."""

from dataclasses import dataclass
from uuid import UUID

from wellness_tracker.domain.exercise import ExerciseType
from wellness_tracker.domain.profiles import PhysicalData
from wellness_tracker.services.onboarding import OnboardingService

DEFAULT_DAILY_CALORIES = 2000
WHO_WEEKLY_MINUTES = 150
DEFAULT_MET = 4.0

EXERCISE_TYPES: tuple[ExerciseType, ...] = (
    ExerciseType("light_walk", "Light walk", 2.5),
    ExerciseType("yoga", "Yoga", 3.0),
    ExerciseType("stretching", "Stretching", 2.3),
    ExerciseType("brisk_walk", "Brisk walk", 4.3),
    ExerciseType("light_cycling", "Light cycling", 5.0),
    ExerciseType("light_swimming", "Light swimming", 5.0),
    ExerciseType("running", "Running", 9.8),
    ExerciseType("hiit", "HIIT", 8.0),
    ExerciseType("intense_cycling", "Intense cycling", 8.0),
    ExerciseType("strength_training", "Strength training", 5.0),
    ExerciseType("soccer", "Soccer", 7.0),
    ExerciseType("basketball", "Basketball", 6.5),
    ExerciseType("tennis", "Tennis", 7.0),
    ExerciseType("other", "Other", DEFAULT_MET),
)

_ACTIVITY_FACTORS: dict[str, float] = {
    "sedentary": 1.2,
    "sedentário": 1.2,
    "sedentario": 1.2,
    "light": 1.375,
    "lightly active": 1.375,
    "leve": 1.375,
    "levemente ativo": 1.375,
    "moderate": 1.55,
    "moderately active": 1.55,
    "moderado": 1.55,
    "moderadamente ativo": 1.55,
    "active": 1.725,
    "very active": 1.725,
    "ativo": 1.725,
    "muito ativo": 1.725,
    "extremely active": 1.9,
    "athlete": 1.9,
    "extremamente ativo": 1.9,
    "atlético": 1.9,
    "atletico": 1.9,
}

_GOAL_FACTORS: dict[str, float] = {
    "lose": 0.85,
    "weight loss": 0.85,
    "lose weight": 0.85,
    "perda de peso": 0.85,
    "emagrecimento": 0.85,
    "gain": 1.1,
    "muscle gain": 1.1,
    "ganho de massa": 1.1,
    "hipertrofia": 1.1,
}


@dataclass(frozen=True)
class EnergyMetrics:
    """Daily calorie need and weekly exercise target for a user."""

    daily_calories: int
    weekly_exercise_target: int
    activity_level: str
    physical_data: PhysicalData | None


def calculate_bmr(data: PhysicalData) -> float | None:
    """Basal metabolic rate with the Mifflin-St Jeor equation."""
    if not (data.weight_kg and data.height_cm and data.age and data.gender):
        return None
    base = 10 * data.weight_kg + 6.25 * data.height_cm - 5 * data.age
    if data.gender.lower() in {"female", "woman", "f", "feminino", "mulher"}:
        return base - 161
    return base + 5


def activity_factor(activity_level: str | None) -> float:
    if not activity_level:
        return 1.2
    return _ACTIVITY_FACTORS.get(activity_level.strip().lower(), 1.2)


def goal_factor(goal: str | None) -> float:
    if not goal:
        return 1.0
    return _GOAL_FACTORS.get(goal.strip().lower(), 1.0)


def calculate_tdee(data: PhysicalData) -> int | None:
    """Total daily energy expenditure."""
    bmr = calculate_bmr(data)
    if bmr is None:
        return None
    return round(bmr * activity_factor(data.activity_level))


def calculate_adjusted_calories(data: PhysicalData) -> int | None:
    """TDEE adjusted for the user's goal."""
    tdee = calculate_tdee(data)
    if tdee is None:
        return None
    return round(tdee * goal_factor(data.goal))


def calculate_weekly_exercise_target(data: PhysicalData) -> int:  # noqa: PLR0912
    """Weekly exercise minutes starting from the WHO baseline."""
    target: float = WHO_WEEKLY_MINUTES
    activity = (data.activity_level or "").lower()

    if data.goal:
        goal = data.goal.lower()
        if any(word in goal for word in ("perda", "loss", "lose", "emagrec")):
            low_activity = any(
                word in activity for word in ("sedent", "light", "leve")
            )
            target = 265 if low_activity else 225
        elif any(word in goal for word in ("muscul", "muscle", "hipertrofia")):
            target = 180
        elif any(word in goal for word in ("resist", "endurance", "capacidade")):
            target = 200

    if data.weight_kg and data.weight_kg > 90:
        adjustment = min(30.0, (data.weight_kg - 90) / 2)
        target = max(WHO_WEEKLY_MINUTES, target - adjustment)

    if data.age:
        if data.age > 60:
            target = max(120, target - 30)
        elif data.age < 30:
            target += 15

    if "sedent" in activity:
        target = min(target, WHO_WEEKLY_MINUTES)
    elif "very active" in activity or ("ativo" in activity and "muito" in activity):
        target = max(target, 200)
    elif any(word in activity for word in ("extrem", "athlete", "atlético")):
        target = max(target, 250)

    return round(target)


def met_for(exercise_type: str) -> float:
    key = exercise_type.strip().lower()
    for entry in EXERCISE_TYPES:
        if key in {entry.key, entry.label.lower()}:
            return entry.met
    return DEFAULT_MET


def calories_per_minute(weight_kg: float | None, exercise_type: str) -> float:
    """Estimated kcal burned per minute for an activity."""
    if not weight_kg:
        return 0.0
    return round(met_for(exercise_type) * 3.5 * weight_kg / 200, 1)


@dataclass
class EnergyService:
    """Computes energy metrics from the stored profile."""

    onboarding_service: OnboardingService

    def get_energy_metrics(self, user_id: UUID) -> EnergyMetrics:
        """Return calorie and exercise targets, defaulting when data is missing."""
        data = self.onboarding_service.get_physical_data(user_id)
        if data is None:
            return EnergyMetrics(
                daily_calories=DEFAULT_DAILY_CALORIES,
                weekly_exercise_target=WHO_WEEKLY_MINUTES,
                activity_level="moderate",
                physical_data=None,
            )
        return EnergyMetrics(
            daily_calories=calculate_adjusted_calories(data) or DEFAULT_DAILY_CALORIES,
            weekly_exercise_target=calculate_weekly_exercise_target(data),
            activity_level=data.activity_level,
            physical_data=data,
        )
