"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from wellness_tracker.adapters.openai_completion_client import OpenAICompletionClient
from wellness_tracker.adapters.supabase_adherence_repository import (
    SupabaseAdherenceRepository,
    SupabaseProgressRepository,
)
from wellness_tracker.adapters.supabase_auth_client import SupabaseAuthClient
from wellness_tracker.adapters.supabase_body_metrics_repository import (
    SupabaseBodyMetricsRepository,
)
from wellness_tracker.adapters.supabase_exam_repository import SupabaseExamRepository
from wellness_tracker.adapters.supabase_exercise_repository import (
    SupabaseExerciseRepository,
)
from wellness_tracker.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from wellness_tracker.adapters.supabase_meal_repository import (
    SupabaseMealRepository,
    SupabaseMealStatusRepository,
)
from wellness_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from wellness_tracker.adapters.supabase_progress_photo_repository import (
    SupabaseProgressPhotoRepository,
)
from wellness_tracker.adapters.supabase_reference_repository import (
    SupabaseReferenceRepository,
)
from wellness_tracker.adapters.supabase_storage import SupabaseFileStorage
from wellness_tracker.adapters.supabase_supplement_repository import (
    SupabaseSupplementRepository,
)
from wellness_tracker.adapters.supabase_water_repository import (
    SupabaseWaterRepository,
)
from wellness_tracker.config import Settings, parse_allowed_user_ids
from wellness_tracker.services.adherence import AdherenceService
from wellness_tracker.services.admin import AdminService
from wellness_tracker.services.auth import AuthService
from wellness_tracker.services.body_metrics import BodyMetricsService
from wellness_tracker.services.cache import InMemoryCache
from wellness_tracker.services.energy import EnergyService
from wellness_tracker.services.exams import ExamService
from wellness_tracker.services.exercise import ExerciseService
from wellness_tracker.services.food_analysis import FoodAnalysisService
from wellness_tracker.services.meal_plans import MealPlanService
from wellness_tracker.services.meals import MealService
from wellness_tracker.services.onboarding import OnboardingService
from wellness_tracker.services.progress import ProgressService
from wellness_tracker.services.progress_photos import ProgressPhotoService
from wellness_tracker.services.references import ReferenceService
from wellness_tracker.services.stats import StatsService
from wellness_tracker.services.supplements import SupplementService
from wellness_tracker.services.water import WaterService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    onboarding_service: OnboardingService
    food_analysis_service: FoodAnalysisService
    meal_service: MealService
    stats_service: StatsService
    exercise_service: ExerciseService
    energy_service: EnergyService
    water_service: WaterService
    exam_service: ExamService
    progress_photo_service: ProgressPhotoService
    adherence_service: AdherenceService
    progress_service: ProgressService
    meal_plan_service: MealPlanService
    supplement_service: SupplementService
    body_metrics_service: BodyMetricsService
    admin_service: AdminService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    storage = SupabaseFileStorage(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)
    openai_client = OpenAICompletionClient.create(resolved_settings.openai_api_key)

    auth_service = AuthService(
        client=SupabaseAuthClient(supabase_client),
        allowed_user_ids=parse_allowed_user_ids(resolved_settings.allowed_user_ids),
    )
    supplement_service = SupplementService(
        SupabaseSupplementRepository(supabase_client)
    )
    onboarding_service = OnboardingService(
        SupabaseProfileRepository(supabase_client),
        InMemoryCache(),
        supplement_service=supplement_service,
    )
    reference_service = ReferenceService(SupabaseReferenceRepository(supabase_client))
    food_analysis_service = FoodAnalysisService(
        client=openai_client,
        model=resolved_settings.openai_model,
        text_model=resolved_settings.openai_text_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        reference_service=reference_service,
        onboarding_service=onboarding_service,
    )
    meal_service = MealService(
        repository=meal_repository,
        status_repository=SupabaseMealStatusRepository(supabase_client),
        storage=storage,
    )
    energy_service = EnergyService(onboarding_service)
    exercise_service = ExerciseService(
        repository=SupabaseExerciseRepository(supabase_client),
        energy_service=energy_service,
        onboarding_service=onboarding_service,
    )
    water_service = WaterService(
        SupabaseWaterRepository(supabase_client), onboarding_service
    )
    exam_service = ExamService(
        repository=SupabaseExamRepository(supabase_client),
        storage=storage,
        client=openai_client,
        model=resolved_settings.openai_text_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        reference_service=reference_service,
        onboarding_service=onboarding_service,
    )
    progress_photo_service = ProgressPhotoService(
        repository=SupabaseProgressPhotoRepository(supabase_client),
        storage=storage,
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        reference_service=reference_service,
        onboarding_service=onboarding_service,
    )
    adherence_service = AdherenceService(SupabaseAdherenceRepository(supabase_client))
    admin_service = AdminService(
        onboarding_service=onboarding_service,
        meal_service=meal_service,
        adherence_service=adherence_service,
        exam_service=exam_service,
        reference_service=reference_service,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        onboarding_service=onboarding_service,
        food_analysis_service=food_analysis_service,
        meal_service=meal_service,
        stats_service=StatsService(meal_repository),
        exercise_service=exercise_service,
        energy_service=energy_service,
        water_service=water_service,
        exam_service=exam_service,
        progress_photo_service=progress_photo_service,
        adherence_service=adherence_service,
        progress_service=ProgressService(SupabaseProgressRepository(supabase_client)),
        meal_plan_service=MealPlanService(
            SupabaseMealPlanRepository(supabase_client), onboarding_service
        ),
        supplement_service=supplement_service,
        body_metrics_service=BodyMetricsService(
            SupabaseBodyMetricsRepository(supabase_client)
        ),
        admin_service=admin_service,
        close_resources=close_resources,
    )
