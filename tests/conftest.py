"""Shared test fixtures."""

import random
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from wellness_tracker.config import Settings
from wellness_tracker.containers import AppContainer
from wellness_tracker.domain.adherence import AdherenceStreaks, DailyAdherence
from wellness_tracker.domain.body_metrics import BodyMeasurements, BodyMetrics
from wellness_tracker.domain.exams import MedicalExam
from wellness_tracker.domain.exercise import ExerciseRecord, WeeklyExerciseSummary
from wellness_tracker.domain.meal_plans import MealPlan
from wellness_tracker.domain.meals import (
    DailyNutritionSummary,
    MealDraft,
    MealRecord,
    MealStatus,
)
from wellness_tracker.domain.photos import ProgressPhoto
from wellness_tracker.domain.profiles import NutritionProfile
from wellness_tracker.domain.progress import (
    NutritionInsight,
    ProgressMetric,
    WeekdayAverage,
)
from wellness_tracker.domain.supplements import (
    SupplementAdvice,
    SupplementDraft,
    UserSupplement,
)
from wellness_tracker.domain.water import WaterIntake
from wellness_tracker.services.adherence import AdherenceRepository, AdherenceService
from wellness_tracker.services.admin import AdminService
from wellness_tracker.services.auth import AuthClient, AuthService
from wellness_tracker.services.body_metrics import (
    BodyMetricsRepository,
    BodyMetricsService,
)
from wellness_tracker.services.cache import InMemoryCache
from wellness_tracker.services.completions import CompletionClient
from wellness_tracker.services.energy import EnergyService
from wellness_tracker.services.exams import ExamRepository, ExamService
from wellness_tracker.services.exercise import ExerciseRepository, ExerciseService
from wellness_tracker.services.food_analysis import FoodAnalysisService
from wellness_tracker.services.meal_plans import MealPlanRepository, MealPlanService
from wellness_tracker.services.meals import (
    MealRepository,
    MealService,
    MealStatusRepository,
)
from wellness_tracker.services.onboarding import OnboardingService, ProfileRepository
from wellness_tracker.services.progress import ProgressRepository, ProgressService
from wellness_tracker.services.progress_photos import (
    ProgressPhotoRepository,
    ProgressPhotoService,
)
from wellness_tracker.services.references import ReferenceRepository, ReferenceService
from wellness_tracker.services.stats import StatsRepository, StatsService
from wellness_tracker.services.storage import FileStorage
from wellness_tracker.services.supplements import (
    SupplementRepository,
    SupplementService,
)
from wellness_tracker.services.water import WaterRepository, WaterService

USER_TOKEN = "user-token"


@dataclass
class FakeCompletionClient(CompletionClient):
    """Fake completion client returning queued responses."""

    responses: list[str] = field(default_factory=list)
    default: str = "{}"
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        image_data_url: str | None = None,
        json_output: bool = True,
    ) -> str:
        self.calls.append(
            {"model": model, "prompt": prompt, "image_data_url": image_data_url}
        )
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return self.default


@dataclass
class FakeFileStorage(FileStorage):
    """In-memory bucket storage."""

    files: dict[tuple[str, str], bytes] = field(default_factory=dict)
    removed: list[tuple[str, str]] = field(default_factory=list)

    def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        self.files[(bucket, path)] = data
        return f"https://storage.test/{bucket}/{path}"

    def download(self, bucket: str, path: str) -> bytes:
        return self.files[(bucket, path)]

    def remove(self, bucket: str, paths: list[str]) -> None:
        for path in paths:
            self.files.pop((bucket, path), None)
            self.removed.append((bucket, path))


@dataclass
class FakeAuthClient(AuthClient):
    """Maps fixed tokens to user ids."""

    tokens: dict[str, UUID] = field(default_factory=dict)

    def get_user_id(self, access_token: str) -> UUID | None:
        return self.tokens.get(access_token)


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, NutritionProfile] = field(default_factory=dict)
    reads: int = 0

    def get_profile(self, user_id: UUID) -> NutritionProfile | None:
        self.reads += 1
        return self.profiles.get(user_id)

    def upsert_profile(
        self, user_id: UUID, payload: dict[str, object]
    ) -> NutritionProfile:
        current = self.profiles.get(user_id) or NutritionProfile(id=user_id)
        restrictions = payload.get("dietary_restrictions")
        profile = replace(
            current,
            name=payload.get("name") or current.name,
            age=payload.get("age") or current.age,
            gender=payload.get("gender") or current.gender,
            height=payload.get("height") or current.height,
            weight=payload.get("weight") or current.weight,
            goal=payload.get("goal") or current.goal,
            activity_level=payload.get("activity_level") or current.activity_level,
            dietary_restrictions=list(restrictions)
            if isinstance(restrictions, list)
            else current.dietary_restrictions,
            onboarding_data=dict(payload.get("onboarding_data") or {}),
            updated_at=datetime.now(tz=UTC),
        )
        self.profiles[user_id] = profile
        return profile

    def list_profiles(self) -> list[NutritionProfile]:
        return list(self.profiles.values())


@dataclass
class InMemoryReferenceRepository(ReferenceRepository):
    """In-memory reference materials."""

    materials: list[dict[str, object]] = field(default_factory=list)
    error: Exception | None = None

    def list_active_materials(self) -> list[dict[str, object]]:
        if self.error is not None:
            raise self.error
        return self.materials


@dataclass
class InMemoryMealRepository(MealRepository, StatsRepository):
    """In-memory meal repository for tests."""

    meals: list[MealRecord] = field(default_factory=list)
    summaries: dict[tuple[UUID, date], DailyNutritionSummary] = field(
        default_factory=dict
    )

    def create_meal(
        self, user_id: UUID, draft: MealDraft, logged_at: datetime
    ) -> MealRecord:
        meal = MealRecord(
            id=uuid4(),
            user_id=user_id,
            meal_type=draft.meal_type,
            description=draft.description,
            foods=list(draft.foods),
            calories=draft.calories,
            protein=draft.protein,
            carbs=draft.carbs,
            fat=draft.fat,
            photo_url=draft.photo_url,
            logged_at=logged_at,
        )
        self.meals.append(meal)
        return meal

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[MealRecord]:
        owned = [meal for meal in self.meals if meal.user_id == user_id]
        return sorted(owned, key=lambda meal: meal.logged_at, reverse=True)[:limit]

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        return [
            meal
            for meal in self.meals
            if meal.user_id == user_id and start <= meal.logged_at < end
        ]

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        for meal in self.meals:
            if meal.id == meal_id and meal.user_id == user_id:
                self.meals.remove(meal)
                return True
        return False

    def upsert_daily_summary(self, summary: DailyNutritionSummary) -> None:
        self.summaries[(summary.user_id, summary.day)] = summary


@dataclass
class InMemoryMealStatusRepository(MealStatusRepository):
    """In-memory daily meal status."""

    statuses: dict[tuple[UUID, date, str], MealStatus] = field(default_factory=dict)
    history: list[tuple[UUID, date, list[MealStatus]]] = field(default_factory=list)

    def list_statuses(self, user_id: UUID, day: date) -> list[MealStatus]:
        return [
            status
            for (owner, status_day, _), status in self.statuses.items()
            if owner == user_id and status_day == day
        ]

    def upsert_status(
        self,
        user_id: UUID,
        day: date,
        meal_id: str,
        status: str,
        meal_data: dict[str, object],
    ) -> MealStatus:
        record = MealStatus(
            meal_id=meal_id, day=day, status=status, meal_data=meal_data
        )
        self.statuses[(user_id, day, meal_id)] = record
        return record

    def delete_statuses(self, user_id: UUID, day: date) -> None:
        for key in [k for k in self.statuses if k[0] == user_id and k[1] == day]:
            del self.statuses[key]

    def save_history(
        self, user_id: UUID, day: date, statuses: list[MealStatus]
    ) -> None:
        self.history.append((user_id, day, list(statuses)))


@dataclass
class InMemoryExerciseRepository(ExerciseRepository):
    """In-memory exercise records and weekly summaries."""

    records: list[ExerciseRecord] = field(default_factory=list)
    summaries: dict[tuple[UUID, date], WeeklyExerciseSummary] = field(
        default_factory=dict
    )

    def create_record(  # noqa: PLR0913
        self,
        user_id: UUID,
        exercise_type: str,
        minutes: int,
        calories_burned: float,
        intensity: str,
        recorded_date: date,
        notes: str | None,
    ) -> ExerciseRecord:
        record = ExerciseRecord(
            id=uuid4(),
            user_id=user_id,
            exercise_type=exercise_type,
            minutes=minutes,
            calories_burned=calories_burned,
            intensity=intensity,
            recorded_date=recorded_date,
            notes=notes,
        )
        self.records.append(record)
        return record

    def list_records(self, user_id: UUID, limit: int) -> list[ExerciseRecord]:
        owned = [r for r in self.records if r.user_id == user_id]
        return list(reversed(owned))[:limit]

    def get_weekly_summary(
        self, user_id: UUID, week_start: date
    ) -> WeeklyExerciseSummary | None:
        return self.summaries.get((user_id, week_start))

    def upsert_weekly_summary(
        self, user_id: UUID, summary: WeeklyExerciseSummary
    ) -> WeeklyExerciseSummary:
        self.summaries[(user_id, summary.week_start)] = summary
        return summary


@dataclass
class InMemoryWaterRepository(WaterRepository):
    """In-memory water intake rows."""

    rows: dict[tuple[UUID, date], WaterIntake] = field(default_factory=dict)

    def get_intake(self, user_id: UUID, day: date) -> WaterIntake | None:
        return self.rows.get((user_id, day))

    def upsert_intake(self, user_id: UUID, intake: WaterIntake) -> WaterIntake:
        self.rows[(user_id, intake.day)] = intake
        return intake

    def list_intake(self, user_id: UUID, start: date, end: date) -> list[WaterIntake]:
        return sorted(
            (
                row
                for (owner, day), row in self.rows.items()
                if owner == user_id and start <= day <= end
            ),
            key=lambda row: row.day,
        )


@dataclass
class InMemoryExamRepository(ExamRepository):
    """In-memory medical exams."""

    exams: dict[UUID, MedicalExam] = field(default_factory=dict)
    status_history: list[tuple[UUID, str]] = field(default_factory=list)
    raw_texts: dict[UUID, str] = field(default_factory=dict)

    def create_exam(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        exam_type: str,
        exam_date: date | None,
        file_url: str,
        storage_path: str,
    ) -> MedicalExam:
        exam = MedicalExam(
            id=uuid4(),
            user_id=user_id,
            name=name,
            exam_type=exam_type,
            exam_date=exam_date,
            file_url=file_url,
            storage_path=storage_path,
            status="pending",
            analysis=None,
            analyzed_at=None,
        )
        self.exams[exam.id] = exam
        return exam

    def get_exam(self, exam_id: UUID) -> MedicalExam | None:
        return self.exams.get(exam_id)

    def list_exams(self, user_id: UUID, limit: int) -> list[MedicalExam]:
        return [e for e in self.exams.values() if e.user_id == user_id][:limit]

    def list_analyzed_exams(self, user_id: UUID) -> list[MedicalExam]:
        return [
            e
            for e in self.exams.values()
            if e.user_id == user_id and e.status == "analyzed"
        ]

    def update_status(self, exam_id: UUID, status: str) -> None:
        self.status_history.append((exam_id, status))
        self.exams[exam_id] = replace(self.exams[exam_id], status=status)

    def save_analysis(
        self,
        exam_id: UUID,
        analysis: dict[str, object],
        raw_text: str,
        analyzed_at: datetime,
    ) -> None:
        self.status_history.append((exam_id, "analyzed"))
        self.raw_texts[exam_id] = raw_text
        self.exams[exam_id] = replace(
            self.exams[exam_id],
            status="analyzed",
            analysis=analysis,
            analyzed_at=analyzed_at,
        )


@dataclass
class InMemoryProgressPhotoRepository(ProgressPhotoRepository):
    """In-memory progress photos."""

    photos: dict[UUID, ProgressPhoto] = field(default_factory=dict)

    def create_photo(  # noqa: PLR0913
        self,
        user_id: UUID,
        photo_url: str,
        storage_path: str,
        photo_type: str,
        notes: str | None,
        ai_analysis: dict[str, object],
    ) -> ProgressPhoto:
        photo = ProgressPhoto(
            id=uuid4(),
            user_id=user_id,
            photo_url=photo_url,
            storage_path=storage_path,
            photo_type=photo_type,
            notes=notes,
            ai_analysis=ai_analysis,
            created_at=datetime.now(tz=UTC),
        )
        self.photos[photo.id] = photo
        return photo

    def list_photos(self, user_id: UUID, limit: int) -> list[ProgressPhoto]:
        return [p for p in self.photos.values() if p.user_id == user_id][:limit]

    def get_photo(self, photo_id: UUID) -> ProgressPhoto | None:
        return self.photos.get(photo_id)

    def update_analysis(self, photo_id: UUID, ai_analysis: dict[str, object]) -> None:
        self.photos[photo_id] = replace(self.photos[photo_id], ai_analysis=ai_analysis)

    def delete_photo(self, photo_id: UUID) -> None:
        self.photos.pop(photo_id, None)


@dataclass
class InMemoryAdherenceRepository(AdherenceRepository):
    """In-memory daily summaries with fixed streaks."""

    daily: list[DailyAdherence] = field(default_factory=list)
    streaks: AdherenceStreaks = field(
        default_factory=lambda: AdherenceStreaks(0, 0, None)
    )

    def list_daily(self, user_id: UUID, start: date, end: date) -> list[DailyAdherence]:
        return [row for row in self.daily if start <= row.day <= end]

    def get_streaks(self, user_id: UUID, min_adherence: int) -> AdherenceStreaks:
        return self.streaks


@dataclass
class InMemoryProgressRepository(ProgressRepository):
    """In-memory progress metrics and canned database function results."""

    metrics: list[ProgressMetric] = field(default_factory=list)
    insights: list[NutritionInsight] = field(default_factory=list)
    weekdays: list[WeekdayAverage] = field(default_factory=list)
    streaks: AdherenceStreaks = field(
        default_factory=lambda: AdherenceStreaks(0, 0, None)
    )

    def list_metrics(
        self, user_id: UUID, start: date, end: date
    ) -> list[ProgressMetric]:
        return [m for m in self.metrics if start <= m.day <= end]

    def get_streaks(self, user_id: UUID, min_adherence: int) -> AdherenceStreaks:
        return self.streaks

    def generate_insights(self, user_id: UUID, days: int) -> list[NutritionInsight]:
        return self.insights

    def weekday_averages(
        self, user_id: UUID, start: date, end: date
    ) -> list[WeekdayAverage]:
        return self.weekdays


@dataclass
class InMemoryMealPlanRepository(MealPlanRepository):
    """In-memory meal plans, newest first."""

    plans: list[MealPlan] = field(default_factory=list)

    def create_plan(self, plan: MealPlan) -> MealPlan:
        stored = replace(plan, id=uuid4(), created_at=datetime.now(tz=UTC))
        self.plans.insert(0, stored)
        return stored

    def list_plans(self, user_id: UUID) -> list[MealPlan]:
        return [plan for plan in self.plans if plan.user_id == user_id]


@dataclass
class InMemorySupplementRepository(SupplementRepository):
    """In-memory supplements and recommendations."""

    supplements: dict[UUID, UserSupplement] = field(default_factory=dict)
    recommendations: dict[UUID, list[SupplementAdvice]] = field(default_factory=dict)

    def create_supplements(
        self, user_id: UUID, drafts: list[SupplementDraft]
    ) -> list[UserSupplement]:
        created = [_supplement(uuid4(), user_id, draft) for draft in drafts]
        for supplement in created:
            self.supplements[supplement.id] = supplement
        return created

    def update_supplement(
        self, user_id: UUID, supplement_id: UUID, draft: SupplementDraft
    ) -> UserSupplement | None:
        current = self.supplements.get(supplement_id)
        if current is None or current.user_id != user_id:
            return None
        updated = _supplement(supplement_id, user_id, draft)
        self.supplements[supplement_id] = updated
        return updated

    def delete_supplement(self, user_id: UUID, supplement_id: UUID) -> bool:
        current = self.supplements.get(supplement_id)
        if current is None or current.user_id != user_id:
            return False
        del self.supplements[supplement_id]
        return True

    def list_supplements(self, user_id: UUID) -> list[UserSupplement]:
        owned = [s for s in self.supplements.values() if s.user_id == user_id]
        return list(reversed(owned))

    def create_recommendations(
        self, user_id: UUID, advice: list[SupplementAdvice]
    ) -> list[SupplementAdvice]:
        stored = [replace(item, id=uuid4()) for item in advice]
        self.recommendations.setdefault(user_id, []).extend(stored)
        return stored

    def list_recommendations(self, user_id: UUID) -> list[SupplementAdvice]:
        return sorted(
            self.recommendations.get(user_id, []), key=lambda item: item.priority
        )


def _supplement(
    supplement_id: UUID, user_id: UUID, draft: SupplementDraft
) -> UserSupplement:
    return UserSupplement(
        id=supplement_id,
        user_id=user_id,
        supplement_name=draft.supplement_name,
        dosage=draft.dosage,
        frequency=draft.frequency,
        timing=draft.timing,
        purpose=draft.purpose,
        notes=draft.notes,
    )


@dataclass
class InMemoryBodyMetricsRepository(BodyMetricsRepository):
    """In-memory monthly body metrics."""

    rows: dict[tuple[UUID, date], BodyMetrics] = field(default_factory=dict)

    def upsert_metrics(
        self, user_id: UUID, month: date, measurements: BodyMeasurements
    ) -> BodyMetrics:
        metrics = BodyMetrics(month, measurements, datetime.now(tz=UTC))
        self.rows[(user_id, month)] = metrics
        return metrics

    def get_metrics(self, user_id: UUID, month: date) -> BodyMetrics | None:
        return self.rows.get((user_id, month))

    def list_metrics(self, user_id: UUID, limit: int) -> list[BodyMetrics]:
        owned = [row for (owner, _), row in self.rows.items() if owner == user_id]
        return sorted(owned, key=lambda row: row.month, reverse=True)[:limit]


def make_onboarding_service(
    profiles: dict[UUID, NutritionProfile] | None = None,
    supplement_service: SupplementService | None = None,
) -> OnboardingService:
    return OnboardingService(
        InMemoryProfileRepository(profiles or {}),
        InMemoryCache(),
        supplement_service=supplement_service,
    )


def make_reference_service(
    materials: list[dict[str, object]] | None = None,
) -> ReferenceService:
    return ReferenceService(InMemoryReferenceRepository(materials or []))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="eyJhbGciOiJIUzI1NiJ9.eyJyb2xlIjoic2VydmljZSJ9.c2ln",
        admin_token="admin-token",
        openai_api_key="openai-key",
        environment="test",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def completion_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def storage() -> FakeFileStorage:
    return FakeFileStorage()


@pytest.fixture
def container(
    settings: Settings,
    user_id: UUID,
    completion_client: FakeCompletionClient,
    storage: FakeFileStorage,
) -> AppContainer:
    supplement_service = SupplementService(InMemorySupplementRepository())
    onboarding_service = make_onboarding_service(
        supplement_service=supplement_service
    )
    reference_service = make_reference_service()
    meal_repository = InMemoryMealRepository()
    meal_service = MealService(
        repository=meal_repository,
        status_repository=InMemoryMealStatusRepository(),
        storage=storage,
    )
    energy_service = EnergyService(onboarding_service)
    exam_service = ExamService(
        repository=InMemoryExamRepository(),
        storage=storage,
        client=completion_client,
        model=settings.openai_text_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
        reference_service=reference_service,
        onboarding_service=onboarding_service,
    )
    adherence_service = AdherenceService(InMemoryAdherenceRepository())

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_service=AuthService(FakeAuthClient({USER_TOKEN: user_id})),
        onboarding_service=onboarding_service,
        food_analysis_service=FoodAnalysisService(
            client=completion_client,
            model=settings.openai_model,
            text_model=settings.openai_text_model,
            reasoning_effort=settings.openai_reasoning_effort,
            store=settings.openai_store,
            reference_service=reference_service,
            onboarding_service=onboarding_service,
        ),
        meal_service=meal_service,
        stats_service=StatsService(meal_repository),
        exercise_service=ExerciseService(
            repository=InMemoryExerciseRepository(),
            energy_service=energy_service,
            onboarding_service=onboarding_service,
        ),
        energy_service=energy_service,
        water_service=WaterService(InMemoryWaterRepository(), onboarding_service),
        exam_service=exam_service,
        progress_photo_service=ProgressPhotoService(
            repository=InMemoryProgressPhotoRepository(),
            storage=storage,
            client=completion_client,
            model=settings.openai_model,
            reasoning_effort=settings.openai_reasoning_effort,
            store=settings.openai_store,
            reference_service=reference_service,
            onboarding_service=onboarding_service,
        ),
        adherence_service=adherence_service,
        progress_service=ProgressService(InMemoryProgressRepository()),
        meal_plan_service=MealPlanService(
            InMemoryMealPlanRepository(), onboarding_service, random.Random(7)
        ),
        admin_service=AdminService(
            onboarding_service=onboarding_service,
            meal_service=meal_service,
            adherence_service=adherence_service,
            exam_service=exam_service,
            reference_service=reference_service,
        ),
        supplement_service=supplement_service,
        body_metrics_service=BodyMetricsService(InMemoryBodyMetricsRepository()),
        close_resources=close_resources,
    )


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {USER_TOKEN}"}
