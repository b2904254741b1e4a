"""Admin service for reporting."""

from dataclasses import asdict, dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from wellness_tracker.domain.admin import AdminUserSummary
from wellness_tracker.domain.profiles import NutritionProfile
from wellness_tracker.services.adherence import AdherenceService
from wellness_tracker.services.exams import ExamService
from wellness_tracker.services.meals import MealService
from wellness_tracker.services.onboarding import OnboardingService
from wellness_tracker.services.references import (
    ANALYSIS_TYPES,
    ReferenceService,
    build_reference_block,
)

ADHERENCE_WINDOW_DAYS = 30


@dataclass
class AdminService:
    """Service for admin dashboards."""

    onboarding_service: OnboardingService
    meal_service: MealService
    adherence_service: AdherenceService
    exam_service: ExamService
    reference_service: ReferenceService

    def list_users(self) -> list[AdminUserSummary]:
        """Return users with their meal counts for the last seven days."""
        summaries = []
        for profile in self.onboarding_service.list_profiles():
            stats = self.meal_service.get_statistics(profile.id, days=7)
            summaries.append(
                AdminUserSummary(
                    id=profile.id,
                    name=profile.name,
                    updated_at=profile.updated_at,
                    meals_last_7d=stats.meal_count,
                    avg_calories_7d=stats.avg_calories,
                )
            )
        return summaries

    def get_user_detail(self, user_id: UUID) -> dict[str, object]:
        """Return profile, meal statistics, adherence and exam insights."""
        profile = self.onboarding_service.get_profile(user_id)
        today = datetime.now(tz=UTC).date()
        adherence = self.adherence_service.calculate_metrics(
            user_id, today - timedelta(days=ADHERENCE_WINDOW_DAYS - 1), today
        )
        insights = self.exam_service.get_nutrition_insights(user_id)
        return {
            "user_id": str(user_id),
            "profile": _serialize_profile(profile) if profile else None,
            "meal_statistics": asdict(self.meal_service.get_statistics(user_id)),
            "adherence": _serialize_adherence(asdict(adherence))
            if adherence
            else None,
            "exam_insights": {
                "recommendations": insights.recommendations,
                "foods_to_increase": [
                    advice.model_dump() for advice in insights.foods_to_increase
                ],
                "foods_to_reduce": [
                    advice.model_dump() for advice in insights.foods_to_reduce
                ],
            },
        }

    def preview_references(self, analysis_type: str) -> dict[str, object]:
        """Return the reference block appended to prompts of one analysis type."""
        if analysis_type not in ANALYSIS_TYPES:
            raise ValueError(f"Unknown analysis type: {analysis_type}")
        materials = self.reference_service.repository.list_active_materials()
        return {
            "analysis_type": analysis_type,
            "material_count": len(materials),
            "block": build_reference_block(materials),
        }


def _serialize_profile(profile: NutritionProfile) -> dict[str, object]:
    return {
        "name": profile.name,
        "age": profile.age,
        "gender": profile.gender,
        "height": profile.height,
        "weight": profile.weight,
        "goal": profile.goal,
        "activity_level": profile.activity_level,
        "dietary_restrictions": profile.dietary_restrictions,
        "updated_at": profile.updated_at.isoformat() if profile.updated_at else None,
    }


def _serialize_adherence(data: dict[str, object]) -> dict[str, object]:
    last_perfect = data.get("last_perfect_date")
    if last_perfect is not None:
        data["last_perfect_date"] = last_perfect.isoformat()
    return data
