"""Body progress photos with AI body-composition analysis."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError

from wellness_tracker.domain.analysis import BodyPhotoAnalysis, NutritionSuggestions
from wellness_tracker.domain.photos import PHOTO_TYPES, ProgressPhoto
from wellness_tracker.domain.profiles import NutritionProfile
from wellness_tracker.services.completions import (
    AnalysisError,
    CompletionClient,
    detect_mime_type,
    extension_for,
    parse_json_response,
    to_data_url,
)
from wellness_tracker.services.onboarding import OnboardingService
from wellness_tracker.services.references import ReferenceService
from wellness_tracker.services.storage import FileStorage

_logger = logging.getLogger(__name__)

PROGRESS_PHOTO_BUCKET = "progress_photos"

BODY_PHOTO_PROMPT = """You are a fitness and nutrition professional reviewing a
{photo_type} view progress photo. Describe posture and visible body composition
without judgement and suggest nutrition adjustments. Answer with a single JSON
object with the keys summary, posture, bodyComposition (strings),
bodyMassEstimate ({{bmi, bodyFatPercentage, musclePercentage, confidence}} where
confidence is low, medium or high), nutritionSuggestions ({{calorieAdjustment,
macroRatioSuggestion, focusAreas}}) and recommendations (list of strings)."""


class ProgressPhotoRepository(Protocol):
    """Persistence interface for progress photos."""

    def create_photo(  # noqa: PLR0913
        self,
        user_id: UUID,
        photo_url: str,
        storage_path: str,
        photo_type: str,
        notes: str | None,
        ai_analysis: dict[str, object],
    ) -> ProgressPhoto:
        """Insert a photo row and return it."""

    def list_photos(self, user_id: UUID, limit: int) -> list[ProgressPhoto]:
        """Return the newest photos first."""

    def get_photo(self, photo_id: UUID) -> ProgressPhoto | None:
        """Return a photo by id."""

    def update_analysis(self, photo_id: UUID, ai_analysis: dict[str, object]) -> None:
        """Replace the stored analysis."""

    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo row."""


@dataclass
class ProgressPhotoService:
    """Service storing progress photos and their analyses."""

    repository: ProgressPhotoRepository
    storage: FileStorage
    client: CompletionClient
    model: str
    reasoning_effort: str | None
    store: bool
    reference_service: ReferenceService
    onboarding_service: OnboardingService

    async def upload_photo(
        self,
        user_id: UUID,
        image_bytes: bytes,
        photo_type: str,
        notes: str | None = None,
    ) -> ProgressPhoto:
        """Store a photo, analyse it and persist both."""
        if photo_type not in PHOTO_TYPES:
            raise ValueError(f"Unknown photo type: {photo_type}")
        if not image_bytes:
            raise ValueError("Image is empty")
        timestamp = int(datetime.now(tz=UTC).timestamp() * 1000)
        path = f"{user_id}/{timestamp}_{photo_type}.{extension_for(image_bytes)}"
        url = self.storage.upload(
            PROGRESS_PHOTO_BUCKET, path, image_bytes, detect_mime_type(image_bytes)
        )
        profile = self.onboarding_service.get_profile(user_id)
        analysis = await self.analyze_photo(image_bytes, photo_type, profile)
        return self.repository.create_photo(
            user_id, url, path, photo_type, notes, analysis.model_dump(by_alias=True)
        )

    def list_photos(self, user_id: UUID, limit: int = 20) -> list[ProgressPhoto]:
        return self.repository.list_photos(user_id, limit)

    async def reanalyze(self, user_id: UUID, photo_id: UUID) -> ProgressPhoto | None:
        """Run the analysis again on a stored photo."""
        photo = self.repository.get_photo(photo_id)
        if photo is None or photo.user_id != user_id:
            return None
        image_bytes = self.storage.download(PROGRESS_PHOTO_BUCKET, photo.storage_path)
        profile = self.onboarding_service.get_profile(user_id)
        analysis = await self.analyze_photo(image_bytes, photo.photo_type, profile)
        payload = analysis.model_dump(by_alias=True)
        self.repository.update_analysis(photo_id, payload)
        return ProgressPhoto(
            id=photo.id,
            user_id=photo.user_id,
            photo_url=photo.photo_url,
            storage_path=photo.storage_path,
            photo_type=photo.photo_type,
            notes=photo.notes,
            ai_analysis=payload,
            created_at=photo.created_at,
        )

    def delete_photo(self, user_id: UUID, photo_id: UUID) -> bool:
        """Delete the row and its stored file."""
        photo = self.repository.get_photo(photo_id)
        if photo is None or photo.user_id != user_id:
            return False
        self.storage.remove(PROGRESS_PHOTO_BUCKET, [photo.storage_path])
        self.repository.delete_photo(photo_id)
        return True

    async def analyze_photo(
        self,
        image_bytes: bytes,
        photo_type: str,
        profile: NutritionProfile | None = None,
    ) -> BodyPhotoAnalysis:
        """Analyse a photo, returning the unavailable analysis on any failure."""
        prompt = BODY_PHOTO_PROMPT.format(photo_type=photo_type)
        if profile is not None:
            details = [
                f"{label}: {value}"
                for label, value in (
                    ("age", profile.age),
                    ("gender", profile.gender),
                    ("weight kg", profile.weight),
                    ("height cm", profile.height),
                    ("goal", profile.goal),
                )
                if value
            ]
            if details:
                prompt += "\nPerson: " + ", ".join(details)
        prompt = self.reference_service.enrich_prompt(prompt, "BODY_PHOTOS")
        try:
            raw_text = await self.client.complete(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                image_data_url=to_data_url(image_bytes),
            )
            return BodyPhotoAnalysis.model_validate(parse_json_response(raw_text))
        except (AnalysisError, ValidationError):
            _logger.warning("Unusable body photo analysis", extra={"type": photo_type})
        except Exception:
            _logger.exception("Body photo analysis failed", extra={"type": photo_type})
        return unavailable_body_analysis()


def unavailable_body_analysis() -> BodyPhotoAnalysis:
    """Placeholder stored when a photo could not be analysed."""
    return BodyPhotoAnalysis(
        summary="Analysis unavailable for this photo.",
        posture="Not analysed",
        body_composition="Not analysed",
        nutrition_suggestions=NutritionSuggestions(
            calorie_adjustment="Keep your current plan",
            macro_ratio_suggestion="Keep your current plan",
        ),
        recommendations=["Try analysing the photo again later."],
    )
