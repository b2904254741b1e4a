"""Medical exam upload and AI interpretation."""

import io
import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError
from pypdf import PdfReader

from wellness_tracker.domain.analysis import (
    ExamAnalysis,
    FoodAdvice,
    NutritionImpact,
)
from wellness_tracker.domain.exams import MedicalExam
from wellness_tracker.domain.profiles import NutritionProfile
from wellness_tracker.services.completions import (
    AnalysisError,
    CompletionClient,
    parse_json_response,
)
from wellness_tracker.services.onboarding import OnboardingService
from wellness_tracker.services.references import ReferenceService
from wellness_tracker.services.storage import FileStorage

_logger = logging.getLogger(__name__)

EXAM_BUCKET = "exams"
MAX_EXAM_CHARS = 200_000

COMMON_EXAM_TYPES: tuple[str, ...] = (
    "blood_count",
    "biochemistry",
    "lipid_panel",
    "glycemia",
    "liver_function",
    "kidney_function",
    "hormonal",
    "thyroid",
    "vitamins",
    "minerals",
)

_TYPE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "blood_count",
        ("hemograma", "hemácias", "leucocito", "plaqueta", "blood count",
         "erythrocyte", "leukocyte", "platelet"),
    ),
    ("glycemia", ("glicemia", "glicose", "glucose")),
    ("lipid_panel", ("colesterol", "triglicerideos", "cholesterol", "ldl")),
)

FUNCTIONAL_RANGES: dict[str, str] = {
    "Hemoglobin": "men 14-16, women 13.5-15.5 g/dL",
    "Ferritin": "70-150 ng/mL",
    "Vitamin B12": "500-900 pg/mL",
    "Homocysteine": "below 6 umol/L",
    "TSH": "1-2.5 mUI/L",
    "Free T4": "1.2-1.4 ng/dL",
    "Free T3": "3.0-3.5 pg/mL",
    "Folic acid": "10-20 ng/mL",
    "Zinc": "95-150 ug/dL",
    "Selenium": "120-150 ug/L",
    "Fasting glucose": "75-90 mg/dL",
    "HbA1c": "below 5.3%",
    "Triglycerides": "below 100 mg/dL",
    "LDL": "below 100 mg/dL",
    "HDL": "men 50-73, women 60-93 mg/dL",
    "Total cholesterol/HDL": "below 3.3",
    "Triglycerides/HDL": "men below 1.38, women below 1.15",
    "LDL/HDL": "below 2.3",
    "Gamma GT": "10-20 U/L",
    "AST": "10-20 U/L",
    "ALT": "10-20 U/L",
    "G6PD": "above 8 U/g Hb",
}

EXAM_PROMPT = """You are an integrative health nutritionist reviewing lab results.
Compare each marker with both the lab reference range and the functional ideal
ranges below, flag what is outside the functional range and explain the
nutritional impact. Answer with a single JSON object with the keys:
summary (string), abnormalValues (list of {name, value, reference, severity}
where severity is low, medium or high), recommendations, nutritionRecommendations,
nutritionImpact ({foodsToIncrease: [{food, reason}], foodsToReduce: [{food, reason}]}),
exerciseRecommendations, healthRisks and potentialDeficiencies (lists of strings).
"""


@dataclass(frozen=True)
class ExamInsights:
    """Nutrition advice merged across every analysed exam."""

    recommendations: list[str]
    foods_to_increase: list[FoodAdvice]
    foods_to_reduce: list[FoodAdvice]


class ExamRepository(Protocol):
    """Persistence interface for medical exams."""

    def create_exam(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        exam_type: str,
        exam_date: date | None,
        file_url: str,
        storage_path: str,
    ) -> MedicalExam:
        """Insert a pending exam row and return it."""

    def get_exam(self, exam_id: UUID) -> MedicalExam | None:
        """Return an exam by id."""

    def list_exams(self, user_id: UUID, limit: int) -> list[MedicalExam]:
        """Return the user's newest exams first."""

    def list_analyzed_exams(self, user_id: UUID) -> list[MedicalExam]:
        """Return analysed exams, most recently analysed first."""

    def update_status(self, exam_id: UUID, status: str) -> None:
        """Set the exam status."""

    def save_analysis(
        self,
        exam_id: UUID,
        analysis: dict[str, object],
        raw_text: str,
        analyzed_at: datetime,
    ) -> None:
        """Store the analysis and mark the exam analysed."""


@dataclass
class ExamService:
    """Service that stores exam files and interprets them with the LLM."""

    repository: ExamRepository
    storage: FileStorage
    client: CompletionClient
    model: str
    reasoning_effort: str | None
    store: bool
    reference_service: ReferenceService
    onboarding_service: OnboardingService

    def list_exams(self, user_id: UUID, limit: int = 20) -> list[MedicalExam]:
        return self.repository.list_exams(user_id, limit)

    def get_exam(self, exam_id: UUID) -> MedicalExam | None:
        return self.repository.get_exam(exam_id)

    def upload_exam(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        exam_type: str,
        content: bytes,
        extension: str = "txt",
        exam_date: date | None = None,
    ) -> MedicalExam:
        """Store the exam file and create a pending exam row."""
        if not content:
            raise ValueError("Exam file is empty")
        if not name.strip():
            raise ValueError("Exam name is required")
        timestamp = int(datetime.now(tz=UTC).timestamp() * 1000)
        path = f"{user_id}/{timestamp}.{extension.lstrip('.') or 'txt'}"
        content_type = "application/pdf" if extension == "pdf" else "text/plain"
        file_url = self.storage.upload(EXAM_BUCKET, path, content, content_type)
        return self.repository.create_exam(
            user_id, name.strip(), exam_type, exam_date, file_url, path
        )

    async def analyze_exam(
        self,
        content: str,
        exam_type: str,
        profile: NutritionProfile | None = None,
    ) -> ExamAnalysis:
        """Interpret exam text, falling back to a generic analysis on failure."""
        analysis, _ = await self.interpret_exam(content, exam_type, profile)
        return analysis

    async def interpret_exam(
        self,
        content: str,
        exam_type: str,
        profile: NutritionProfile | None = None,
    ) -> tuple[ExamAnalysis, str]:
        """Return the analysis together with the model's raw reply."""
        detected = detect_exam_type(content, exam_type)
        prompt = self.reference_service.enrich_prompt(
            build_exam_prompt(content, detected, profile), "EXAMS"
        )
        try:
            raw_text = await self.client.complete(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
            )
        except Exception:
            _logger.exception("Exam analysis request failed", extra={"type": detected})
            return fallback_exam_analysis(detected), ""

        try:
            analysis = ExamAnalysis.model_validate(parse_json_response(raw_text))
        except (AnalysisError, ValidationError):
            _logger.warning("Unstructured exam analysis", extra={"type": detected})
            fallback = fallback_exam_analysis(detected)
            analysis = fallback.model_copy(update={"summary": raw_text.strip()})
        return analysis, raw_text

    async def process_exam(self, exam_id: UUID) -> bool:
        """Download, analyse and store an exam; reset it to pending on error."""
        exam = self.repository.get_exam(exam_id)
        if exam is None or not exam.storage_path:
            return False
        if exam.status == "analyzed" and exam.analysis:
            return True
        try:
            self.repository.update_status(exam_id, "analyzing")
            data = self.storage.download(EXAM_BUCKET, exam.storage_path)
            content = extract_exam_text(data, exam.storage_path)
            profile = self.onboarding_service.get_profile(exam.user_id)
            analysis, raw_text = await self.interpret_exam(
                content, exam.exam_type, profile
            )
            self.repository.save_analysis(
                exam_id,
                analysis.model_dump(by_alias=True),
                raw_text,
                datetime.now(tz=UTC),
            )
        except Exception:
            _logger.exception("Exam processing failed", extra={"exam_id": str(exam_id)})
            self.repository.update_status(exam_id, "pending")
            return False
        return True

    def get_nutrition_insights(self, user_id: UUID) -> ExamInsights:
        """Merge advice from analysed exams, keeping the first of each food."""
        recommendations: list[str] = []
        increase: dict[str, FoodAdvice] = {}
        reduce: dict[str, FoodAdvice] = {}
        for exam in self.repository.list_analyzed_exams(user_id):
            if not exam.analysis:
                continue
            try:
                analysis = ExamAnalysis.model_validate(exam.analysis)
            except ValidationError:
                _logger.warning(
                    "Skipping unreadable exam analysis",
                    extra={"exam_id": str(exam.id)},
                )
                continue
            for item in analysis.nutrition_recommendations:
                if item not in recommendations:
                    recommendations.append(item)
            for advice in analysis.nutrition_impact.foods_to_increase:
                increase.setdefault(advice.food, advice)
            for advice in analysis.nutrition_impact.foods_to_reduce:
                reduce.setdefault(advice.food, advice)
        return ExamInsights(
            recommendations=recommendations,
            foods_to_increase=list(increase.values()),
            foods_to_reduce=list(reduce.values()),
        )


def extract_exam_text(data: bytes, storage_path: str) -> str:
    """Return the readable text of an exam file, extracting PDF pages."""
    if not storage_path.lower().endswith(".pdf"):
        return data.decode("utf-8", errors="replace")[:MAX_EXAM_CHARS]
    reader = PdfReader(io.BytesIO(data))
    text = "\n".join(page.extract_text() or "" for page in reader.pages).strip()
    if not text:
        raise ValueError("PDF exam has no extractable text")
    return text[:MAX_EXAM_CHARS]


def detect_exam_type(content: str, declared: str) -> str:
    """Prefer the exam type named in the content over the declared one."""
    lowered = content.lower()
    for exam_type, keywords in _TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return exam_type
    return declared


def build_exam_prompt(
    content: str, exam_type: str, profile: NutritionProfile | None
) -> str:
    lines = [EXAM_PROMPT, "Functional ideal ranges:"]
    lines.extend(f"- {name}: {value}" for name, value in FUNCTIONAL_RANGES.items())
    if profile is not None:
        lines.append("\nPatient:")
        for label, value in (
            ("Age", profile.age),
            ("Gender", profile.gender),
            ("Weight (kg)", profile.weight),
            ("Height (cm)", profile.height),
            ("Goal", profile.goal),
        ):
            if value:
                lines.append(f"- {label}: {value}")
        conditions = profile.onboarding_data.get("health_conditions")
        if isinstance(conditions, list) and conditions:
            lines.append("- Health conditions: " + ", ".join(map(str, conditions)))
        if profile.dietary_restrictions:
            lines.append(
                "- Dietary restrictions: " + ", ".join(profile.dietary_restrictions)
            )
    lines.append(f"\nExam type: {exam_type}\nExam content:\n{content}")
    return "\n".join(lines)


def fallback_exam_analysis(exam_type: str) -> ExamAnalysis:
    """Generic analysis used when the model cannot interpret the exam."""
    return ExamAnalysis(
        summary=(
            f"This is a {exam_type} exam. A detailed automatic analysis was not "
            "possible. Please ask a health professional to interpret the results."
        ),
        recommendations=[
            "Ask a doctor to interpret the results",
            "Keep a balanced diet",
            "Exercise regularly",
        ],
        nutrition_recommendations=[
            "Eat a variety of foods from every food group",
            "Prioritise vegetables, fruit and lean proteins",
            "Stay well hydrated",
        ],
        nutrition_impact=NutritionImpact(
            foods_to_increase=[
                FoodAdvice(food="Leafy greens", reason="Rich in vitamins and minerals"),
                FoodAdvice(food="Fruit", reason="Source of antioxidants and fibre"),
            ],
            foods_to_reduce=[
                FoodAdvice(
                    food="Processed foods", reason="Cut sodium and preservatives"
                ),
                FoodAdvice(food="Simple sugars", reason="Avoid blood sugar spikes"),
            ],
        ),
        exercise_recommendations=[
            "Do regular aerobic activity",
            "Include strength training",
        ],
    )
