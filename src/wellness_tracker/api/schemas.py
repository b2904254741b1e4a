"""Request bodies for the HTTP API."""

import base64
from datetime import date, datetime

from pydantic import BaseModel, Field

_DATA_URL_MARKER = ";base64,"


def decode_base64(value: str) -> bytes:
    """Decode plain or data-URL base64 content; raises ValueError when invalid."""
    if _DATA_URL_MARKER in value:
        value = value.split(_DATA_URL_MARKER, 1)[1]
    return base64.b64decode(value.strip(), validate=True)


class MealIn(BaseModel):
    meal_type: str
    description: str = ""
    calories: float
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    foods: list[str] = Field(default_factory=list)
    photo_url: str | None = None
    logged_at: datetime | None = None


class ImageIn(BaseModel):
    image_base64: str


class TextAnalysisIn(BaseModel):
    description: str | None = None
    foods: list[str] = Field(default_factory=list)


class MealStatusIn(BaseModel):
    meal_id: str
    status: str
    day: date | None = None
    meal_data: dict[str, object] = Field(default_factory=dict)


class ResetDayIn(BaseModel):
    day: date | None = None
    meals: list[dict[str, object]] = Field(default_factory=list)


class ExerciseIn(BaseModel):
    exercise_type: str
    minutes: int
    intensity: str = "moderate"
    notes: str | None = None
    recorded_date: date | None = None


class WeeklyGoalIn(BaseModel):
    minutes: int


class WaterTargetIn(BaseModel):
    weight_kg: float


class ExamUploadIn(BaseModel):
    name: str
    content_base64: str
    exam_type: str = "other"
    extension: str = "txt"
    exam_date: date | None = None
    analyze: bool = True


class ProgressPhotoIn(BaseModel):
    image_base64: str
    photo_type: str
    notes: str | None = None


class MealPlanIn(BaseModel):
    meal_count: int = 5
    calorie_target: float = 2000
    protein_target: float = 150
    carb_target: float = 200
    fat_target: float = 70
    exclude_foods: list[str] = Field(default_factory=list)


class SupplementIn(BaseModel):
    supplement_name: str
    dosage: str = ""
    frequency: str = ""
    timing: str = ""
    purpose: str = ""
    notes: str | None = None


class SupplementAdviceIn(BaseModel):
    supplement_name: str
    reason: str
    priority: int = 1
    dosage_recommendation: str | None = None
    specific_considerations: str | None = None


class BodyMetricsIn(BaseModel):
    day: date | None = None
    weight: float
    waist_circumference: float | None = None
    abdominal_circumference: float | None = None
    hip_circumference: float | None = None
    body_fat_percentage: float | None = None
    lean_mass_percentage: float | None = None
    notes: str | None = None
