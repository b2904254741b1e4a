"""Models for LLM analysis results."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FoodItem(_CamelModel):
    """Single food identified on a plate."""

    name: str
    category: str = "other"
    calories: float = Field(default=0.0, ge=0.0)
    portion: str = ""
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)


class FoodAnalysis(_CamelModel):
    """Nutrition analysis of a meal photo."""

    dish_name: str = ""
    calories: float = Field(default=0.0, ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)
    fiber: float = Field(default=0.0, ge=0.0)
    categories: list[str] = Field(default_factory=list)
    food_items: list[FoodItem] = Field(default_factory=list)
    health_score: int = Field(default=5, ge=1, le=10)
    dietary_tags: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.9, ge=0.0, le=1.0)
    user_recommendations: list[str] = Field(default_factory=list)


class MacroEstimate(_CamelModel):
    """Macro estimate for a meal described in text."""

    calories: float = Field(default=0.0, ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class AbnormalValue(_CamelModel):
    """Exam marker outside its reference range."""

    name: str
    value: str = ""
    reference: str = ""
    severity: str = "medium"


class FoodAdvice(_CamelModel):
    """A food to eat more or less of, with the reason."""

    food: str
    reason: str = ""


class NutritionImpact(_CamelModel):
    """Dietary adjustments suggested by an exam."""

    foods_to_increase: list[FoodAdvice] = Field(default_factory=list)
    foods_to_reduce: list[FoodAdvice] = Field(default_factory=list)


class ExamAnalysis(_CamelModel):
    """Structured interpretation of a medical exam."""

    summary: str = ""
    abnormal_values: list[AbnormalValue] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    nutrition_recommendations: list[str] = Field(default_factory=list)
    nutrition_impact: NutritionImpact = Field(default_factory=NutritionImpact)
    exercise_recommendations: list[str] = Field(default_factory=list)
    health_risks: list[str] = Field(default_factory=list)
    potential_deficiencies: list[str] = Field(default_factory=list)


class BodyMassEstimate(_CamelModel):
    """Body composition estimate from a progress photo."""

    bmi: float | None = None
    body_fat_percentage: float | None = None
    muscle_percentage: float | None = None
    confidence: str = "low"


class NutritionSuggestions(_CamelModel):
    """Nutrition adjustments suggested from a progress photo."""

    calorie_adjustment: str = ""
    macro_ratio_suggestion: str = ""
    focus_areas: list[str] = Field(default_factory=list)


class BodyPhotoAnalysis(_CamelModel):
    """Structured analysis of a progress photo."""

    summary: str = ""
    posture: str = ""
    body_composition: str = ""
    body_mass_estimate: BodyMassEstimate = Field(default_factory=BodyMassEstimate)
    nutrition_suggestions: NutritionSuggestions = Field(
        default_factory=NutritionSuggestions
    )
    recommendations: list[str] = Field(default_factory=list)
