"""Food photo and meal description analysis via the LLM."""

import logging
import math
import re
from dataclasses import dataclass
from uuid import UUID

from pydantic import ValidationError

from wellness_tracker.domain.analysis import FoodAnalysis, FoodItem, MacroEstimate
from wellness_tracker.services.completions import (
    AnalysisError,
    CompletionClient,
    parse_json_response,
    to_data_url,
)
from wellness_tracker.services.onboarding import OnboardingService
from wellness_tracker.services.recommendations import (
    calculate_health_score,
    generate_recommendations,
    map_recommendation_profile,
)
from wellness_tracker.services.references import ReferenceService

_logger = logging.getLogger(__name__)

UNIDENTIFIED_FOOD = "Unidentified food"
DEFAULT_CONFIDENCE = 0.9

FOOD_IMAGE_PROMPT = """You are a nutritionist analysing a photo of a meal.
Identify every food on the plate, estimate its portion and its nutrients.
Answer with a single JSON object and nothing else, shaped like this example:
{
  "dishName": "Grilled chicken with rice and salad",
  "calories": 520,
  "protein": 38,
  "carbs": 55,
  "fat": 14,
  "fiber": 6,
  "categories": ["lunch", "protein", "grains"],
  "foodItems": [
    {"name": "Grilled chicken breast", "category": "protein", "calories": 250,
     "portion": "150g", "protein": 35, "carbs": 0, "fat": 6}
  ],
  "healthScore": 8,
  "dietaryTags": ["high-protein", "gluten-free"]
}
Use grams for macros and kcal for calories. healthScore goes from 1 to 10."""

MEAL_TEXT_PROMPT = """Estimate the nutrition of the meal below.
Answer with a single JSON object with the numeric keys calories, protein,
carbs and fat (grams) and a confidence between 0 and 1.
"""

_NUMBER_RE = re.compile(r"-?\d+(?:[.,]\d+)?")


@dataclass
class FoodAnalysisService:
    """Prepares food prompts and normalises the model output."""

    client: CompletionClient
    model: str
    text_model: str
    reasoning_effort: str | None
    store: bool
    reference_service: ReferenceService
    onboarding_service: OnboardingService

    async def analyze_image(
        self, image_bytes: bytes, user_id: UUID | None = None
    ) -> FoodAnalysis:
        """Analyse a meal photo and attach personalised recommendations."""
        if not image_bytes:
            raise ValueError("Image is empty")
        prompt = self.reference_service.enrich_prompt(FOOD_IMAGE_PROMPT, "FOOD")
        raw_text = await self.client.complete(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=prompt,
            image_data_url=to_data_url(image_bytes),
        )
        analysis = normalize_food_analysis(parse_json_response(raw_text))
        if user_id is None:
            return analysis

        try:
            profile = self.onboarding_service.get_profile(user_id)
        except Exception:
            _logger.exception(
                "Failed to load profile for recommendations",
                extra={"user_id": str(user_id)},
            )
            return analysis
        if profile is None:
            return analysis
        recommendations = generate_recommendations(
            map_recommendation_profile(profile), analysis
        )
        return analysis.model_copy(update={"user_recommendations": recommendations})

    async def analyze_text(
        self, description: str | None, foods: list[str] | None = None
    ) -> MacroEstimate:
        """Estimate macros from a free-text description or a food list."""
        description = (description or "").strip()
        foods = [food.strip() for food in foods or [] if food.strip()]
        if not description and not foods:
            raise ValueError("Provide a description or at least one food")
        lines = [MEAL_TEXT_PROMPT]
        if description:
            lines.append(f"Description: {description}")
        if foods:
            lines.append("Foods: " + ", ".join(foods))
        raw_text = await self.client.complete(
            model=self.text_model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt="\n".join(lines),
        )
        raw = parse_json_response(raw_text)
        try:
            return MacroEstimate(
                calories=to_float(raw.get("calories")),
                protein=to_float(raw.get("protein")),
                carbs=to_float(raw.get("carbs")),
                fat=to_float(raw.get("fat")),
                confidence=min(1.0, to_float(raw.get("confidence"), 0.5)),
            )
        except ValidationError as exc:
            raise AnalysisError(f"Invalid macro estimate: {exc}") from exc


def normalize_food_analysis(raw: dict[str, object]) -> FoodAnalysis:
    """Coerce a loosely typed model answer into a complete analysis."""
    dish_name = str(raw.get("dishName") or raw.get("foodName") or "").strip()
    items = []
    raw_items = raw.get("foodItems")
    if isinstance(raw_items, list):
        for entry in raw_items:
            if not isinstance(entry, dict):
                continue
            items.append(
                FoodItem(
                    name=str(entry.get("name") or "Food item"),
                    category=str(entry.get("category") or "other"),
                    calories=to_float(entry.get("calories")),
                    portion=str(entry.get("portion") or "100g"),
                    protein=to_float(entry.get("protein")),
                    carbs=to_float(entry.get("carbs")),
                    fat=to_float(entry.get("fat")),
                )
            )

    calories = to_float(raw.get("calories"))
    if not calories and items:
        calories = sum(item.calories for item in items)
    protein = to_float(raw.get("protein"))
    carbs = to_float(raw.get("carbs"))
    fat = to_float(raw.get("fat"))
    fiber = to_float(raw.get("fiber"))
    if not items:
        items = [
            FoodItem(
                name=dish_name or UNIDENTIFIED_FOOD,
                calories=calories,
                portion="100g",
                protein=protein,
                carbs=carbs,
                fat=fat,
            )
        ]

    raw_score = raw.get("healthScore")
    health_score = (
        max(1, min(10, round(to_float(raw_score))))
        if raw_score not in (None, "", 0)
        else calculate_health_score(calories, protein, carbs, fiber)
    )
    return FoodAnalysis(
        dish_name=dish_name or UNIDENTIFIED_FOOD,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        fiber=fiber,
        categories=_str_list(raw.get("categories")),
        food_items=items,
        health_score=health_score,
        dietary_tags=_str_list(raw.get("dietaryTags")),
        confidence=DEFAULT_CONFIDENCE,
    )


def to_float(value: object, default: float = 0.0) -> float:
    """Read a non-negative number from model output such as ``"25g"``."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int | float):
        number = float(value) if abs(value) < 1e300 else math.inf
    else:
        match = _NUMBER_RE.search(str(value))
        if match is None:
            return default
        number = float(match.group(0).replace(",", "."))
    if not math.isfinite(number):
        return default
    return max(0.0, number)


def _str_list(value: object) -> list[str]:
    if isinstance(value, list):
        return [str(item) for item in value if item]
    if isinstance(value, str) and value:
        return [value]
    return []
