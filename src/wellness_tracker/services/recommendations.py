"""Health scoring and personalised advice for analysed meals."""

from wellness_tracker.domain.analysis import FoodAnalysis
from wellness_tracker.domain.profiles import NutritionProfile, RecommendationProfile

MAX_RECOMMENDATIONS = 5
DEFAULT_WEIGHT_KG = 70.0

_LOSE_KEYWORDS = ("perda", "emagrecer", "reduzir", "perder", "lose", "loss")
_GAIN_KEYWORDS = ("ganho", "aumentar", "massa", "muscle", "gain")
_HIGH_ACTIVITY_KEYWORDS = ("alt", "intens", "high", "very active", "athlete")
_LOW_ACTIVITY_KEYWORDS = ("baix", "sed", "low")
_GLUTEN_FOODS = (
    "trigo",
    "pão",
    "macarrão",
    "cerveja",
    "wheat",
    "bread",
    "pasta",
    "beer",
)
_DAIRY_FOODS = ("leite", "queijo", "iogurte", "cream", "milk", "cheese", "yogurt")
_DESSERT_WORDS = ("sobremesa", "doce", "dessert", "sweet")


def calculate_health_score(
    calories: float, protein: float, carbs: float, fiber: float
) -> int:
    """Score a meal from 1 to 10 using macro ratios and fibre."""
    score = 5
    energy = calories or 1
    protein_ratio = protein * 4 / energy
    if protein_ratio > 0.25:
        score += 2
    elif protein_ratio > 0.15:
        score += 1

    if fiber > 8:
        score += 2
    elif fiber > 4:
        score += 1

    carb_ratio = carbs * 4 / energy
    if carb_ratio > 0.7:
        score -= 2
    elif carb_ratio > 0.55:
        score -= 1
    return max(1, min(10, score))


def map_recommendation_profile(
    profile: NutritionProfile | None,
) -> RecommendationProfile:
    """Normalise free-text profile answers into recommendation categories."""
    if profile is None:
        return RecommendationProfile(
            weight_goal="maintain",
            activity_level="medium",
            goals=("health",),
            dietary_preferences=("balanced",),
        )

    data = profile.onboarding_data
    goal_text = str(profile.goal or data.get("goal") or "").lower()
    weight_goal = "maintain"
    if any(word in goal_text for word in _LOSE_KEYWORDS):
        weight_goal = "lose"
    elif any(word in goal_text for word in _GAIN_KEYWORDS):
        weight_goal = "gain"

    activity_text = str(
        profile.activity_level or data.get("activity_level") or ""
    ).lower()
    activity_level = "medium"
    if any(word in activity_text for word in _HIGH_ACTIVITY_KEYWORDS):
        activity_level = "high"
    elif any(word in activity_text for word in _LOW_ACTIVITY_KEYWORDS):
        activity_level = "low"

    secondary = data.get("secondary_goals") or []
    secondary_text = (
        " ".join(str(item) for item in secondary)
        if isinstance(secondary, list)
        else str(secondary)
    ).lower()
    goals = ["health"]
    if "muscul" in secondary_text or "hipertrofia" in secondary_text:
        goals.append("muscle")
    if any(word in secondary_text for word in ("energia", "disposição", "energy")):
        goals.append("energy")
    if any(word in secondary_text for word in ("sono", "dormir", "sleep")):
        goals.append("sleep")

    restrictions_text = " ".join(profile.dietary_restrictions).lower()
    preferences = ["balanced"]
    if "vegan" in restrictions_text:
        preferences.append("vegan")
    if "veget" in restrictions_text:
        preferences.append("vegetarian")
    if "lactose" in restrictions_text or "dairy" in restrictions_text:
        preferences.append("dairy-free")
    if "gluten" in restrictions_text or "glúten" in restrictions_text:
        preferences.append("gluten-free")

    return RecommendationProfile(
        weight_goal=weight_goal,
        activity_level=activity_level,
        goals=tuple(goals),
        dietary_preferences=tuple(preferences),
        weight=profile.weight,
    )


def generate_recommendations(  # noqa: PLR0912
    profile: RecommendationProfile, analysis: FoodAnalysis
) -> list[str]:
    """Return up to five tips for a meal given the user's profile."""
    recs: list[str] = []
    calories = analysis.calories
    total = calories or 0
    protein_pct = analysis.protein * 4 / total * 100 if total > 0 else 0
    carbs_pct = analysis.carbs * 4 / total * 100 if total > 0 else 0
    fat_pct = analysis.fat * 9 / total * 100 if total > 0 else 0

    if profile.weight_goal == "lose":
        if calories > 550:
            recs.append(
                f"For your weight loss goal this {calories:.0f} kcal meal is on the "
                "heavy side. Cut back on refined carbs or added fats."
            )
        else:
            recs.append(
                f"This {calories:.0f} kcal meal fits your weight loss goal. "
                "Spread your protein across the day for best results."
            )
    elif profile.weight_goal == "gain":
        if calories < 600:
            recs.append(
                f"For your muscle gain goal, add quality protein and complex carbs "
                f"to this {calories:.0f} kcal meal."
            )
        else:
            recs.append(
                f"This {calories:.0f} kcal meal supports your muscle gain goal. "
                "Pair it with regular training."
            )

    if profile.activity_level == "high":
        if analysis.carbs < 50:
            recs.append(
                f"With your high activity level, add complex carbs. This meal has "
                f"only {analysis.carbs:.0f} g."
            )
        if analysis.protein < 25:
            recs.append(
                f"Active bodies need more protein for recovery. This meal has only "
                f"{analysis.protein:.0f} g."
            )
    elif profile.activity_level == "medium" and analysis.protein < 15:
        recs.append("Add a protein source to keep intake adequate for your activity.")

    if "muscle" in profile.goals:
        per_kg = analysis.protein / (profile.weight or DEFAULT_WEIGHT_KG)
        if per_kg < 0.3:
            recs.append(
                "For muscle building, raise the protein in this meal with eggs, "
                "chicken, fish or plant proteins."
            )
    if "energy" in profile.goals and carbs_pct < 40:
        recs.append(
            "To keep your energy up, raise the share of complex carbs such as "
            "whole grains, fruit and starchy vegetables."
        )
    if "sleep" in profile.goals and analysis.categories:
        is_dinner = any(
            "jantar" in c.lower() or "dinner" in c.lower() or "noturna" in c.lower()
            for c in analysis.categories
        )
        if is_dinner and (analysis.fat > 25 or calories > 700):
            recs.append(
                "Lighter dinners with less fat help sleep quality."
            )

    names = [item.name.lower() for item in analysis.food_items]
    if "gluten-free" in profile.dietary_preferences and any(
        word in name for name in names for word in _GLUTEN_FOODS
    ):
        recs.append("Warning: this meal may contain gluten. Check the ingredients.")
    if "dairy-free" in profile.dietary_preferences and any(
        word in name for name in names for word in _DAIRY_FOODS
    ):
        recs.append(
            "Warning: this meal may contain lactose. Consider plant-based swaps."
        )

    if protein_pct < 15 and len(recs) < 3:
        recs.append(
            f"Only {protein_pct:.0f}% of this meal's energy comes from protein. "
            "Add lean meat, eggs, legumes or dairy."
        )
    if carbs_pct > 65 and len(recs) < 3:
        recs.append(
            f"{carbs_pct:.0f}% of this meal's energy comes from carbs. Swap some "
            "starch for vegetables and protein."
        )
    if fat_pct > 40 and len(recs) < 3:
        recs.append(
            f"{fat_pct:.0f}% of this meal's energy comes from fat. Prefer avocado "
            "and olive oil over fried food."
        )
    if analysis.fiber < 4 and len(recs) < 4:
        recs.append(
            "This meal is low in fibre. Add vegetables, fruit or whole grains."
        )

    if len(recs) < 4 and analysis.categories:
        lowered = [c.lower() for c in analysis.categories]
        if any(word in c for c in lowered for word in _DESSERT_WORDS):
            recs.append("Enjoy desserts in moderation and balance the rest of the day.")
        if any("frit" in c or "fried" in c for c in lowered):
            recs.append("Prefer baked, grilled or boiled versions of fried foods.")

    if len(recs) < 3:
        if analysis.health_score < 4:
            recs.append(
                "This meal scored low. Add vegetables and cut processed ingredients."
            )
        elif analysis.health_score > 7:
            recs.append("Great choice! This meal is well balanced.")

    recs = recs[:MAX_RECOMMENDATIONS]
    if not recs:
        recs = [
            "Balance meals with protein, complex carbs, healthy fats and vegetables.",
            "Drink at least 2 litres of water per day.",
        ]
    return recs
