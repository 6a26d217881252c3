"""Prompt templates for meal, cheat meal and shopping list generation."""

import random
from collections.abc import Sequence
from textwrap import dedent

from mealplanner.schemas import MealSlot, ProfileContext

# =============================================================================
# Static Guidelines
# =============================================================================

SIMPLE_RECIPE_GUIDELINES = dedent(
    """
    RECIPE RULES:
    - Everyday home cooking only, no restaurant or gastronomic dishes
    - Ingredients available in any supermarket, nothing rare or expensive
    - At most 6-8 ingredients and 5-6 short preparation steps
    - Realistic preparation time
    """
).strip()

MEAL_TYPE_GUIDELINES: dict[str, str] = {
    MealSlot.BREAKFAST.value: (
        "BREAKFAST: simple and quick (5-10 min), mostly sweet (toast with jam, "
        "porridge, cereal, yogurt with fruit) with an optional light savory touch "
        "(egg, smoked salmon, ham). Never a cooked lunch-style dish."
    ),
    MealSlot.LUNCH.value: (
        "LUNCH: a balanced main course with a protein, vegetables and a starch, "
        "optionally with a side salad or dairy."
    ),
    MealSlot.SNACK.value: (
        "SNACK: a small bite that bridges the afternoon without spoiling dinner "
        "(fruit and nuts, yogurt, a small smoothie)."
    ),
    MealSlot.DINNER.value: (
        "DINNER: lighter than lunch, easy to digest, vegetables first "
        "(soup, omelette, grilled fish with greens)."
    ),
}

CHEAT_MEAL_GUIDELINES = dedent(
    """
    CHEAT MEAL (once a week):
    - Total indulgence: a real burger, a generous pizza, a proper dessert
    - No "fit" version and no compromise on taste
    - The description talks about flavour and texture, never about calories
    """
).strip()

CULINARY_THEMES: tuple[str, ...] = (
    "Mediterranean (Italy, Greece, Spain)",
    "Traditional French home cooking",
    "Asian flavours (Japan, Thailand, Vietnam), adapted",
    "Creative plant-based cooking",
    "Slow-cooked comfort food",
    "World cuisine (Mexico, India, Lebanon)",
    "Quick and light recipes",
    "Regional specialities",
    "Modern fusion",
    "Fresh and energising",
)

SHOPPING_CATEGORIES: tuple[str, ...] = (
    "Produce",
    "Meat & Fish",
    "Dairy & Eggs",
    "Savory Grocery",
    "Sweet Grocery",
    "Bakery",
    "Frozen",
    "Beverages",
)

CHEAT_MEAL_CALORIE_RANGE = (1000, 1200)

# Preferred tags are used as the day's theme this often
PREFERRED_TAG_THEME_PROBABILITY = 0.5
PREFERRED_TAG_POOL = 3


def pick_theme(rng: random.Random, preferred_tags: Sequence[str] = ()) -> str:
    """Pick a culinary theme, leaning on the user's preferred tags when known."""
    if preferred_tags and rng.random() < PREFERRED_TAG_THEME_PROBABILITY:
        return rng.choice(list(preferred_tags[:PREFERRED_TAG_POOL]))
    return rng.choice(CULINARY_THEMES)


def _format_list(values: Sequence[str], empty: str = "none") -> str:
    cleaned = [v for v in values if v]
    return ", ".join(cleaned) if cleaned else empty


def format_profile_context(profile: ProfileContext | None) -> str:
    """Render the optional user profile as a short prompt preamble."""
    if profile is None:
        return ""

    lines = []
    if profile.name:
        lines.append(f"- Name: {profile.name}")
    if profile.age is not None:
        lines.append(f"- Age: {profile.age}")
    if profile.gender:
        lines.append(f"- Gender: {profile.gender}")
    if profile.weight is not None:
        target = f" (target {profile.target_weight:g} kg)" if profile.target_weight else ""
        lines.append(f"- Weight: {profile.weight:g} kg{target}")
    if profile.activity_level:
        lines.append(f"- Activity level: {profile.activity_level}")
    if profile.primary_goal:
        lines.append(f"- Primary goal: {profile.primary_goal}")
    if profile.preferred_tags:
        lines.append(f"- Enjoys: {_format_list(profile.preferred_tags)}")

    if not lines:
        return ""
    return "USER PROFILE:\n" + "\n".join(lines)


def _join_sections(*sections: str) -> str:
    return "\n\n".join(section.strip() for section in sections if section and section.strip())


# =============================================================================
# Meal Prompts
# =============================================================================


def build_meal_prompt(
    *,
    slot: MealSlot,
    day: str,
    calorie_target: float,
    max_prep_time: int,
    avoid_titles: Sequence[str],
    diet_type: str | None = None,
    allergies: Sequence[str] = (),
    cooking_skill: str | None = None,
    theme: str | None = None,
    fasting_context: str | None = None,
    profile_context: str | None = None,
) -> str:
    """Build the request for one standard meal."""
    target = round(calorie_target)
    constraints = [
        f"- Target calories: {target} kcal",
        f"- Diet type: {diet_type or 'balanced'}",
        f"- Allergies to avoid: {_format_list(allergies)}",
        f"- Maximum preparation time: {max_prep_time} minutes",
        f"- AVOID these dishes, already on the menu: {_format_list(avoid_titles)}",
    ]
    if cooking_skill:
        constraints.append(f"- Cooking skill level: {cooking_skill}")
    if theme:
        constraints.append(f"- Theme of the day: {theme}")

    response_format = dedent(
        f"""
        Answer ONLY with valid JSON:
        {{
          "title": "Simple dish name",
          "description": "One sentence",
          "ingredients": ["at most 8 common ingredients"],
          "calories": {target},
          "proteins": 25,
          "carbs": 35,
          "fats": 12,
          "prepTime": {min(max_prep_time, 25)}
        }}
        """
    )

    return _join_sections(
        SIMPLE_RECIPE_GUIDELINES,
        MEAL_TYPE_GUIDELINES.get(slot.value, ""),
        fasting_context or "",
        profile_context or "",
        f"Create a simple everyday {slot.value} recipe for {day}.",
        "CONSTRAINTS:\n" + "\n".join(constraints),
        response_format,
    )


def build_cheat_meal_prompt(
    *,
    slot: MealSlot,
    day: str,
    avoid_titles: Sequence[str],
    allergies: Sequence[str] = (),
    profile_context: str | None = None,
) -> str:
    """Build the request for the week's cheat meal; dietary constraints are dropped."""
    low, high = CHEAT_MEAL_CALORIE_RANGE
    constraints = [
        f"- Calories: generous, around {low}-{high} kcal, do not hold back",
        "- Diet type: none",
        f"- Allergies to avoid: {_format_list(allergies)}",
        f"- AVOID these dishes, already on the menu: {_format_list(avoid_titles)}",
    ]

    response_format = dedent(
        f"""
        Answer ONLY with valid JSON:
        {{
          "title": "Fun, catchy dish name",
          "description": "Short, guilt-free and mouth-watering",
          "ingredients": ["ingredient 1", "ingredient 2"],
          "calories": {(low + high) // 2},
          "proteins": 40,
          "carbs": 110,
          "fats": 50,
          "prepTime": 30
        }}
        """
    )

    return _join_sections(
        CHEAT_MEAL_GUIDELINES,
        profile_context or "",
        f"Create the CHEAT MEAL for {day} {slot.value}. Ignore the usual dietary rules.",
        "CONSTRAINTS:\n" + "\n".join(constraints),
        response_format,
    )


# =============================================================================
# Shopping List Prompt
# =============================================================================


def build_shopping_list_prompt(
    meals: Sequence[dict],
    budget: float | None = None,
    price_preference: str | None = None,
    currency: str = "EUR",
) -> str:
    """
    Build the consolidation request for a week of meals.

    Args:
        meals: Dicts with ``name``, ``calories``, ``proteins`` and optional
            ``ingredients`` keys.
        budget: Optional weekly budget.
        price_preference: Optional price positioning (budget, standard, premium).
        currency: Currency for price estimates.
    """
    meal_lines = []
    for meal in meals:
        line = f"- {meal['name']} ({round(meal['calories'])} kcal, {round(meal['proteins'])} g protein)"
        if meal.get("ingredients"):
            line += f": {_format_list(meal['ingredients'])}"
        meal_lines.append(line)

    budget_lines = []
    if budget is not None:
        budget_lines.append(f"- Weekly budget: {budget:.2f} {currency}; stay within it if possible")
    if price_preference:
        budget_lines.append(f"- Price positioning: {price_preference}")

    return _join_sections(
        "You are a grocery assistant. These are the meals planned for one week:",
        "\n".join(meal_lines),
        "TASK:\n"
        "1. Work out the ingredients these meals need\n"
        "2. Merge duplicates across meals and estimate realistic total quantities\n"
        f"3. Estimate a realistic supermarket price for each item in {currency}\n"
        f"4. Group items into these categories only: {', '.join(SHOPPING_CATEGORIES)}\n"
        "5. Add a few practical savings tips",
        "\n".join(budget_lines),
        dedent(
            """
            Answer ONLY with valid JSON:
            {
              "categories": [
                {
                  "name": "Produce",
                  "items": [{"name": "Tomatoes", "quantity": "1 kg", "priceEstimate": 2.5}],
                  "subtotal": 2.5
                }
              ],
              "totalEstimate": 2.5,
              "savingsTips": ["Buy seasonal vegetables"]
            }
            """
        ),
    )
