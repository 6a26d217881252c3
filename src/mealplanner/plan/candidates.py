"""Single-meal generation with a static fallback on any failure."""

import math
from dataclasses import dataclass
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from mealplanner.generation.gateway import GenerationError, TextGenerator
from mealplanner.generation.parser import ResponseParseError, parse_json_object
from mealplanner.generation.prompts import build_cheat_meal_prompt, build_meal_prompt
from mealplanner.logging_config import get_logger
from mealplanner.plan.meals import cheat_fallback_meal, fallback_meal
from mealplanner.schemas import MealPlanMeal, MealSlot

logger = get_logger(__name__)


class GeneratedRecipe(BaseModel):
    """Recipe record as returned by the generation capability."""

    title: str = Field(min_length=1, validation_alias=AliasChoices("title", "name"))
    description: str | None = None
    calories: float = Field(ge=0, allow_inf_nan=False)
    proteins: float = Field(ge=0, allow_inf_nan=False)
    carbs: float = Field(ge=0, allow_inf_nan=False)
    fats: float = Field(ge=0, allow_inf_nan=False)
    prep_time: int = Field(
        ge=0,
        validation_alias=AliasChoices("prepTime", "prep_time", "temps_preparation"),
    )
    ingredients: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _flatten_macros(cls, data: Any) -> Any:
        """Accept nutrition nested under a ``macros`` object."""
        if isinstance(data, dict) and isinstance(data.get("macros"), dict):
            data = {**data["macros"], **{k: v for k, v in data.items() if k != "macros"}}
        return data

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title is blank")
        return value

    @field_validator("prep_time", mode="before")
    @classmethod
    def _round_prep_time(cls, value: Any) -> Any:
        # Non-finite floats are left for the int check to reject
        if isinstance(value, float) and math.isfinite(value):
            return round(value)
        return value

    @field_validator("ingredients", mode="before")
    @classmethod
    def _ingredients_as_strings(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [str(item) for item in value if item]
        return value

    def to_meal(self, slot: MealSlot, is_cheat_meal: bool = False) -> MealPlanMeal:
        return MealPlanMeal(
            type=slot,
            name=self.title,
            description=self.description,
            calories=self.calories,
            proteins=self.proteins,
            carbs=self.carbs,
            fats=self.fats,
            prep_time=self.prep_time,
            ingredients=self.ingredients,
            is_cheat_meal=is_cheat_meal,
        )


@dataclass(frozen=True)
class MealRequest:
    """Everything needed to ask for one meal."""

    slot: MealSlot
    day: str
    calorie_target: float
    max_prep_time: int
    avoid_titles: tuple[str, ...] = ()
    diet_type: str | None = None
    allergies: tuple[str, ...] = ()
    cooking_skill: str | None = None
    theme: str | None = None
    fasting_context: str | None = None
    profile_context: str | None = None


class MealCandidateBuilder:
    """
    Produces exactly one meal per request.

    Generation, parsing and validation failures never propagate: the
    slot's fixed fallback meal is returned instead.
    """

    def __init__(self, generator: TextGenerator):
        self.generator = generator

    async def build(self, request: MealRequest) -> MealPlanMeal:
        """Generate a standard meal honouring the dietary constraints."""
        prompt = build_meal_prompt(
            slot=request.slot,
            day=request.day,
            calorie_target=request.calorie_target,
            max_prep_time=request.max_prep_time,
            avoid_titles=request.avoid_titles,
            diet_type=request.diet_type,
            allergies=request.allergies,
            cooking_skill=request.cooking_skill,
            theme=request.theme,
            fasting_context=request.fasting_context,
            profile_context=request.profile_context,
        )
        recipe = await self._generate_recipe(prompt, request)
        if recipe is None:
            return fallback_meal(request.slot)
        return recipe.to_meal(request.slot)

    async def build_cheat(self, request: MealRequest) -> MealPlanMeal:
        """Generate the week's cheat meal; only allergies are kept as constraints."""
        prompt = build_cheat_meal_prompt(
            slot=request.slot,
            day=request.day,
            avoid_titles=request.avoid_titles,
            allergies=request.allergies,
            profile_context=request.profile_context,
        )
        recipe = await self._generate_recipe(prompt, request, cheat=True)
        if recipe is None:
            return cheat_fallback_meal(request.slot)
        return recipe.to_meal(request.slot, is_cheat_meal=True)

    async def _generate_recipe(
        self,
        prompt: str,
        request: MealRequest,
        cheat: bool = False,
    ) -> GeneratedRecipe | None:
        """Run one generation call; None means the caller should fall back."""
        label = f"{'cheat ' if cheat else ''}{request.slot.value} for {request.day}"

        try:
            text = await self.generator.generate(prompt)
        except GenerationError as e:
            logger.warning(f"Generation failed for {label}, using fallback: {e}")
            return None
        except Exception as e:
            # Custom generators and caller-imposed timeouts raise their own types
            logger.warning(
                f"Generator {self.generator.name} raised for {label}, using fallback: {e!r}"
            )
            return None

        try:
            payload = parse_json_object(text)
        except ResponseParseError as e:
            logger.warning(f"Unparseable response for {label}, using fallback: {e}")
            return None

        try:
            recipe = GeneratedRecipe.model_validate(payload)
        except ValidationError as e:
            logger.warning(
                f"Invalid recipe for {label}, using fallback: {e.error_count()} errors"
            )
            return None

        logger.debug(f"Generated {label}: {recipe.title} ({recipe.calories:.0f} kcal)")
        return recipe
