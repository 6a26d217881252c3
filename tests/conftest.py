"""Pytest configuration and shared fixtures."""

import itertools
import json
import re
from collections.abc import Callable

import pytest

from mealplanner.config import Settings
from mealplanner.engine import MealPlanEngine
from mealplanner.generation.gateway import GenerationError, TextGenerator
from mealplanner.schemas import WeeklyPlanPreferences

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Stub Generators
# =============================================================================

_TARGET_CALORIES = re.compile(r"Target calories: (\d+) kcal")
_AVOID_LINE = re.compile(r"AVOID these dishes, already on the menu: (.*)")


def avoid_list(prompt: str) -> list[str]:
    """Extract the avoid-list from a meal prompt."""
    match = _AVOID_LINE.search(prompt)
    if not match or match.group(1).strip() == "none":
        return []
    return [name.strip() for name in match.group(1).split(", ")]


class ScriptedGenerator(TextGenerator):
    """Deterministic generator driven by a prompt -> text handler."""

    def __init__(self, handler: Callable[[str], str], available: bool = True):
        self.handler = handler
        self.available = available
        self.prompts: list[str] = []

    @property
    def name(self) -> str:
        return "scripted"

    def is_available(self) -> bool:
        return self.available

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.handler(prompt)


def recipe_handler() -> Callable[[str], str]:
    """Return valid recipe JSON with a unique title per call, echoing the calorie target."""
    counter = itertools.count(1)

    def handler(prompt: str) -> str:
        n = next(counter)
        if "CHEAT MEAL" in prompt:
            recipe = {
                "title": f"Cheat Feast {n}",
                "description": "Melting and crispy",
                "ingredients": ["beef", "cheese", "bun"],
                "calories": 1100,
                "proteins": 45,
                "carbs": 100,
                "fats": 55,
                "prepTime": 30,
            }
            return json.dumps(recipe)

        match = _TARGET_CALORIES.search(prompt)
        calories = int(match.group(1)) if match else 300
        recipe = {
            "title": f"Generated Dish {n}",
            "description": "Simple and tasty",
            "ingredients": ["ingredient a", "ingredient b"],
            "calories": calories,
            "proteins": 25,
            "carbs": 35,
            "fats": 12,
            "prepTime": 15,
        }
        return "```json\n" + json.dumps(recipe) + "\n```"

    return handler


def failing_handler(prompt: str) -> str:
    raise GenerationError("upstream unavailable", "scripted")


@pytest.fixture
def recipe_generator():
    """Generator that always returns a valid, unique recipe."""
    return ScriptedGenerator(recipe_handler())


@pytest.fixture
def failing_generator():
    """Generator whose every call fails."""
    return ScriptedGenerator(failing_handler)


@pytest.fixture
def unavailable_generator():
    """Generator that reports itself as not configured."""
    return ScriptedGenerator(recipe_handler(), available=False)


# =============================================================================
# Engine and Preference Fixtures
# =============================================================================


@pytest.fixture
def test_settings():
    """Settings isolated from the environment."""
    return Settings(
        _env_file=None,
        openai_api_key="test-key",
        default_cooking_time_weekday=20,
        default_cooking_time_weekend=45,
        currency="EUR",
    )


@pytest.fixture
def make_engine(test_settings):
    """Factory for engines with a seeded random source."""

    def _make(generator: TextGenerator, seed: int = 0) -> MealPlanEngine:
        return MealPlanEngine(generator, seed=seed, settings=test_settings)

    return _make


@pytest.fixture
def vegetarian_preferences():
    """Preferences from the vegetarian 2000 kcal scenario."""
    return WeeklyPlanPreferences(
        daily_calories=2000,
        proteins=90,
        carbs=250,
        fats=70,
        diet_type="vegetarian",
        allergies=["peanuts"],
        include_cheat_meal=False,
    )


@pytest.fixture
def cheat_preferences(vegetarian_preferences):
    """Same preferences with a weekly cheat meal."""
    return vegetarian_preferences.model_copy(update={"include_cheat_meal": True})
