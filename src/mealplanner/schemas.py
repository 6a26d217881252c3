"""Data schemas for weekly plans, preferences and shopping lists."""

import re
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

FastingType = Literal["none", "16_8", "18_6", "20_4", "5_2", "eat_stop_eat"]

DEFAULT_EATING_WINDOW_START = 12
DEFAULT_EATING_WINDOW_END = 20

WINDOWED_FASTING_TYPES = frozenset({"16_8", "18_6", "20_4"})

DAYS_PER_WEEK = 7
MEALS_PER_DAY = 4

_HOUR_PATTERN = re.compile(r"\s*(\d{1,2})")


def parse_hour(value: str | None, default: int) -> int:
    """
    Parse an hour-of-day from strings like "13:00", "9h30" or "20".

    Returns the default when the value is missing or not an hour 0-23.
    """
    if not value:
        return default
    match = _HOUR_PATTERN.match(value)
    if not match:
        return default
    hour = int(match.group(1))
    return hour if 0 <= hour <= 23 else default


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MealSlot(str, Enum):
    """The four fixed meal occasions of a day, in serving order."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    SNACK = "snack"
    DINNER = "dinner"


# =============================================================================
# Preferences
# =============================================================================


class FastingSchedule(CamelModel):
    """Intermittent fasting schedule."""

    model_config = ConfigDict(frozen=True)

    type: FastingType = "none"
    eating_window_start: str | None = None
    eating_window_end: str | None = None

    @property
    def is_active(self) -> bool:
        return self.type != "none"

    @property
    def has_eating_window(self) -> bool:
        """Daily time-restricted schedules (16:8, 18:6, 20:4)."""
        return self.type in WINDOWED_FASTING_TYPES

    @property
    def start_hour(self) -> int:
        return parse_hour(self.eating_window_start, DEFAULT_EATING_WINDOW_START)

    @property
    def end_hour(self) -> int:
        return parse_hour(self.eating_window_end, DEFAULT_EATING_WINDOW_END)

    @property
    def window_label(self) -> str:
        """Eating window as displayed in prompts, e.g. "12:00 - 20:00"."""
        return f"{self.start_hour:02d}:00 - {self.end_hour:02d}:00"


class WeeklyPlanPreferences(CamelModel):
    """User preferences driving one weekly plan generation."""

    model_config = ConfigDict(frozen=True)

    daily_calories: float = Field(ge=0, allow_inf_nan=False)
    proteins: float = Field(0, ge=0, allow_inf_nan=False)
    carbs: float = Field(0, ge=0, allow_inf_nan=False)
    fats: float = Field(0, ge=0, allow_inf_nan=False)
    diet_type: str | None = None
    allergies: tuple[str, ...] = ()
    goals: str | None = None
    include_cheat_meal: bool = False
    cooking_skill_level: str | None = Field(
        None, description="beginner, intermediate or advanced"
    )
    cooking_time_weekday: int | None = Field(None, ge=0, description="Max prep minutes")
    cooking_time_weekend: int | None = Field(None, ge=0, description="Max prep minutes")
    fasting_schedule: FastingSchedule | None = None
    weekly_budget: float | None = Field(None, ge=0, allow_inf_nan=False)
    price_preference: str | None = Field(None, description="e.g. budget, standard, premium")

    @property
    def is_fasting(self) -> bool:
        return self.fasting_schedule is not None and self.fasting_schedule.is_active


class ProfileContext(CamelModel):
    """Optional user profile details used to personalise prompts."""

    name: str | None = None
    age: int | None = Field(None, ge=0)
    gender: str | None = None
    weight: float | None = Field(
        None, ge=0, allow_inf_nan=False, description="Current weight in kg"
    )
    target_weight: float | None = Field(
        None, ge=0, allow_inf_nan=False, description="Target weight in kg"
    )
    activity_level: str | None = None
    primary_goal: str | None = None
    preferred_tags: list[str] = Field(
        default_factory=list,
        description="Recipe tags the user rated highly, most preferred first",
    )


# =============================================================================
# Weekly plan
# =============================================================================


class MealPlanMeal(CamelModel):
    """A single meal placed in a plan slot."""

    type: MealSlot
    name: str
    description: str | None = None
    calories: float = Field(0, ge=0, allow_inf_nan=False)
    proteins: float = Field(0, ge=0, allow_inf_nan=False)
    carbs: float = Field(0, ge=0, allow_inf_nan=False)
    fats: float = Field(0, ge=0, allow_inf_nan=False)
    prep_time: int = Field(0, ge=0)
    ingredients: list[str] = Field(default_factory=list)
    is_cheat_meal: bool = False
    is_fasting: bool = False

    @model_validator(mode="after")
    def _fasting_has_no_nutrition(self) -> "MealPlanMeal":
        if self.is_fasting and any((self.calories, self.proteins, self.carbs, self.fats)):
            raise ValueError("fasting placeholder meals must have zero nutrition")
        return self


class MealPlanDay(CamelModel):
    """One day of the plan: four meals in slot order."""

    day: str
    meals: list[MealPlanMeal] = Field(min_length=MEALS_PER_DAY, max_length=MEALS_PER_DAY)

    @computed_field(alias="totalCalories")  # type: ignore[prop-decorator]
    @property
    def total_calories(self) -> float:
        return sum(meal.calories for meal in self.meals)

    def meal_names(self, include_fasting: bool = False) -> list[str]:
        """Names of this day's meals, fasting placeholders excluded by default."""
        return [m.name for m in self.meals if m.name and (include_fasting or not m.is_fasting)]


class WeeklyPlan(CamelModel):
    """Seven days, Monday first."""

    days: list[MealPlanDay] = Field(min_length=DAYS_PER_WEEK, max_length=DAYS_PER_WEEK)

    def cheat_meals(self) -> list[tuple[int, MealPlanMeal]]:
        """All cheat meals with the index of the day they are on."""
        return [
            (index, meal)
            for index, day in enumerate(self.days)
            for meal in day.meals
            if meal.is_cheat_meal
        ]


# =============================================================================
# Shopping list
# =============================================================================


class ShoppingItem(CamelModel):
    """A consolidated ingredient to buy."""

    name: str
    quantity: str = ""
    price_estimate: float = Field(0.0, ge=0, allow_inf_nan=False)


class ShoppingCategory(CamelModel):
    """A shopping aisle with its items and locally computed subtotal."""

    name: str
    items: list[ShoppingItem] = Field(default_factory=list)
    subtotal: float = 0.0


class ShoppingList(CamelModel):
    """Consolidated, priced shopping list derived from one weekly plan."""

    categories: list[ShoppingCategory] = Field(default_factory=list)
    total_estimate: float = 0.0
    savings_tips: list[str] = Field(default_factory=list)
    budget: float | None = None
    currency: str = "EUR"

    @computed_field(alias="overBudget")  # type: ignore[prop-decorator]
    @property
    def over_budget(self) -> bool | None:
        if self.budget is None:
            return None
        return self.total_estimate > self.budget

    @property
    def item_count(self) -> int:
        return sum(len(category.items) for category in self.categories)
