"""Weekly meal plan generation and provisioning engine."""

from mealplanner.engine import MealPlanEngine
from mealplanner.exceptions import (
    GenerationUnavailableError,
    MealPlanError,
    ShoppingListError,
)

__version__ = "0.1.0"

__all__ = [
    "GenerationUnavailableError",
    "MealPlanEngine",
    "MealPlanError",
    "ShoppingListError",
]
