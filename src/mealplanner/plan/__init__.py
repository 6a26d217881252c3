"""Weekly meal plan generation and shopping list consolidation."""

from mealplanner.plan.candidates import GeneratedRecipe, MealCandidateBuilder, MealRequest
from mealplanner.plan.day_builder import DayPlanBuilder
from mealplanner.plan.ledger import UsedTitlesLedger
from mealplanner.plan.shopping_list import ShoppingListConsolidator
from mealplanner.plan.weekly import (
    CheatPlacement,
    DayRegenerator,
    WeeklyPlanOrchestrator,
    pick_cheat_placement,
)

__all__ = [
    "CheatPlacement",
    "DayPlanBuilder",
    "DayRegenerator",
    "GeneratedRecipe",
    "MealCandidateBuilder",
    "MealRequest",
    "ShoppingListConsolidator",
    "UsedTitlesLedger",
    "WeeklyPlanOrchestrator",
    "pick_cheat_placement",
]
