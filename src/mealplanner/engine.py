"""Public entry point wiring the generator into the planning components."""

import random
import uuid

from mealplanner.config import Settings, get_settings
from mealplanner.generation.gateway import OpenAIGenerator, TextGenerator
from mealplanner.logging_config import LoggingContext, get_logger
from mealplanner.plan.candidates import MealCandidateBuilder
from mealplanner.plan.day_builder import DayPlanBuilder
from mealplanner.plan.shopping_list import ShoppingListConsolidator
from mealplanner.plan.weekly import DayRegenerator, WeeklyPlanOrchestrator
from mealplanner.schemas import (
    MealPlanDay,
    ProfileContext,
    ShoppingList,
    WeeklyPlan,
    WeeklyPlanPreferences,
)

logger = get_logger(__name__)


class MealPlanEngine:
    """
    Weekly plan, day regeneration and shopping list operations.

    The engine holds no per-request state: each operation builds its own
    ledger, so one engine can serve concurrent requests for different
    plans. Each operation draws from its own ``random.Random``; pass a
    ``seed`` to make cheat placement and themes reproducible per call.
    """

    def __init__(
        self,
        generator: TextGenerator,
        seed: int | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self.generator = generator
        self.seed = seed

        candidates = MealCandidateBuilder(generator)
        day_builder = DayPlanBuilder(
            candidates,
            default_cooking_time_weekday=settings.default_cooking_time_weekday,
            default_cooking_time_weekend=settings.default_cooking_time_weekend,
        )
        self.orchestrator = WeeklyPlanOrchestrator(generator, day_builder)
        self.regenerator = DayRegenerator(generator, day_builder)
        self.consolidator = ShoppingListConsolidator(generator, currency=settings.currency)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "MealPlanEngine":
        """Build an engine backed by the configured OpenAI-compatible endpoint."""
        settings = settings or get_settings()
        return cls(OpenAIGenerator(settings=settings), settings=settings)

    def new_rng(self) -> random.Random:
        """Fresh random source for one operation; unseeded engines use OS entropy."""
        return random.Random(self.seed)

    @property
    def is_available(self) -> bool:
        return self.generator.is_available()

    async def generate_weekly_plan(
        self,
        preferences: WeeklyPlanPreferences,
        profile: ProfileContext | None = None,
    ) -> WeeklyPlan:
        """Generate a seven-day plan; raises GenerationUnavailableError upfront."""
        with LoggingContext(plan_id=uuid.uuid4().hex):
            return await self.orchestrator.generate(preferences, profile, rng=self.new_rng())

    async def regenerate_day(
        self,
        day_index: int,
        preferences: WeeklyPlanPreferences,
        existing_plan: WeeklyPlan,
        profile: ProfileContext | None = None,
    ) -> MealPlanDay:
        """Generate a replacement for one day of ``existing_plan``."""
        return await self.regenerator.regenerate(
            day_index, preferences, existing_plan, profile, rng=self.new_rng()
        )

    async def generate_shopping_list(
        self,
        weekly_plan: WeeklyPlan,
        budget: float | None = None,
        price_preference: str | None = None,
    ) -> ShoppingList:
        """Consolidate a plan into a priced shopping list; raises ShoppingListError."""
        return await self.consolidator.generate(weekly_plan, budget, price_preference)
