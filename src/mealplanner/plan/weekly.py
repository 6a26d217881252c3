"""Week-level orchestration: full plan generation and single-day regeneration."""

import random
from dataclasses import dataclass

from mealplanner.exceptions import GenerationUnavailableError
from mealplanner.generation.gateway import TextGenerator
from mealplanner.generation.prompts import pick_theme
from mealplanner.logging_config import LoggingContext, get_logger
from mealplanner.plan.day_builder import DayPlanBuilder
from mealplanner.plan.ledger import UsedTitlesLedger
from mealplanner.plan.meals import CHEAT_MEAL_DAY_INDICES, CHEAT_MEAL_SLOTS, WEEK_DAYS
from mealplanner.schemas import (
    MealPlanDay,
    MealSlot,
    ProfileContext,
    WeeklyPlan,
    WeeklyPlanPreferences,
)

logger = get_logger(__name__)

UNAVAILABLE_MESSAGE = (
    "Meal plan generation is currently unavailable. Please try again later."
)


@dataclass(frozen=True)
class CheatPlacement:
    """The single day and slot hosting the week's cheat meal."""

    day_index: int
    slot: MealSlot

    @property
    def day(self) -> str:
        return WEEK_DAYS[self.day_index]


def pick_cheat_placement(rng: random.Random) -> CheatPlacement:
    """Draw the cheat meal day (Fri-Sun) and slot (lunch or dinner)."""
    return CheatPlacement(
        day_index=rng.choice(CHEAT_MEAL_DAY_INDICES),
        slot=rng.choice(CHEAT_MEAL_SLOTS),
    )


def _ensure_available(generator: TextGenerator) -> None:
    if not generator.is_available():
        logger.warning(f"Generator {generator.name} is not available")
        raise GenerationUnavailableError(UNAVAILABLE_MESSAGE)


class WeeklyPlanOrchestrator:
    """
    Generates a full seven-day plan.

    Days are built strictly one after another with a single ledger so that
    every generation call sees every meal named before it in the week.
    """

    def __init__(self, generator: TextGenerator, day_builder: DayPlanBuilder):
        self.generator = generator
        self.day_builder = day_builder

    async def generate(
        self,
        preferences: WeeklyPlanPreferences,
        profile: ProfileContext | None = None,
        rng: random.Random | None = None,
    ) -> WeeklyPlan:
        """
        Generate a weekly plan.

        Args:
            preferences: The user's weekly preferences.
            profile: Optional profile used to personalise prompts and themes.
            rng: Random source for cheat placement and themes; one per call.

        Returns:
            A plan with seven days of four meals each.

        Raises:
            GenerationUnavailableError: If the generator is not configured.
        """
        _ensure_available(self.generator)
        rng = rng or random.Random()

        logger.info(
            f"Generating weekly plan: {preferences.daily_calories:.0f} kcal/day, "
            f"diet={preferences.diet_type or 'balanced'}, "
            f"cheat_meal={preferences.include_cheat_meal}"
        )

        cheat: CheatPlacement | None = None
        if preferences.include_cheat_meal:
            cheat = pick_cheat_placement(rng)
            logger.info(f"Cheat meal scheduled for {cheat.day} ({cheat.slot.value})")

        preferred_tags = profile.preferred_tags if profile else []
        ledger = UsedTitlesLedger()
        days: list[MealPlanDay] = []

        for day_index, day in enumerate(WEEK_DAYS):
            theme = pick_theme(rng, preferred_tags)
            with LoggingContext(day=day):
                logger.debug(f"Theme for {day}: {theme}")
                plan_day = await self.day_builder.build_day(
                    day_index,
                    preferences,
                    ledger,
                    cheat_slot=cheat.slot if cheat and cheat.day_index == day_index else None,
                    theme=theme,
                    profile=profile,
                )
            days.append(plan_day)

        plan = WeeklyPlan(days=days)
        logger.info(f"Weekly plan generated with {len(ledger)} named meals")
        return plan


class DayRegenerator:
    """
    Rebuilds one day of an existing plan.

    The other six days seed the ledger so the new day avoids their meals.
    The supplied plan is never modified; callers splice the returned day
    back in at the same index.
    """

    def __init__(self, generator: TextGenerator, day_builder: DayPlanBuilder):
        self.generator = generator
        self.day_builder = day_builder

    async def regenerate(
        self,
        day_index: int,
        preferences: WeeklyPlanPreferences,
        existing_plan: WeeklyPlan,
        profile: ProfileContext | None = None,
        rng: random.Random | None = None,
    ) -> MealPlanDay:
        """
        Produce a replacement for ``existing_plan.days[day_index]``.

        Raises:
            ValueError: If ``day_index`` is not 0-6.
            GenerationUnavailableError: If the generator is not configured.
        """
        if not 0 <= day_index < len(WEEK_DAYS):
            raise ValueError(f"day_index must be between 0 and 6, got {day_index}")

        _ensure_available(self.generator)
        rng = rng or random.Random()

        day = WEEK_DAYS[day_index]
        other_days = [d for index, d in enumerate(existing_plan.days) if index != day_index]
        ledger = UsedTitlesLedger.from_days(other_days)

        # Keep the week at a single cheat meal once the day is spliced back
        cheat_slot = next(
            (meal.type for index, meal in existing_plan.cheat_meals() if index == day_index),
            None,
        )

        preferred_tags = profile.preferred_tags if profile else []
        theme = pick_theme(rng, preferred_tags)

        logger.info(
            f"Regenerating {day} avoiding {len(ledger)} meals from the rest of the week"
        )
        with LoggingContext(day=day):
            return await self.day_builder.build_day(
                day_index,
                preferences,
                ledger,
                cheat_slot=cheat_slot,
                theme=theme,
                profile=profile,
            )
