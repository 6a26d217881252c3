"""Assembly of one plan day from four meal slots."""

from mealplanner.generation.prompts import format_profile_context
from mealplanner.logging_config import get_logger
from mealplanner.plan.candidates import MealCandidateBuilder, MealRequest
from mealplanner.plan.ledger import UsedTitlesLedger
from mealplanner.plan.meals import (
    CHEAT_AVOID_LIST_SIZE,
    FIVE_TWO_CALORIE_FACTOR,
    FIVE_TWO_RESTRICTED_DAY_INDICES,
    SLOT_SPECS,
    STANDARD_AVOID_LIST_SIZE,
    WEEK_DAYS,
    fasting_placeholder,
    is_weekend,
)
from mealplanner.schemas import (
    FastingSchedule,
    MealPlanDay,
    MealPlanMeal,
    MealSlot,
    ProfileContext,
    WeeklyPlanPreferences,
)

logger = get_logger(__name__)

# Breakfast is skipped when the eating window opens at or after noon
FASTING_BREAKFAST_CUTOFF_HOUR = 12

DEFAULT_COOKING_TIME_WEEKDAY = 20
DEFAULT_COOKING_TIME_WEEKEND = 45


def skips_slot(schedule: FastingSchedule | None, slot: MealSlot) -> bool:
    """Whether the fasting schedule replaces this slot with a placeholder."""
    if schedule is None or not schedule.is_active:
        return False
    return slot == MealSlot.BREAKFAST and schedule.start_hour >= FASTING_BREAKFAST_CUTOFF_HOUR


def fasting_prompt_context(
    schedule: FastingSchedule | None,
    slot: MealSlot,
    day_index: int,
    calorie_target: float,
) -> str | None:
    """Extra prompt lines describing the fasting constraints for one slot."""
    if schedule is None or not schedule.is_active:
        return None

    if schedule.has_eating_window:
        label = schedule.type.replace("_", ":")
        return (
            f"INTERMITTENT FASTING {label}:\n"
            f"- Eating window: {schedule.window_label}\n"
            f"- If {slot.value} falls outside the window, keep it very light\n"
            "- Meals inside the window should be filling and nutritious"
        )

    if schedule.type == "5_2" and day_index in FIVE_TWO_RESTRICTED_DAY_INDICES:
        return (
            "FASTING DAY (5:2):\n"
            "- Total budget for the whole day: 500-600 kcal\n"
            f"- This meal must stay under {round(calorie_target * FIVE_TWO_CALORIE_FACTOR)} kcal\n"
            "- Favour vegetables and lean protein"
        )

    return None


class DayPlanBuilder:
    """
    Builds one MealPlanDay, slot by slot.

    Each slot goes through the same checks in order: fasting skip, the
    week's cheat placement, then standard generation. Every produced meal
    is recorded in the ledger before the next slot is requested so later
    slots can avoid it.
    """

    def __init__(
        self,
        candidates: MealCandidateBuilder,
        default_cooking_time_weekday: int = DEFAULT_COOKING_TIME_WEEKDAY,
        default_cooking_time_weekend: int = DEFAULT_COOKING_TIME_WEEKEND,
    ):
        self.candidates = candidates
        self.default_cooking_time_weekday = default_cooking_time_weekday
        self.default_cooking_time_weekend = default_cooking_time_weekend

    def max_prep_time(self, preferences: WeeklyPlanPreferences, day_index: int) -> int:
        """Prep-time budget for the day, from preferences or the defaults."""
        if is_weekend(day_index):
            return preferences.cooking_time_weekend or self.default_cooking_time_weekend
        return preferences.cooking_time_weekday or self.default_cooking_time_weekday

    async def build_day(
        self,
        day_index: int,
        preferences: WeeklyPlanPreferences,
        ledger: UsedTitlesLedger,
        cheat_slot: MealSlot | None = None,
        theme: str | None = None,
        profile: ProfileContext | None = None,
    ) -> MealPlanDay:
        """
        Build the four meals of one day.

        Args:
            day_index: 0 for Monday through 6 for Sunday.
            preferences: The week's preferences.
            ledger: Week ledger; appended to as meals are produced.
            cheat_slot: Slot hosting the week's cheat meal, if it is on this day.
            theme: Optional culinary theme for the day's standard meals.
            profile: Optional user profile for prompt personalisation.

        Returns:
            The day with exactly four meals in slot order.
        """
        day = WEEK_DAYS[day_index]
        max_prep_time = self.max_prep_time(preferences, day_index)
        profile_context = format_profile_context(profile) or None
        schedule = preferences.fasting_schedule if preferences.is_fasting else None

        meals: list[MealPlanMeal] = []
        for spec in SLOT_SPECS:
            slot = spec.slot

            if skips_slot(schedule, slot):
                logger.debug(f"{day} {slot.value} skipped by fasting window")
                meals.append(fasting_placeholder(slot))
                continue

            calorie_target = spec.calorie_target(preferences.daily_calories)

            if slot == cheat_slot:
                logger.info(f"Generating cheat meal for {day} ({slot.value})")
                meal = await self.candidates.build_cheat(
                    MealRequest(
                        slot=slot,
                        day=day,
                        calorie_target=calorie_target,
                        max_prep_time=max_prep_time,
                        avoid_titles=tuple(ledger.tail(CHEAT_AVOID_LIST_SIZE)),
                        allergies=preferences.allergies,
                        profile_context=profile_context,
                    )
                )
            else:
                meal = await self.candidates.build(
                    MealRequest(
                        slot=slot,
                        day=day,
                        calorie_target=calorie_target,
                        max_prep_time=max_prep_time,
                        avoid_titles=tuple(ledger.tail(STANDARD_AVOID_LIST_SIZE)),
                        diet_type=preferences.diet_type,
                        allergies=preferences.allergies,
                        cooking_skill=preferences.cooking_skill_level,
                        theme=theme,
                        fasting_context=fasting_prompt_context(
                            schedule, slot, day_index, calorie_target
                        ),
                        profile_context=profile_context,
                    )
                )

            if not meal.is_fasting and meal.name in ledger:
                logger.debug(f"{day} {slot.value} repeats an earlier meal: {meal.name}")
            ledger.record(meal)
            meals.append(meal)

        plan_day = MealPlanDay(day=day, meals=meals)
        logger.info(f"Built {day}: {plan_day.total_calories:.0f} kcal")
        return plan_day
