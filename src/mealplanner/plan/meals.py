"""Fixed meal-slot policy, fallback meals and the fasting placeholder."""

from dataclasses import dataclass

from mealplanner.schemas import MealPlanMeal, MealSlot

# =============================================================================
# Calendar
# =============================================================================

WEEK_DAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# Days with the weekend cooking-time budget (0 = Monday)
WEEKEND_DAY_INDICES = frozenset({5, 6})

# The week's cheat meal may land on Friday, Saturday or Sunday
CHEAT_MEAL_DAY_INDICES: tuple[int, ...] = (4, 5, 6)
CHEAT_MEAL_SLOTS: tuple[MealSlot, ...] = (MealSlot.LUNCH, MealSlot.DINNER)

# 5:2 fasting restricts Tuesday and Friday
FIVE_TWO_RESTRICTED_DAY_INDICES = frozenset({1, 4})
FIVE_TWO_CALORIE_FACTOR = 0.3

# Prompts only ever show the tail of the ledger
STANDARD_AVOID_LIST_SIZE = 10
CHEAT_AVOID_LIST_SIZE = 5


def is_weekend(day_index: int) -> bool:
    return day_index in WEEKEND_DAY_INDICES


# =============================================================================
# Slots
# =============================================================================


@dataclass(frozen=True)
class SlotSpec:
    """A meal slot and its fixed share of the daily calories."""

    slot: MealSlot
    calorie_share: float

    def calorie_target(self, daily_calories: float) -> float:
        return daily_calories * self.calorie_share


BREAKFAST_SHARE = 0.25
LUNCH_SHARE = 0.35
SNACK_SHARE = 0.10
DINNER_SHARE = 0.30

# Evaluation order is serving order
SLOT_SPECS: tuple[SlotSpec, ...] = (
    SlotSpec(MealSlot.BREAKFAST, BREAKFAST_SHARE),
    SlotSpec(MealSlot.LUNCH, LUNCH_SHARE),
    SlotSpec(MealSlot.SNACK, SNACK_SHARE),
    SlotSpec(MealSlot.DINNER, DINNER_SHARE),
)


# =============================================================================
# Static Meals
# =============================================================================

FALLBACK_MEALS: dict[MealSlot, MealPlanMeal] = {
    MealSlot.BREAKFAST: MealPlanMeal(
        type=MealSlot.BREAKFAST,
        name="Oat porridge with banana and honey",
        description="Rolled oats cooked in milk, topped with sliced banana and a drizzle of honey.",
        calories=420,
        proteins=14,
        carbs=70,
        fats=9,
        prep_time=10,
        ingredients=["rolled oats", "milk", "banana", "honey"],
    ),
    MealSlot.LUNCH: MealPlanMeal(
        type=MealSlot.LUNCH,
        name="Chicken, rice and green beans",
        description="Pan-seared chicken breast with basmati rice and steamed green beans.",
        calories=620,
        proteins=45,
        carbs=70,
        fats=14,
        prep_time=25,
        ingredients=["chicken breast", "basmati rice", "green beans", "olive oil"],
    ),
    MealSlot.SNACK: MealPlanMeal(
        type=MealSlot.SNACK,
        name="Apple with a handful of almonds",
        description="A crisp apple and about 20 g of almonds.",
        calories=180,
        proteins=5,
        carbs=22,
        fats=9,
        prep_time=2,
        ingredients=["apple", "almonds"],
    ),
    MealSlot.DINNER: MealPlanMeal(
        type=MealSlot.DINNER,
        name="Vegetable omelette with side salad",
        description="Three-egg omelette with peppers and spinach, served with a green salad.",
        calories=480,
        proteins=28,
        carbs=18,
        fats=32,
        prep_time=15,
        ingredients=["eggs", "bell pepper", "spinach", "lettuce", "olive oil"],
    ),
}

CHEAT_FALLBACK_NAME = "Double cheeseburger with fries"


def fallback_meal(slot: MealSlot) -> MealPlanMeal:
    """The fixed recipe used when generation for a standard slot fails."""
    return FALLBACK_MEALS[slot].model_copy(deep=True)


def cheat_fallback_meal(slot: MealSlot) -> MealPlanMeal:
    """The fixed recipe used when cheat meal generation fails."""
    return MealPlanMeal(
        type=slot,
        name=CHEAT_FALLBACK_NAME,
        description="Two smashed beef patties, melted cheddar, brioche bun and crispy fries.",
        calories=1150,
        proteins=52,
        carbs=95,
        fats=62,
        prep_time=30,
        ingredients=["ground beef", "cheddar", "brioche buns", "potatoes", "pickles"],
        is_cheat_meal=True,
    )


def fasting_placeholder(slot: MealSlot) -> MealPlanMeal:
    """Zero-nutrition record for a slot skipped by the fasting window."""
    return MealPlanMeal(
        type=slot,
        name="Fasting - water, tea or coffee",
        description="Fasting period, hydration only.",
        calories=0,
        proteins=0,
        carbs=0,
        fats=0,
        prep_time=0,
        ingredients=["water", "unsweetened tea or coffee (optional)"],
        is_fasting=True,
    )
