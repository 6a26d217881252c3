"""Week-scoped record of meal names already placed in a plan."""

from collections.abc import Iterable, Iterator

from mealplanner.schemas import MealPlanDay, MealPlanMeal


class UsedTitlesLedger:
    """
    Ordered list of meal names used so far in the week.

    The ledger has a single writer (the plan being built) and is consulted
    before every generation call, so names must be recorded in the order
    the meals were produced.
    """

    def __init__(self, titles: Iterable[str] | None = None):
        self._titles: list[str] = [t for t in (titles or []) if t]

    @classmethod
    def from_days(cls, days: Iterable[MealPlanDay]) -> "UsedTitlesLedger":
        """Seed a ledger with every non-fasting meal name of the given days."""
        return cls(name for day in days for name in day.meal_names())

    def record(self, meal: MealPlanMeal) -> None:
        """Append a produced meal; fasting placeholders are never tracked."""
        if meal.is_fasting or not meal.name:
            return
        self._titles.append(meal.name)

    def tail(self, count: int) -> list[str]:
        """The most recent ``count`` names, oldest first."""
        if count <= 0:
            return []
        return self._titles[-count:]

    def __contains__(self, title: object) -> bool:
        if not isinstance(title, str):
            return False
        needle = title.casefold()
        return any(t.casefold() == needle for t in self._titles)

    def __iter__(self) -> Iterator[str]:
        return iter(self._titles)

    def __len__(self) -> int:
        return len(self._titles)

    def __repr__(self) -> str:
        return f"UsedTitlesLedger({self._titles!r})"
