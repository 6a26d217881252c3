"""Operation-level failures surfaced to callers of the engine."""


class MealPlanError(Exception):
    """Base class for failures of a public engine operation."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class GenerationUnavailableError(MealPlanError):
    """The generation capability is not configured; no work was attempted."""


class ShoppingListError(MealPlanError):
    """The shopping list could not be generated, parsed or validated."""
