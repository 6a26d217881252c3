"""API routes for weekly plan generation, day regeneration and shopping lists."""

from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from pydantic import Field

from mealplanner.engine import MealPlanEngine
from mealplanner.exceptions import GenerationUnavailableError, ShoppingListError
from mealplanner.logging_config import get_logger
from mealplanner.schemas import (
    CamelModel,
    MealPlanDay,
    ProfileContext,
    ShoppingList,
    WeeklyPlan,
    WeeklyPlanPreferences,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/meal-plans", tags=["meal-plans"])


# =============================================================================
# Request/Response Schemas
# =============================================================================


class WeeklyPlanRequest(CamelModel):
    """Request to generate a new weekly plan."""

    preferences: WeeklyPlanPreferences
    profile: ProfileContext | None = None


class RegenerateDayRequest(CamelModel):
    """Request to regenerate one day of an existing plan."""

    preferences: WeeklyPlanPreferences
    existing_plan: WeeklyPlan
    profile: ProfileContext | None = None


class RegenerateDayResponse(CamelModel):
    """Replacement day; the caller splices it in at ``day_index``."""

    day_index: int
    day_plan: MealPlanDay


class ShoppingListRequest(CamelModel):
    """Request to consolidate a weekly plan into a shopping list."""

    weekly_plan: WeeklyPlan
    budget: float | None = Field(None, ge=0, description="Weekly budget")
    price_preference: str | None = None
    preferences: WeeklyPlanPreferences | None = Field(
        None, description="Supplies budget and price preference when not given explicitly"
    )


# =============================================================================
# Dependencies
# =============================================================================


@lru_cache
def get_engine() -> MealPlanEngine:
    """Get the process-wide engine built from settings."""
    return MealPlanEngine.from_settings()


def _unavailable(e: GenerationUnavailableError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.reason)


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/weekly", response_model=WeeklyPlan)
async def generate_weekly_plan(
    request: WeeklyPlanRequest,
    engine: MealPlanEngine = Depends(get_engine),
) -> WeeklyPlan:
    """
    Generate a seven-day plan with four meals per day.

    Meals that cannot be generated are replaced by fixed fallback recipes,
    so a successful response always contains the full week.
    """
    try:
        return await engine.generate_weekly_plan(request.preferences, request.profile)
    except GenerationUnavailableError as e:
        raise _unavailable(e) from e


@router.post("/weekly/days/{day_index}/regenerate", response_model=RegenerateDayResponse)
async def regenerate_day(
    day_index: Annotated[int, Path(ge=0, le=6, description="0 = Monday")],
    request: RegenerateDayRequest,
    engine: MealPlanEngine = Depends(get_engine),
) -> RegenerateDayResponse:
    """Regenerate one day, avoiding the meals of the other six."""
    try:
        day_plan = await engine.regenerate_day(
            day_index,
            request.preferences,
            request.existing_plan,
            request.profile,
        )
    except GenerationUnavailableError as e:
        raise _unavailable(e) from e

    return RegenerateDayResponse(day_index=day_index, day_plan=day_plan)


@router.post("/shopping-list", response_model=ShoppingList)
async def generate_shopping_list(
    request: ShoppingListRequest,
    engine: MealPlanEngine = Depends(get_engine),
) -> ShoppingList:
    """Consolidate a plan into a categorised, priced shopping list."""
    budget = request.budget
    price_preference = request.price_preference
    if request.preferences is not None:
        if budget is None:
            budget = request.preferences.weekly_budget
        price_preference = price_preference or request.preferences.price_preference

    try:
        return await engine.generate_shopping_list(
            request.weekly_plan,
            budget=budget,
            price_preference=price_preference,
        )
    except GenerationUnavailableError as e:
        raise _unavailable(e) from e
    except ShoppingListError as e:
        logger.warning(f"Shopping list request failed: {e.reason}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.reason) from e
