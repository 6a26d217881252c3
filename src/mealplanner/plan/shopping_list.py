"""Shopping list consolidation from a finished weekly plan."""

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from mealplanner.exceptions import GenerationUnavailableError, ShoppingListError
from mealplanner.generation.gateway import TextGenerator
from mealplanner.generation.parser import ResponseParseError, parse_json_object
from mealplanner.generation.prompts import SHOPPING_CATEGORIES, build_shopping_list_prompt
from mealplanner.logging_config import get_logger
from mealplanner.schemas import ShoppingCategory, ShoppingItem, ShoppingList, WeeklyPlan

logger = get_logger(__name__)

FAILURE_MESSAGE = "Failed to generate shopping list"

_CENT = Decimal("0.01")
_PRICE_TOKEN = re.compile(r"\d[\d.,]*")
# "1.234" or "12,500": whole amount with thousands grouping only
_GROUPED_INTEGER = re.compile(r"[1-9]\d{0,2}(?:([.,])\d{3})(?:\1\d{3})*")

# Lowercased spellings mapped onto the fixed category vocabulary
_CATEGORY_ALIASES: dict[str, str] = {name.lower(): name for name in SHOPPING_CATEGORIES}
_CATEGORY_ALIASES.update(
    {
        "fruits & vegetables": "Produce",
        "fruits and vegetables": "Produce",
        "vegetables": "Produce",
        "meat and fish": "Meat & Fish",
        "meat/fish": "Meat & Fish",
        "meat & seafood": "Meat & Fish",
        "dairy and eggs": "Dairy & Eggs",
        "dairy/eggs": "Dairy & Eggs",
        "dairy": "Dairy & Eggs",
        "savory grocery": "Savory Grocery",
        "pantry": "Savory Grocery",
        "sweet grocery": "Sweet Grocery",
        "bread": "Bakery",
        "frozen foods": "Frozen",
        "drinks": "Beverages",
    }
)


def round_money(value: Decimal | float) -> float:
    """Round half-up to cents."""
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def parse_price(text: str) -> float:
    """
    Read an amount from generated text such as "2,50 EUR", "1.234,56" or "1,234.56".

    The last separator is the decimal mark unless the number is a whole
    amount grouped in thousands.
    """
    match = _PRICE_TOKEN.search(text)
    if not match:
        raise ValueError(f"no number in price {text!r}")

    token = match.group(0).rstrip(".,")
    if _GROUPED_INTEGER.fullmatch(token):
        return float(re.sub(r"[.,]", "", token))

    last = max(token.rfind(","), token.rfind("."))
    if last == -1:
        return float(token)
    whole = re.sub(r"[.,]", "", token[:last]) or "0"
    return float(f"{whole}.{token[last + 1 :]}")


def canonical_category(name: str) -> str:
    """Map a generated category name onto the fixed vocabulary when possible."""
    cleaned = name.strip()
    return _CATEGORY_ALIASES.get(cleaned.lower(), cleaned)


# =============================================================================
# Generated Document Shape
# =============================================================================


class GeneratedShoppingItem(BaseModel):
    """Item as returned by the generation capability."""

    name: str = Field(min_length=1)
    quantity: str = ""
    price_estimate: float = Field(
        0.0,
        ge=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("priceEstimate", "price_estimate", "price"),
    )

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_as_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, int | float):
            return f"{value:g}"
        return value

    @field_validator("price_estimate", mode="before")
    @classmethod
    def _price_from_text(cls, value: Any) -> Any:
        """Accept "2.50", "2,50 EUR", "1.234,56" or null."""
        if value is None:
            return 0.0
        if isinstance(value, str):
            return parse_price(value)
        return value


class GeneratedShoppingCategory(BaseModel):
    name: str = Field(min_length=1)
    items: list[GeneratedShoppingItem] = Field(default_factory=list)


class GeneratedShoppingList(BaseModel):
    """
    Consolidation document shape.

    Subtotals and totals reported by the generator are read but ignored.
    """

    categories: list[GeneratedShoppingCategory]
    savings_tips: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("savingsTips", "savings_tips"),
    )

    @field_validator("savings_tips", mode="before")
    @classmethod
    def _tips_as_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


# =============================================================================
# Consolidator
# =============================================================================


class ShoppingListConsolidator:
    """
    Builds a priced shopping list for a weekly plan.

    The generation capability merges and prices ingredients; all arithmetic
    (category subtotals and the grand total) is recomputed here.
    """

    def __init__(self, generator: TextGenerator, currency: str = "EUR"):
        self.generator = generator
        self.currency = currency

    @staticmethod
    def collect_meals(plan: WeeklyPlan) -> list[dict[str, Any]]:
        """Every non-fasting meal of the week, in plan order."""
        return [
            {
                "name": meal.name,
                "calories": meal.calories,
                "proteins": meal.proteins,
                "ingredients": list(meal.ingredients),
            }
            for day in plan.days
            for meal in day.meals
            if not meal.is_fasting
        ]

    async def generate(
        self,
        plan: WeeklyPlan,
        budget: float | None = None,
        price_preference: str | None = None,
    ) -> ShoppingList:
        """
        Generate the shopping list for a weekly plan.

        Args:
            plan: A completed weekly plan.
            budget: Optional weekly budget, passed to the prompt and used
                for the over-budget flag.
            price_preference: Optional price positioning.

        Returns:
            ShoppingList with locally computed subtotals and total.

        Raises:
            GenerationUnavailableError: If the generator is not configured.
            ShoppingListError: If generation, parsing or validation fails.
        """
        if not self.generator.is_available():
            raise GenerationUnavailableError(
                "Shopping list generation is currently unavailable. Please try again later."
            )

        meals = self.collect_meals(plan)
        logger.info(f"Generating shopping list for {len(meals)} meals")

        prompt = build_shopping_list_prompt(
            meals,
            budget=budget,
            price_preference=price_preference,
            currency=self.currency,
        )

        try:
            text = await self.generator.generate(prompt)
        except Exception as e:
            logger.error(f"Shopping list generation failed: {e!r}")
            raise ShoppingListError(FAILURE_MESSAGE) from e

        document = self._parse_document(text)
        shopping_list = self._build_list(document, budget)

        logger.info(
            f"Generated shopping list: {len(shopping_list.categories)} categories, "
            f"{shopping_list.item_count} items, "
            f"total estimate: {shopping_list.total_estimate:.2f} {self.currency}"
        )
        return shopping_list

    def _parse_document(self, text: str) -> GeneratedShoppingList:
        """Parse and shape-check the raw response."""
        try:
            payload = parse_json_object(text)
        except ResponseParseError as e:
            logger.error(f"Shopping list response is not JSON: {e}")
            raise ShoppingListError(FAILURE_MESSAGE) from e

        if not isinstance(payload.get("categories"), list):
            logger.error("Shopping list response has no categories array")
            raise ShoppingListError(FAILURE_MESSAGE)

        try:
            return GeneratedShoppingList.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Shopping list response has an invalid shape: {e.error_count()} errors")
            raise ShoppingListError(FAILURE_MESSAGE) from e

    def _build_list(
        self,
        document: GeneratedShoppingList,
        budget: float | None,
    ) -> ShoppingList:
        """Merge categories by canonical name and recompute every amount."""
        grouped: dict[str, list[ShoppingItem]] = {}
        for category in document.categories:
            name = canonical_category(category.name)
            items = grouped.setdefault(name, [])
            items.extend(
                ShoppingItem(
                    name=item.name.strip(),
                    quantity=item.quantity.strip(),
                    price_estimate=round_money(item.price_estimate),
                )
                for item in category.items
            )

        categories: list[ShoppingCategory] = []
        total = Decimal("0")
        for name, items in grouped.items():
            subtotal = round_money(
                sum((Decimal(str(item.price_estimate)) for item in items), Decimal("0"))
            )
            total += Decimal(str(subtotal))
            categories.append(ShoppingCategory(name=name, items=items, subtotal=subtotal))

        return ShoppingList(
            categories=categories,
            total_estimate=round_money(total),
            savings_tips=[tip.strip() for tip in document.savings_tips if tip and tip.strip()],
            budget=budget,
            currency=self.currency,
        )
