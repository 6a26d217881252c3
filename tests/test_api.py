"""Tests for the meal plan API endpoints."""

import json

import pytest
from fastapi.testclient import TestClient

from conftest import ScriptedGenerator
from mealplanner.main import app
from mealplanner.plan.meals import SLOT_SPECS, WEEK_DAYS, fallback_meal
from mealplanner.routers.meal_plans import get_engine
from mealplanner.schemas import MealPlanDay, WeeklyPlan

PREFERENCES = {"dailyCalories": 2000, "dietType": "vegetarian", "allergies": ["peanuts"]}


@pytest.fixture
def client_for(make_engine):
    """Factory for a TestClient whose engine uses the given generator."""

    def _client(generator) -> TestClient:
        engine = make_engine(generator)
        app.dependency_overrides[get_engine] = lambda: engine
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()


@pytest.fixture
def plan_payload():
    plan = WeeklyPlan(
        days=[
            MealPlanDay(day=day, meals=[fallback_meal(spec.slot) for spec in SLOT_SPECS])
            for day in WEEK_DAYS
        ]
    )
    return plan.model_dump(mode="json", by_alias=True)


class TestWeeklyPlanEndpoint:
    """Tests for POST /api/v1/meal-plans/weekly."""

    def test_generates_week(self, client_for, recipe_generator):
        client = client_for(recipe_generator)

        response = client.post("/api/v1/meal-plans/weekly", json={"preferences": PREFERENCES})

        assert response.status_code == 200
        data = response.json()
        assert len(data["days"]) == 7
        assert data["days"][0]["day"] == "Monday"
        assert data["days"][0]["totalCalories"] == 2000
        assert len(data["days"][0]["meals"]) == 4

    def test_unavailable(self, client_for, unavailable_generator):
        client = client_for(unavailable_generator)

        response = client.post("/api/v1/meal-plans/weekly", json={"preferences": PREFERENCES})

        assert response.status_code == 503
        assert "unavailable" in response.json()["detail"]

    def test_invalid_preferences(self, client_for, recipe_generator):
        client = client_for(recipe_generator)

        response = client.post(
            "/api/v1/meal-plans/weekly", json={"preferences": {"dailyCalories": -5}}
        )

        assert response.status_code == 422


class TestRegenerateDayEndpoint:
    """Tests for POST /api/v1/meal-plans/weekly/days/{day_index}/regenerate."""

    def test_regenerates_day(self, client_for, recipe_generator, plan_payload):
        client = client_for(recipe_generator)

        response = client.post(
            "/api/v1/meal-plans/weekly/days/2/regenerate",
            json={"preferences": PREFERENCES, "existingPlan": plan_payload},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["dayIndex"] == 2
        assert data["dayPlan"]["day"] == "Wednesday"
        assert len(data["dayPlan"]["meals"]) == 4

    def test_day_index_out_of_range(self, client_for, recipe_generator, plan_payload):
        client = client_for(recipe_generator)

        response = client.post(
            "/api/v1/meal-plans/weekly/days/7/regenerate",
            json={"preferences": PREFERENCES, "existingPlan": plan_payload},
        )

        assert response.status_code == 422
        assert recipe_generator.prompts == []

    def test_unavailable(self, client_for, unavailable_generator, plan_payload):
        client = client_for(unavailable_generator)

        response = client.post(
            "/api/v1/meal-plans/weekly/days/0/regenerate",
            json={"preferences": PREFERENCES, "existingPlan": plan_payload},
        )

        assert response.status_code == 503


class TestShoppingListEndpoint:
    """Tests for POST /api/v1/meal-plans/shopping-list."""

    def test_generates_list(self, client_for, plan_payload):
        document = {
            "categories": [
                {"name": "Produce", "items": [{"name": "Bananas", "priceEstimate": 1.5}]}
            ],
            "savingsTips": ["Buy in season"],
        }
        client = client_for(ScriptedGenerator(lambda prompt: json.dumps(document)))

        response = client.post(
            "/api/v1/meal-plans/shopping-list",
            json={"weeklyPlan": plan_payload, "budget": 1},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["totalEstimate"] == 1.5
        assert data["categories"][0]["subtotal"] == 1.5
        assert data["overBudget"] is True

    def test_generation_failure(self, client_for, plan_payload):
        client = client_for(ScriptedGenerator(lambda prompt: "no list today"))

        response = client.post(
            "/api/v1/meal-plans/shopping-list", json={"weeklyPlan": plan_payload}
        )

        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to generate shopping list"

    def test_unavailable(self, client_for, unavailable_generator, plan_payload):
        client = client_for(unavailable_generator)

        response = client.post(
            "/api/v1/meal-plans/shopping-list", json={"weeklyPlan": plan_payload}
        )

        assert response.status_code == 503

    def test_budget_from_preferences(self, client_for, plan_payload):
        document = {"categories": [{"name": "Bakery", "items": [{"name": "Bread", "price": 2}]}]}
        generator = ScriptedGenerator(lambda prompt: json.dumps(document))
        client = client_for(generator)

        response = client.post(
            "/api/v1/meal-plans/shopping-list",
            json={
                "weeklyPlan": plan_payload,
                "preferences": {
                    "dailyCalories": 2000,
                    "weeklyBudget": 50,
                    "pricePreference": "premium",
                },
            },
        )

        assert response.status_code == 200
        assert response.json()["budget"] == 50
        assert response.json()["overBudget"] is False
        assert "Price positioning: premium" in generator.prompts[0]
