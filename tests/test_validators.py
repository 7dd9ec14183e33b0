"""
AnyList Gateway - Validator Unit Tests
======================================

What:  Tests for the recipe, meal-plan and query-parameter validators.
How:   Pure functions over plain dicts; no app, no client.

What we test:
    ✅ Valid recipe bodies produce no messages
    ✅ Every violation is reported, with 1-based positions
    ✅ Partial (update) validation only checks fields that are present
    ✅ Meal-plan date and meal-type rules
    ✅ Identifier and collection-parameter helpers
    ✅ Request models only read camelCase keys; model errors become 422
"""

from datetime import datetime, timedelta, timezone

import pytest

from anylist_gateway.exceptions import BadRequestError, RequestValidationFailed
from anylist_gateway.schemas.recipe import MealPlanInput, RecipeInput
from anylist_gateway.validators import (
    ensure_valid,
    is_integer,
    is_valid_url,
    parse_body,
    parse_plan_date,
    require_identifier,
    validate_collection_param,
    validate_meal_plan,
    validate_recipe,
)


class TestPredicates:
    def test_is_integer(self):
        assert is_integer(5)
        assert is_integer(5.0)
        assert not is_integer(5.5)
        assert not is_integer(True)
        assert not is_integer("5")

    def test_is_valid_url(self):
        assert is_valid_url("https://example.com/photo.jpg")
        assert is_valid_url("http://example.com")
        assert not is_valid_url("not-a-url")
        assert not is_valid_url(42)

    def test_parse_plan_date_plain_day(self):
        assert parse_plan_date("2025-03-14") == datetime(2025, 3, 14)

    def test_parse_plan_date_iso_timestamp(self):
        parsed = parse_plan_date("2025-03-14T18:30:00Z")
        assert parsed == datetime(2025, 3, 14, 18, 30, tzinfo=timezone.utc)
        assert parsed.utcoffset() == timedelta(0)

    def test_parse_plan_date_fractional_seconds(self):
        parsed = parse_plan_date("2025-01-15T10:30:00.5Z")
        assert parsed == datetime(2025, 1, 15, 10, 30, 0, 500000, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["not-a-date", "2025-02-30", "14/03/2025", "2025-3-14"])
    def test_parse_plan_date_rejects(self, value):
        assert parse_plan_date(value) is None


class TestValidateRecipe:
    """Create (partial=False) and update (partial=True) rules."""

    def test_complete_recipe_is_valid(self):
        body = {
            "name": "Pancakes",
            "note": "Sunday breakfast",
            "sourceName": "Grandma",
            "sourceUrl": "https://example.com/pancakes",
            "ingredients": [
                {"name": "Flour", "quantity": "2", "unit": "cups"},
                {"name": "Milk"},
            ],
            "preparationSteps": ["Mix", "Fry"],
            "photoUrls": ["https://example.com/pancakes.jpg"],
            "cookTime": 10,
            "prepTime": 5,
            "servings": "4",
            "rating": 5,
            "nutritionalInfo": "Calories: 300",
        }
        assert validate_recipe(body) == []

    def test_name_required_on_create(self):
        assert validate_recipe({}) == [
            "Recipe name is required and must be a non-empty string"
        ]
        assert validate_recipe({"name": "   "}) == [
            "Recipe name is required and must be a non-empty string"
        ]

    def test_null_optional_fields_are_ignored(self):
        assert validate_recipe({"name": "Soup", "rating": None, "cookTime": None}) == []

    def test_numeric_ranges(self):
        errors = validate_recipe({"name": "Soup", "cookTime": -1, "prepTime": "5", "rating": 6})
        assert errors == [
            "Cook time must be a non-negative integer",
            "Prep time must be a non-negative integer",
            "Rating must be an integer between 1 and 5",
        ]

    def test_rating_rejects_fraction(self):
        assert validate_recipe({"name": "Soup", "rating": 4.5}) == [
            "Rating must be an integer between 1 and 5"
        ]

    def test_text_fields_must_be_strings(self):
        errors = validate_recipe(
            {"name": "Soup", "note": 1, "sourceName": [], "nutritionalInfo": {}, "servings": 4}
        )
        assert errors == [
            "Note must be a string",
            "Source name must be a string",
            "Nutritional info must be a string",
            "Servings must be a string",
        ]

    def test_ingredient_errors_use_positions(self):
        errors = validate_recipe(
            {
                "name": "Soup",
                "ingredients": [
                    {"name": "Water"},
                    {"name": ""},
                    "salt",
                    {"name": "Leek", "quantity": 2, "unit": 3},
                ],
            }
        )
        assert errors == [
            "Ingredient 2: name is required and must be a non-empty string",
            "Ingredient 3: must be an object",
            "Ingredient 4: quantity must be a string",
            "Ingredient 4: unit must be a string",
        ]

    def test_ingredients_must_be_array(self):
        assert validate_recipe({"name": "Soup", "ingredients": "water"}) == [
            "Ingredients must be an array"
        ]

    def test_preparation_steps(self):
        assert validate_recipe({"name": "Soup", "preparationSteps": "boil"}) == [
            "Preparation steps must be an array"
        ]
        assert validate_recipe({"name": "Soup", "preparationSteps": ["Boil", " "]}) == [
            "Preparation step 2: must be a non-empty string"
        ]

    def test_urls(self):
        errors = validate_recipe(
            {
                "name": "Soup",
                "sourceUrl": "not-a-url",
                "photoUrls": ["https://example.com/a.jpg", "nope"],
            }
        )
        assert errors == [
            "Source URL must be a valid URL format",
            "Photo URL 2: must be a valid URL format",
        ]
        assert validate_recipe({"name": "Soup", "photoUrls": "x"}) == [
            "Photo URLs must be an array"
        ]

    def test_collects_every_violation(self):
        errors = validate_recipe({"cookTime": -5, "rating": 0, "sourceUrl": "bad"})
        assert len(errors) == 4

    def test_partial_allows_missing_name(self):
        assert validate_recipe({"rating": 3}, partial=True) == []

    def test_partial_rejects_blank_name(self):
        assert validate_recipe({"name": ""}, partial=True) == [
            "Recipe name must be a non-empty string"
        ]

    def test_partial_null_name_is_absent(self):
        assert validate_recipe({"name": None}, partial=True) == []


class TestValidateMealPlan:
    def test_valid(self):
        assert validate_meal_plan({"recipeId": "recipe-1", "date": "2025-03-14"}) == []
        assert validate_meal_plan(
            {"recipeId": "recipe-1", "date": "2025-03-14T18:30:00Z", "mealType": "Dinner"}
        ) == []

    def test_missing_fields(self):
        assert validate_meal_plan({}) == [
            "Recipe ID is required and must be a non-empty string",
            "Date is required and must be a string",
        ]

    def test_bad_date(self):
        assert validate_meal_plan({"recipeId": "recipe-1", "date": "2025-02-30"}) == [
            "Date must be a valid date format (YYYY-MM-DD or ISO string)"
        ]

    def test_bad_meal_type(self):
        assert validate_meal_plan(
            {"recipeId": "recipe-1", "date": "2025-03-14", "mealType": "brunch"}
        ) == ["Meal type must be one of: breakfast, lunch, dinner, snack, meal"]


class TestHelpers:
    def test_collection_param(self):
        assert validate_collection_param(None) == []
        assert validate_collection_param("Desserts") == []
        assert validate_collection_param("  ") == [
            "Collection parameter must be a non-empty string"
        ]

    def test_ensure_valid_raises_with_all_messages(self):
        ensure_valid([])
        with pytest.raises(RequestValidationFailed) as exc_info:
            ensure_valid(["a", "b"])
        assert exc_info.value.errors == ["a", "b"]
        assert exc_info.value.status_code == 422

    def test_require_identifier(self):
        assert require_identifier(" recipe-1 ") == "recipe-1"
        with pytest.raises(BadRequestError) as exc_info:
            require_identifier("   ")
        assert exc_info.value.message == "Recipe ID is required"


class TestParseBody:
    def test_builds_model_from_camel_case(self):
        data = parse_body(RecipeInput, {"name": "Soup", "cookTime": 20})
        assert data.cook_time == 20
        assert data.provided_fields() == {"name", "cook_time"}

    def test_snake_case_keys_do_not_populate(self):
        data = parse_body(RecipeInput, {"name": "Soup", "cook_time": -5, "photo_urls": ["x"]})
        assert data.cook_time is None
        assert data.photo_urls is None
        assert data.provided_fields() == {"name"}

    def test_nulls_are_not_provided(self):
        data = parse_body(RecipeInput, {"rating": None, "note": "n"})
        assert "rating" in data.model_fields_set
        assert data.provided_fields() == {"note"}

    def test_model_errors_become_422(self):
        with pytest.raises(RequestValidationFailed) as exc_info:
            parse_body(RecipeInput, {"name": "Soup", "cookTime": "abc", "rating": [1]})
        errors = exc_info.value.errors
        assert len(errors) == 2
        assert errors[0].startswith("cookTime: ")
        assert errors[1].startswith("rating: ")

    def test_meal_plan_requires_camel_case_id(self):
        with pytest.raises(RequestValidationFailed) as exc_info:
            parse_body(MealPlanInput, {"recipe_id": "recipe-1", "date": "2025-03-14"})
        assert exc_info.value.errors[0].startswith("recipeId: ")
