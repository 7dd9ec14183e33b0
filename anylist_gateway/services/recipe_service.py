"""
AnyList Gateway - Recipe Service
================================

What:  Business logic behind the recipe, recipe-collection and meal-plan routes.
How:   Fetches recipes/collections through the request's ListClient, converts
       them to response models, and applies create/update/delete/plan requests
       that already passed validation.
Who:   Called by routes/recipes.py.

Error Handling:
    Every client interaction runs inside `upstream_call`, which maps library
    failures to 429 / forwarded 4xx / 500. Missing recipes raise NotFoundError.
    The one exception is collection lookup while filtering GET /recipes: if it
    fails, the full recipe list is returned and the failure is logged.
"""

import logging
from typing import Any, List, Optional

from anylist_gateway.exceptions import NotFoundError
from anylist_gateway.schemas.recipe import (
    CollectionOut,
    IngredientInput,
    MealPlanInput,
    RecipeInput,
    RecipeOut,
)
from anylist_gateway.services.client_base import ListClient, upstream_call
from anylist_gateway.validators import parse_plan_date

logger = logging.getLogger(__name__)

DEFAULT_MEAL_TITLE = "Meal"

# RecipeInput attributes copied verbatim onto the client's recipe object
RECIPE_SCALAR_FIELDS = (
    "name",
    "note",
    "source_name",
    "source_url",
    "preparation_steps",
    "photo_urls",
    "cook_time",
    "prep_time",
    "servings",
    "rating",
    "nutritional_info",
)


class RecipeService:
    """Recipe operations; stateless, one client per call."""

    async def _load_recipes(self, client: ListClient) -> List[Any]:
        async with upstream_call("fetching recipes"):
            await client.get_recipes()
        return list(client.recipes or [])

    async def _find_recipe(self, client: ListClient, recipe_id: str) -> Any:
        for recipe in await self._load_recipes(client):
            if recipe.identifier == recipe_id:
                return recipe
        raise NotFoundError(resource="recipe", resource_id=recipe_id)

    def _build_ingredients(self, client: ListClient, ingredients: List[IngredientInput]) -> List[Any]:
        return [
            client.create_item(name=ing.name, quantity=ing.quantity, unit=ing.unit)
            for ing in ingredients
        ]

    async def list_collections(self, client: ListClient) -> List[CollectionOut]:
        async with upstream_call("fetching recipe collections"):
            collections = await client.get_recipe_collections()
        return [CollectionOut.from_client(c) for c in collections or []]

    async def list_recipes(
        self, client: ListClient, collection: Optional[str] = None
    ) -> List[RecipeOut]:
        """
        All recipes, or only those in the named collection (case-insensitive).

        An unknown collection yields an empty list.
        """
        recipes = await self._load_recipes(client)

        if collection:
            try:
                collections = await client.get_recipe_collections() or []
            except Exception as e:
                logger.warning(
                    "Collection lookup failed, returning all recipes: %s", e, exc_info=True
                )
            else:
                wanted = collection.strip().lower()
                target = next((c for c in collections if c.name.lower() == wanted), None)
                if target is None:
                    recipes = []
                else:
                    member_ids = set(getattr(target, "recipe_ids", None) or [])
                    recipes = [r for r in recipes if r.identifier in member_ids]

        return [RecipeOut.from_client(r) for r in recipes]

    async def get_recipe(self, client: ListClient, recipe_id: str) -> RecipeOut:
        return RecipeOut.from_client(await self._find_recipe(client, recipe_id))

    async def create_recipe(self, client: ListClient, data: RecipeInput) -> str:
        """Create and save a recipe; returns its identifier."""
        async with upstream_call("creating a recipe"):
            recipe = await client.create_recipe(
                name=data.name,
                note=data.note,
                source_name=data.source_name,
                source_url=data.source_url,
                preparation_steps=data.preparation_steps or [],
                photo_urls=data.photo_urls or [],
                cook_time=data.cook_time,
                prep_time=data.prep_time,
                servings=data.servings,
                rating=data.rating,
                nutritional_info=data.nutritional_info,
            )
            if data.ingredients:
                recipe.ingredients = self._build_ingredients(client, data.ingredients)
            await recipe.save()
        logger.info("Created recipe %s (%s)", recipe.identifier, data.name)
        return recipe.identifier

    async def update_recipe(self, client: ListClient, recipe_id: str, data: RecipeInput) -> str:
        """
        Apply a partial update: only the fields the client sent with a value are
        touched. JSON null leaves the stored value alone.

        A provided `ingredients` array replaces the recipe's ingredients.
        """
        recipe = await self._find_recipe(client, recipe_id)
        sent = data.provided_fields()

        async with upstream_call("updating a recipe"):
            for field in RECIPE_SCALAR_FIELDS:
                if field in sent:
                    setattr(recipe, field, getattr(data, field))
            if "ingredients" in sent:
                recipe.ingredients = self._build_ingredients(client, data.ingredients)
            await recipe.save()
        logger.info("Updated recipe %s (%s)", recipe_id, ", ".join(sorted(sent)) or "no fields")
        return recipe.identifier

    async def delete_recipe(self, client: ListClient, recipe_id: str) -> None:
        recipe = await self._find_recipe(client, recipe_id)
        async with upstream_call("deleting a recipe"):
            await recipe.delete()
        logger.info("Deleted recipe %s", recipe_id)

    async def add_to_meal_plan(self, client: ListClient, data: MealPlanInput) -> str:
        """Schedule a recipe on a date; returns the new event identifier."""
        async with upstream_call("adding to meal plan"):
            event = await client.create_event(
                recipe_id=data.recipe_id,
                date=parse_plan_date(data.date),
                title=data.meal_type or DEFAULT_MEAL_TITLE,
            )
            await event.save()
        logger.info("Planned recipe %s on %s", data.recipe_id, data.date)
        return event.identifier


recipe_service = RecipeService()
