"""
AnyList Gateway - Recipe Route Handlers
=======================================

What:  Recipe CRUD, recipe collections, and meal planning.

    GET    /recipes              list (optional ?collection= filter)
    GET    /recipes/{id}         single recipe
    POST   /recipes              create                      → 201 {"id"}
    PUT    /recipes/{id}         partial update              → 200 {"id"}
    DELETE /recipes/{id}         delete                      → 200 {"id", "deleted"}
    GET    /recipe-collections   collections with recipe ids
    POST   /meal-plan            schedule a recipe           → 201 {"eventId"}

How:   Validate first (400 blank id, 422 field errors), then open a client
       session and delegate to RecipeService.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from anylist_gateway.config import Settings
from anylist_gateway.schemas.common import ErrorResponse, ValidationErrorResponse
from anylist_gateway.schemas.recipe import (
    CollectionListResponse,
    MealPlanInput,
    MealPlanResponse,
    RecipeDeletedResponse,
    RecipeIdResponse,
    RecipeInput,
    RecipeListResponse,
    RecipeOut,
)
from anylist_gateway.services.recipe_service import recipe_service
from anylist_gateway.session import ClientFactory, get_client_factory, get_settings, open_client
from anylist_gateway.validators import (
    ensure_valid,
    parse_body,
    require_identifier,
    validate_collection_param,
    validate_meal_plan,
    validate_recipe,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Recipes"])

UPSTREAM_RESPONSES: Dict[int, Dict[str, Any]] = {
    429: {"description": "Rate limited by the list service", "model": ErrorResponse},
    500: {"description": "List service failure", "model": ErrorResponse},
}
ID_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"description": "Blank recipe id", "model": ErrorResponse},
    404: {"description": "Recipe not found", "model": ErrorResponse},
    **UPSTREAM_RESPONSES,
}
VALIDATION_RESPONSE: Dict[int, Dict[str, Any]] = {
    422: {"description": "Field validation failed", "model": ValidationErrorResponse},
}


@router.get(
    "/recipes",
    response_model=RecipeListResponse,
    responses={**VALIDATION_RESPONSE, **UPSTREAM_RESPONSES},
    summary="List recipes, optionally filtered by collection name",
)
async def list_recipes(
    collection: Optional[str] = Query(
        default=None,
        description="Collection name, matched case-insensitively. Unknown names give [].",
    ),
    settings: Settings = Depends(get_settings),
    factory: ClientFactory = Depends(get_client_factory),
) -> RecipeListResponse:
    ensure_valid(validate_collection_param(collection))
    async with open_client(settings, factory) as client:
        recipes = await recipe_service.list_recipes(client, collection)
    return RecipeListResponse(recipes=recipes)


@router.get(
    "/recipes/{recipe_id}",
    response_model=RecipeOut,
    responses=ID_RESPONSES,
    summary="Get a single recipe",
)
async def get_recipe(
    recipe_id: str,
    settings: Settings = Depends(get_settings),
    factory: ClientFactory = Depends(get_client_factory),
) -> RecipeOut:
    recipe_id = require_identifier(recipe_id)
    async with open_client(settings, factory) as client:
        return await recipe_service.get_recipe(client, recipe_id)


@router.post(
    "/recipes",
    response_model=RecipeIdResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**VALIDATION_RESPONSE, **UPSTREAM_RESPONSES},
    summary="Create a recipe",
)
async def create_recipe(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    settings: Settings = Depends(get_settings),
    factory: ClientFactory = Depends(get_client_factory),
) -> RecipeIdResponse:
    body = payload or {}
    ensure_valid(validate_recipe(body, partial=False))
    data = parse_body(RecipeInput, body)

    async with open_client(settings, factory) as client:
        recipe_id = await recipe_service.create_recipe(client, data)
    return RecipeIdResponse(id=recipe_id)


@router.put(
    "/recipes/{recipe_id}",
    response_model=RecipeIdResponse,
    responses={**ID_RESPONSES, **VALIDATION_RESPONSE},
    summary="Update some fields of a recipe",
)
async def update_recipe(
    recipe_id: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    settings: Settings = Depends(get_settings),
    factory: ClientFactory = Depends(get_client_factory),
) -> RecipeIdResponse:
    recipe_id = require_identifier(recipe_id)
    body = payload or {}
    ensure_valid(validate_recipe(body, partial=True))
    data = parse_body(RecipeInput, body)

    async with open_client(settings, factory) as client:
        updated_id = await recipe_service.update_recipe(client, recipe_id, data)
    return RecipeIdResponse(id=updated_id)


@router.delete(
    "/recipes/{recipe_id}",
    response_model=RecipeDeletedResponse,
    responses=ID_RESPONSES,
    summary="Delete a recipe",
)
async def delete_recipe(
    recipe_id: str,
    settings: Settings = Depends(get_settings),
    factory: ClientFactory = Depends(get_client_factory),
) -> RecipeDeletedResponse:
    recipe_id = require_identifier(recipe_id)
    async with open_client(settings, factory) as client:
        await recipe_service.delete_recipe(client, recipe_id)
    return RecipeDeletedResponse(id=recipe_id)


@router.get(
    "/recipe-collections",
    response_model=CollectionListResponse,
    responses=UPSTREAM_RESPONSES,
    summary="List recipe collections",
)
async def list_collections(
    settings: Settings = Depends(get_settings),
    factory: ClientFactory = Depends(get_client_factory),
) -> CollectionListResponse:
    async with open_client(settings, factory) as client:
        collections = await recipe_service.list_collections(client)
    return CollectionListResponse(collections=collections)


@router.post(
    "/meal-plan",
    response_model=MealPlanResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**VALIDATION_RESPONSE, **UPSTREAM_RESPONSES},
    summary="Add a recipe to the meal plan",
)
async def add_to_meal_plan(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    settings: Settings = Depends(get_settings),
    factory: ClientFactory = Depends(get_client_factory),
) -> MealPlanResponse:
    body = payload or {}
    ensure_valid(validate_meal_plan(body))
    data = parse_body(MealPlanInput, body)

    async with open_client(settings, factory) as client:
        event_id = await recipe_service.add_to_meal_plan(client, data)
    return MealPlanResponse(event_id=event_id)
