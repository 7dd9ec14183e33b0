"""
AnyList Gateway - Recipe Schemas
================================

What:  Request and response models for recipes, recipe collections and
       meal-plan events.
How:   Request models are parsed only after `validators` accepted the raw body,
       so they never produce FastAPI's automatic 422. Response models mirror the
       external client's objects field by field.
"""

from typing import Any, List, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Number = Union[int, float]


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, populated by either name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class IngredientOut(CamelModel):
    name: Optional[str] = None
    quantity: Optional[str] = None
    unit: Optional[str] = None

    @classmethod
    def from_client(cls, ingredient: Any) -> "IngredientOut":
        return cls(
            name=getattr(ingredient, "name", None),
            quantity=getattr(ingredient, "quantity", None),
            unit=getattr(ingredient, "unit", None),
        )


class RecipeOut(CamelModel):
    """
    What:  Full recipe as returned by GET /recipes and GET /recipes/{id}.

    `servings` is free text on the account ("4", "2-3 people"), so numbers are
    passed through as-is.
    """

    id: str = Field(description="Recipe identifier on the account")
    name: Optional[str] = None
    note: Optional[str] = None
    source_name: Optional[str] = None
    source_url: Optional[str] = None
    ingredients: List[IngredientOut] = Field(default_factory=list)
    preparation_steps: List[str] = Field(default_factory=list)
    photo_urls: List[str] = Field(default_factory=list)
    cook_time: Optional[Number] = None
    prep_time: Optional[Number] = None
    servings: Optional[Union[str, Number]] = None
    rating: Optional[int] = None
    nutritional_info: Optional[str] = None
    creation_timestamp: Optional[Number] = None

    @classmethod
    def from_client(cls, recipe: Any) -> "RecipeOut":
        return cls(
            id=recipe.identifier,
            name=getattr(recipe, "name", None),
            note=getattr(recipe, "note", None),
            source_name=getattr(recipe, "source_name", None),
            source_url=getattr(recipe, "source_url", None),
            ingredients=[
                IngredientOut.from_client(ing) for ing in (getattr(recipe, "ingredients", None) or [])
            ],
            preparation_steps=list(getattr(recipe, "preparation_steps", None) or []),
            photo_urls=list(getattr(recipe, "photo_urls", None) or []),
            cook_time=getattr(recipe, "cook_time", None),
            prep_time=getattr(recipe, "prep_time", None),
            servings=getattr(recipe, "servings", None),
            rating=getattr(recipe, "rating", None),
            nutritional_info=getattr(recipe, "nutritional_info", None),
            creation_timestamp=getattr(recipe, "creation_timestamp", None),
        )


class RecipeListResponse(CamelModel):
    recipes: List[RecipeOut]


class RecipeIdResponse(CamelModel):
    id: str


class RecipeDeletedResponse(CamelModel):
    id: str
    deleted: bool = True


class CollectionOut(CamelModel):
    """A named group of recipe identifiers (membership by reference)."""

    id: Optional[str] = None
    name: str
    recipe_ids: List[str] = Field(default_factory=list)

    @classmethod
    def from_client(cls, collection: Any) -> "CollectionOut":
        return cls(
            id=getattr(collection, "identifier", None),
            name=collection.name,
            recipe_ids=list(getattr(collection, "recipe_ids", None) or []),
        )


class CollectionListResponse(CamelModel):
    collections: List[CollectionOut]


class MealPlanResponse(CamelModel):
    event_id: str
# ══════════════════════════════════════════════════════════════════════════
# Request Models (parsed after validation)
# ══════════════════════════════════════════════════════════════════════════


class WireModel(BaseModel):
    """
    Base for request bodies: populated from camelCase keys only.

    Snake_case spellings such as `cook_time` are ignored.
    """

    model_config = ConfigDict(alias_generator=to_camel, extra="ignore")


class IngredientInput(WireModel):
    name: str
    quantity: Optional[str] = None
    unit: Optional[str] = None


class RecipeInput(WireModel):
    """
    Recipe body for POST /recipes and PUT /recipes/{id}.

    For updates, `provided_fields()` tells which attributes the client sent
    with a value; only those are copied onto the stored recipe.
    """

    name: Optional[str] = None
    note: Optional[str] = None
    source_name: Optional[str] = None
    source_url: Optional[str] = None
    ingredients: Optional[List[IngredientInput]] = None
    preparation_steps: Optional[List[str]] = None
    photo_urls: Optional[List[str]] = None
    cook_time: Optional[int] = None
    prep_time: Optional[int] = None
    servings: Optional[str] = None
    rating: Optional[int] = None
    nutritional_info: Optional[str] = None

    def provided_fields(self) -> Set[str]:
        """Fields present in the body and not null; JSON null means "leave as is"."""
        return {name for name in self.model_fields_set if getattr(self, name) is not None}


class MealPlanInput(WireModel):
    recipe_id: str
    date: str
    meal_type: Optional[str] = None
