"""
AnyList Gateway - Request Validators
====================================

What:  Field-level checks for recipe, meal-plan and query payloads.
How:   Each validator walks the raw JSON-decoded payload and returns a list of
       human-readable messages, one per violation. Nothing short-circuits, so a
       client fixing a payload sees every problem at once.
Who:   Called by route handlers before anything reaches the external client.
       An empty list means the payload may be parsed into the typed request
       models in `schemas.recipe`.

Absent fields and JSON null are both treated as "not provided" for optional
fields. Positions in messages are 1-based ("Ingredient 1: ...").
"""

import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import AnyUrl, BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from anylist_gateway.exceptions import BadRequestError, RequestValidationFailed

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack", "meal")

# YYYY-MM-DD, optionally followed by an ISO time part
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}(T.*)?$")

_url_adapter = TypeAdapter(AnyUrl)
_datetime_adapter = TypeAdapter(datetime)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Optional free-text recipe fields and their message labels
_RECIPE_TEXT_FIELDS = (
    ("note", "Note"),
    ("sourceName", "Source name"),
    ("nutritionalInfo", "Nutritional info"),
    ("servings", "Servings"),
)


# ══════════════════════════════════════════════════════════════════════════
# Predicates
# ══════════════════════════════════════════════════════════════════════════

def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def is_integer(value: Any) -> bool:
    """JSON integers; integral floats like 5.0 count, booleans do not."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def is_valid_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def parse_plan_date(value: str) -> Optional[datetime]:
    """
    Parse a meal-plan date: "YYYY-MM-DD" or an ISO timestamp starting with one.

    Returns None when the string does not match or names an impossible date.
    """
    if not DATE_PATTERN.match(value):
        return None
    try:
        day = date.fromisoformat(value[:10])
    except ValueError:
        return None
    if len(value) == 10:
        return datetime(day.year, day.month, day.day)
    try:
        return _datetime_adapter.validate_python(value)
    except PydanticValidationError:
        return None


def _present(data: Dict[str, Any], key: str) -> bool:
    return data.get(key) is not None


# ══════════════════════════════════════════════════════════════════════════
# Validators
# ══════════════════════════════════════════════════════════════════════════

def validate_recipe(data: Dict[str, Any], partial: bool = False) -> List[str]:
    """
    Validate a recipe body for create (partial=False) or update (partial=True).

    On create the name is required; on update only the fields present are
    checked.
    """
    errors: List[str] = []

    if not partial:
        if not is_non_empty_string(data.get("name")):
            errors.append("Recipe name is required and must be a non-empty string")
    elif _present(data, "name") and not is_non_empty_string(data["name"]):
        errors.append("Recipe name must be a non-empty string")

    for key, label in (("cookTime", "Cook time"), ("prepTime", "Prep time")):
        if _present(data, key):
            value = data[key]
            if not is_integer(value) or value < 0:
                errors.append(f"{label} must be a non-negative integer")

    if _present(data, "rating"):
        rating = data["rating"]
        if not is_integer(rating) or not 1 <= rating <= 5:
            errors.append("Rating must be an integer between 1 and 5")

    for key, label in _RECIPE_TEXT_FIELDS:
        if _present(data, key) and not isinstance(data[key], str):
            errors.append(f"{label} must be a string")

    if _present(data, "ingredients"):
        errors.extend(_validate_ingredients(data["ingredients"]))

    if _present(data, "preparationSteps"):
        steps = data["preparationSteps"]
        if not isinstance(steps, list):
            errors.append("Preparation steps must be an array")
        else:
            for position, step in enumerate(steps, start=1):
                if not is_non_empty_string(step):
                    errors.append(f"Preparation step {position}: must be a non-empty string")

    if _present(data, "sourceUrl") and not is_valid_url(data["sourceUrl"]):
        errors.append("Source URL must be a valid URL format")

    if _present(data, "photoUrls"):
        photos = data["photoUrls"]
        if not isinstance(photos, list):
            errors.append("Photo URLs must be an array")
        else:
            for position, url in enumerate(photos, start=1):
                if not is_valid_url(url):
                    errors.append(f"Photo URL {position}: must be a valid URL format")

    return errors


def _validate_ingredients(ingredients: Any) -> List[str]:
    if not isinstance(ingredients, list):
        return ["Ingredients must be an array"]

    errors: List[str] = []
    for position, ingredient in enumerate(ingredients, start=1):
        if not isinstance(ingredient, dict):
            errors.append(f"Ingredient {position}: must be an object")
            continue
        if not is_non_empty_string(ingredient.get("name")):
            errors.append(
                f"Ingredient {position}: name is required and must be a non-empty string"
            )
        for key in ("quantity", "unit"):
            if _present(ingredient, key) and not isinstance(ingredient[key], str):
                errors.append(f"Ingredient {position}: {key} must be a string")
    return errors


def validate_meal_plan(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []

    if not is_non_empty_string(data.get("recipeId")):
        errors.append("Recipe ID is required and must be a non-empty string")

    plan_date = data.get("date")
    if not isinstance(plan_date, str) or not plan_date:
        errors.append("Date is required and must be a string")
    elif parse_plan_date(plan_date) is None:
        errors.append("Date must be a valid date format (YYYY-MM-DD or ISO string)")

    if _present(data, "mealType"):
        meal_type = data["mealType"]
        if not isinstance(meal_type, str) or meal_type.lower() not in MEAL_TYPES:
            errors.append(f"Meal type must be one of: {', '.join(MEAL_TYPES)}")

    return errors


def validate_collection_param(value: Optional[str]) -> List[str]:
    """A `collection` query parameter, when given, must not be blank."""
    if value is not None and not is_non_empty_string(value):
        return ["Collection parameter must be a non-empty string"]
    return []


# ══════════════════════════════════════════════════════════════════════════
# Raising helpers used by the routes
# ══════════════════════════════════════════════════════════════════════════

def ensure_valid(errors: List[str]) -> None:
    """Raise RequestValidationFailed (422) if any messages were collected."""
    if errors:
        raise RequestValidationFailed(errors)


def require_identifier(value: Optional[str], label: str = "Recipe ID") -> str:
    """
    Return the stripped path identifier, or raise BadRequestError (400).

    Blank identifiers are a malformed request rather than a validation failure.
    """
    if value is None or not value.strip():
        raise BadRequestError(message=f"{label} is required", field="id")
    return value.strip()


def parse_body(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """
    Build a request model from an already validated body.

    Anything the model still rejects is reported as a 422 like any other field
    error, e.g. "cookTime: Input should be a valid integer".
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise RequestValidationFailed(
            [
                f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
                for err in e.errors()
            ]
        ) from e
