# Schemas package init
"""
AnyList Gateway - Pydantic Schemas
==================================

What:  The JSON contract of the gateway.

    - recipe.py:   recipe, collection and meal-plan request/response models
    - shopping.py: shopping list and list item response models
    - common.py:   error and health response models

Wire keys are camelCase (`sourceUrl`, `recipeIds`, ...); Python attributes are
snake_case. Response models are built from the external client's objects with
their `from_client()` constructors.
"""
