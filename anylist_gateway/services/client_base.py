"""
AnyList Gateway - External List Client Interface
================================================

What:  Abstract base class describing the account-bound client the gateway
       drives, plus the `upstream_call` helper that classifies its failures.
How:   A client library is plugged in through an adapter subclassing ListClient;
       `CLIENT_FACTORY` points at a callable returning one. The gateway never
       looks inside: authentication, sessions and sync are the library's job.
Who:   Implemented by the adapter; used by ListService and RecipeService.

Object Contract (duck-typed, as returned by the client):

    shopping list  .identifier .name .items
                   .get_item_by_name(name) / .get_item_by_id(id)  → item | None
                   await .add_item(item) / await .remove_item(item)
    list item      .identifier .name .checked .details .category_match_id
                   await .save()
    recipe         .identifier .name .note .source_name .source_url
                   .ingredients .preparation_steps .photo_urls .cook_time
                   .prep_time .servings .rating .nutritional_info
                   .creation_timestamp
                   await .save() / await .delete()
    collection     .identifier .name .recipe_ids
    event          .identifier
                   await .save()
"""

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional

from anylist_gateway.errors import classify_upstream_error

logger = logging.getLogger(__name__)


class ListClient(ABC):
    """
    Abstract interface for an authenticated grocery/recipe account session.

    Contract:
        - login() must be awaited before anything else
        - `lists` is populated by get_lists(), `recipes` by get_recipes()
        - Failures surface as ordinary exceptions; the gateway classifies them
    """

    lists: List[Any]
    recipes: List[Any]

    @abstractmethod
    async def login(self, force: bool = False) -> None:
        """Authenticate, reusing cached credentials unless `force` is set."""
        ...

    @abstractmethod
    async def get_lists(self) -> List[Any]:
        ...

    @abstractmethod
    async def get_recipes(self) -> List[Any]:
        ...

    @abstractmethod
    async def get_recipe_collections(self) -> List[Any]:
        ...

    @abstractmethod
    def create_item(self, **fields: Any) -> Any:
        """
        Build an unsaved list item or recipe ingredient.

        Accepted fields: name, quantity, unit, category_match_id.
        """
        ...

    @abstractmethod
    def get_recent_items(self, list_id: str) -> Optional[List[Any]]:
        """Recently used items of a list, each with `.name` and `.category_match_id`."""
        ...

    @abstractmethod
    async def create_recipe(self, **fields: Any) -> Any:
        ...

    @abstractmethod
    async def create_event(self, **fields: Any) -> Any:
        """Build a meal-plan event from recipe_id, date (datetime) and title."""
        ...

    async def close(self) -> None:
        """Release any connections held by the session. Default: nothing to release."""
        return None


@asynccontextmanager
async def upstream_call(action: str) -> AsyncIterator[None]:
    """
    Wrap interaction with the external client.

    Any exception raised inside is logged with its traceback and re-raised as
    the classified gateway error (429 / forwarded 4xx / 500).

    Usage:
        async with upstream_call("fetching recipes"):
            await client.get_recipes()
    """
    try:
        yield
    except Exception as e:
        error = classify_upstream_error(e)
        if error is not e:
            logger.error("Upstream failure while %s: %s", action, e, exc_info=True)
            raise error from e
        raise
