"""
AnyList Gateway - Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   An in-memory FakeListClient stands in for the external client library and
       is injected by overriding the `get_client_factory` dependency, so login,
       list sync and close still run through `open_client`.

Fixture Hierarchy:
    ├── test_settings: Settings with credentials, no IP filter, no default list
    ├── fake_client:   Fresh FakeListClient (2 lists, 3 recipes, 2 collections)
    ├── make_app:      Builds an app with settings overrides, wired to fake_client
    └── test_client:   HTTPX AsyncClient against the default app
"""

import itertools
import os
import tempfile
from typing import Any, List, Optional
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any app imports: the module-level settings singleton reads these
os.environ["EMAIL"] = "test@example.com"
os.environ["PASSWORD"] = "testpassword"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SECRETS_PATH"] = tempfile.mkdtemp(prefix="anylist_gateway_secrets_")
os.environ.pop("IP_FILTER", None)
os.environ.pop("DEFAULT_LIST", None)

from anylist_gateway.config import Settings  # noqa: E402
from anylist_gateway.main import create_app  # noqa: E402
from anylist_gateway.services.client_base import ListClient  # noqa: E402
from anylist_gateway.session import get_client_factory  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Fake Client Objects
# ══════════════════════════════════════════════════════════════════════════

_ids = itertools.count(1)


class FakeItem:
    """List item or recipe ingredient."""

    def __init__(
        self,
        name: str,
        identifier: Optional[str] = None,
        checked: bool = False,
        details: str = "",
        quantity: Optional[str] = None,
        unit: Optional[str] = None,
        category_match_id: Optional[str] = None,
    ):
        self.identifier = identifier or f"item-{next(_ids)}"
        self.name = name
        self.checked = checked
        self.details = details
        self.quantity = quantity
        self.unit = unit
        self.category_match_id = category_match_id
        self.save = AsyncMock(return_value=None)


class FakeList:
    def __init__(self, name: str, identifier: str, items: List[FakeItem]):
        self.name = name
        self.identifier = identifier
        self.items = items

    def get_item_by_name(self, name: str) -> Optional[FakeItem]:
        return next((i for i in self.items if i.name == name), None)

    def get_item_by_id(self, identifier: str) -> Optional[FakeItem]:
        return next((i for i in self.items if i.identifier == identifier), None)

    async def add_item(self, item: FakeItem) -> None:
        self.items.append(item)

    async def remove_item(self, item: FakeItem) -> None:
        self.items.remove(item)


class FakeRecipe:
    def __init__(self, identifier: str, name: Optional[str] = None, **fields: Any):
        self.identifier = identifier
        self.name = name
        self.note = fields.get("note")
        self.source_name = fields.get("source_name")
        self.source_url = fields.get("source_url")
        self.ingredients = fields.get("ingredients") or []
        self.preparation_steps = fields.get("preparation_steps") or []
        self.photo_urls = fields.get("photo_urls") or []
        self.cook_time = fields.get("cook_time")
        self.prep_time = fields.get("prep_time")
        self.servings = fields.get("servings")
        self.rating = fields.get("rating")
        self.nutritional_info = fields.get("nutritional_info")
        self.creation_timestamp = fields.get("creation_timestamp")
        self.save = AsyncMock(return_value=None)
        self.delete = AsyncMock(return_value=None)


class FakeCollection:
    def __init__(self, identifier: str, name: str, recipe_ids: List[str]):
        self.identifier = identifier
        self.name = name
        self.recipe_ids = recipe_ids


class FakeEvent:
    def __init__(self, identifier: str, **fields: Any):
        self.identifier = identifier
        self.recipe_id = fields.get("recipe_id")
        self.date = fields.get("date")
        self.title = fields.get("title")
        self.save = AsyncMock(return_value=None)


class FakeListClient(ListClient):
    """
    In-memory account.

    Lists:        Groceries (Milk unchecked, Eggs checked), Hardware (empty)
    Recipes:      recipe-1 Chocolate Cake, recipe-2 Roast Chicken, recipe-3 Green Salad
    Collections:  Desserts [recipe-1], Main Dishes [recipe-2]
    Recent items: Groceries → Bread in category "bakery"
    """

    def __init__(self):
        self.logged_in = False
        self.closed = False
        self.factory_kwargs: dict = {}
        self.events: List[FakeEvent] = []
        self.lists = [
            FakeList(
                "Groceries",
                "list-groceries",
                [
                    FakeItem("Milk", identifier="item-milk", details="2%"),
                    FakeItem("Eggs", identifier="item-eggs", checked=True),
                ],
            ),
            FakeList("Hardware", "list-hardware", []),
        ]
        self.recipes = [
            FakeRecipe(
                "recipe-1",
                "Chocolate Cake",
                note="Family favourite",
                source_name="Grandma",
                source_url="https://example.com/cake",
                ingredients=[
                    FakeItem("Flour", quantity="2", unit="cups"),
                    FakeItem("Sugar", quantity="1", unit="cup"),
                ],
                preparation_steps=["Mix ingredients", "Bake at 350F"],
                photo_urls=["https://example.com/cake.jpg"],
                cook_time=30,
                prep_time=15,
                servings="8",
                rating=5,
                nutritional_info="Calories: 450",
                creation_timestamp=1700000000,
            ),
            FakeRecipe(
                "recipe-2",
                "Roast Chicken",
                ingredients=[FakeItem("Chicken", quantity="1", unit="whole")],
                preparation_steps=["Roast for an hour"],
                cook_time=60,
                prep_time=10,
                rating=4,
            ),
            FakeRecipe("recipe-3", "Green Salad", rating=3),
        ]
        self.collections = [
            FakeCollection("collection-1", "Desserts", ["recipe-1"]),
            FakeCollection("collection-2", "Main Dishes", ["recipe-2"]),
        ]
        self.recent_items = {
            "list-groceries": [FakeItem("Bread", category_match_id="bakery")],
        }

    def _require_login(self) -> None:
        if not self.logged_in:
            raise RuntimeError("Not logged in")

    async def login(self, force: bool = False) -> None:
        self.logged_in = True

    async def get_lists(self) -> List[Any]:
        self._require_login()
        return self.lists

    async def get_recipes(self) -> List[Any]:
        self._require_login()
        return self.recipes

    async def get_recipe_collections(self) -> List[Any]:
        self._require_login()
        return self.collections

    def create_item(self, **fields: Any) -> FakeItem:
        return FakeItem(**fields)

    def get_recent_items(self, list_id: str) -> Optional[List[Any]]:
        return self.recent_items.get(list_id)

    async def create_recipe(self, **fields: Any) -> FakeRecipe:
        self._require_login()
        recipe = FakeRecipe(f"recipe-new-{next(_ids)}", **fields)
        self.recipes.append(recipe)
        return recipe

    async def create_event(self, **fields: Any) -> FakeEvent:
        self._require_login()
        event = FakeEvent(f"event-{next(_ids)}", **fields)
        self.events.append(event)
        return event

    async def close(self) -> None:
        self.closed = True


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path):
    """Settings with credentials and a (never imported) factory path."""
    return Settings(
        email="test@example.com",
        password="testpassword",
        client_factory="tests.fake:FakeListClient",
        secrets_path=str(tmp_path / "secrets"),
        log_level="WARNING",
    )


@pytest.fixture
def fake_client():
    return FakeListClient()


@pytest.fixture
def make_app(test_settings, fake_client):
    """
    Build an app wired to `fake_client`, with optional settings overrides.

    Usage:
        app = make_app(ip_filter="192.168.1.", default_list="Groceries")
    """

    def _make(**overrides):
        settings = test_settings.model_copy(update=overrides)
        app = create_app(settings)

        def factory(**kwargs):
            fake_client.factory_kwargs = kwargs
            return fake_client

        app.dependency_overrides[get_client_factory] = lambda: factory
        return app

    return _make


@pytest_asyncio.fixture
async def test_client(make_app):
    """
    HTTPX AsyncClient talking to the default app in-process.

    Usage:
        async def test_lists(test_client):
            response = await test_client.get("/lists")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=make_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
