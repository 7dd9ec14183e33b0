"""
AnyList Gateway - Shopping List Service
=======================================

What:  Business logic behind /lists, /items, /add, /remove, /update and /check.
How:   Each method receives a logged-in ListClient, finds the list by name,
       mutates items through the client and returns the HTTP status the route
       should answer with (200 changed, 304 nothing to do). Unusable input
       raises BadRequestError.
Who:   Called by routes/lists.py.

List names match case-insensitively, ignoring surrounding whitespace.
"""

import logging
from typing import Any, Dict, List, Optional

from anylist_gateway.exceptions import BadRequestError, NotFoundError
from anylist_gateway.schemas.shopping import ItemOut
from anylist_gateway.services.client_base import ListClient, upstream_call

logger = logging.getLogger(__name__)

STATUS_CHANGED = 200
STATUS_UNCHANGED = 304


def normalize_list_name(name: str) -> str:
    return name.strip().upper()


def find_list(client: ListClient, name: str) -> Optional[Any]:
    wanted = normalize_list_name(name)
    for shopping_list in client.lists or []:
        if normalize_list_name(shopping_list.name) == wanted:
            return shopping_list
    return None


def lookup_item_category(client: ListClient, list_id: str, item_name: str) -> Optional[str]:
    """Category of a recently used item with the same (case-insensitive) name."""
    recent_items = client.get_recent_items(list_id)
    if not recent_items:
        return None
    wanted = item_name.lower()
    for recent in recent_items:
        if recent.name.lower() == wanted:
            return getattr(recent, "category_match_id", None)
    return None


def apply_item_updates(item: Any, updates: Dict[str, Any]) -> None:
    """Copy name / checked / notes from a request body onto a client item."""
    if "name" in updates:
        item.name = updates["name"]
    if "checked" in updates:
        item.checked = updates["checked"]
    if "notes" in updates:
        item.details = updates["notes"]


class ListService:
    """
    Shopping list operations.

    Stateless: every call gets the request's client.
    """

    def _require_list(self, client: ListClient, list_name: str) -> Any:
        shopping_list = find_list(client, list_name)
        if shopping_list is None:
            raise BadRequestError(message=f"List '{list_name}' not found", field="list")
        return shopping_list

    async def get_list_names(self, client: ListClient) -> List[str]:
        return [shopping_list.name for shopping_list in client.lists or []]

    async def get_items(self, client: ListClient, list_name: str) -> List[ItemOut]:
        shopping_list = find_list(client, list_name)
        if shopping_list is None:
            raise NotFoundError(resource="list", resource_id=list_name)
        return [ItemOut.from_client(item) for item in shopping_list.items or []]

    async def add_item(
        self, client: ListClient, list_name: str, item_name: str, updates: Dict[str, Any]
    ) -> int:
        """
        Put an item on the list, unchecked.

        Returns:
            200 when the item was created or un-checked, 304 when it is already
            on the list and unchecked.
        """
        shopping_list = self._require_list(client, list_name)
        item = shopping_list.get_item_by_name(item_name)

        if item is None:
            async with upstream_call("adding an item"):
                category = lookup_item_category(client, shopping_list.identifier, item_name)
                new_item = client.create_item(name=item_name, category_match_id=category)
                apply_item_updates(new_item, updates)
                new_item.checked = False
                await shopping_list.add_item(new_item)
            logger.info("Added '%s' to list '%s'", item_name, shopping_list.name)
            return STATUS_CHANGED

        if item.checked:
            async with upstream_call("re-adding an item"):
                apply_item_updates(item, updates)
                item.checked = False
                await item.save()
            logger.info("Unchecked '%s' on list '%s'", item_name, shopping_list.name)
            return STATUS_CHANGED

        return STATUS_UNCHANGED

    async def remove_item(
        self,
        client: ListClient,
        list_name: str,
        item_name: Optional[str] = None,
        item_id: Optional[str] = None,
    ) -> int:
        """Remove by name (preferred) or id; 304 when the item is not on the list."""
        shopping_list = self._require_list(client, list_name)
        if item_name:
            item = shopping_list.get_item_by_name(item_name)
        elif item_id:
            item = shopping_list.get_item_by_id(item_id)
        else:
            raise BadRequestError(message="Item name or id is required", field="name")

        if item is None:
            return STATUS_UNCHANGED

        async with upstream_call("removing an item"):
            await shopping_list.remove_item(item)
        logger.info("Removed '%s' from list '%s'", item.name, shopping_list.name)
        return STATUS_CHANGED

    async def update_item(
        self, client: ListClient, list_name: str, item_id: str, updates: Dict[str, Any]
    ) -> int:
        shopping_list = self._require_list(client, list_name)
        item = shopping_list.get_item_by_id(item_id)
        if item is None:
            raise BadRequestError(message=f"Item '{item_id}' not found", field="id")

        async with upstream_call("updating an item"):
            apply_item_updates(item, updates)
            await item.save()
        return STATUS_CHANGED

    async def check_item(
        self, client: ListClient, list_name: str, item_name: str, checked: bool
    ) -> int:
        shopping_list = self._require_list(client, list_name)
        item = shopping_list.get_item_by_name(item_name)
        if item is None:
            raise BadRequestError(message=f"Item '{item_name}' not found", field="name")

        if bool(item.checked) == bool(checked):
            return STATUS_UNCHANGED

        async with upstream_call("checking an item"):
            item.checked = checked
            await item.save()
        return STATUS_CHANGED


list_service = ListService()
