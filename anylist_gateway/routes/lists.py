"""
AnyList Gateway - Shopping List Route Handlers
==============================================

What:  GET /lists, GET /items and the item mutations POST /add, /remove,
       /update, /check.
How:   Pull parameters from the query string or JSON body, fall back to the
       configured default list, delegate to ListService.
Who:   Called by home automations and scripts.

Mutations answer with a bare status code:
    200  the list changed
    304  nothing to do (already present / already in that state / not found on remove)
    400  missing parameter, unknown list, unknown item
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Response

from anylist_gateway.config import Settings
from anylist_gateway.exceptions import BadRequestError
from anylist_gateway.schemas.common import ErrorResponse
from anylist_gateway.schemas.shopping import ItemsResponse, ListsResponse
from anylist_gateway.services.list_service import list_service
from anylist_gateway.session import ClientFactory, get_client_factory, get_settings, open_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Lists"])

MUTATION_RESPONSES = {
    200: {"description": "List changed"},
    304: {"description": "Nothing to change"},
    400: {"description": "Missing parameter or unknown list/item", "model": ErrorResponse},
}


def resolve_list_name(requested: Optional[str], settings: Settings) -> str:
    """Requested list name, else DEFAULT_LIST; 400 when neither is set."""
    name = requested or settings.default_list
    if not name:
        raise BadRequestError(message="List name is required", field="list")
    return name


@router.get("/lists", response_model=ListsResponse, summary="Names of all lists")
async def get_lists(
    settings: Settings = Depends(get_settings),
    factory: ClientFactory = Depends(get_client_factory),
) -> ListsResponse:
    async with open_client(settings, factory) as client:
        return ListsResponse(lists=await list_service.get_list_names(client))


@router.get(
    "/items",
    response_model=ItemsResponse,
    responses={
        400: {"description": "No list given and no default list", "model": ErrorResponse},
        404: {"description": "List not found", "model": ErrorResponse},
    },
    summary="Items on a list",
)
async def get_items(
    list_name: Optional[str] = Query(default=None, alias="list"),
    settings: Settings = Depends(get_settings),
    factory: ClientFactory = Depends(get_client_factory),
) -> ItemsResponse:
    name = resolve_list_name(list_name, settings)
    async with open_client(settings, factory) as client:
        return ItemsResponse(items=await list_service.get_items(client, name))


@router.post("/add", responses=MUTATION_RESPONSES, summary="Add or un-check an item")
async def add_item(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    settings: Settings = Depends(get_settings),
    factory: ClientFactory = Depends(get_client_factory),
) -> Response:
    body = payload or {}
    item_name = body.get("name")
    if not item_name:
        raise BadRequestError(message="Item name is required", field="name")
    list_name = resolve_list_name(body.get("list"), settings)

    async with open_client(settings, factory) as client:
        code = await list_service.add_item(client, list_name, item_name, body)
    return Response(status_code=code)


@router.post("/remove", responses=MUTATION_RESPONSES, summary="Remove an item by name or id")
async def remove_item(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    settings: Settings = Depends(get_settings),
    factory: ClientFactory = Depends(get_client_factory),
) -> Response:
    body = payload or {}
    list_name = resolve_list_name(body.get("list"), settings)
    if not body.get("name") and not body.get("id"):
        raise BadRequestError(message="Item name or id is required", field="name")

    async with open_client(settings, factory) as client:
        code = await list_service.remove_item(
            client, list_name, item_name=body.get("name"), item_id=body.get("id")
        )
    return Response(status_code=code)


@router.post("/update", responses=MUTATION_RESPONSES, summary="Update an item by id")
async def update_item(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    settings: Settings = Depends(get_settings),
    factory: ClientFactory = Depends(get_client_factory),
) -> Response:
    body = payload or {}
    list_name = resolve_list_name(body.get("list"), settings)
    item_id = body.get("id")
    if not item_id:
        raise BadRequestError(message="Item id is required", field="id")

    async with open_client(settings, factory) as client:
        code = await list_service.update_item(client, list_name, item_id, body)
    return Response(status_code=code)


@router.post("/check", responses=MUTATION_RESPONSES, summary="Check or uncheck an item by name")
async def check_item(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    settings: Settings = Depends(get_settings),
    factory: ClientFactory = Depends(get_client_factory),
) -> Response:
    body = payload or {}
    list_name = resolve_list_name(body.get("list"), settings)
    item_name = body.get("name")
    if not item_name:
        raise BadRequestError(message="Item name is required", field="name")
    if body.get("checked") is None:
        raise BadRequestError(message="Checked state is required", field="checked")

    async with open_client(settings, factory) as client:
        code = await list_service.check_item(client, list_name, item_name, body["checked"])
    return Response(status_code=code)
