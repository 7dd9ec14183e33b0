"""
AnyList Gateway - Shopping List Schemas
=======================================

What:  Response models for GET /lists and GET /items.

The mutation endpoints (/add, /remove, /update, /check) answer with a bare
status code, so they have no response model.
"""

from typing import Any, List

from pydantic import BaseModel, Field


class ItemOut(BaseModel):
    """
    A single list item.

    `notes` maps to the client's `details` attribute.
    """

    id: str = Field(description="Item identifier")
    name: str
    checked: bool = False
    notes: str = ""

    @classmethod
    def from_client(cls, item: Any) -> "ItemOut":
        return cls(
            id=item.identifier,
            name=item.name,
            checked=bool(getattr(item, "checked", False)),
            notes=getattr(item, "details", None) or "",
        )


class ListsResponse(BaseModel):
    lists: List[str] = Field(description="Names of every list on the account")


class ItemsResponse(BaseModel):
    items: List[ItemOut]
