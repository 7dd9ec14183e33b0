"""
AnyList Gateway - Per-Request Client Session
============================================

What:  Builds, logs in, and tears down an external list client for a request.
How:   `get_client_factory` (a FastAPI dependency) resolves the CLIENT_FACTORY
       dotted path; route handlers validate their input first and then open a
       session with `open_client(settings, factory)`, which calls the factory
       with the configured credentials, awaits login + list sync, yields the
       client, and closes it afterwards.
Who:   Route handlers in routes/lists.py and routes/recipes.py.

Example usage in a route:
    @router.get("/lists")
    async def get_lists(
        settings: Settings = Depends(get_settings),
        factory: ClientFactory = Depends(get_client_factory),
    ):
        async with open_client(settings, factory) as client:
            ...

Tests override `get_client_factory` with a callable returning a fake client.
"""

import importlib
import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, AsyncIterator, Callable

from fastapi import Depends, Request

from anylist_gateway.config import Settings
from anylist_gateway.exceptions import ConfigurationError
from anylist_gateway.services.client_base import ListClient, upstream_call

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., ListClient]


def get_settings(request: Request) -> Settings:
    """The Settings instance the running app was created with."""
    return request.app.state.settings


@lru_cache(maxsize=8)
def load_client_factory(path: str) -> ClientFactory:
    """
    Import "package.module:callable" (or "package.module.callable").

    Raises:
        ConfigurationError: malformed path, missing module or attribute
    """
    module_name, sep, attr = path.partition(":")
    if not sep:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ConfigurationError(
            message=f"Invalid CLIENT_FACTORY '{path}'. Expected 'package.module:callable'",
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(
            message=f"Cannot import client factory module '{module_name}'",
            context={"original_error": str(e)},
        ) from e
    factory = getattr(module, attr, None)
    if not callable(factory):
        raise ConfigurationError(message=f"'{path}' is not a callable client factory")
    return factory


def get_client_factory(settings: Settings = Depends(get_settings)) -> ClientFactory:
    if not settings.client_factory:
        raise ConfigurationError(message="CLIENT_FACTORY is not configured")
    return load_client_factory(settings.client_factory)


@asynccontextmanager
async def open_client(settings: Settings, factory: ClientFactory) -> AsyncIterator[ListClient]:
    """
    Provide a logged-in client with lists loaded, closed on exit.

    Login and sync failures go through the upstream classifier, so a throttled
    login becomes a 429 like any other rate-limited call.
    """
    async with upstream_call("logging in"):
        client: Any = factory(
            email=settings.email,
            password=settings.password,
            credentials_file=settings.credentials_file,
        )
        await client.login(False)
        await client.get_lists()

    try:
        yield client
    finally:
        try:
            await client.close()
        except Exception as e:
            logger.warning("Failed to close list client: %s", e)
