"""
AnyList Gateway - Command Line Entry Point
==========================================

What:  `python -m anylist_gateway [options]` (or the `anylist-gateway` script).
How:   argparse flags override environment variables; the resulting Settings
       are validated and served with uvicorn.

Example:
    anylist-gateway --port 8080 --email me@example.com --password secret \\
        --client-factory my_adapter:AnyListClient --ip-filter 192.168.1. \\
        --default-list Groceries
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

import uvicorn
from pydantic import ValidationError

from anylist_gateway import __version__
from anylist_gateway.config import Settings
from anylist_gateway.main import create_app, setup_logging

logger = logging.getLogger("anylist_gateway")

# flag → Settings field
OPTIONS = (
    ("--host", "host", str, "Interface to bind (default 0.0.0.0)"),
    ("--port", "port", int, "Port to listen on (default 8080)"),
    ("--email", "email", str, "Account email"),
    ("--password", "password", str, "Account password"),
    ("--ip-filter", "ip_filter", str, "Only accept clients whose address starts with this prefix"),
    ("--default-list", "default_list", str, "List used when a request names none"),
    ("--credentials-file", "credentials_file", str, "Token cache file for the client library"),
    ("--client-factory", "client_factory", str, "Client adapter as 'package.module:callable'"),
    ("--log-level", "log_level", str, "DEBUG, INFO, WARNING, ERROR or CRITICAL"),
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anylist-gateway",
        description="REST gateway for shopping lists, recipes and meal planning.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    for flag, dest, type_, help_text in OPTIONS:
        parser.add_argument(flag, dest=dest, type=type_, default=None, help=help_text)
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Environment-based Settings with every flag that was given applied on top."""
    overrides: Dict[str, Any] = {
        dest: getattr(args, dest)
        for _, dest, _, _ in OPTIONS
        if getattr(args, dest) is not None
    }
    return Settings(**overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        setup_logging()
        logger.error("Invalid configuration:\n%s", e)
        return 2

    setup_logging(settings.log_level)
    if not settings.has_credentials:
        logger.error("Missing username or password")
        return 1

    try:
        settings.validate_required()
    except ValueError as e:
        logger.error("%s", e)
        return 1

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
