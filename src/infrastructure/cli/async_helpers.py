"""Async helpers for CLI commands to eliminate duplication."""

import asyncio
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any

from src.application.services import CurationService, create_curation_service
from src.config import log_startup_info, settings
from src.infrastructure.cli.ui import ConsoleArtistChooser, command_error_handler
from src.infrastructure.connectors import SpotifyConnector
from src.infrastructure.persistence.factories import create_store


async def build_curation_service() -> CurationService:
    """Wire the configured store, the Spotify connector and the console chooser."""
    log_startup_info()
    store = await create_store(settings)
    return create_curation_service(
        store=store,
        music=SpotifyConnector(),
        chooser=ConsoleArtistChooser(),
    )


def async_service_operation() -> Callable[
    [Callable[..., Awaitable[Any]]], Callable[..., Any]
]:
    """Decorator for commands running one curation service operation.

    The wrapped coroutine receives a freshly built service as its `service`
    keyword argument and runs to completion under `asyncio.run`. Failures are
    reported by `command_error_handler`.
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Any]:
        async def run(*args: Any, **kwargs: Any) -> Any:
            service = await build_curation_service()
            return await func(*args, service=service, **kwargs)

        @command_error_handler
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return asyncio.run(run(*args, **kwargs))

        return wrapper

    return decorator
