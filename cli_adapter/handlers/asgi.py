"""ASGI handler: runs a FastAPI/Starlette app in-process for one request.

The resolved environment is placed in the scope's ``state`` so route code
reads it as ``request.state.env``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import httpx

from cli_adapter.handlers.interface import Handler

logger = logging.getLogger(__name__)


def with_env(app: Any, env: Mapping[str, Any]) -> Any:
    """Wrap *app* so every HTTP scope carries ``state = {"env": env}``."""
    state = {"env": dict(env)}

    async def wrapped(scope: dict[str, Any], receive: Any, send: Any) -> None:
        await app({**scope, "state": state}, receive, send)

    return wrapped


class AsgiHandler(Handler):
    def __init__(self, app: Any) -> None:
        self.app = app

    @property
    def routes(self) -> Sequence[Any]:
        return getattr(self.app, "routes", None) or []

    async def fetch(self, request: httpx.Request, env: Mapping[str, Any]) -> httpx.Response:
        transport = httpx.ASGITransport(app=with_env(self.app, env))
        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.send(request)
            await response.aread()
        logger.debug("asgi %s %s -> %d", request.method, request.url.path, response.status_code)
        return response


class _FetchAdapter(Handler):
    """Wraps a duck-typed object exposing ``fetch(request, env)``."""

    def __init__(self, target: Any) -> None:
        self._target = target

    @property
    def routes(self) -> Sequence[Any]:
        return getattr(self._target, "routes", None) or []

    async def fetch(self, request: httpx.Request, env: Mapping[str, Any]) -> httpx.Response:
        return await self._target.fetch(request, env)


def as_handler(app: Any) -> Handler:
    if isinstance(app, Handler):
        return app
    if callable(getattr(app, "fetch", None)):
        return _FetchAdapter(app)
    if callable(app):
        return AsgiHandler(app)
    raise TypeError(f"{type(app).__name__} is neither a Handler, a fetch-capable object nor an ASGI app")


async def dispatch(handler: Handler, request: httpx.Request, env: Mapping[str, Any]) -> httpx.Response:
    """Hand *request* to *handler*. Errors propagate unmodified; no retries."""
    logger.info("dispatch method=%s url=%s", request.method, request.url)
    return await handler.fetch(request, env)
