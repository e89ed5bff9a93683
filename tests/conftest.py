"""Shared fixtures for cli_adapter tests."""

from __future__ import annotations

from typing import Any, Mapping

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from cli_adapter.adapters.web_fastapi.app import create_app
from cli_adapter.handlers import Handler


class StaticHandler(Handler):
    """Answers every request with the same status/body and records what it saw."""

    def __init__(self, status: int = 200, body: str = "", routes: list[Any] | None = None) -> None:
        self.status = status
        self.body = body
        self._routes = routes or []
        self.requests: list[httpx.Request] = []
        self.envs: list[dict[str, Any]] = []

    @property
    def routes(self) -> list[Any]:
        return self._routes

    async def fetch(self, request: httpx.Request, env: Mapping[str, Any]) -> httpx.Response:
        self.requests.append(request)
        self.envs.append(dict(env))
        return httpx.Response(self.status, text=self.body, request=request)


@pytest.fixture(autouse=True)
def _no_command_override(monkeypatch):
    monkeypatch.delenv("CLI_ADAPTER_COMMAND", raising=False)


@pytest.fixture
def example_app() -> FastAPI:
    return create_app()


@pytest.fixture
def get_app() -> FastAPI:
    app = FastAPI()

    @app.get("/items/{item_id}")
    async def item(item_id: str, request: Request) -> JSONResponse:
        return JSONResponse({
            "item_id": item_id,
            "query": [list(pair) for pair in request.query_params.multi_items()],
        })

    @app.get("/env/{key}", response_class=PlainTextResponse)
    async def env_value(key: str, request: Request) -> str:
        env = getattr(request.state, "env", None) or {}
        return f"{key}={env.get(key, '')}"

    @app.get("/missing")
    async def missing() -> JSONResponse:
        return JSONResponse({"error": "not here"}, status_code=404)

    @app.post("/write")
    async def write() -> JSONResponse:
        return JSONResponse({"ok": True})

    return app


@pytest.fixture
def static_handler():
    def _make(**kwargs: Any) -> StaticHandler:
        return StaticHandler(**kwargs)

    return _make
