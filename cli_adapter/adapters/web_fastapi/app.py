"""Example FastAPI app driven from the command line.

    cli-adapter-example hello Taro
    cli-adapter-example env HOME --env HOME=/tmp
    cli-adapter-example submit -- name=Taro age=4
    cli-adapter-example --list
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="cli_adapter example", version="0.1.0")

    @app.post("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Hello from FastAPI"

    @app.post("/help", response_class=PlainTextResponse)
    async def usage() -> str:
        lines = [
            "cli_adapter example",
            "",
            "Usage: cli-adapter-example [segments...] [--json] [--list] [--base /v1] [--env KEY=VALUE]",
            "",
            "POST routes:",
        ]
        for route in app.routes:
            if "POST" in (getattr(route, "methods", None) or set()):
                lines.append(f"  POST {route.path}")
        lines.append("")
        return "\n".join(lines)

    @app.post("/hello/{name}", response_class=PlainTextResponse)
    async def hello(name: str) -> str:
        return f"Hello, {name}!"

    @app.post("/env/{key}", response_class=PlainTextResponse)
    async def env_value(key: str, request: Request) -> str:
        env = getattr(request.state, "env", None) or {}
        return f"{key}={env.get(key, '')}"

    @app.post("/submit")
    async def submit(request: Request) -> JSONResponse:
        body = await request.body()
        payload = await request.json() if body else {}
        logger.debug("submit payload=%s", payload)
        return JSONResponse({"ok": True, "received": payload})

    return app
