"""cli_adapter: turn argv into a request for an in-process ASGI app.

Usage::

    from cli_adapter import run_cli_default

    result = await run_cli_default(app, ["hello", "Taro", "--json"])
    for line in result.lines:
        print(line)
    raise SystemExit(result.code)

``run_cli_and_exit`` does the printing and exiting for a bin script.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import httpx

from cli_adapter.engine.adapter import GET_VARIANT, POST_VARIANT, CliAdapter, get_adapter, post_adapter
from cli_adapter.engine.models import AdapterOptions, ParsedArgs, RunCliResult
from cli_adapter.engine.request import build_url_from_argv, command_from_argv
from cli_adapter.handlers import AsgiHandler, Handler
from cli_adapter.introspection import from_openapi, list_routes
from cli_adapter.adapters.cli.main import run_cli_and_exit

__all__ = [
    "AdapterOptions",
    "AsgiHandler",
    "CliAdapter",
    "Handler",
    "ParsedArgs",
    "RunCliResult",
    "adapt_and_fetch",
    "build_url_from_argv",
    "command_from_argv",
    "create_adapter",
    "from_openapi",
    "list_routes",
    "run_cli",
    "run_cli_and_exit",
    "run_cli_default",
]


def create_adapter(method: str = "POST") -> CliAdapter:
    """Return the adapter variant for *method* (``"GET"`` or ``"POST"``)."""
    variants = {"GET": GET_VARIANT, "POST": POST_VARIANT}
    variant = variants.get(method.upper())
    if variant is None:
        raise ValueError(f"Unsupported method '{method}' (expected GET or POST)")
    return CliAdapter(variant)


async def adapt_and_fetch(
    app: Any,
    argv: Sequence[str] | None = None,
    options: AdapterOptions | None = None,
    environ: Mapping[str, str] | None = None,
) -> tuple[httpx.Request, httpx.Response]:
    """POST variant: dispatch *argv* against *app* and return ``(request, response)``."""
    return await post_adapter.adapt_and_fetch(app, argv, options, environ)


async def run_cli(
    app: Any,
    argv: Sequence[str] | None = None,
    options: AdapterOptions | None = None,
    environ: Mapping[str, str] | None = None,
) -> RunCliResult:
    """GET variant runner."""
    return await get_adapter.run_cli(app, argv, options, environ)


async def run_cli_default(
    app: Any,
    argv: Sequence[str] | None = None,
    options: AdapterOptions | None = None,
    environ: Mapping[str, str] | None = None,
) -> RunCliResult:
    """POST variant runner: ``-- key=value`` body, before_fetch hooks, process env."""
    return await post_adapter.run_cli(app, argv, options, environ)
