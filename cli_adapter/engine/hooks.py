"""Pre-dispatch hooks (POST variant only).

A hook is ``(request, parsed_args) -> httpx.Request | None`` and may be
async. Configure either one hook for every command or a table keyed by the
first positional segment.
"""

from __future__ import annotations

import inspect
import logging
from typing import Mapping

import httpx

from cli_adapter.engine.models import BeforeFetch, ParsedArgs
from cli_adapter.engine.request import command_from_argv

logger = logging.getLogger(__name__)


def resolve_before_fetch(
    config: BeforeFetch | Mapping[str, BeforeFetch] | None,
    parsed: ParsedArgs,
) -> BeforeFetch | None:
    if config is None:
        return None
    if callable(config):
        return config
    command = command_from_argv(parsed)
    if command is None:
        return None
    return config.get(command)


async def apply_before_fetch(
    hook: BeforeFetch | None,
    request: httpx.Request,
    parsed: ParsedArgs,
) -> httpx.Request:
    """Run *hook*; its result replaces *request* only if it is an ``httpx.Request``."""
    if hook is None:
        return request
    result = hook(request, parsed)
    if inspect.isawaitable(result):
        result = await result
    if isinstance(result, httpx.Request):
        logger.debug("before_fetch replaced request url=%s", result.url)
        return result
    return request
