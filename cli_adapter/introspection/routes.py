"""Route introspection and command-example generation.

``route_entries`` is the only place that knows how an app exposes its route
table. Everything else works on :class:`RouteDescriptor` records, so a change
in the web framework's internals touches one function.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Iterable

from cli_adapter.engine.models import RouteDescriptor

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_BASE = "cli"
COMMAND_BASE_ENV = "CLI_ADAPTER_COMMAND"

_PLACEHOLDER = re.compile(r"\{([^}:]+)(?::[^}]*)?\}")


def normalize_path(path: str) -> str:
    """``/user/{id}`` and ``/files/{path:path}`` → ``/user/:id``, ``/files/:path``."""
    return _PLACEHOLDER.sub(r":\1", path)


def route_entries(app: Any) -> list[RouteDescriptor]:
    """Best-effort snapshot of *app*'s route table, recomputed on every call."""
    raw = getattr(app, "routes", None) or []
    entries: list[RouteDescriptor] = []
    for route in raw:
        if isinstance(route, dict):
            methods = [route.get("method")]
            path = route.get("path")
        else:
            # FastAPI's own /docs and /openapi.json routes
            if getattr(route, "include_in_schema", True) is False:
                continue
            methods = list(getattr(route, "methods", None) or [getattr(route, "method", None)])
            path = getattr(route, "path", None)
        if not isinstance(path, str):
            continue
        for method in methods:
            if isinstance(method, str):
                entries.append(RouteDescriptor(method=method.upper(), path=normalize_path(path)))
    return entries


def list_routes(app: Any, method: str) -> list[str]:
    wanted = method.upper()
    return [r.path for r in route_entries(app) if r.method == wanted]


# ---------------------------------------------------------------------------
# Command examples
# ---------------------------------------------------------------------------

def route_to_segments(path: str) -> list[str]:
    return [f"<{s[1:]}>" if s.startswith(":") else s for s in path.split("/") if s]


def build_example(path: str, command_base: str) -> str:
    return " ".join([command_base, *route_to_segments(path)])


def build_examples(paths: Iterable[str], command_base: str) -> list[str]:
    return [build_example(p, command_base) for p in paths]


def detect_command_base(
    argv0: str | None = None,
    executable: str | None = None,
    cwd: str | None = None,
) -> str:
    """Guess how the user invoked us, e.g. ``python example/cli.py`` or ``mytool``."""
    override = os.environ.get(COMMAND_BASE_ENV)
    if override:
        return override

    script = argv0 if argv0 is not None else (sys.argv[0] if sys.argv else "")
    if not script or script in ("-c", "-m", "-"):
        return DEFAULT_COMMAND_BASE

    script_path = Path(script)
    if script_path.suffix != ".py":
        return script_path.name or DEFAULT_COMMAND_BASE

    runtime = Path(executable if executable is not None else sys.executable or "").name or "python"
    try:
        rel = os.path.relpath(script_path.resolve(), cwd or os.getcwd())
    except ValueError:
        # different drive on Windows
        rel = str(script_path)
    logger.debug("detected command base runtime=%s script=%s", runtime, rel)
    return f"{runtime} {Path(rel).as_posix()}"
