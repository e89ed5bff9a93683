"""OpenAPI-driven route listing: routes, command examples and parameter docs."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from cli_adapter.engine.models import OpenApiRoutes, ParamDescriptor
from cli_adapter.introspection.routes import build_example, normalize_path

logger = logging.getLogger(__name__)


def _param(raw: Mapping[str, Any]) -> ParamDescriptor:
    return ParamDescriptor(
        name=raw.get("name", ""),
        location=raw.get("in", ""),
        required=bool(raw.get("required", False)),
        description=raw.get("description"),
        schema_=raw.get("schema"),
    )


def _body_params(operation: Mapping[str, Any]) -> list[ParamDescriptor]:
    schema = (
        (operation.get("requestBody") or {})
        .get("content", {})
        .get("application/json", {})
        .get("schema")
    )
    if not isinstance(schema, Mapping) or schema.get("type") != "object":
        return []
    properties = schema.get("properties")
    if not isinstance(properties, Mapping):
        return []
    required = set(schema.get("required") or [])
    return [
        ParamDescriptor(
            name=name,
            location="body",
            required=name in required,
            description=(prop or {}).get("description"),
            schema_=dict(prop) if isinstance(prop, Mapping) else None,
        )
        for name, prop in properties.items()
    ]


def from_openapi(
    document: Mapping[str, Any],
    command_base: str,
    method: str = "post",
) -> OpenApiRoutes:
    """Collect every path with a *method* operation, in ``paths`` key order.

    Path-item parameters come before operation parameters, then the JSON
    body's object properties. Path params are already positional in the
    example, so only query/body params become ``--name <name>`` flags.
    """
    result = OpenApiRoutes()
    for path, item in (document.get("paths") or {}).items():
        if not isinstance(item, Mapping):
            continue
        operation = item.get(method.lower())
        if not isinstance(operation, Mapping):
            continue

        route = normalize_path(path)
        params = [
            _param(p)
            for p in [*(item.get("parameters") or []), *(operation.get("parameters") or [])]
            if isinstance(p, Mapping)
        ]
        params.extend(_body_params(operation))

        flags = [f"--{p.name} <{p.name}>" for p in params if p.location in ("query", "body")]
        result.routes.append(route)
        result.examples.append(" ".join([build_example(route, command_base), *flags]))
        result.params.append(params)

    logger.debug("openapi introspection found %d %s routes", len(result.routes), method.upper())
    return result


def format_param_lines(params: list[ParamDescriptor]) -> list[str]:
    """``--email (string, required) : user email`` for each non-path param."""
    lines = []
    for p in params:
        if p.location == "path":
            continue
        type_name = (p.schema_ or {}).get("type", "any")
        required = ", required" if p.required else ""
        description = f" : {p.description}" if p.description else ""
        lines.append(f"--{p.name} ({type_name}{required}){description}")
    return lines


def openapi_for(app: Any) -> dict[str, Any] | None:
    """``app.openapi()`` for FastAPI apps; ``None`` for anything else."""
    generate = getattr(app, "openapi", None)
    if not callable(generate):
        return None
    document = generate()
    return document if isinstance(document, dict) else None
