from cli_adapter.introspection.openapi import format_param_lines, from_openapi, openapi_for
from cli_adapter.introspection.routes import (
    build_example,
    build_examples,
    detect_command_base,
    list_routes,
    normalize_path,
    route_entries,
    route_to_segments,
)

__all__ = [
    "build_example",
    "build_examples",
    "detect_command_base",
    "format_param_lines",
    "from_openapi",
    "list_routes",
    "normalize_path",
    "openapi_for",
    "route_entries",
    "route_to_segments",
]
