from cli_adapter.engine.models import (
    AdapterOptions,
    OpenApiRoutes,
    ParamDescriptor,
    ParseConfig,
    ParsedArgs,
    RouteDescriptor,
    RunCliResult,
)
from cli_adapter.engine.argv import parse_argv
from cli_adapter.engine.env import EnvPolicy, parse_env_flags, resolve_env
from cli_adapter.engine.request import (
    DEFAULT_RESERVED,
    build_get_request,
    build_post_request,
    build_request,
    build_url_from_argv,
    command_from_argv,
    parse_body_tokens,
)
from cli_adapter.engine.hooks import apply_before_fetch, resolve_before_fetch
from cli_adapter.engine.adapter import (
    GET_VARIANT,
    POST_VARIANT,
    CliAdapter,
    Variant,
    format_output,
    get_adapter,
    post_adapter,
)

__all__ = [
    "AdapterOptions",
    "CliAdapter",
    "DEFAULT_RESERVED",
    "EnvPolicy",
    "GET_VARIANT",
    "OpenApiRoutes",
    "POST_VARIANT",
    "ParamDescriptor",
    "ParseConfig",
    "ParsedArgs",
    "RouteDescriptor",
    "RunCliResult",
    "Variant",
    "apply_before_fetch",
    "build_get_request",
    "build_post_request",
    "build_request",
    "build_url_from_argv",
    "command_from_argv",
    "format_output",
    "get_adapter",
    "parse_argv",
    "parse_body_tokens",
    "parse_env_flags",
    "post_adapter",
    "resolve_before_fetch",
    "resolve_env",
]
