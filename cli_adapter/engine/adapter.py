"""CliAdapter: argv → request → dispatch → formatted lines, without I/O.

Two variants are provided and intentionally kept apart:

  GET_VARIANT   method GET, env = options.env < --env, no body, no hooks
  POST_VARIANT  method POST, env = os.environ < options.env < --env,
                ``-- key=value`` tail becomes a JSON body, before_fetch hooks
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import httpx

from cli_adapter.engine.argv import parse_argv
from cli_adapter.engine.env import EnvPolicy, parse_env_flags, resolve_env
from cli_adapter.engine.hooks import apply_before_fetch, resolve_before_fetch
from cli_adapter.engine.models import AdapterOptions, ParseConfig, ParsedArgs, RunCliResult
from cli_adapter.engine.request import build_request
from cli_adapter.handlers import as_handler, dispatch
from cli_adapter.introspection.openapi import format_param_lines, from_openapi, openapi_for
from cli_adapter.introspection.routes import build_examples, detect_command_base, list_routes

logger = logging.getLogger(__name__)

CLI_RESERVED: frozenset[str] = frozenset({"json", "list", "help"})


@dataclass(frozen=True)
class Variant:
    name: str
    method: str
    env_policy: EnvPolicy
    accepts_body: bool


GET_VARIANT = Variant("get", "GET", EnvPolicy.OVERRIDES_ONLY, accepts_body=False)
POST_VARIANT = Variant("post", "POST", EnvPolicy.PROCESS_AND_OVERRIDES, accepts_body=True)


class CliAdapter:
    """Public API: ``result = await adapter.run_cli(app, argv)``."""

    def __init__(self, variant: Variant) -> None:
        self.variant = variant

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse_config(self) -> ParseConfig:
        return ParseConfig(
            strings=frozenset({"base", "env"}),
            booleans=CLI_RESERVED,
            capture_tail=self.variant.accepts_body,
        )

    def parse(self, argv: Sequence[str]) -> ParsedArgs:
        return parse_argv(argv, self.parse_config())

    def effective_options(self, parsed: ParsedArgs, options: AdapterOptions | None) -> AdapterOptions:
        """``--base`` on the command line overrides ``options.base``."""
        opts = options or AdapterOptions()
        base = parsed.get("base")
        if isinstance(base, list):
            base = base[-1]
        if isinstance(base, str) and base:
            opts = opts.model_copy(update={"base": base})
        return opts

    # ------------------------------------------------------------------
    # Request + env
    # ------------------------------------------------------------------

    def build_request(
        self,
        parsed: ParsedArgs,
        options: AdapterOptions | None = None,
        reserved: Sequence[str] = (),
    ) -> httpx.Request:
        return build_request(
            parsed,
            self.variant.method,
            options,
            reserved,
            with_body=self.variant.accepts_body,
        )

    def resolve_env(
        self,
        parsed: ParsedArgs,
        options: AdapterOptions,
        environ: Mapping[str, str] | None,
    ) -> dict[str, Any]:
        process_env = None
        if self.variant.env_policy is EnvPolicy.PROCESS_AND_OVERRIDES:
            process_env = os.environ if environ is None else environ
        return resolve_env(
            self.variant.env_policy,
            process_env,
            options.env,
            parse_env_flags(parsed.get("env")),
        )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def fetch_parsed(
        self,
        app: Any,
        parsed: ParsedArgs,
        options: AdapterOptions | None = None,
        environ: Mapping[str, str] | None = None,
        reserved: Sequence[str] = (),
    ) -> tuple[httpx.Request, httpx.Response]:
        handler = as_handler(app)
        opts = self.effective_options(parsed, options)
        request = self.build_request(parsed, opts, reserved)
        env = self.resolve_env(parsed, opts, environ)

        if self.variant.accepts_body:
            hook = resolve_before_fetch(opts.before_fetch, parsed)
            request = await apply_before_fetch(hook, request, parsed)
        elif opts.before_fetch is not None:
            logger.debug("before_fetch ignored by %s variant", self.variant.name)

        response = await dispatch(handler, request, env)
        return request, response

    async def adapt_and_fetch(
        self,
        app: Any,
        argv: Sequence[str] | None = None,
        options: AdapterOptions | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> tuple[httpx.Request, httpx.Response]:
        """Run ``app`` for *argv* and return ``(request, response)``; writes nothing."""
        parsed = self.parse(_argv_or_default(argv))
        return await self.fetch_parsed(app, parsed, options, environ)

    # ------------------------------------------------------------------
    # CLI runner
    # ------------------------------------------------------------------

    async def run_cli(
        self,
        app: Any,
        argv: Sequence[str] | None = None,
        options: AdapterOptions | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> RunCliResult:
        parsed = self.parse(_argv_or_default(argv))
        opts = options or AdapterOptions()

        if parsed.get("list") is True or parsed.get("help") is True:
            lines = self.list_lines(app, opts)
            if parsed.get("help") is True:
                lines = self.help_lines(opts) + lines + [""] + self.flag_lines()
            return RunCliResult(code=0, lines=lines)

        request, response = await self.fetch_parsed(app, parsed, opts, environ, CLI_RESERVED)
        text = response.text
        lines = [format_output(response.status_code, text, as_json=parsed.get("json") is True)]
        code = 0 if response.is_success else 1
        logger.info("status=%d exit=%d", response.status_code, code)
        return RunCliResult(code=code, lines=lines, request=request, response=response)

    # ------------------------------------------------------------------
    # --list / --help output
    # ------------------------------------------------------------------

    def command_base(self, options: AdapterOptions) -> str:
        return options.command_base or detect_command_base()

    def list_lines(self, app: Any, options: AdapterOptions) -> list[str]:
        command_base = self.command_base(options)
        document = options.openapi if options.openapi is not None else openapi_for(app)
        if document is not None:
            listing = from_openapi(document, command_base, self.variant.method)
            lines: list[str] = []
            for example, params in zip(listing.examples, listing.params):
                lines.append(example)
                lines.extend(f"  {line}" for line in format_param_lines(params))
            return lines
        return build_examples(list_routes(app, self.variant.method), command_base)

    def help_lines(self, options: AdapterOptions) -> list[str]:
        usage = f"Usage: {self.command_base(options)} [segments...] [--flags]"
        if self.variant.accepts_body:
            usage += " [-- key=value ...]"
        return [usage, "", "Commands:"]

    def flag_lines(self) -> list[str]:
        lines = [
            "Flags:",
            "  --list             list available commands",
            "  --help             show this help",
            "  --json             print {status, data} as pretty JSON",
            "  --base <path>      prefix every request path",
            "  --env KEY=VALUE    pass an environment value to the app (repeatable)",
        ]
        if self.variant.accepts_body:
            lines.append("  -- key=value ...   send the pairs as a JSON body")
        return lines


def format_output(status: int, text: str, as_json: bool = False) -> str:
    """Raw body text, or ``{"status", "data"}`` pretty-printed with 2-space indent."""
    if not as_json:
        return text
    try:
        data: Any = json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        data = text
    return json.dumps({"status": status, "data": data}, indent=2, ensure_ascii=False)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _argv_or_default(argv: Sequence[str] | None) -> list[str]:
    return list(sys.argv[1:] if argv is None else argv)


get_adapter = CliAdapter(GET_VARIANT)
post_adapter = CliAdapter(POST_VARIANT)
