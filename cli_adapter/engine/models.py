"""Core data models: no internal dependencies, only Pydantic + httpx."""

from __future__ import annotations

from typing import Any, Callable, Mapping

import httpx
from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Parsed argv (tokenizer → adapter)
# ---------------------------------------------------------------------------

FlagValue = str | bool | list[str]


class ParseConfig(BaseModel):
    """Tokenizer settings, modelled on minimist's options object."""

    model_config = ConfigDict(frozen=True)

    strings: frozenset[str] = frozenset()
    booleans: frozenset[str] = frozenset()
    aliases: dict[str, str] = Field(default_factory=lambda: {"e": "env"})
    capture_tail: bool = False


class ParsedArgs(BaseModel):
    """Result of tokenizing argv. Created per invocation, never mutated."""

    model_config = ConfigDict(frozen=True)

    positional: tuple[str, ...] = ()
    flags: dict[str, FlagValue] = Field(default_factory=dict)
    tail: tuple[str, ...] = ()

    def get(self, name: str, default: Any = None) -> Any:
        return self.flags.get(name, default)


# ---------------------------------------------------------------------------
# Caller configuration
# ---------------------------------------------------------------------------

BeforeFetch = Callable[..., Any]


class AdapterOptions(BaseModel):
    """Caller-supplied options, read-only for the duration of one invocation.

    ``before_fetch`` is only honoured by the POST variant. ``openapi`` and
    ``command_base`` only affect the ``--list`` / ``--help`` output.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    base: str = ""
    env: dict[str, Any] = Field(default_factory=dict)
    reserved_keys: frozenset[str] = frozenset()
    before_fetch: BeforeFetch | Mapping[str, BeforeFetch] | None = None
    openapi: dict[str, Any] | None = None
    command_base: str | None = None


# ---------------------------------------------------------------------------
# Introspection records
# ---------------------------------------------------------------------------

class RouteDescriptor(BaseModel):
    method: str
    path: str


class ParamDescriptor(BaseModel):
    """One path/query/body parameter of an OpenAPI operation."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: str = Field(alias="in")  # path | query | body
    required: bool = False
    description: str | None = None
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")


class OpenApiRoutes(BaseModel):
    """Parallel lists: ``routes[i]``, ``examples[i]`` and ``params[i]`` describe one path."""

    routes: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)
    params: list[list[ParamDescriptor]] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Runner output
# ---------------------------------------------------------------------------

class RunCliResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    code: int
    lines: list[str] = Field(default_factory=list)
    request: httpx.Request | None = None
    response: httpx.Response | None = None
