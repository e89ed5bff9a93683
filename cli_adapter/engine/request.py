"""argv → URL / JSON body → ``httpx.Request``.

The URL host is a fixed placeholder: requests built here are only ever
handed to an in-process app, never sent over a network.
"""

from __future__ import annotations

from typing import Iterable, Sequence
from urllib.parse import quote, urlencode

import httpx

from cli_adapter.engine.env import split_pair
from cli_adapter.engine.models import AdapterOptions, ParsedArgs

PLACEHOLDER_ORIGIN = "http://cli"
DEFAULT_RESERVED: frozenset[str] = frozenset({"_", "--", "base", "env"})

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_segment(segment: str) -> str:
    return quote(segment, safe=_URI_COMPONENT_SAFE)


def join_path(*parts: str) -> str:
    """Join with single slashes, trimming each part and dropping empties. Always starts with ``/``."""
    trimmed = (str(p).strip("/") for p in parts)
    return "/" + "/".join(p for p in trimmed if p)


def reserved_keys(options: AdapterOptions | None, extra: Iterable[str] = ()) -> frozenset[str]:
    caller = options.reserved_keys if options else frozenset()
    return DEFAULT_RESERVED | caller | frozenset(extra)


def query_items(parsed: ParsedArgs, reserved: frozenset[str]) -> list[tuple[str, str]]:
    items: list[tuple[str, str]] = []
    for key, value in parsed.flags.items():
        if key in reserved or value is None:
            continue
        if isinstance(value, list):
            items.extend((key, str(v)) for v in value)
        elif isinstance(value, bool):
            items.append((key, "true" if value else "false"))
        else:
            items.append((key, str(value)))
    return items


def build_url_from_argv(
    parsed: ParsedArgs,
    options: AdapterOptions | None = None,
    reserved: Iterable[str] = (),
) -> httpx.URL:
    base = options.base if options else ""
    segments = [encode_segment(str(s)) for s in parsed.positional if s is not None]
    path = join_path(base, *segments)
    query = urlencode(query_items(parsed, reserved_keys(options, reserved)))
    return httpx.URL(PLACEHOLDER_ORIGIN + path + (f"?{query}" if query else ""))


def command_from_argv(parsed: ParsedArgs) -> str | None:
    """First positional segment, used as the key into a per-command hook table."""
    if not parsed.positional:
        return None
    return str(parsed.positional[0])


def parse_body_tokens(tail: Sequence[str]) -> dict[str, str]:
    return dict(split_pair(token) for token in tail)


def build_request(
    parsed: ParsedArgs,
    method: str,
    options: AdapterOptions | None = None,
    reserved: Iterable[str] = (),
    with_body: bool = False,
) -> httpx.Request:
    url = build_url_from_argv(parsed, options, reserved)
    body = parse_body_tokens(parsed.tail) if with_body else {}
    if body:
        return httpx.Request(method, url, json=body)
    return httpx.Request(method, url)


def build_get_request(
    parsed: ParsedArgs, options: AdapterOptions | None = None, reserved: Iterable[str] = ()
) -> httpx.Request:
    return build_request(parsed, "GET", options, reserved)


def build_post_request(
    parsed: ParsedArgs, options: AdapterOptions | None = None, reserved: Iterable[str] = ()
) -> httpx.Request:
    return build_request(parsed, "POST", options, reserved, with_body=True)
