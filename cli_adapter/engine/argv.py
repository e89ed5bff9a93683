"""argv tokenizer with minimist semantics.

Turns raw CLI tokens into :class:`ParsedArgs`: positional segments, a flag
mapping (repeated flags collapse into lists) and, optionally, the raw tail
after a ``--`` separator. Values are kept as strings; no numeric coercion.
"""

from __future__ import annotations

import re
from typing import Sequence

from cli_adapter.engine.models import FlagValue, ParseConfig, ParsedArgs

_LONG_WITH_VALUE = re.compile(r"^--([^=]+)=(.*)$", re.DOTALL)


def parse_argv(raw_args: Sequence[str], config: ParseConfig | None = None) -> ParsedArgs:
    cfg = config or ParseConfig()
    flags: dict[str, FlagValue] = {}
    positional: list[str] = []
    tail: list[str] = []

    def canonical(name: str) -> str:
        return cfg.aliases.get(name, name)

    def set_flag(name: str, value: str | bool) -> None:
        key = canonical(name)
        if key in cfg.strings and isinstance(value, bool):
            value = ""
        if key in cfg.booleans and isinstance(value, str):
            value = value != "false"
        existing = flags.get(key)
        # booleans overwrite; only string values accumulate into a list
        if existing is None or key in cfg.booleans or isinstance(existing, bool):
            flags[key] = value
        elif isinstance(existing, list):
            existing.append(_as_str(value))
        else:
            flags[key] = [_as_str(existing), _as_str(value)]

    def takes_value(name: str, next_token: str | None) -> bool:
        key = canonical(name)
        if key in cfg.booleans or next_token is None:
            return False
        return not next_token.startswith("-")

    args = list(raw_args)
    i = 0
    while i < len(args):
        token = args[i]
        next_token = args[i + 1] if i + 1 < len(args) else None

        if token == "--":
            rest = args[i + 1:]
            (tail if cfg.capture_tail else positional).extend(rest)
            break

        match = _LONG_WITH_VALUE.match(token)
        if match:
            set_flag(match.group(1), match.group(2))
        elif token.startswith("--no-") and len(token) > 5:
            set_flag(token[5:], False)
        elif token.startswith("--") and len(token) > 2:
            name = token[2:]
            if takes_value(name, next_token):
                set_flag(name, next_token)  # type: ignore[arg-type]
                i += 1
            else:
                set_flag(name, True)
        elif token.startswith("-") and len(token) > 1:
            letters = token[1:]
            for letter in letters[:-1]:
                set_flag(letter, True)
            last = letters[-1]
            if takes_value(last, next_token):
                set_flag(last, next_token)  # type: ignore[arg-type]
                i += 1
            else:
                set_flag(last, True)
        else:
            positional.append(token)
        i += 1

    return ParsedArgs(positional=tuple(positional), flags=flags, tail=tuple(tail))


def _as_str(value: str | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value
