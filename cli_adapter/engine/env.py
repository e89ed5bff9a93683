"""Environment resolution for the dispatched request.

The two adapter flavours merge differently and both are kept:

  OVERRIDES_ONLY         options.env < --env flags            (GET variant)
  PROCESS_AND_OVERRIDES  process env < options.env < --env    (POST variant)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Sequence


class EnvPolicy(str, Enum):
    OVERRIDES_ONLY = "overrides_only"
    PROCESS_AND_OVERRIDES = "process_and_overrides"


def parse_env_flags(value: str | Sequence[str] | bool | None) -> dict[str, str]:
    """Parse ``--env KEY=VALUE`` occurrences; a token without ``=`` maps to ``""``."""
    if value is None or isinstance(value, bool):
        return {}
    tokens = [value] if isinstance(value, str) else list(value)
    return dict(split_pair(token) for token in tokens)


def split_pair(token: str) -> tuple[str, str]:
    key, sep, val = token.partition("=")
    return (key, val) if sep else (token, "")


def resolve_env(
    policy: EnvPolicy,
    process_env: Mapping[str, str] | None,
    options_env: Mapping[str, Any] | None,
    flag_env: Mapping[str, str] | None,
) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    if policy is EnvPolicy.PROCESS_AND_OVERRIDES:
        merged.update(process_env or {})
    merged.update(options_env or {})
    merged.update(flag_env or {})
    return merged
