"""Bin-script layer: the only place that prints and exits."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import Any, Callable, Sequence, TextIO

from dotenv import load_dotenv

from cli_adapter.engine.adapter import POST_VARIANT, CliAdapter, Variant
from cli_adapter.engine.models import AdapterOptions

logger = logging.getLogger(__name__)


def run_cli_and_exit(
    app: Any,
    argv: Sequence[str] | None = None,
    options: AdapterOptions | None = None,
    *,
    variant: Variant = POST_VARIANT,
    stream: TextIO | None = None,
    exit_process: Callable[[int], Any] = sys.exit,
) -> int:
    """Run the CLI, write each output line, then ``exit_process(code)``.

    Returns the code when *exit_process* returns (tests pass a recorder instead of
    ``sys.exit``).
    """
    load_dotenv()  # reads .env into os.environ (no-op if file missing)

    result = asyncio.run(CliAdapter(variant).run_cli(app, argv, options))

    # no stdout (e.g. pythonw): fall back to stderr, then to logging
    out = next((s for s in (stream, sys.stdout, sys.stderr) if s is not None), None)
    for line in result.lines:
        if out is None:
            logger.warning("%s", line)
        else:
            out.write(line + "\n")
    if out is not None:
        out.flush()

    exit_process(result.code)
    return result.code


def main() -> None:
    """Entry-point for the ``cli-adapter-example`` console script."""
    level = os.environ.get("CLI_ADAPTER_LOG_LEVEL")
    if level:
        logging.basicConfig(level=level.upper(), stream=sys.stderr)

    from cli_adapter.adapters.web_fastapi.app import create_app

    run_cli_and_exit(create_app(), sys.argv[1:])


if __name__ == "__main__":
    main()
