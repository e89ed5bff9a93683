"""Handler ABC: the two capabilities the adapter needs from a web app."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

import httpx


class Handler(ABC):
    """An in-process request handler.

    ``fetch`` is required. ``routes`` is a best-effort view of the registered
    routes; the default is empty, which only makes ``--list`` print nothing.
    """

    @abstractmethod
    async def fetch(self, request: httpx.Request, env: Mapping[str, Any]) -> httpx.Response: ...

    @property
    def routes(self) -> Sequence[Any]:
        return []
