"""Immutable HTTP request.

The asset middleware only looks at ``method`` and ``path``. Headers are
kept for custom middleware placed in the same chain. The body is never
read: nothing kiln serves depends on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from kiln.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """A request as seen by middleware."""

    method: str
    path: str
    headers: Headers

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> Request:
        """Build a Request from an HTTP scope; ``headers`` may be absent."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
        )
