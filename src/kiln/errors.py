"""Kiln exception hierarchy.

Shared across the compile pipeline, middleware, and the ASGI host so every
module raises and catches the same types.

Compile failures are split by how the host must react to them:

- ``SourceNotFound`` is a sentinel. The pipeline swallows it and the request
  passes through untouched (downstream static serving then 404s naturally).
- ``CompilerError``, ``AssetIOError`` and ``StageError`` are fatal for the
  current request and surface to the HTTP layer as a 500.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class KilnError(Exception):
    """Base for all kiln-specific errors."""


class ConfigurationError(KilnError):
    """Raised when mount or app configuration is invalid.

    Always raised at construction time (``AssetCompiler(...)`` or
    ``App._freeze()``), never deferred to the first request.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(KilnError):
    """An error that maps directly to an HTTP status code.

    Raised by middleware or the end of the chain. The ASGI handler catches
    these and turns them into a response with the matching status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — nothing in the middleware chain answered the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class CompileError(KilnError):
    """Base for failures inside a single compile pipeline run.

    ``path`` is the file the failing stage was working on, when known.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.message} ({self.path})"
        return self.message


class SourceNotFound(CompileError):  # noqa: N818
    """The source file for a matched request does not exist."""


class CompilerError(CompileError):
    """The backend rejected the source (syntax error, unresolved import...)."""


class AssetIOError(CompileError):
    """Reading the source or writing the compiled output failed."""


class StageError(CompileError):
    """A precompile/postcompile hook failed or a stage returned garbage."""


def normalize_error(
    exc: object,
    *,
    path: Path | None = None,
    default: type[CompileError] = CompileError,
) -> CompileError:
    """Coerce whatever a stage produced into a ``CompileError``.

    ``CompileError`` instances pass through unchanged. Missing-file errors
    become ``SourceNotFound``, other ``OSError`` become ``AssetIOError``,
    remaining exceptions become *default*. Non-exception values (a hook
    returning a string instead of raising) are wrapped by their ``repr``.
    """
    if isinstance(exc, CompileError):
        return exc

    if isinstance(exc, FileNotFoundError):
        err: CompileError = SourceNotFound(
            exc.strerror or "No such file or directory",
            path=path or _filename(exc),
        )
    elif isinstance(exc, OSError):
        err = AssetIOError(
            exc.strerror or str(exc) or type(exc).__name__,
            path=path or _filename(exc),
        )
    elif isinstance(exc, BaseException):
        err = default(str(exc) or type(exc).__name__, path=path)
    else:
        return default(f"Stage produced a non-error value: {exc!r}", path=path)

    err.__cause__ = exc
    return err


def _filename(exc: OSError) -> Path | None:
    return Path(exc.filename) if exc.filename else None
