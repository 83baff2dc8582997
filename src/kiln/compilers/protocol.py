"""Compiler adapter protocol.

An adapter wraps one backend library behind a single async call::

    class UpperCompiler:
        source_extension = None

        async def compile(self, name: str, source: bytes, args: CompileArgs) -> bytes:
            return source.upper()

No base class required. The pipeline checks the shape, not the lineage.

Contract: ``compile()`` either returns the compiled output (``bytes`` or
``str``) or raises. Backend exceptions should be converted to
``CompilerError``; anything else that escapes is normalized by the
pipeline. Blocking backends run their work through
``anyio.to_thread.run_sync`` so the event loop is never blocked.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class CompileArgs:
    """Auxiliary inputs for a compile call.

    Attributes:
        search_paths: Import search directories, outermost first.
        source_path: Absolute path of the source file being compiled.
        options: Mount-level ``args`` forwarded verbatim to the backend.
    """

    search_paths: tuple[Path, ...]
    source_path: Path
    options: Mapping[str, Any] = field(default_factory=dict)


class CompilerAdapter(Protocol):
    """Protocol for compiler adapters.

    ``source_extension`` is the extension (without dot) the source is read
    from, when it differs from the requested one: the LESS adapter reads
    ``app.less`` for a request to ``app.css``. ``None`` reads the requested
    filename as-is.
    """

    source_extension: str | None

    async def compile(self, name: str, source: bytes, args: CompileArgs) -> bytes | str: ...
