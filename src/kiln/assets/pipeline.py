"""Compile pipeline — one matched request, one compile attempt.

Stages, in order::

    precompile hook → read source → resolve search paths
        → compile → ensure destination directory → write → postcompile hook

Each stage either produces the value the next one needs or raises a
``CompileError``; the first failure ends the run. ``run()`` never raises for
compile failures: it classifies them into a ``CompileResult`` so callers can
tell "no source here" (pass through) from a real error (surface it).

Every matched request recompiles and overwrites the destination file. The
destination tree is a cache for the static-file server downstream, not for
this pipeline.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import anyio

from kiln._internal.invoke import invoke
from kiln.assets.context import CompileContext
from kiln.assets.matching import PathMatcher
from kiln.assets.search import resolve_search_paths
from kiln.compilers.protocol import CompileArgs, CompilerAdapter
from kiln.config import MountConfig, Stage
from kiln.errors import (
    AssetIOError,
    CompileError,
    CompilerError,
    SourceNotFound,
    StageError,
    normalize_error,
)

logger = logging.getLogger("kiln.assets")


@dataclass(frozen=True, slots=True)
class CompileResult:
    """Outcome of one pipeline run.

    ``handled`` is False when the request was declined (no source file, or
    a path escaping its root); ``error`` is set only for real failures.
    """

    handled: bool
    context: CompileContext | None = None
    dest_path: Path | None = None
    error: CompileError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


_DECLINED = CompileResult(handled=False)


def normalize_root(root: str | Path) -> Path:
    """Absolute *root* with ``.`` and ``..`` segments collapsed. Symlinks are kept."""
    return Path(os.path.normpath(Path(root).absolute()))


class CompilePipeline:
    """Runs the compile stages for one mount.

    Built once per mount at middleware construction; ``run()`` is safe to
    call concurrently because all per-request state lives in the
    ``CompileContext`` and local variables.
    """

    __slots__ = ("_adapter", "_dest_root", "_matcher", "_mount", "_source_extension", "_source_root")

    def __init__(
        self,
        source_root: str | Path,
        dest_root: str | Path,
        matcher: PathMatcher,
        adapter: CompilerAdapter,
        mount: MountConfig | None = None,
    ) -> None:
        self._source_root = normalize_root(source_root)
        self._dest_root = normalize_root(dest_root)
        self._matcher = matcher
        self._adapter = adapter
        self._mount = mount or MountConfig()

        ext = self._mount.source_extension or getattr(adapter, "source_extension", None)
        self._source_extension: str | None = ext.lstrip(".") if ext else None

    @property
    def matcher(self) -> PathMatcher:
        return self._matcher

    @property
    def source_root(self) -> Path:
        return self._source_root

    @property
    def dest_root(self) -> Path:
        return self._dest_root

    async def run(self, path: str) -> CompileResult:
        """Compile the asset for request *path*."""
        context = self.create_context(path)
        if context is None:
            return _DECLINED

        try:
            return await self._run_stages(context)
        except SourceNotFound as exc:
            logger.debug("No source for %s (%s)", path, exc)
            return _DECLINED
        except CompileError as exc:
            logger.debug("Compile failed for %s: %s", path, exc)
            return CompileResult(handled=True, context=context, error=exc)
        except Exception as exc:
            err = normalize_error(exc, default=StageError)
            if isinstance(err, SourceNotFound):
                return _DECLINED
            return CompileResult(handled=True, context=context, error=err)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def create_context(self, path: str) -> CompileContext | None:
        """Build the request's context, or None if *path* is outside the mount."""
        name = self._matcher.match(path)
        if name is None:
            return None
        return CompileContext(
            source_root=self._source_root,
            dest_root=self._dest_root,
            relative_path=os.sep.join(path.lstrip("/").split("/")),
            name=name,
        )

    def locate(self, context: CompileContext) -> tuple[Path, Path] | None:
        """Return ``(src_path, dest_path)`` for *context*.

        None when either path normalizes outside its root (``..`` segments).
        """
        dest_rel = context.relative_path
        src_rel = dest_rel
        if self._source_extension:
            src_rel = os.path.splitext(dest_rel)[0] + "." + self._source_extension

        src_path = Path(os.path.normpath(context.source_root / src_rel))
        dest_path = Path(os.path.normpath(context.dest_root / dest_rel))
        if not (src_path.is_relative_to(context.source_root) and dest_path.is_relative_to(context.dest_root)):
            return None
        return src_path, dest_path

    async def _run_stages(self, context: CompileContext) -> CompileResult:
        context = await self._run_hook(self._mount.precompile, context, "precompile")

        located = self.locate(context)
        if located is None:
            logger.debug("Declining %s: path escapes its root", context.relative_path)
            return _DECLINED
        src_path, dest_path = located

        source = await self._read(src_path)
        search_paths = resolve_search_paths(src_path, context.source_root)
        output = await self._compile(context, source, CompileArgs(search_paths, src_path, self._mount.compiler_args))
        await self._write(dest_path, output)
        logger.debug("Compiled %s -> %s", src_path, dest_path)

        context = await self._run_hook(self._mount.postcompile, context, "postcompile")
        return CompileResult(handled=True, context=context, dest_path=dest_path)

    async def _run_hook(self, hook: Stage | None, context: CompileContext, stage: str) -> CompileContext:
        if hook is None:
            return context
        try:
            result = await invoke(hook, context)
        except Exception as exc:
            raise normalize_error(exc, default=StageError) from exc
        if result is None:
            return context
        if not isinstance(result, CompileContext):
            msg = f"{stage} hook returned {type(result).__name__}, expected CompileContext or None"
            raise StageError(msg)
        if result.source_root != self._source_root or result.dest_root != self._dest_root:
            msg = f"{stage} hook changed source_root or dest_root; roots are fixed per mount"
            raise StageError(msg)
        return result

    async def _read(self, src_path: Path) -> bytes:
        try:
            return await anyio.Path(src_path).read_bytes()
        except FileNotFoundError as exc:
            raise SourceNotFound("Source file does not exist", path=src_path) from exc
        except OSError as exc:
            raise AssetIOError(f"Cannot read source: {exc.strerror or exc}", path=src_path) from exc

    async def _compile(self, context: CompileContext, source: bytes, args: CompileArgs) -> bytes:
        try:
            output = await self._adapter.compile(context.name, source, args)
        except CompileError:
            raise
        except Exception as exc:
            msg = f"{type(self._adapter).__name__} raised {type(exc).__name__}: {exc}"
            raise CompilerError(msg, path=args.source_path) from exc

        if isinstance(output, str):
            return output.encode("utf-8")
        if isinstance(output, bytes | bytearray | memoryview):
            return bytes(output)
        msg = f"{type(self._adapter).__name__} returned {type(output).__name__}, expected bytes or str"
        raise CompilerError(msg, path=args.source_path)

    async def _write(self, dest_path: Path, output: bytes) -> None:
        target = anyio.Path(dest_path)
        try:
            await target.parent.mkdir(parents=True, exist_ok=True)
            await target.write_bytes(output)
        except OSError as exc:
            raise AssetIOError(f"Cannot write output: {exc.strerror or exc}", path=dest_path) from exc
