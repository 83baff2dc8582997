"""Asset compiler middleware — one filtered pipeline per asset type.

Compiles sources into the build tree on request, then lets the rest of the
chain (normally ``StaticFiles`` over the same build tree) serve the result::

    app.add_middleware(AssetCompiler(
        source_root="./assets",
        dest_root="./build",
        mounts={"less": "/styles", "default": "/raw"},
    ))
    app.add_middleware(StaticFiles("./build", prefix="/"))

Mounts run in the mapping's insertion order. Each one may decline (no match
or no source file) or compile; either way the next mount gets its turn. The
first real compile error stops the walk and propagates to the host, which
answers 500.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from kiln.assets.matching import build_matcher
from kiln.assets.pipeline import CompilePipeline, CompileResult, normalize_root
from kiln.compilers.registry import CompilerRegistry, default_registry
from kiln.config import MountConfig, coerce_mount
from kiln.http.request import Request
from kiln.http.response import Response
from kiln.middleware.filter import RequestFilter
from kiln.middleware.protocol import Next

logger = logging.getLogger("kiln.assets")


class AssetCompiler:
    """Middleware that compiles assets for every configured mount.

    Backends are resolved here, at construction: an asset type whose
    libraries are all missing raises ``ConfigurationError`` immediately.
    """

    __slots__ = ("_dest_root", "_filters", "_source_root")

    def __init__(
        self,
        source_root: str | Path,
        dest_root: str | Path,
        mounts: Mapping[str, str | Mapping[str, Any] | MountConfig | None],
        *,
        registry: CompilerRegistry | None = None,
    ) -> None:
        self._source_root = normalize_root(source_root)
        self._dest_root = normalize_root(dest_root)
        registry = registry or default_registry()

        filters: list[RequestFilter] = []
        for key, value in mounts.items():
            mount = coerce_mount(value)
            resolved = registry.resolve(key, mount.backends)
            pipeline = CompilePipeline(
                self._source_root,
                self._dest_root,
                build_matcher(mount.dir, resolved.dest_extension),
                resolved.adapter,
                mount,
            )
            filters.append(RequestFilter(pipeline, key=key))
            logger.debug("Mounted %r at %s", key, pipeline.matcher.mount)
        self._filters: tuple[RequestFilter, ...] = tuple(filters)

    @property
    def filters(self) -> tuple[RequestFilter, ...]:
        return self._filters

    async def compile(self, request: Request) -> list[CompileResult]:
        """Run every mount for *request* in order; return the non-declined results.

        Stops at the first result carrying an error (it is the last item).
        """
        results: list[CompileResult] = []
        for request_filter in self._filters:
            result = await request_filter.process(request)
            if result is None or not result.handled:
                continue
            results.append(result)
            if result.error is not None:
                break
        return results

    async def __call__(self, request: Request, next: Next) -> Response:
        """Compile whatever matches, then continue down the chain."""
        results = await self.compile(request)
        if results and results[-1].error is not None:
            raise results[-1].error
        return await next(request)
