"""Request filter — gate in front of one compile pipeline.

Only ``GET`` requests whose path matches the pipeline's mount reach the
pipeline. Everything else passes straight through, untouched.
"""

from kiln.assets.pipeline import CompilePipeline, CompileResult
from kiln.http.request import Request
from kiln.http.response import Response
from kiln.middleware.protocol import Next


class RequestFilter:
    """Wraps a ``CompilePipeline`` so it only sees requests it can compile.

    Usable on its own as middleware::

        app.add_middleware(RequestFilter(pipeline))

    or driven by ``AssetCompiler`` through ``process()``.
    """

    __slots__ = ("_pipeline", "key")

    def __init__(self, pipeline: CompilePipeline, *, key: str = "") -> None:
        self._pipeline = pipeline
        self.key = key

    @property
    def pipeline(self) -> CompilePipeline:
        return self._pipeline

    def matches(self, request: Request) -> bool:
        """True for GET requests inside the pipeline's mount."""
        return request.method.upper() == "GET" and request.path in self._pipeline.matcher

    async def process(self, request: Request) -> CompileResult | None:
        """Run the pipeline for *request*, or return None if it is filtered out."""
        if not self.matches(request):
            return None
        return await self._pipeline.run(request.path)

    async def __call__(self, request: Request, next: Next) -> Response:
        """Compile if matched, then continue down the chain."""
        result = await self.process(request)
        if result is not None and result.error is not None:
            raise result.error
        return await next(request)
