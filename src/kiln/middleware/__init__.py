"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    AssetCompiler -- Compile assets for every configured mount
    RequestFilter -- Gate a single compile pipeline to GET requests in its mount
    StaticFiles -- Serve files from a directory
"""

from kiln.middleware.compiler import AssetCompiler
from kiln.middleware.filter import RequestFilter
from kiln.middleware.protocol import Middleware, Next
from kiln.middleware.static import StaticFiles

__all__ = [
    "AssetCompiler",
    "Middleware",
    "Next",
    "RequestFilter",
    "StaticFiles",
]
