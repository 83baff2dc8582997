"""Compile-on-request core: mount matching, search paths, the pipeline."""

from kiln.assets.context import CompileContext
from kiln.assets.matching import PathMatcher, build_matcher
from kiln.assets.pipeline import CompilePipeline, CompileResult
from kiln.assets.search import resolve_search_paths

__all__ = [
    "CompileContext",
    "CompilePipeline",
    "CompileResult",
    "PathMatcher",
    "build_matcher",
    "resolve_search_paths",
]
