"""Compiler adapters — one async ``compile()`` per backend library.

Built-in asset types:
    less -- LESS → CSS via lesscpy
    sass -- SCSS → CSS via libsass
    template -- templates → HTML via kida (or jinja2)
    default -- passthrough copy
"""

from kiln.compilers.protocol import CompileArgs, CompilerAdapter
from kiln.compilers.registry import (
    AssetType,
    Backend,
    CompilerRegistry,
    ResolvedCompiler,
    default_registry,
    resolve_backend,
)

__all__ = [
    "AssetType",
    "Backend",
    "CompileArgs",
    "CompilerAdapter",
    "CompilerRegistry",
    "ResolvedCompiler",
    "default_registry",
    "resolve_backend",
]
