"""Registered compilers table.

Maps asset-type keys to the adapter that compiles them and the extension
the compiled file is served under. Backends are optional libraries, so each
asset type lists import candidates in preference order; the first one that
imports wins. Resolution happens once, when the middleware is built — a
missing backend is a startup error, never a request-time one.

Usage::

    registry = default_registry()
    resolved = registry.resolve("less")
    resolved.adapter, resolved.dest_extension  # (LessCompiler, "css")

Custom types register alongside the built-ins::

    registry.register(AssetType("upper", "txt", builtin=UpperCompiler))
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from types import ModuleType

from kiln.compilers.less import LessCompiler
from kiln.compilers.passthrough import PassthroughCompiler
from kiln.compilers.protocol import CompilerAdapter
from kiln.compilers.sass import SassCompiler
from kiln.compilers.templates import TemplateCompiler
from kiln.errors import ConfigurationError

logger = logging.getLogger("kiln.compilers")


@dataclass(frozen=True, slots=True)
class Backend:
    """An optional backend library and how to wrap it.

    ``module`` is the import name probed; ``factory`` receives the imported
    module and returns the adapter.
    """

    module: str
    factory: Callable[[ModuleType], CompilerAdapter]


@dataclass(frozen=True, slots=True)
class AssetType:
    """A registrable asset type.

    ``dest_extension`` is a regex fragment matched against the requested
    file's extension. Either ``backends`` (probed in order) or ``builtin``
    (no library needed) provides the adapter.
    """

    key: str
    dest_extension: str
    backends: tuple[Backend, ...] = ()
    builtin: Callable[[], CompilerAdapter] | None = None


@dataclass(frozen=True, slots=True)
class ResolvedCompiler:
    """An asset type bound to a concrete adapter instance."""

    key: str
    adapter: CompilerAdapter
    dest_extension: str


def resolve_backend(
    candidates: Sequence[Backend],
    *,
    importer: Callable[[str], ModuleType] = importlib.import_module,
) -> CompilerAdapter:
    """Return an adapter for the first importable candidate.

    Raises:
        ConfigurationError: If none of the candidates can be imported.
    """
    failed: list[str] = []
    for candidate in candidates:
        try:
            module = importer(candidate.module)
        except ImportError:
            failed.append(candidate.module)
            continue
        logger.debug("Using backend %r", candidate.module)
        return candidate.factory(module)

    msg = "Required module(s) not found. Please install one of the following: " + ", ".join(failed)
    raise ConfigurationError(msg)


class CompilerRegistry:
    """Asset-type key → ``AssetType`` table.

    Mutable while being populated; read-only in practice once handed to an
    ``AssetCompiler``.
    """

    __slots__ = ("_types",)

    def __init__(self, types: Sequence[AssetType] = ()) -> None:
        self._types: dict[str, AssetType] = {}
        for asset_type in types:
            self.register(asset_type)

    def register(self, asset_type: AssetType) -> None:
        """Add or replace an asset type."""
        if asset_type.builtin is None and not asset_type.backends:
            msg = f"Asset type {asset_type.key!r} needs a builtin factory or at least one backend"
            raise ConfigurationError(msg)
        self._types[asset_type.key] = asset_type

    def __contains__(self, key: object) -> bool:
        return key in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def get(self, key: str) -> AssetType:
        """Return the asset type registered under *key*.

        Raises:
            ConfigurationError: If *key* is not registered.
        """
        try:
            return self._types[key]
        except KeyError:
            known = ", ".join(sorted(self._types)) or "(none)"
            msg = f"Unknown asset type {key!r}. Registered types: {known}"
            raise ConfigurationError(msg) from None

    def resolve(self, key: str, preferred: Sequence[str] = ()) -> ResolvedCompiler:
        """Bind *key* to an adapter, probing backends if needed.

        *preferred* lists backend import names to try first, in order. Each
        must be one of the asset type's known backends.
        """
        asset_type = self.get(key)

        if asset_type.builtin is not None and not asset_type.backends:
            if preferred:
                msg = f"Asset type {key!r} has no selectable backends"
                raise ConfigurationError(msg)
            return ResolvedCompiler(key, asset_type.builtin(), asset_type.dest_extension)

        by_module = {backend.module: backend for backend in asset_type.backends}
        unknown = [name for name in preferred if name not in by_module]
        if unknown:
            msg = (
                f"Unknown backend(s) for {key!r}: {', '.join(unknown)}. "
                f"Known: {', '.join(by_module)}"
            )
            raise ConfigurationError(msg)

        candidates = [by_module[name] for name in preferred]
        candidates.extend(b for b in asset_type.backends if b.module not in preferred)
        return ResolvedCompiler(key, resolve_backend(candidates), asset_type.dest_extension)


def default_registry() -> CompilerRegistry:
    """Registry with the built-in asset types.

    - ``less``: lesscpy, ``.less`` → ``.css``
    - ``sass``: libsass, ``.scss`` → ``.css``
    - ``template``: kida or jinja2, ``.tmpl`` → ``.html``
    - ``default``: passthrough for any 2–5 letter extension
    """
    return CompilerRegistry(
        [
            AssetType("less", "css", backends=(Backend("lesscpy", LessCompiler),)),
            AssetType("sass", "css", backends=(Backend("sass", SassCompiler),)),
            AssetType(
                "template",
                "html",
                backends=(Backend("kida", TemplateCompiler), Backend("jinja2", TemplateCompiler)),
            ),
            AssetType("default", "[a-zA-Z]{2,5}?", builtin=PassthroughCompiler),
        ]
    )
