"""Tests for the compiler registry and backend probing."""

from types import ModuleType

import pytest

from kiln.compilers.less import LessCompiler
from kiln.compilers.passthrough import PassthroughCompiler
from kiln.compilers.protocol import CompileArgs
from kiln.compilers.registry import (
    AssetType,
    Backend,
    CompilerRegistry,
    default_registry,
    resolve_backend,
)
from kiln.errors import ConfigurationError

MISSING = "kiln_tests_no_such_backend"


class ModuleCompiler:
    """Adapter that remembers which module it was built from."""

    source_extension = None

    def __init__(self, lib: ModuleType) -> None:
        self.lib = lib

    async def compile(self, name: str, source: bytes, args: CompileArgs) -> bytes:
        return source


class TestResolveBackend:
    def test_first_available_wins(self) -> None:
        adapter = resolve_backend([Backend("json", ModuleCompiler), Backend("csv", ModuleCompiler)])
        assert adapter.lib.__name__ == "json"

    def test_skips_missing_candidates(self) -> None:
        adapter = resolve_backend([Backend(MISSING, ModuleCompiler), Backend("csv", ModuleCompiler)])
        assert adapter.lib.__name__ == "csv"

    def test_none_available_raises(self) -> None:
        with pytest.raises(ConfigurationError, match=MISSING):
            resolve_backend([Backend(MISSING, ModuleCompiler), Backend(MISSING + "_2", ModuleCompiler)])

    def test_error_lists_all_candidates(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_backend([Backend("a_missing", ModuleCompiler), Backend("b_missing", ModuleCompiler)])
        assert "a_missing, b_missing" in str(exc_info.value)

    def test_custom_importer(self) -> None:
        probed: list[str] = []

        def importer(name: str) -> ModuleType:
            probed.append(name)
            if name == "second":
                return ModuleType("second")
            raise ImportError(name)

        adapter = resolve_backend(
            [Backend("first", ModuleCompiler), Backend("second", ModuleCompiler), Backend("third", ModuleCompiler)],
            importer=importer,
        )
        assert adapter.lib.__name__ == "second"
        assert probed == ["first", "second"]


class TestCompilerRegistry:
    def test_default_types(self) -> None:
        registry = default_registry()
        assert list(registry) == ["less", "sass", "template", "default"]
        assert len(registry) == 4
        assert "less" in registry

    def test_unknown_type(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown asset type 'coffee'"):
            default_registry().resolve("coffee")

    def test_builtin_resolves_without_probing(self) -> None:
        resolved = default_registry().resolve("default")
        assert isinstance(resolved.adapter, PassthroughCompiler)
        assert resolved.dest_extension == "[a-zA-Z]{2,5}?"
        assert resolved.key == "default"

    def test_builtin_rejects_preferred_backends(self) -> None:
        with pytest.raises(ConfigurationError, match="no selectable backends"):
            default_registry().resolve("default", ["json"])

    def test_register_custom_type(self) -> None:
        registry = CompilerRegistry()
        registry.register(AssetType("data", "json", backends=(Backend("json", ModuleCompiler),)))
        resolved = registry.resolve("data")
        assert isinstance(resolved.adapter, ModuleCompiler)
        assert resolved.dest_extension == "json"

    def test_register_requires_a_source(self) -> None:
        with pytest.raises(ConfigurationError, match="needs a builtin factory"):
            CompilerRegistry([AssetType("empty", "txt")])

    def test_missing_backend_fails_at_resolve(self) -> None:
        registry = CompilerRegistry([AssetType("x", "x", backends=(Backend(MISSING, ModuleCompiler),))])
        with pytest.raises(ConfigurationError, match="Please install one of the following"):
            registry.resolve("x")

    def test_preferred_backend_tried_first(self) -> None:
        registry = CompilerRegistry(
            [
                AssetType(
                    "data",
                    "txt",
                    backends=(Backend("json", ModuleCompiler), Backend("csv", ModuleCompiler)),
                )
            ]
        )
        assert registry.resolve("data").adapter.lib.__name__ == "json"
        assert registry.resolve("data", ["csv"]).adapter.lib.__name__ == "csv"

    def test_preferred_falls_back_to_defaults(self) -> None:
        registry = CompilerRegistry(
            [
                AssetType(
                    "data",
                    "txt",
                    backends=(Backend(MISSING, ModuleCompiler), Backend("csv", ModuleCompiler)),
                )
            ]
        )
        assert registry.resolve("data", [MISSING]).adapter.lib.__name__ == "csv"

    def test_unknown_preferred_backend(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown backend"):
            default_registry().resolve("less", ["stylus"])

    def test_less_uses_lesscpy(self) -> None:
        pytest.importorskip("lesscpy")
        resolved = default_registry().resolve("less")
        assert isinstance(resolved.adapter, LessCompiler)
        assert resolved.dest_extension == "css"
