"""Tests for kiln.config — AppConfig, MountConfig and mount coercion."""

from pathlib import Path

import pytest

from kiln.config import AppConfig, MountConfig, coerce_mount
from kiln.errors import ConfigurationError


class TestAppConfig:
    def test_defaults(self) -> None:
        cfg = AppConfig()

        assert cfg.debug is False
        assert cfg.source_dir == "assets"
        assert cfg.build_dir == "build"
        assert dict(cfg.assets) == {}
        assert cfg.static_url == "/"
        assert cfg.cache_control == "no-cache"

    def test_override(self) -> None:
        cfg = AppConfig(source_dir=Path("src"), build_dir="out", assets={"less": "/styles"})

        assert cfg.source_dir == Path("src")
        assert cfg.build_dir == "out"
        assert cfg.assets == {"less": "/styles"}

    def test_frozen(self) -> None:
        cfg = AppConfig()

        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]


class TestMountConfig:
    def test_defaults(self) -> None:
        mount = MountConfig()

        assert mount.dir == ""
        assert mount.source_extension is None
        assert mount.precompile is None
        assert mount.postcompile is None
        assert dict(mount.compiler_args) == {}
        assert mount.backends == ()

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            MountConfig().dir = "/x"  # type: ignore[misc]


class TestCoerceMount:
    def test_none_is_root_mount(self) -> None:
        assert coerce_mount(None) == MountConfig()

    def test_string_is_mount_dir(self) -> None:
        assert coerce_mount("/styles").dir == "/styles"

    def test_mount_config_passes_through(self) -> None:
        mount = MountConfig(dir="/css")
        assert coerce_mount(mount) is mount

    def test_mapping_options(self) -> None:
        def hook(ctx):
            return None

        mount = coerce_mount(
            {
                "dir": "/styles",
                "precompile": hook,
                "postcompile": hook,
                "source_extension": "scss",
                "args": {"output_style": "compressed"},
                "backends": ["sass"],
            }
        )

        assert mount.dir == "/styles"
        assert mount.precompile is hook
        assert mount.postcompile is hook
        assert mount.source_extension == "scss"
        assert mount.compiler_args == {"output_style": "compressed"}
        assert mount.backends == ("sass",)

    def test_single_backend_string(self) -> None:
        assert coerce_mount({"backends": "jinja2"}).backends == ("jinja2",)

    def test_dir_none_is_root(self) -> None:
        assert coerce_mount({"dir": None}).dir == ""

    def test_unknown_option_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown mount option"):
            coerce_mount({"dir": "/styles", "directory": "/oops"})

    def test_unsupported_type_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="must be a string"):
            coerce_mount(42)  # type: ignore[arg-type]
