"""Application and mount configuration.

Both configs are frozen dataclasses — immutable after creation,
IDE-autocompletable, no string-key dict lookups at request time.

Mounts accept the same loose shapes as the asset compiler API: a bare
string is the mount directory, a mapping uses the option names below::

    {"less": "/styles"}
    {"less": {"dir": "/styles", "postcompile": notify}}
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kiln.errors import ConfigurationError

if TYPE_CHECKING:
    from kiln.assets.context import CompileContext

# A precompile/postcompile hook. Returning None keeps the current context;
# returning a CompileContext replaces it for the remaining stages.
type Stage = Callable[
    [CompileContext],
    CompileContext | None | Awaitable[CompileContext | None],
]

# Mapping keys accepted by coerce_mount(), mapped to MountConfig fields
_MOUNT_OPTIONS = {
    "dir": "dir",
    "precompile": "precompile",
    "postcompile": "postcompile",
    "source_extension": "source_extension",
    "args": "compiler_args",
    "backends": "backends",
}


@dataclass(frozen=True, slots=True)
class MountConfig:
    """Per asset-type mount configuration. Immutable after creation.

    ``dir`` is the URL prefix ("" mounts at the root). ``source_extension``
    overrides the extension the compiler adapter reads from. ``backends``
    lists backend import names to try before the asset type's defaults.
    """

    dir: str = ""
    source_extension: str | None = None
    precompile: Stage | None = None
    postcompile: Stage | None = None
    compiler_args: Mapping[str, Any] = field(default_factory=dict)
    backends: tuple[str, ...] = ()


def coerce_mount(value: str | Mapping[str, Any] | MountConfig | None) -> MountConfig:
    """Normalize a user-supplied mount value into a ``MountConfig``.

    Raises:
        ConfigurationError: On unknown option names or unsupported types.
    """
    if value is None:
        return MountConfig()
    if isinstance(value, MountConfig):
        return value
    if isinstance(value, str):
        return MountConfig(dir=value)
    if not isinstance(value, Mapping):
        msg = f"Mount configuration must be a string, mapping or MountConfig, got {type(value).__name__}"
        raise ConfigurationError(msg)

    unknown = sorted(set(value) - set(_MOUNT_OPTIONS))
    if unknown:
        msg = (
            f"Unknown mount option(s): {', '.join(unknown)}. "
            f"Expected any of: {', '.join(sorted(_MOUNT_OPTIONS))}"
        )
        raise ConfigurationError(msg)

    kwargs: dict[str, Any] = {_MOUNT_OPTIONS[key]: item for key, item in value.items()}
    if "dir" in kwargs and kwargs["dir"] is None:
        kwargs["dir"] = ""
    if "backends" in kwargs:
        backends = kwargs["backends"]
        kwargs["backends"] = (backends,) if isinstance(backends, str) else tuple(backends)
    return MountConfig(**kwargs)


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(
            source_dir="assets",
            build_dir="build",
            assets={"less": "/styles", "default": "/raw"},
        )
    """

    debug: bool = False

    # Compile-on-request assets
    source_dir: str | Path = "assets"
    build_dir: str | Path = "build"
    assets: Mapping[str, str | Mapping[str, Any] | MountConfig] = field(default_factory=dict)

    # Static serving of the build directory
    static_url: str = "/"
    cache_control: str = "no-cache"
