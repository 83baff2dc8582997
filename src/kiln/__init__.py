"""Kiln — compile assets on first request, serve them from disk.

An ASGI middleware that maps requests onto source files (LESS, SCSS,
templates, anything), compiles them into a build directory and hands off
to static-file serving::

    from kiln import App, AppConfig

    app = App(AppConfig(
        source_dir="assets",
        build_dir="build",
        assets={"less": "/styles", "default": "/raw"},
    ))

Or as middleware in your own chain::

    from kiln.middleware import AssetCompiler

    compiler = AssetCompiler("assets", "build", {"sass": "/css"})
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "AssetCompiler",
    "CompileContext",
    "CompileError",
    "CompilerError",
    "ConfigurationError",
    "HTTPError",
    "KilnError",
    "MountConfig",
    "NotFound",
    "Request",
    "Response",
    "SourceNotFound",
    "StaticFiles",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import kiln`` fast and avoids importing backends until used.
    """
    if name == "App":
        from kiln.app import App

        return App

    if name in ("AppConfig", "MountConfig"):
        from kiln import config as _config

        return getattr(_config, name)

    if name == "Request":
        from kiln.http.request import Request

        return Request

    if name == "Response":
        from kiln.http.response import Response

        return Response

    if name in ("AssetCompiler", "StaticFiles"):
        from kiln import middleware as _mw

        return getattr(_mw, name)

    if name == "CompileContext":
        from kiln.assets.context import CompileContext

        return CompileContext

    if name in (
        "CompileError",
        "CompilerError",
        "ConfigurationError",
        "HTTPError",
        "KilnError",
        "NotFound",
        "SourceNotFound",
    ):
        from kiln import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
