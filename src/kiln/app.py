"""The kiln ASGI application.

Serves a build directory and compiles its assets on request::

    from kiln import App, AppConfig

    app = App(AppConfig(
        source_dir="assets",
        build_dir="build",
        assets={"less": "/styles", "template": "/pages"},
    ))

Run with any ASGI server (``uvicorn module:app``).
"""

from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable
from typing import Any

from kiln._internal.asgi import Receive, Scope, Send
from kiln.compilers.registry import CompilerRegistry
from kiln.config import AppConfig
from kiln.middleware.protocol import Middleware, Next
from kiln.server.handler import build_chain, handle_request

logger = logging.getLogger("kiln.server")


class App:
    """The kiln application.

    Mutable during setup (middleware, hooks). Frozen when the first
    lifespan or HTTP scope arrives: the middleware chain is compiled, asset
    backends are resolved, and any ``ConfigurationError`` surfaces then,
    before a single request is served when the server runs lifespan.

    Middleware order: user middleware (outermost, in registration order),
    then ``AssetCompiler`` for ``config.assets``, then ``StaticFiles`` over
    ``config.build_dir``, then 404.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_handler",
        "_middleware",
        "_middleware_list",
        "_registry",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        registry: CompilerRegistry | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._registry = registry
        self._middleware_list: list[Middleware] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Set by _freeze()
        self._middleware: tuple[Callable[..., Any], ...] = ()
        self._handler: Next | None = None

    # -- Setup --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware to the chain, ahead of the built-in asset stack."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a sync or async function to run at lifespan startup."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a sync or async function to run at lifespan shutdown."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    @property
    def middleware(self) -> tuple[Callable[..., Any], ...]:
        """The compiled middleware chain (freezes the app)."""
        self._ensure_frozen()
        return self._middleware

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()
        assert self._handler is not None

        await handle_request(
            scope,
            send,
            handler=self._handler,
            debug=self.config.debug,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup so configuration errors fail the
        server's startup instead of the first request.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    await self.startup()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send(
                        {
                            "type": "lifespan.startup.failed",
                            "message": str(exc),
                        }
                    )
                    return

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Run startup hooks in registration order."""
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        from kiln.middleware.compiler import AssetCompiler
        from kiln.middleware.static import StaticFiles

        middleware_list: list[Callable[..., Any]] = list(self._middleware_list)

        if self.config.assets:
            middleware_list.append(
                AssetCompiler(
                    self.config.source_dir,
                    self.config.build_dir,
                    self.config.assets,
                    registry=self._registry,
                )
            )

        middleware_list.append(
            StaticFiles(
                self.config.build_dir,
                prefix=self.config.static_url,
                cache_control=self.config.cache_control,
            )
        )

        self._middleware = tuple(middleware_list)
        self._handler = build_chain(self._middleware)
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register middleware and hooks before the first request."
            )
            raise RuntimeError(msg)
