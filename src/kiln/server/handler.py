"""ASGI handler — translates ASGI scope/messages to kiln types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, dispatches through the middleware chain, and
sends the Response back through ASGI send().
"""

from collections.abc import Callable
from typing import Any

from kiln._internal.asgi import Scope, Send
from kiln.errors import HTTPError, NotFound
from kiln.http.request import Request
from kiln.http.response import Response
from kiln.middleware.protocol import Next
from kiln.server.errors import handle_http_error, handle_internal_error
from kiln.server.sender import send_response


async def _end_of_chain(request: Request) -> Response:
    raise NotFound(f"Nothing to serve for {request.path}")


def build_chain(middleware: tuple[Callable[..., Any], ...], endpoint: Next = _end_of_chain) -> Next:
    """Wrap *middleware* around *endpoint*, first middleware outermost."""
    handler = endpoint
    for mw in reversed(middleware):

        async def make_next(req: Request, _mw: Any = mw, _next: Next = handler) -> Response:
            return await _mw(req, _next)

        handler = make_next
    return handler


async def handle_request(
    scope: Scope,
    send: Send,
    *,
    handler: Next,
    debug: bool,
) -> None:
    """Process a single HTTP request through the middleware chain."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)

    try:
        response = await handler(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request, debug=debug)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug=debug)

    await send_response(response, send, head=request.method == "HEAD")
