"""Error handling for kiln requests.

Maps HTTPError exceptions and unexpected failures (compile errors
included) to Response objects.
"""

import logging

from kiln.errors import CompileError, HTTPError
from kiln.http.request import Request
from kiln.http.response import Response

logger = logging.getLogger("kiln.server")


def handle_http_error(exc: HTTPError, request: Request, *, debug: bool) -> Response:
    """Map an HTTPError to a Response with its status and headers."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)

    detail = exc.detail or f"Error {exc.status}"
    if debug and exc.detail:
        detail = f"{exc.status}: {exc.detail}"

    resp = Response(body=detail).with_status(exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, request: Request, *, debug: bool) -> Response:
    """Handle unexpected exceptions, compile failures included, as 500 errors.

    In debug mode the body carries the error type and message so compiler
    diagnostics (line numbers, unresolved imports) show up in the browser.
    """
    if isinstance(exc, CompileError):
        logger.error("500 %s %s — %s: %s", request.method, request.path, type(exc).__name__, exc)
    else:
        logger.exception("500 %s %s", request.method, request.path)

    if debug:
        return Response(body=f"{type(exc).__name__}: {exc}", status=500)
    return Response(body="Internal Server Error", status=500)
