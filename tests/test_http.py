"""Tests for the HTTP layer: headers, requests, responses, and the ASGI sender."""

import pytest

from kiln.http.headers import Headers
from kiln.http.request import Request
from kiln.http.response import Response
from kiln.server.sender import send_response


def _h(*pairs: tuple[str, str]) -> Headers:
    return Headers((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs)


class TestHeaders:
    def test_case_insensitive_lookup(self) -> None:
        h = _h(("Content-Type", "text/css"))
        assert h["content-type"] == "text/css"
        assert h["CONTENT-TYPE"] == "text/css"
        assert "Content-Type" in h

    def test_missing_key(self) -> None:
        h = _h(("Accept", "*/*"))
        with pytest.raises(KeyError):
            h["x-missing"]
        assert h.get("x-missing") is None
        assert 42 not in h  # type: ignore[operator]

    def test_repeated_header_reads_first_value(self) -> None:
        h = _h(("Accept", "*/*"), ("Cookie", "a=1"), ("Accept", "text/css"))
        assert h["accept"] == "*/*"
        assert list(h) == ["accept", "cookie"]
        assert len(h) == 2


class TestRequest:
    def test_from_minimal_scope(self) -> None:
        request = Request.from_asgi({"method": "GET", "path": "/styles/app.css"})

        assert request.method == "GET"
        assert request.path == "/styles/app.css"
        assert len(request.headers) == 0

    def test_headers_from_scope(self) -> None:
        scope = {"method": "GET", "path": "/", "headers": [(b"accept", b"text/css")]}
        assert Request.from_asgi(scope).headers["Accept"] == "text/css"


class TestResponse:
    def test_transformations_return_new_objects(self) -> None:
        base = Response("body")
        changed = base.with_status(201).with_header("X-One", "1")

        assert base.status == 200
        assert base.headers == ()
        assert changed.status == 201
        assert changed.headers == (("X-One", "1"),)

    def test_body_conversions(self) -> None:
        assert Response("é").body_bytes == "é".encode()
        assert Response(b"\xc3\xa9").text == "é"


class TestSendResponse:
    async def test_body_and_headers(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("ok").with_header("Cache-Control", "no-cache"), send)

        headers = dict(messages[0]["headers"])
        assert messages[0]["status"] == 200
        assert headers[b"cache-control"] == b"no-cache"
        assert headers[b"content-length"] == b"2"
        assert messages[1]["body"] == b"ok"

    @pytest.mark.parametrize("status", [204, 304])
    async def test_no_body_statuses(self, status: int) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("unexpected").with_status(status), send)

        assert dict(messages[0]["headers"])[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_head_keeps_length_drops_body(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("four"), send, head=True)

        assert dict(messages[0]["headers"])[b"content-length"] == b"4"
        assert messages[1]["body"] == b""
