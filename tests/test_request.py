"""Tests for rtr.http.request — frozen Request with async body access."""

import pytest

from rtr.http.request import Request


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "root_path": "",
        "headers": [],
        "server": ("localhost", 8000),
        "client": ("127.0.0.1", 54321),
    }
    base.update(overrides)
    return base


def _make_receive(*messages: dict):
    """Create an ASGI receive callable that replays *messages*."""
    it = iter(messages)

    async def receive():
        return next(it)

    return receive


def _chunk(body: bytes, more: bool = False) -> dict:
    return {"type": "http.request", "body": body, "more_body": more}


class TestRequestFromASGI:
    def test_basic_fields(self) -> None:
        scope = _make_scope(
            method="POST",
            path="/users",
            query_string=b"a=1&a=2",
            headers=[(b"content-type", b"application/json")],
        )
        req = Request.from_asgi(scope, _make_receive(_chunk(b"")))
        assert req.method == "POST"
        assert req.path == "/users"
        assert req.query == {"a": ["1", "2"]}
        assert req.content_type == "application/json"
        assert req.server == ("localhost", 8000)
        assert req.client == ("127.0.0.1", 54321)
        assert req.url == "/users?a=1&a=2"

    def test_minimal_scope(self) -> None:
        req = Request.from_asgi({"type": "http", "method": "GET", "path": "/"}, _make_receive())
        assert req.http_version == "1.1"
        assert req.query_string == b""
        assert req.server is None
        assert req.url == "/"
        assert req.root_path == ""
        assert req.client is None
        assert len(req.headers) == 0

    def test_list_header_pairs_normalised(self) -> None:
        scope = _make_scope(headers=[[b"accept", b"*/*"], [bytearray(b"x-id"), b"7"]])
        req = Request.from_asgi(scope, _make_receive())
        assert req.headers.raw == ((b"accept", b"*/*"), (b"x-id", b"7"))
        assert req.headers["X-Id"] == "7"

    def test_non_http_scope_rejected(self) -> None:
        with pytest.raises(ValueError, match="'websocket'"):
            Request.from_asgi(_make_scope(type="websocket"), _make_receive())

    def test_frozen(self) -> None:
        req = Request.build("GET", "/")
        with pytest.raises(AttributeError):
            req.path = "/x"  # type: ignore[misc]


class TestRequestBody:
    @pytest.mark.anyio
    async def test_chunked_body_is_joined_and_cached(self) -> None:
        receive = _make_receive(_chunk(b"hel", more=True), _chunk(b"lo"))
        req = Request.from_asgi(_make_scope(), receive)
        assert await req.body() == b"hello"
        # Second call must not touch receive again (iterator is exhausted).
        assert await req.body() == b"hello"

    @pytest.mark.anyio
    async def test_json(self) -> None:
        req = Request.build("POST", "/", body=b'{"a": 1}')
        assert await req.json() == {"a": 1}

    @pytest.mark.anyio
    async def test_text(self) -> None:
        req = Request.build("POST", "/", body="héllo".encode())
        assert await req.text() == "héllo"

    @pytest.mark.anyio
    async def test_disconnect_while_reading(self) -> None:
        receive = _make_receive(_chunk(b"part", more=True), {"type": "http.disconnect"})
        req = Request.from_asgi(_make_scope(), receive)
        assert req.disconnected is False
        assert await req.body() == b"part"
        assert req.disconnected is True


class TestRequestBuild:
    def test_query_split(self) -> None:
        req = Request.build("GET", "/search?q=x")
        assert req.path == "/search"
        assert req.query_string == b"q=x"

    def test_headers(self) -> None:
        req = Request.build("GET", "/", headers={"X-Token": "abc"})
        assert req.headers["x-token"] == "abc"

    @pytest.mark.anyio
    async def test_receive_passthrough(self) -> None:
        req = Request.build("POST", "/", body=b"x")
        first = await req.receive()
        assert first["body"] == b"x"
        assert (await req.receive())["type"] == "http.disconnect"
