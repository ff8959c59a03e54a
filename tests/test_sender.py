"""Tests for rtr.server.sender response emission rules."""

import pytest

from rtr.http.response import Response
from rtr.server.sender import send_response


async def _emit(response: Response, method: str = "GET") -> list[dict]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    await send_response(response, send, method=method)
    return messages


class TestSendResponse:
    @pytest.mark.anyio
    async def test_200_preserves_body(self) -> None:
        messages = await _emit(Response(b"ok"))
        assert messages[0]["type"] == "http.response.start"
        assert messages[0]["status"] == 200
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"2"
        assert headers[b"content-type"] == b"text/plain; charset=utf-8"
        assert messages[1] == {"type": "http.response.body", "body": b"ok"}

    @pytest.mark.anyio
    async def test_header_names_lowercased(self) -> None:
        messages = await _emit(Response(headers=(("X-Custom", "v"),)))
        assert (b"x-custom", b"v") in messages[0]["headers"]

    @pytest.mark.anyio
    @pytest.mark.parametrize("status", [204, 304, 101])
    async def test_no_body_statuses(self, status: int) -> None:
        # Even if a handler wrote content, no-body statuses send none.
        messages = await _emit(Response(b"unexpected", status=status))
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    @pytest.mark.anyio
    async def test_handler_content_length_replaced_for_get(self) -> None:
        messages = await _emit(Response(b"abc", headers=(("Content-Length", "99"),)))
        lengths = [v for k, v in messages[0]["headers"] if k == b"content-length"]
        assert lengths == [b"3"]

    @pytest.mark.anyio
    async def test_head_drops_body_but_keeps_length(self) -> None:
        messages = await _emit(Response(b"abc"), method="HEAD")
        assert dict(messages[0]["headers"])[b"content-length"] == b"3"
        assert messages[1]["body"] == b""

    @pytest.mark.anyio
    async def test_head_declared_length_kept_when_nothing_written(self) -> None:
        response = Response(headers=(("Content-Length", "42"),))
        messages = await _emit(response, method="HEAD")
        assert dict(messages[0]["headers"])[b"content-length"] == b"42"

    @pytest.mark.anyio
    async def test_head_no_body_status_reports_zero(self) -> None:
        messages = await _emit(Response(b"abc", status=204), method="HEAD")
        assert dict(messages[0]["headers"])[b"content-length"] == b"0"
