"""ASGI response sending — translates a finished Response to ASGI messages."""

from rtr._internal.asgi import Send
from rtr.http.response import Response


def _status_allows_body(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC 9110: 1xx, 204 and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _content_length(response: Response, method: str, declared: bytes | None) -> bytes:
    if not _status_allows_body(response.status):
        return b"0"
    # HEAD reports the length GET would send. A HEAD handler that wrote
    # nothing may still announce that length itself.
    if method == "HEAD" and declared is not None and not response.body:
        return declared
    return str(len(response.body)).encode("latin-1")


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Translate an rtr Response into ASGI send() calls.

    The body is measured before HEAD strips it, so HEAD and GET carry the
    same ``content-length``.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    declared: bytes | None = None
    for name, value in response.headers:
        if name.lower() == "content-length":
            declared = value.encode("latin-1")
            continue
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))
    raw_headers.append((b"content-length", _content_length(response, method, declared)))

    if method == "HEAD" or not _status_allows_body(response.status):
        body = b""
    else:
        body = response.body

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
