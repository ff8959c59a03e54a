"""Response sink and finished-response snapshot.

Handlers write into a ``ResponseWriter``. Once the handler returns, the
writer is frozen into a ``Response`` that the sender puts on the wire and
the test client hands back to tests.
"""

import json as json_module
import logging
from dataclasses import dataclass
from typing import Any

from rtr.http.headers import MutableHeaders

logger = logging.getLogger("rtr.server")

DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """A finished HTTP response. Immutable."""

    body: bytes = b""
    status: int = 200
    content_type: str = DEFAULT_CONTENT_TYPE
    headers: tuple[tuple[str, str], ...] = ()

    @property
    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """The body parsed as JSON."""
        return json_module.loads(self.body)

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or None."""
        key = name.lower()
        for hname, hvalue in self.headers:
            if hname.lower() == key:
                return hvalue
        return None


class ResponseWriter:
    """Mutable response sink handed to every handler.

    Set headers first, then write the body::

        def status(w: ResponseWriter, r: Request) -> None:
            w.headers.set("Content-Type", "application/json")
            w.write('{"status": "ok"}')

    The first ``write`` commits status 200 unless ``write_header`` was
    called before it. The status can only be set once.
    """

    __slots__ = ("_chunks", "_status", "headers")

    def __init__(self) -> None:
        self.headers = MutableHeaders()
        self._status: int | None = None
        self._chunks: list[bytes] = []

    def write_header(self, status: int) -> None:
        """Commit the response status code."""
        if self._status is not None:
            logger.warning(
                "superfluous write_header(%d): status already %d", status, self._status
            )
            return
        self._status = status

    def write(self, data: bytes | bytearray | memoryview | str) -> int:
        """Append *data* to the body and return the number of bytes written.

        Raises ``TypeError`` for anything but text or a bytes-like buffer.
        """
        if isinstance(data, str):
            chunk = data.encode("utf-8")
        elif isinstance(data, (bytes, bytearray, memoryview)):
            chunk = bytes(data)
        else:
            msg = f"write() expects str or bytes, got {type(data).__name__}"
            raise TypeError(msg)
        if self._status is None:
            self.write_header(200)
        self._chunks.append(chunk)
        return len(chunk)

    @property
    def status(self) -> int:
        """The committed status, or 200 if nothing was committed yet."""
        return 200 if self._status is None else self._status

    @property
    def written(self) -> bool:
        """True once a status has been committed."""
        return self._status is not None

    @property
    def body(self) -> bytes:
        return b"".join(self._chunks)

    def to_response(self) -> Response:
        """Freeze the current state into a ``Response``."""
        content_type = self.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        extra = tuple((k, v) for k, v in self.headers if k != "content-type")
        return Response(
            body=self.body,
            status=self.status,
            content_type=content_type,
            headers=extra,
        )
