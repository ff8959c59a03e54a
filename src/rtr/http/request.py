"""Immutable HTTP request descriptor.

Frozen metadata with async body access. The router only reads
``method`` and ``path``; everything else is for handlers.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs

from rtr._internal.asgi import Receive, Scope
from rtr.http.headers import Headers


async def _empty_receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the ASGI ``path``: already percent-decoded and stripped
    of the query string, which is what route matching compares against.
    Body is accessed asynchronously via ``.body()``, ``.text()``,
    ``.json()`` or ``.stream()``.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query_string: bytes = b""
    http_version: str = "1.1"
    root_path: str = ""
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming and disconnects
    _receive: Receive = field(default=_empty_receive, repr=False, compare=False)

    # Private: mutable cache for the body and disconnect state
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def query(self) -> dict[str, list[str]]:
        """Parsed query string, each key mapped to all of its values."""
        return parse_qs(self.query_string.decode("latin-1"), keep_blank_values=True)

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Request path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string.decode('latin-1')}"
        return self.path

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached — the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                self._cache["_disconnected"] = True
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON."""
        raw = await self.body()
        return json_module.loads(raw)

    @property
    def disconnected(self) -> bool:
        """True once an ``http.disconnect`` message was seen while reading."""
        return bool(self._cache.get("_disconnected"))

    @property
    def receive(self) -> Receive:
        """The raw ASGI receive callable, for handlers that watch for
        disconnects themselves."""
        return self._receive

    # -- Factories --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI ``http`` scope and receive callable.

        Only ``method`` and ``path`` are required. Header pairs may arrive
        as lists or as non-``bytes`` buffers; they are normalised to a
        tuple of ``bytes`` pairs so ``Headers`` stays immutable.

        Raises ``ValueError`` for any scope type other than ``http``.
        """
        scope_type = scope.get("type", "http")
        if scope_type != "http":
            msg = f"Cannot build a Request from an ASGI {scope_type!r} scope"
            raise ValueError(msg)
        server = scope.get("server")
        client = scope.get("client")
        raw_headers = tuple((bytes(k), bytes(v)) for k, v in scope.get("headers", ()))
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(raw_headers),
            query_string=scope.get("query_string", b""),
            http_version=scope.get("http_version", "1.1"),
            root_path=scope.get("root_path", ""),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
    ) -> Request:
        """Create a standalone Request, e.g. for calling ``serve_http`` directly.

        A query string in *path* is split off into ``query_string``.
        """
        path_part, _, query = path.partition("?")
        raw_headers = tuple(
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in (headers or {}).items()
        )
        sent = False

        async def receive() -> dict[str, Any]:
            nonlocal sent
            if not sent:
                sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            return {"type": "http.disconnect"}

        return cls(
            method=method,
            path=path_part,
            headers=Headers(raw_headers),
            query_string=query.encode("latin-1"),
            _receive=receive,
        )
