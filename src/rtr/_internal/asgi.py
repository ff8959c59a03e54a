"""ASGI 3.0 callable types.

The router is an ASGI application; these aliases describe what the
server hands to ``Router.__call__``. Scope parsing lives in
``Request.from_asgi``.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]
