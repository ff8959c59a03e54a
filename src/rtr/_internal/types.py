"""Shared type aliases used across rtr modules."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from rtr.http.request import Request
    from rtr.http.response import ResponseWriter

# Route handler — handler(writer, request); plain or async, return value ignored
Handler: TypeAlias = Callable[["ResponseWriter", "Request"], Any]
