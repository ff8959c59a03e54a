"""Route, RouteEntry and RouteMatch frozen dataclasses, plus the
per-method constructors."""

from dataclasses import dataclass

from rtr._internal.types import Handler
from rtr.errors import InvalidRouteError

METHODS: frozenset[str] = frozenset(
    {"GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"}
)


def check_path(path: str, what: str) -> None:
    """Raise ``InvalidRouteError`` unless *path* is empty or starts with ``/``."""
    if not isinstance(path, str):
        msg = f"{what} must be a string, got {type(path).__name__}"
        raise InvalidRouteError(msg)
    if path and not path.startswith("/"):
        msg = f"{what} {path!r} must be empty or start with '/'"
        raise InvalidRouteError(msg)


@dataclass(frozen=True, slots=True, eq=False)
class Route:
    """A frozen (method, path, handler) binding.

    Identity is by object: two routes with equal fields are still two
    registrations, and both survive in the registry.
    """

    method: str
    path: str
    handler: Handler
    name: str | None = None

    def __post_init__(self) -> None:
        if self.method not in METHODS:
            allowed = ", ".join(sorted(METHODS))
            msg = f"Route {self.method} {self.path!r}: unsupported method (expected one of {allowed})"
            raise InvalidRouteError(msg)
        check_path(self.path, f"Route {self.method} path")
        if not callable(self.handler):
            msg = f"Route {self.method} {self.path!r}: handler {self.handler!r} is not callable"
            raise InvalidRouteError(msg)

    def __repr__(self) -> str:
        label = f" name={self.name!r}" if self.name else ""
        return f"<Route {self.method} {self.path!r}{label}>"


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """One flattened registry entry: a route and its effective path."""

    method: str
    path: str
    route: Route


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful match."""

    route: Route
    path: str

    @property
    def handler(self) -> Handler:
        return self.route.handler


def route(method: str, path: str, handler: Handler, *, name: str | None = None) -> Route:
    """Create a Route for any supported method (case-insensitive)."""
    if not isinstance(method, str):
        msg = f"Route method must be a string, got {type(method).__name__}"
        raise InvalidRouteError(msg)
    return Route(method=method.upper(), path=path, handler=handler, name=name)


def get(path: str, handler: Handler, *, name: str | None = None) -> Route:
    return Route("GET", path, handler, name)


def post(path: str, handler: Handler, *, name: str | None = None) -> Route:
    return Route("POST", path, handler, name)


def put(path: str, handler: Handler, *, name: str | None = None) -> Route:
    return Route("PUT", path, handler, name)


def delete(path: str, handler: Handler, *, name: str | None = None) -> Route:
    return Route("DELETE", path, handler, name)


def patch(path: str, handler: Handler, *, name: str | None = None) -> Route:
    return Route("PATCH", path, handler, name)


def head(path: str, handler: Handler, *, name: str | None = None) -> Route:
    return Route("HEAD", path, handler, name)


def options(path: str, handler: Handler, *, name: str | None = None) -> Route:
    return Route("OPTIONS", path, handler, name)
