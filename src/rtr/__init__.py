"""rtr — a small first-match HTTP router with prefix groups.

Register routes, nest them in groups that share a path prefix, and serve
the router with any ASGI server.

Basic usage::

    import rtr

    def hello(w, r):
        w.write("Hello, World!")

    router = rtr.new_router()
    router.add_route(rtr.get("/hello", hello))

    users = rtr.new_group().set_prefix("/users")
    users.add_route(rtr.get("", list_users))
    router.add_group(rtr.new_group().set_prefix("/api").add_group(users))

    # uvicorn module:router
"""

from rtr.config import RouterConfig
from rtr.errors import (
    ConfigurationError,
    GroupNestingError,
    HTTPError,
    InvalidRouteError,
    MethodNotAllowed,
    NotFound,
    RtrError,
)
from rtr.http.request import Request
from rtr.http.response import Response, ResponseWriter
from rtr.routing.group import Group
from rtr.routing.route import (
    METHODS,
    Route,
    RouteEntry,
    RouteMatch,
    delete,
    get,
    head,
    options,
    patch,
    post,
    put,
    route,
)
from rtr.routing.router import Router

__version__ = "0.1.0"
__all__ = [
    "METHODS",
    "ConfigurationError",
    "Group",
    "GroupNestingError",
    "HTTPError",
    "InvalidRouteError",
    "MethodNotAllowed",
    "NotFound",
    "Request",
    "Response",
    "ResponseWriter",
    "Route",
    "RouteEntry",
    "RouteMatch",
    "Router",
    "RouterConfig",
    "RtrError",
    "delete",
    "get",
    "head",
    "new_group",
    "new_router",
    "options",
    "patch",
    "post",
    "put",
    "route",
]


def new_router(config: RouterConfig | None = None) -> Router:
    """Return a fresh, empty router."""
    return Router(config)


def new_group() -> Group:
    """Return a fresh, empty group with no prefix."""
    return Group()
