"""First-match router over a tree of prefix groups.

Routes and groups are registered while the router is *building*. The
first dispatch (or an explicit ``freeze()``) flattens the tree into an
immutable lookup table; from then on the router is *serving* and any
further registration raises ``RuntimeError``.
"""

import logging
import threading
from collections.abc import Iterator

from rtr._internal.asgi import Receive, Scope, Send
from rtr._internal.invoke import invoke
from rtr.config import RouterConfig
from rtr.errors import GroupNestingError, HTTPError, MethodNotAllowed, NotFound
from rtr.http.request import Request
from rtr.http.response import ResponseWriter
from rtr.routing.group import Group
from rtr.routing.route import Route, RouteEntry, RouteMatch
from rtr.server.sender import send_response

logger = logging.getLogger("rtr.router")

NOT_FOUND_BODY = b"404 page not found\n"
METHOD_NOT_ALLOWED_BODY = b"405 method not allowed\n"


class Router:
    """The top-level route container and ASGI application.

    Usage::

        router = Router()
        router.add_route(get("/hello", hello))
        router.add_group(Group("/api").add_route(get("/status", status)))

        # any ASGI server
        uvicorn.run(router)

    Matching walks the registry in pre-order, routes before subgroups,
    and the first route whose effective path and method both equal the
    request's wins. Registration order is the only tie-breaker.
    """

    __slots__ = (
        "_allowed",
        "_entries",
        "_freeze_lock",
        "_frozen",
        "_groups",
        "_routes",
        "_table",
        "config",
    )

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config = config or RouterConfig()
        self._routes: list[Route] = []
        self._groups: list[Group] = []

        # Compiled state — set during _freeze()
        self._frozen = False
        self._freeze_lock = threading.Lock()
        self._entries: tuple[RouteEntry, ...] = ()
        self._table: dict[tuple[str, str], RouteEntry] = {}
        self._allowed: dict[str, frozenset[str]] = {}

    def __repr__(self) -> str:
        state = "serving" if self._frozen else "building"
        return f"<Router {state} routes={len(self._routes)} groups={len(self._groups)}>"

    # -- Registration --

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def groups(self) -> tuple[Group, ...]:
        """Top-level groups in registration order."""
        return tuple(self._groups)

    def add_route(self, route: Route) -> "Router":
        """Register a top-level route. Returns self for chaining."""
        if not isinstance(route, Route):
            msg = f"add_route() expects a Route, got {type(route).__name__}"
            raise TypeError(msg)
        self._check_not_frozen()
        self._routes.append(route)
        logger.debug("registered %s %s", route.method, route.path or "''")
        return self

    def add_group(self, group: Group) -> "Router":
        """Attach a top-level group. Returns self for chaining.

        The group must not already be nested in another group or attached
        to any router, this one included.
        """
        if not isinstance(group, Group):
            msg = f"add_group() expects a Group, got {type(group).__name__}"
            raise TypeError(msg)
        self._check_not_frozen()
        if group.parent is not None:
            msg = f"Cannot attach {group!r}: it is nested in {group.parent!r}."
            raise GroupNestingError(msg)
        if group._router is not None:
            msg = f"Cannot attach {group!r}: it is already attached to a router."
            raise GroupNestingError(msg)
        group._router = self
        self._groups.append(group)
        logger.debug("attached group %r", group.prefix)
        return self

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the router after it has started serving. "
                "Register all routes and groups before the first request."
            )
            raise RuntimeError(msg)

    # -- Compilation --

    def _walk(self) -> Iterator[RouteEntry]:
        for route in self._routes:
            yield RouteEntry(route.method, route.path, route)
        for group in self._groups:
            for path, route in group.walk():
                yield RouteEntry(route.method, path, route)

    @property
    def routes(self) -> tuple[RouteEntry, ...]:
        """Every registered route with its effective path, in match order."""
        if self._frozen:
            return self._entries
        return tuple(self._walk())

    def freeze(self) -> None:
        """Compile the route table and stop accepting registrations.

        Thread-safe with double-checked locking: concurrent first
        requests compile the table exactly once. Called implicitly on
        first dispatch.
        """
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._compile()

    def _compile(self) -> None:
        """Build the lookup table. MUST only be called while holding _freeze_lock."""
        entries = tuple(self._walk())
        table: dict[tuple[str, str], RouteEntry] = {}
        allowed: dict[str, set[str]] = {}
        for entry in entries:
            key = (entry.method, entry.path)
            if key in table:
                logger.debug(
                    "%s %s is shadowed by an earlier registration", entry.method, entry.path
                )
                continue
            table[key] = entry
            allowed.setdefault(entry.path, set()).add(entry.method)

        self._entries = entries
        self._table = table
        self._allowed = {path: frozenset(methods) for path, methods in allowed.items()}
        self._frozen = True
        logger.debug("router frozen with %d routes (%d distinct)", len(entries), len(table))

    # -- Matching --

    def match(self, method: str, path: str) -> RouteMatch:
        """Resolve *method* and *path* to the first matching route.

        Comparison is exact: no case folding, no trailing-slash tolerance,
        no query-string handling.

        Raises ``NotFound`` when nothing matches. With
        ``config.method_not_allowed`` it raises ``MethodNotAllowed``
        instead when *path* is bound under other methods.
        """
        self.freeze()
        entry = self._table.get((method, path))
        if entry is not None:
            return RouteMatch(route=entry.route, path=entry.path)
        if self.config.method_not_allowed:
            allowed = self._allowed.get(path)
            if allowed:
                raise MethodNotAllowed(allowed)
        raise NotFound(f"No route matches {method} {path!r}")

    def find(self, name: str) -> RouteEntry | None:
        """Return the first entry whose route is named *name*."""
        for entry in self.routes:
            if entry.route.name == name:
                return entry
        return None

    # -- Dispatch --

    async def serve_http(self, writer: ResponseWriter, request: Request) -> None:
        """Dispatch one request: call the matching handler or write the error.

        The handler receives *writer* and *request* untouched. Exceptions
        it raises propagate to the caller.
        """
        try:
            match = self.match(request.method, request.path)
        except HTTPError as exc:
            if self.config.debug:
                logger.debug("%s %s -> %d", request.method, request.path, exc.status)
            write_error(writer, exc)
            return

        if self.config.debug:
            logger.debug("%s %s -> %r", request.method, request.path, match.route)
        await invoke(
            match.handler,
            writer,
            request,
            threaded=self.config.threaded_handlers,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Freezes at lifespan startup when the server speaks lifespan;
        otherwise on the first HTTP request. Non-HTTP scopes are ignored.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        writer = ResponseWriter()
        await self.serve_http(writer, request)
        await send_response(writer.to_response(), send, method=request.method)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    self.freeze()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return


def write_error(writer: ResponseWriter, exc: HTTPError) -> None:
    """Write the canonical plain-text response for a match failure."""
    writer.headers.set("Content-Type", "text/plain; charset=utf-8")
    writer.headers.set("X-Content-Type-Options", "nosniff")
    for name, value in exc.headers:
        writer.headers.set(name, value)
    writer.write_header(exc.status)
    if isinstance(exc, MethodNotAllowed):
        writer.write(METHOD_NOT_ALLOWED_BODY)
    else:
        writer.write(NOT_FOUND_BODY)
