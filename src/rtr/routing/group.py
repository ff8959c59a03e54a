"""Prefix groups — composable containers of routes and sub-groups.

Groups form a tree. Each group knows its parent and, once attached, the
router that owns the tree, so the single-parent and no-cycle rules are
checked at the ``add_group`` call and prefix changes after attachment are
refused instead of silently invalidating the compiled table.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from rtr.errors import ConfigurationError, GroupNestingError
from rtr.routing.route import Route, check_path

if TYPE_CHECKING:
    from rtr.routing.router import Router


def join_path(prefix: str, path: str) -> str:
    """Concatenate *prefix* and *path*, skipping empty components.

    No separator is inserted: the child path carries its own leading
    slash (``"/api" + "/status"``), and an empty child path yields the
    prefix unchanged (``"/users" + ""`` -> ``"/users"``). A slash shared by
    both sides is kept once, so ``"/" + "/x"`` is ``"/x"``, never ``"//x"``.
    """
    if not prefix:
        return path
    if not path:
        return prefix
    if prefix.endswith("/") and path.startswith("/"):
        return prefix + path[1:]
    return prefix + path


class Group:
    """A prefix scope holding routes and nested groups.

    Usage::

        users = Group().set_prefix("/users")
        users.add_route(get("", list_users))
        api = Group("/api").add_group(users)
        router.add_group(api)

    ``set_prefix`` is only legal before the group, or any ancestor, is
    attached to a router.
    """

    __slots__ = ("_parent", "_prefix", "_router", "_routes", "_subgroups")

    def __init__(self, prefix: str = "") -> None:
        check_path(prefix, "Group prefix")
        self._prefix = prefix
        self._routes: list[Route] = []
        self._subgroups: list[Group] = []
        self._parent: Group | None = None
        self._router: Router | None = None

    def __repr__(self) -> str:
        return (
            f"<Group prefix={self._prefix!r} routes={len(self._routes)} "
            f"subgroups={len(self._subgroups)}>"
        )

    # -- Read-only views --

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    @property
    def subgroups(self) -> tuple[Group, ...]:
        return tuple(self._subgroups)

    @property
    def parent(self) -> Group | None:
        return self._parent

    @property
    def router(self) -> Router | None:
        """The router this group's tree is attached to, if any."""
        return self.root._router

    @property
    def root(self) -> Group:
        """The top-most ancestor (the group itself when it has no parent)."""
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    def ancestors(self) -> Iterator[Group]:
        """Yield the parent chain, nearest first."""
        node = self._parent
        while node is not None:
            yield node
            node = node._parent

    # -- Builders --

    def set_prefix(self, prefix: str) -> Group:
        """Replace the prefix. Returns self for chaining."""
        check_path(prefix, "Group prefix")
        if self.router is not None:
            msg = (
                f"Cannot change prefix of {self!r} to {prefix!r}: "
                "the group is already attached to a router."
            )
            raise ConfigurationError(msg)
        self._prefix = prefix
        return self

    def add_route(self, route: Route) -> Group:
        """Append *route*. Duplicates are kept. Returns self for chaining."""
        if not isinstance(route, Route):
            msg = f"{self!r}.add_route() expects a Route, got {type(route).__name__}"
            raise TypeError(msg)
        self._check_mutable()
        self._routes.append(route)
        return self

    def add_group(self, group: Group) -> Group:
        """Nest *group* under this one. Returns self for chaining.

        Raises ``GroupNestingError`` if *group* already has a parent, is
        attached to a router, or is this group or one of its ancestors.
        """
        if not isinstance(group, Group):
            msg = f"{self!r}.add_group() expects a Group, got {type(group).__name__}"
            raise TypeError(msg)
        self._check_mutable()
        if group is self or any(a is group for a in self.ancestors()):
            msg = f"Cannot add {group!r} to {self!r}: the groups would form a cycle."
            raise GroupNestingError(msg)
        if group._parent is not None:
            msg = f"Cannot add {group!r} to {self!r}: it already belongs to {group._parent!r}."
            raise GroupNestingError(msg)
        if group._router is not None:
            msg = f"Cannot add {group!r} to {self!r}: it is already attached to a router."
            raise GroupNestingError(msg)
        group._parent = self
        self._subgroups.append(group)
        return self

    # -- Traversal --

    def walk(self, prefix: str = "") -> Iterator[tuple[str, Route]]:
        """Yield ``(effective_path, route)`` for every route in this tree.

        Pre-order, routes before subgroups, insertion order throughout.
        *prefix* is the accumulated prefix of the enclosing scopes.
        """
        scope = join_path(prefix, self._prefix)
        for route in self._routes:
            yield join_path(scope, route.path), route
        for group in self._subgroups:
            yield from group.walk(scope)

    def _check_mutable(self) -> None:
        router = self.router
        if router is not None and router.frozen:
            msg = f"Cannot modify {self!r}: its router is frozen."
            raise RuntimeError(msg)
