"""rtr exception hierarchy.

Shared across Route, Group, Router and the ASGI adapter so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class RtrError(Exception):
    """Base for all rtr-specific errors."""


class ConfigurationError(RtrError):
    """Raised when the route registry is built incorrectly.

    These are programming errors in the caller and are raised at the
    offending registration call, never deferred to dispatch.
    """


class InvalidRouteError(ConfigurationError):
    """A route has an unsupported method, a malformed path, or no handler."""


class GroupNestingError(ConfigurationError):
    """A group was nested into itself, a descendant, or a second parent."""


@dataclass(frozen=True, slots=True)
class HTTPError(RtrError):
    """An outcome of matching that maps directly to an HTTP status code.

    ``Router.match`` raises these; ``Router.serve_http`` turns them into
    the canonical plain-text responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request method and path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — the path is bound, but not for this HTTP method.

    Only raised when ``RouterConfig.method_not_allowed`` is enabled.
    Carries an ``Allow`` header listing the registered methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )

    @property
    def allowed(self) -> frozenset[str]:
        """The methods registered for the requested path."""
        value = dict(self.headers)["Allow"]
        return frozenset(m.strip() for m in value.split(",") if m.strip())
