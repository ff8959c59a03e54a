"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, no
string-key dict lookups, no environment variables.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields default to the plain matching behaviour. Override what you
    need::

        config = RouterConfig(method_not_allowed=True)
    """

    # Answer 405 + Allow instead of 404 when the path exists under
    # other methods.
    method_not_allowed: bool = False

    # Run plain ``def`` handlers in a worker thread (anyio.to_thread)
    # so a blocking handler does not stall the event loop.
    threaded_handlers: bool = False

    # Log every dispatch decision at DEBUG level on the "rtr.router" logger.
    debug: bool = False
