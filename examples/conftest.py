"""Fixtures for the rtr examples.

Each example directory holds an ``app.py`` that builds a module-level
``router``. Routers freeze on their first request, so every test runs the
file again to get one that is still accepting registrations.
"""

import runpy
from pathlib import Path

import pytest

from rtr import Router


@pytest.fixture
def example_router(request: pytest.FixtureRequest) -> Router:
    """Build the ``router`` defined in the test's sibling app.py."""
    namespace = runpy.run_path(str(Path(request.path).with_name("app.py")))
    router = namespace.get("router")
    assert isinstance(router, Router), "app.py must define a module-level `router`"
    return router
