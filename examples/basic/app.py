"""Basic — a greeting route plus a nested /api/users group.

Demonstrates top-level routes, prefix groups, a group nested in a group,
and the empty-path route that answers on the group prefix itself.

Run with any ASGI server:
    cd examples/basic && uvicorn app:router
"""

import rtr
from rtr import Request, ResponseWriter


def hello(w: ResponseWriter, r: Request) -> None:
    w.write("Hello, World!")


def status(w: ResponseWriter, r: Request) -> None:
    w.headers.set("Content-Type", "application/json")
    w.write('{"status": "ok"}')


def list_users(w: ResponseWriter, r: Request) -> None:
    w.write("List of users")


def user_123(w: ResponseWriter, r: Request) -> None:
    # Exact match only: there are no path parameters.
    w.write("User ID: 123")


router = rtr.new_router()
router.add_route(rtr.get("/hello", hello))

api = rtr.new_group().set_prefix("/api")
api.add_route(rtr.get("/status", status))

users = rtr.new_group().set_prefix("/users")
users.add_route(rtr.get("", list_users))
users.add_route(rtr.get("/123", user_123))

api.add_group(users)
router.add_group(api)
