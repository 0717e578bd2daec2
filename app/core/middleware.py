"""ASGI middleware."""

from urllib.parse import parse_qs

from starlette.types import ASGIApp, Receive, Scope, Send

OVERRIDABLE_METHODS = frozenset({"PUT", "DELETE"})


class MethodOverrideMiddleware:
    """
    Dispatch POST ...?_method=PUT|DELETE as that method.

    HTML forms can only submit GET and POST; the edit and delete forms rely on this.
    Only methods some route accepts are honoured; anything else stays a POST.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "POST":
            query = parse_qs(scope.get("query_string", b"").decode("latin-1"))
            override = (query.get("_method") or [""])[0].upper()
            if override in OVERRIDABLE_METHODS:
                scope = dict(scope, method=override)
        await self.app(scope, receive, send)
