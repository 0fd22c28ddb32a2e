from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import PlainTextResponse
from starlette.types import Receive, Scope, Send

SAFE_METHODS = ("GET", "HEAD")


class StrictCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that also refuses actual requests from unlisted origins.

    Stock CORSMiddleware only withholds the Access-Control-* headers and
    lets the request run. Here a non-safe request carrying an ``Origin``
    outside the allow-list never reaches the app. Requests without
    ``Origin`` and safe-method reads (``/health``) pass through unchanged.
    """

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            headers = Headers(scope=scope)
            origin = headers.get("origin")
            method = scope["method"]
            preflight = method == "OPTIONS" and "access-control-request-method" in headers
            if (
                origin is not None
                and not preflight
                and method not in SAFE_METHODS
                and not self.is_allowed_origin(origin=origin)
            ):
                response = PlainTextResponse("Disallowed CORS origin", status_code=403)
                await response(scope, receive, send)
                return
        await super().__call__(scope, receive, send)
