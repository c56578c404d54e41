"""Path traversal guard middleware.

Rejects request paths containing ".." before they reach file serving.
"""

import json
import logging

logger = logging.getLogger(__name__)


class PathGuardMiddleware:
    """
    Deny requests whose path contains "..".

    Uses the pure ASGI middleware pattern so it runs before routing and
    static file lookups, like http.ServeFile's own precaution.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        if ".." not in path:
            await self.app(scope, receive, send)
            return

        logger.warning(f"Error: invalid URL path {path!r}")
        response_body = json.dumps({"success": False, "error": "invalid URL path"}).encode()
        await send(
            {
                "type": "http.response.start",
                "status": 400,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"content-length", str(len(response_body)).encode()),
                ],
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": response_body,
            }
        )
