"""ASGI authentication middleware."""

import json

import structlog
from starlette.types import ASGIApp, Receive, Scope, Send

from intellichat.core.exceptions import AppException, error_body
from intellichat.services.identity_service import IdentityProvider

logger = structlog.get_logger()

PUBLIC_PATHS: set[str] = {
    "",
    "/",
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
}


class AuthMiddleware:
    """Pure ASGI middleware resolving the caller through the identity provider."""

    def __init__(self, app: ASGIApp, identity_provider: IdentityProvider) -> None:
        self.app = app
        self.identity_provider = identity_provider

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "")
        if method == "OPTIONS":
            await self.app(scope, receive, send)
            return

        path = scope["path"]
        normalized = path.rstrip("/") or "/"
        if normalized in PUBLIC_PATHS or path.startswith(("/docs", "/redoc")):
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        auth_header = headers.get(b"authorization", b"").decode()
        token = auth_header[7:].strip() if auth_header.startswith("Bearer ") else None

        try:
            user = await self.identity_provider.authenticate(token or None)
        except AppException as exc:
            logger.info("Authentication failed", path=path, code=exc.code)
            await self._send_error(send, exc)
            return

        scope.setdefault("state", {})
        scope["state"]["user"] = user

        await self.app(scope, receive, send)

    @staticmethod
    async def _send_error(send: Send, exc: AppException) -> None:
        """Send a JSON error response directly."""
        body = json.dumps(error_body(exc)).encode()

        await send(
            {
                "type": "http.response.start",
                "status": exc.status_code,
                "headers": [
                    [b"content-type", b"application/json"],
                    [b"content-length", str(len(body)).encode()],
                ],
            }
        )
        await send({"type": "http.response.body", "body": body})
