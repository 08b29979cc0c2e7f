"""Request rate limiting."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address


def rate_limit_key(request: Request) -> str:
    """Limit per signed-in user, falling back to the client address."""
    user = getattr(request.state, "user", None)
    if user is not None:
        return f"user:{user.uid}"
    return get_remote_address(request)


limiter = Limiter(key_func=rate_limit_key)


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Custom handler for rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={
            "error": "Rate limit exceeded",
            "code": "RATE_LIMIT_EXCEEDED",
            "details": str(exc.detail),
        },
    )
