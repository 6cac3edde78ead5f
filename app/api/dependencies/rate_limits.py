from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from infrastructure.logging import get_module_logger
from infrastructure.services.providers import get_settings

logger = get_module_logger()


def user_or_remote_key(request: Request) -> str:
    """Rate limit per acting user when the identity header is present."""
    user_id = request.headers.get(get_settings().server.USER_ID_HEADER)
    if user_id:
        return f"user:{user_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=user_or_remote_key)


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 with the limit that was hit, e.g. "60 per 1 minute"."""
    logger.warning(
        "rate_limit_exceeded",
        path=request.url.path,
        key=user_or_remote_key(request),
        limit=exc.detail,
    )
    return JSONResponse(
        status_code=429,
        content={"message": "Rate limit exceeded", "limit": exc.detail},
    )


def setup_rate_limiter(app: FastAPI) -> None:
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)


def get_limiter() -> Limiter:
    return limiter
