from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.router import api_router
from api.dependencies.rate_limits import setup_rate_limiter, get_limiter
from infrastructure.logging import bind_request_context, get_module_logger
from infrastructure.services import get_settings
from server.lifespan import lifespan

logger = get_module_logger()
settings = get_settings()

CORRELATION_ID_HEADER = "X-Correlation-ID"


handler = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
setup_rate_limiter(handler)
limiter = get_limiter()


@handler.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Bind a correlation id and the acting user to every log line of a request."""
    with bind_request_context(
        correlation_id=request.headers.get(CORRELATION_ID_HEADER),
        user_id=request.headers.get(settings.server.USER_ID_HEADER),
        request_path=request.url.path,
        request_method=request.method,
    ) as correlation_id:
        response = await call_next(request)
    response.headers[CORRELATION_ID_HEADER] = correlation_id
    return response


allow_origins = (
    settings.server.cors_origins
    if settings.is_production
    else [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ]
)
handler.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


handler.include_router(api_router)
