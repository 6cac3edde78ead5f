from fastapi import APIRouter, Request

from api.dependencies.rate_limits import get_limiter
from infrastructure.resilience import get_all_circuit_breaker_stats
from infrastructure.services import NotificationServiceDep, SettingsDep

router = APIRouter(tags=["System"])
limiter = get_limiter()


# Load balancer health probes hit these frequently; keep the limit generous
@router.get("/version")
@limiter.limit("50/minute")
def get_version(request: Request, settings: SettingsDep):  # pylint: disable=unused-argument
    """Get the version of the application."""
    return {"version": settings.GIT_SHA}


@router.get("/health")
@limiter.limit("50/minute")
def get_health(request: Request):  # pylint: disable=unused-argument
    """Healthcheck endpoint."""
    return {"status": "ok"}


@router.get("/health/channels")
@limiter.limit("50/minute")
async def get_channel_health(
    request: Request,  # pylint: disable=unused-argument
    service: NotificationServiceDep,
):
    """Per-channel delivery health and circuit breaker state."""
    health = await service.health_check()
    return {
        "status": "ok" if all(r.is_success for r in health.values()) else "degraded",
        "channels": {name: result.to_dict() for name, result in health.items()},
        "circuit_breakers": get_all_circuit_breaker_stats(),
    }
