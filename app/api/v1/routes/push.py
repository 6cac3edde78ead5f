from fastapi import APIRouter, HTTPException, Request, status

from api.dependencies.rate_limits import get_limiter
from api.dependencies.users import CurrentUserId
from api.v1.schemas import PushSubscribeRequest, PushUnsubscribeRequest
from infrastructure.services import NotificationServiceDep

router = APIRouter(prefix="/push", tags=["Push"])
limiter = get_limiter()


@router.get("/vapid-public-key")
async def get_vapid_public_key(service: NotificationServiceDep):
    """Key the browser passes to PushManager.subscribe()."""
    public_key = service.get_vapid_public_key()
    if not public_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Push notifications not configured",
        )
    return {"publicKey": public_key}


@router.post("/subscribe", status_code=status.HTTP_201_CREATED)
@limiter.limit("20/minute")
async def subscribe(
    request: Request,  # pylint: disable=unused-argument
    body: PushSubscribeRequest,
    user_id: CurrentUserId,
    service: NotificationServiceDep,
):
    if body.kind == "web" and body.keys is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Web push subscriptions require p256dh and auth keys",
        )
    saved = await service.subscriptions.save_subscription(
        user_id,
        body.endpoint,
        p256dh=body.keys.p256dh if body.keys else None,
        auth=body.keys.auth if body.keys else None,
        kind=body.kind,
    )
    if not saved:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save subscription",
        )
    return {"success": True}


@router.post("/unsubscribe")
async def unsubscribe(
    body: PushUnsubscribeRequest,
    user_id: CurrentUserId,
    service: NotificationServiceDep,
):
    if not await service.subscriptions.remove_subscription(user_id, body.endpoint):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to remove subscription",
        )
    return {"success": True}
