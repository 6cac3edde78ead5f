from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, status

from api.dependencies.rate_limits import get_limiter
from api.dependencies.users import CurrentUserId
from api.v1.schemas import (
    DeliveryLogResponse,
    MarkAllReadResponse,
    NotificationListResponse,
    SendNotificationRequest,
    SendNotificationResponse,
    UnreadCountResponse,
)
from infrastructure.logging import get_correlation_id, get_module_logger
from infrastructure.notifications import NotificationCategory, NotificationRecord
from infrastructure.services import NotificationServiceDep

logger = get_module_logger()

router = APIRouter(prefix="/notifications", tags=["Notifications"])
limiter = get_limiter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    user_id: CurrentUserId,
    service: NotificationServiceDep,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    category: Optional[NotificationCategory] = None,
    unread_only: bool = False,
):
    """Newest-first page of the caller's notifications."""
    notifications = await service.records.get_user_notifications(
        user_id,
        limit=limit,
        offset=offset,
        category=category,
        unread_only=unread_only,
    )
    return NotificationListResponse(
        notifications=notifications, limit=limit, offset=offset
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(user_id: CurrentUserId, service: NotificationServiceDep):
    return UnreadCountResponse(count=await service.records.get_unread_count(user_id))


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(user_id: CurrentUserId, service: NotificationServiceDep):
    updated = await service.records.mark_all_as_read(user_id)
    return MarkAllReadResponse(updated=updated)


@router.post(
    "/send",
    response_model=SendNotificationResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("60/minute")
async def send_notification(
    request: Request,  # pylint: disable=unused-argument
    body: SendNotificationRequest,
    user_id: CurrentUserId,
    service: NotificationServiceDep,
):
    """Admin-triggered send (announcements, account notices)."""
    logger.info(
        "admin_notification_requested",
        requested_by=user_id,
        recipient=body.user_id,
        notification_type=body.type.value,
    )
    notification_id = await service.send_notification(
        body.user_id, body.type, body.payload, body.options
    )
    if notification_id is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": "Notification could not be created",
                "correlation_id": get_correlation_id(),
            },
        )
    return SendNotificationResponse(notification_id=notification_id)


@router.get("/{notification_id}", response_model=NotificationRecord)
async def get_notification(
    notification_id: str, user_id: CurrentUserId, service: NotificationServiceDep
):
    notification = await service.records.get_notification(notification_id, user_id)
    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification


@router.post("/{notification_id}/read")
async def mark_read(
    notification_id: str, user_id: CurrentUserId, service: NotificationServiceDep
):
    if not await service.records.mark_notification_as_read(notification_id, user_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True}


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str, user_id: CurrentUserId, service: NotificationServiceDep
):
    if not await service.records.delete_notification(notification_id, user_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True}


@router.get("/{notification_id}/deliveries", response_model=DeliveryLogResponse)
async def get_deliveries(
    notification_id: str, user_id: CurrentUserId, service: NotificationServiceDep
):
    """Delivery attempts for one of the caller's notifications."""
    if await service.records.get_notification(notification_id, user_id) is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    deliveries = await service.delivery_log.get_entries(notification_id)
    return DeliveryLogResponse(notification_id=notification_id, deliveries=deliveries)
