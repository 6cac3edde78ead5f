from fastapi import APIRouter, HTTPException, status

from api.dependencies.users import CurrentUserId
from api.v1.schemas import BulkPreferencesUpdate, PreferencesResponse
from infrastructure.notifications import (
    ChannelPreferences,
    ChannelPreferencesUpdate,
    NotificationType,
)
from infrastructure.services import NotificationServiceDep

router = APIRouter(prefix="/notification-preferences", tags=["Notification Preferences"])


@router.get("", response_model=PreferencesResponse)
async def get_preferences(user_id: CurrentUserId, service: NotificationServiceDep):
    """Effective preferences for every notification type."""
    return PreferencesResponse(
        preferences=await service.preferences.get_all_preferences(user_id)
    )


@router.get("/defaults", response_model=PreferencesResponse)
async def get_default_preferences(service: NotificationServiceDep):
    return PreferencesResponse(preferences=service.preferences.get_default_preferences())


@router.put("", response_model=PreferencesResponse)
async def update_preferences(
    body: BulkPreferencesUpdate,
    user_id: CurrentUserId,
    service: NotificationServiceDep,
):
    if not await service.preferences.update_notification_preferences(
        user_id, body.preferences
    ):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update preferences",
        )
    return PreferencesResponse(
        preferences=await service.preferences.get_all_preferences(user_id)
    )


@router.put("/{notification_type}", response_model=ChannelPreferences)
async def update_preference(
    notification_type: NotificationType,
    body: ChannelPreferencesUpdate,
    user_id: CurrentUserId,
    service: NotificationServiceDep,
):
    """Partial update of one type; omitted channels keep their value."""
    if not await service.preferences.update_notification_preference(
        user_id, notification_type, body
    ):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update preference",
        )
    return await service.preferences.get_preferences_for_type(
        user_id, notification_type
    )


@router.post("/reset", response_model=PreferencesResponse)
async def reset_preferences(user_id: CurrentUserId, service: NotificationServiceDep):
    if not await service.preferences.reset_preferences_to_defaults(user_id):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to reset preferences",
        )
    return PreferencesResponse(preferences=service.preferences.get_default_preferences())
