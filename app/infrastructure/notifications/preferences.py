"""Per-user, per-type channel preferences layered over static defaults.

A missing row means "use the default". Reads fail open to the defaults and
writes report failure as False; storage exceptions never reach callers.
"""

from typing import Dict, Mapping, Optional, Union

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import (
    ChannelPreferences,
    ChannelPreferencesUpdate,
    NotificationChannel,
    NotificationType,
)
from infrastructure.notifications.templates import (
    get_default_channel_preferences,
    get_default_preferences,
)
from infrastructure.persistence import Database
from infrastructure.persistence.models import NotificationPreferenceRow

logger = get_module_logger()

PreferenceUpdate = Union[ChannelPreferencesUpdate, Mapping[str, Optional[bool]]]


def _to_preferences(row: NotificationPreferenceRow) -> ChannelPreferences:
    return ChannelPreferences(
        push=row.channel_push,
        email=row.channel_email,
        sms=row.channel_sms,
        in_app=row.channel_in_app,
    )


def _as_update(partial: PreferenceUpdate) -> ChannelPreferencesUpdate:
    if isinstance(partial, ChannelPreferencesUpdate):
        return partial
    return ChannelPreferencesUpdate.model_validate(dict(partial))


class PreferenceStore:
    """Reads and writes notification_preferences rows."""

    def __init__(self, database: Database):
        self._database = database

    async def _load_row(
        self, user_id: str, notification_type: NotificationType
    ) -> Optional[NotificationPreferenceRow]:
        async with self._database.session() as session:
            return await session.scalar(
                select(NotificationPreferenceRow).where(
                    NotificationPreferenceRow.user_id == user_id,
                    NotificationPreferenceRow.notification_type
                    == NotificationType(notification_type).value,
                )
            )

    async def get_preferences_for_type(
        self, user_id: str, notification_type: NotificationType
    ) -> ChannelPreferences:
        """Stored preferences for the type, or its static default."""
        try:
            row = await self._load_row(user_id, notification_type)
        except SQLAlchemyError as e:
            logger.error(
                "preference_lookup_failed",
                user_id=user_id,
                notification_type=NotificationType(notification_type).value,
                error=str(e),
            )
            return get_default_channel_preferences(notification_type)

        if row is None:
            return get_default_channel_preferences(notification_type)
        return _to_preferences(row)

    async def is_channel_enabled(
        self,
        user_id: str,
        notification_type: NotificationType,
        channel: NotificationChannel,
    ) -> bool:
        """Whether the user wants this type on this channel.

        WEBSOCKET is always enabled. Storage errors answer with the type's
        default, never with silence.
        """
        channel = NotificationChannel(channel)
        if channel == NotificationChannel.WEBSOCKET:
            return True

        preferences = await self.get_preferences_for_type(user_id, notification_type)
        return preferences.is_enabled(channel)

    async def update_notification_preference(
        self,
        user_id: str,
        notification_type: NotificationType,
        partial: PreferenceUpdate,
    ) -> bool:
        """Upsert one type's row.

        Each field resolves to: given value, else the existing row's value,
        else the type default. Other types' rows are untouched.
        """
        notification_type = NotificationType(notification_type)
        update = _as_update(partial)
        try:
            async with self._database.session() as session:
                row = await session.scalar(
                    select(NotificationPreferenceRow).where(
                        NotificationPreferenceRow.user_id == user_id,
                        NotificationPreferenceRow.notification_type
                        == notification_type.value,
                    )
                )
                base = (
                    _to_preferences(row)
                    if row is not None
                    else get_default_channel_preferences(notification_type)
                )
                merged = base.model_copy(
                    update=update.model_dump(exclude_none=True)
                )

                if row is None:
                    row = NotificationPreferenceRow(
                        user_id=user_id,
                        notification_type=notification_type.value,
                    )
                    session.add(row)
                row.channel_push = merged.push
                row.channel_email = merged.email
                row.channel_sms = merged.sms
                row.channel_in_app = merged.in_app
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(
                "preference_update_failed",
                user_id=user_id,
                notification_type=notification_type.value,
                error=str(e),
            )
            return False

        logger.info(
            "preference_updated",
            user_id=user_id,
            notification_type=notification_type.value,
            **merged.model_dump(),
        )
        return True

    async def update_notification_preferences(
        self,
        user_id: str,
        updates: Mapping[NotificationType, PreferenceUpdate],
    ) -> bool:
        """Apply several per-type updates; True only if all succeeded."""
        all_ok = True
        for notification_type, partial in updates.items():
            ok = await self.update_notification_preference(
                user_id, notification_type, partial
            )
            all_ok = all_ok and ok
        return all_ok

    async def get_all_preferences(
        self, user_id: str
    ) -> Dict[NotificationType, ChannelPreferences]:
        """Every type's effective preferences for the user."""
        preferences = get_default_preferences()
        try:
            async with self._database.session() as session:
                rows = (
                    await session.scalars(
                        select(NotificationPreferenceRow).where(
                            NotificationPreferenceRow.user_id == user_id
                        )
                    )
                ).all()
        except SQLAlchemyError as e:
            logger.error("preference_list_failed", user_id=user_id, error=str(e))
            return preferences

        for row in rows:
            try:
                notification_type = NotificationType(row.notification_type)
            except ValueError:
                logger.warning(
                    "preference_row_unknown_type",
                    user_id=user_id,
                    notification_type=row.notification_type,
                )
                continue
            preferences[notification_type] = _to_preferences(row)
        return preferences

    def get_default_preferences(self) -> Dict[NotificationType, ChannelPreferences]:
        return get_default_preferences()

    async def reset_preferences_to_defaults(self, user_id: str) -> bool:
        """Delete every stored row for the user."""
        try:
            async with self._database.session() as session:
                result = await session.execute(
                    delete(NotificationPreferenceRow).where(
                        NotificationPreferenceRow.user_id == user_id
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("preference_reset_failed", user_id=user_id, error=str(e))
            return False

        logger.info("preferences_reset", user_id=user_id, rows_deleted=result.rowcount)
        return True

    async def initialize_user_preferences(self, user_id: str) -> bool:
        """Insert one default row per type, unless the user has any row."""
        try:
            async with self._database.session() as session:
                existing = await session.scalar(
                    select(NotificationPreferenceRow.id)
                    .where(NotificationPreferenceRow.user_id == user_id)
                    .limit(1)
                )
                if existing is not None:
                    return True

                for notification_type, defaults in get_default_preferences().items():
                    session.add(
                        NotificationPreferenceRow(
                            user_id=user_id,
                            notification_type=notification_type.value,
                            channel_push=defaults.push,
                            channel_email=defaults.email,
                            channel_sms=defaults.sms,
                            channel_in_app=defaults.in_app,
                        )
                    )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(
                "preference_initialize_failed", user_id=user_id, error=str(e)
            )
            return False

        logger.info("preferences_initialized", user_id=user_id)
        return True
