"""Durable notification records and their read state.

create() raises on storage failure because the dispatcher treats it as a
hard failure. Every other operation fails open.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import (
    NotificationCategory,
    NotificationPriority,
    NotificationRecord,
    NotificationType,
)
from infrastructure.persistence import Database
from infrastructure.persistence.models import DeliveryLogRow, NotificationRow

logger = get_module_logger()


class NotificationStore:
    """Reads and writes the notifications table."""

    def __init__(self, database: Database):
        self._database = database

    async def create(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        body: str,
        category: NotificationCategory,
        priority: NotificationPriority,
        data: Optional[Dict[str, Any]] = None,
    ) -> NotificationRecord:
        """Insert a notification row.

        Raises:
            SQLAlchemyError: If the insert fails
        """
        async with self._database.session() as session:
            row = NotificationRow(
                user_id=user_id,
                type=NotificationType(notification_type).value,
                title=title,
                body=body,
                data=data or {},
                category=NotificationCategory(category).value,
                priority=NotificationPriority(priority).value,
                is_read=False,
            )
            session.add(row)
            await session.commit()
            return NotificationRecord.model_validate(row)

    async def get_notification(
        self, notification_id: str, user_id: Optional[str] = None
    ) -> Optional[NotificationRecord]:
        """Fetch one notification, optionally scoped to its owner."""
        query = select(NotificationRow).where(NotificationRow.id == notification_id)
        if user_id is not None:
            query = query.where(NotificationRow.user_id == user_id)
        try:
            async with self._database.session() as session:
                row = await session.scalar(query)
        except SQLAlchemyError as e:
            logger.error(
                "notification_lookup_failed",
                notification_id=notification_id,
                error=str(e),
            )
            return None
        return NotificationRecord.model_validate(row) if row is not None else None

    async def get_user_notifications(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        category: Optional[NotificationCategory] = None,
        unread_only: bool = False,
    ) -> List[NotificationRecord]:
        """Newest-first page of a user's notifications."""
        query = select(NotificationRow).where(NotificationRow.user_id == user_id)
        if category is not None:
            query = query.where(
                NotificationRow.category == NotificationCategory(category).value
            )
        if unread_only:
            query = query.where(NotificationRow.is_read.is_(False))
        query = (
            query.order_by(NotificationRow.created_at.desc(), NotificationRow.id.desc())
            .limit(limit)
            .offset(offset)
        )

        try:
            async with self._database.session() as session:
                rows = (await session.scalars(query)).all()
        except SQLAlchemyError as e:
            logger.error("notification_list_failed", user_id=user_id, error=str(e))
            return []
        return [NotificationRecord.model_validate(row) for row in rows]

    async def get_unread_count(self, user_id: str) -> int:
        try:
            async with self._database.session() as session:
                count = await session.scalar(
                    select(func.count())
                    .select_from(NotificationRow)
                    .where(
                        NotificationRow.user_id == user_id,
                        NotificationRow.is_read.is_(False),
                    )
                )
        except SQLAlchemyError as e:
            logger.error("unread_count_failed", user_id=user_id, error=str(e))
            return 0
        return int(count or 0)

    async def mark_notification_as_read(
        self, notification_id: str, user_id: Optional[str] = None
    ) -> bool:
        """Set is_read. Idempotent; False if no such notification or on error."""
        statement = (
            update(NotificationRow)
            .where(NotificationRow.id == notification_id)
            .values(is_read=True)
        )
        if user_id is not None:
            statement = statement.where(NotificationRow.user_id == user_id)
        try:
            async with self._database.session() as session:
                result = await session.execute(statement)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(
                "mark_read_failed", notification_id=notification_id, error=str(e)
            )
            return False
        return result.rowcount > 0

    async def mark_all_as_read(self, user_id: str) -> int:
        """Mark every unread notification read; returns rows flipped."""
        try:
            async with self._database.session() as session:
                result = await session.execute(
                    update(NotificationRow)
                    .where(
                        NotificationRow.user_id == user_id,
                        NotificationRow.is_read.is_(False),
                    )
                    .values(is_read=True)
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("mark_all_read_failed", user_id=user_id, error=str(e))
            return 0
        return result.rowcount

    async def delete_notification(
        self, notification_id: str, user_id: Optional[str] = None
    ) -> bool:
        """Delete a notification together with its delivery log rows."""
        ownership = select(NotificationRow.id).where(
            NotificationRow.id == notification_id
        )
        if user_id is not None:
            ownership = ownership.where(NotificationRow.user_id == user_id)

        try:
            async with self._database.session() as session:
                if await session.scalar(ownership) is None:
                    return False
                # SQLite does not enforce ON DELETE CASCADE without a pragma
                await session.execute(
                    delete(DeliveryLogRow).where(
                        DeliveryLogRow.notification_id == notification_id
                    )
                )
                await session.execute(
                    delete(NotificationRow).where(NotificationRow.id == notification_id)
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(
                "notification_delete_failed",
                notification_id=notification_id,
                error=str(e),
            )
            return False

        logger.info("notification_deleted", notification_id=notification_id)
        return True
