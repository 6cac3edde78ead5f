"""Append-only delivery audit.

One row per attempted (notification, channel). Rows are inserted once with
their final status and never updated.
"""

from datetime import datetime
from typing import Dict, List, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import (
    DeliveryLogEntry,
    DeliveryStatus,
    NotificationChannel,
)
from infrastructure.persistence import Database
from infrastructure.persistence.models import DeliveryLogRow

logger = get_module_logger()


def _channel_name(channel: Union[NotificationChannel, str]) -> str:
    return channel.value if isinstance(channel, NotificationChannel) else str(channel)


class DeliveryLog:
    """Writes and queries notification_delivery_log."""

    def __init__(self, database: Database):
        self._database = database

    async def log(
        self,
        notification_id: str,
        channel: Union[NotificationChannel, str],
        status: DeliveryStatus,
        error: Optional[str] = None,
    ) -> None:
        """Insert one entry. Failures are logged, never raised."""
        channel_name = _channel_name(channel)
        try:
            async with self._database.session() as session:
                session.add(
                    DeliveryLogRow(
                        notification_id=notification_id,
                        channel=channel_name,
                        status=DeliveryStatus(status).value,
                        error_message=error,
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(
                "delivery_log_write_failed",
                notification_id=notification_id,
                channel=channel_name,
                status=DeliveryStatus(status).value,
                error=str(e),
            )

    async def get_entries(self, notification_id: str) -> List[DeliveryLogEntry]:
        """Every delivery attempt recorded for a notification."""
        try:
            async with self._database.session() as session:
                rows = (
                    await session.scalars(
                        select(DeliveryLogRow)
                        .where(DeliveryLogRow.notification_id == notification_id)
                        .order_by(DeliveryLogRow.created_at, DeliveryLogRow.channel)
                    )
                ).all()
        except SQLAlchemyError as e:
            logger.error(
                "delivery_log_read_failed",
                notification_id=notification_id,
                error=str(e),
            )
            return []
        return [DeliveryLogEntry.model_validate(row) for row in rows]

    async def get_status_counts(
        self, since: Optional[datetime] = None
    ) -> Dict[str, Dict[str, int]]:
        """Aggregate counts as {channel: {status: count}}."""
        query = select(
            DeliveryLogRow.channel, DeliveryLogRow.status, func.count()
        ).group_by(DeliveryLogRow.channel, DeliveryLogRow.status)
        if since is not None:
            query = query.where(DeliveryLogRow.created_at >= since)

        try:
            async with self._database.session() as session:
                rows = (await session.execute(query)).all()
        except SQLAlchemyError as e:
            logger.error("delivery_log_counts_failed", error=str(e))
            return {}

        counts: Dict[str, Dict[str, int]] = {}
        for channel, status, count in rows:
            counts.setdefault(channel, {})[status] = count
        return counts
