"""Push subscription storage (web push endpoints and FCM device tokens)."""

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import PushSubscription
from infrastructure.persistence import Database
from infrastructure.persistence.models import PushSubscriptionRow

logger = get_module_logger()


class PushSubscriptionStore:
    """Reads and writes push_subscriptions rows."""

    def __init__(self, database: Database):
        self._database = database

    async def save_subscription(
        self,
        user_id: str,
        endpoint: str,
        p256dh: Optional[str] = None,
        auth: Optional[str] = None,
        kind: str = "web",
    ) -> bool:
        """Store a subscription unless the (user, endpoint) pair exists."""
        try:
            async with self._database.session() as session:
                existing = await session.scalar(
                    select(PushSubscriptionRow.id).where(
                        PushSubscriptionRow.user_id == user_id,
                        PushSubscriptionRow.endpoint == endpoint,
                    )
                )
                if existing is not None:
                    return True
                session.add(
                    PushSubscriptionRow(
                        user_id=user_id,
                        kind=kind,
                        endpoint=endpoint,
                        p256dh=p256dh,
                        auth=auth,
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("push_subscription_save_failed", user_id=user_id, error=str(e))
            return False

        logger.info("push_subscription_saved", user_id=user_id, kind=kind)
        return True

    async def remove_subscription(self, user_id: str, endpoint: str) -> bool:
        try:
            async with self._database.session() as session:
                await session.execute(
                    delete(PushSubscriptionRow).where(
                        PushSubscriptionRow.user_id == user_id,
                        PushSubscriptionRow.endpoint == endpoint,
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(
                "push_subscription_remove_failed", user_id=user_id, error=str(e)
            )
            return False
        return True

    async def remove_endpoint(self, endpoint: str) -> int:
        """Drop an endpoint for every user; used when the push service reports it gone."""
        try:
            async with self._database.session() as session:
                result = await session.execute(
                    delete(PushSubscriptionRow).where(
                        PushSubscriptionRow.endpoint == endpoint
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("push_endpoint_remove_failed", error=str(e))
            return 0
        return result.rowcount

    async def get_user_subscriptions(self, user_id: str) -> List[PushSubscription]:
        """Raises SQLAlchemyError; the push sender reports it as a failure."""
        async with self._database.session() as session:
            rows = (
                await session.scalars(
                    select(PushSubscriptionRow)
                    .where(PushSubscriptionRow.user_id == user_id)
                    .order_by(PushSubscriptionRow.created_at)
                )
            ).all()
        return [PushSubscription.model_validate(row) for row in rows]
