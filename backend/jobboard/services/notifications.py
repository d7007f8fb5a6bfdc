"""
Notification Sink - per-user message log

Notifications are written only as a side effect of application workflow
transitions, never through a client-facing create. Delivery is best effort:
``notify`` runs in its own session after the primary mutation has committed,
and any failure is logged and dropped so it can never fail the request that
triggered it.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from jobboard.database import store_errors
from jobboard.enums import NotificationType
from jobboard.errors import NotFound
from jobboard.middleware.metrics import record_notification_failure, record_notification_sent
from jobboard.models import Notification

logger = logging.getLogger(__name__)


class NotificationSink:
    """
    Args:
        session: Request session for reads and mark-read updates
        session_factory: Factory for the independent notification write
    """

    def __init__(
        self,
        session: Optional[AsyncSession] = None,
        session_factory: Optional[async_sessionmaker] = None,
    ):
        self.session = session
        self.session_factory = session_factory

    async def notify(
        self,
        user_id: str,
        title: str,
        message: str,
        notification_type: NotificationType = NotificationType.SYSTEM,
    ) -> Optional[Notification]:
        """Insert a notification. Returns None (and logs) if the insert fails."""
        try:
            async with self.session_factory() as session:
                notification = Notification(
                    user_id=user_id,
                    title=title,
                    message=message,
                    type=NotificationType(notification_type).value,
                )
                session.add(notification)
                await session.commit()
        except Exception:
            record_notification_failure()
            logger.warning(f"Dropped notification '{title}' for user {user_id}", exc_info=True)
            return None

        record_notification_sent(notification.type)
        return notification

    async def list(
        self, actor, unread_only: bool = False, limit: int = 50
    ) -> Tuple[List[Notification], int]:
        """Newest-first notifications for the actor, plus their unread count."""
        query = select(Notification).where(Notification.user_id == actor.id)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)

        unread_query = select(func.count(Notification.id)).where(
            Notification.user_id == actor.id,
            Notification.is_read.is_(False),
        )

        with store_errors("get notifications"):
            notifications = list((await self.session.execute(query)).scalars().all())
            unread = (await self.session.execute(unread_query)).scalar_one()

        return notifications, unread

    async def mark_read(self, actor, notification_id: str) -> Notification:
        with store_errors("update notification"):
            notification = await self.session.get(Notification, notification_id)
            # Other users' notifications are reported as missing
            if notification is None or notification.user_id != actor.id:
                raise NotFound("Notification not found")

            notification.is_read = True
            await self.session.commit()

        return notification

    async def mark_all_read(self, actor) -> int:
        with store_errors("update notifications"):
            result = await self.session.execute(
                update(Notification)
                .where(Notification.user_id == actor.id, Notification.is_read.is_(False))
                .values(is_read=True)
            )
            await self.session.commit()

        return result.rowcount or 0
