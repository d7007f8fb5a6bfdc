from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.auth import get_current_actor
from jobboard.database import get_db
from jobboard.schemas import MarkAllReadResponse, NotificationListResponse, NotificationResponse
from jobboard.services.identity import Actor
from jobboard.services.notifications import NotificationSink

router = APIRouter()


def get_notification_sink(db: AsyncSession = Depends(get_db)) -> NotificationSink:
    return NotificationSink(session=db)


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    limit: int = Query(50, ge=1, le=100),
    actor: Actor = Depends(get_current_actor),
    sink: NotificationSink = Depends(get_notification_sink),
):
    notifications, unread = await sink.list(actor, unread_only=unread_only, limit=limit)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=unread,
    )


# Registered before /{notification_id}/read so "read-all" is not taken as an id
@router.patch("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    actor: Actor = Depends(get_current_actor),
    sink: NotificationSink = Depends(get_notification_sink),
):
    updated = await sink.mark_all_read(actor)
    return MarkAllReadResponse(updated=updated)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    actor: Actor = Depends(get_current_actor),
    sink: NotificationSink = Depends(get_notification_sink),
):
    notification = await sink.mark_read(actor, notification_id)
    return NotificationResponse.model_validate(notification)
