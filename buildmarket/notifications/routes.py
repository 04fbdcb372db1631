from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from buildmarket.database import get_db
from buildmarket.dependencies import get_current_user
from buildmarket.notifications.crud import get_notifications, count_unread, mark_notification_read, mark_all_read
from buildmarket.notifications.schemas import NotificationResponse, UnreadCountResponse
from buildmarket.users.models import User

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
def get_user_notifications(
    unread_only: bool = False,
    limit: int = 50,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_notifications(db, current_user.id, limit, unread_only)


@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"count": count_unread(db, current_user.id)}


@router.put("/read-all")
def mark_all_as_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    updated = mark_all_read(db, current_user.id)
    return {"message": "All notifications marked as read", "updated": updated}


@router.put("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    notification = mark_notification_read(db, notification_id, current_user.id)
    if not notification:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found"
        )
    return notification
