from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from hr_approvals.core.exceptions import NotFoundError
from hr_approvals.core.schemas import ApiResponse
from hr_approvals.database import get_db
from hr_approvals.dependencies import get_current_reviewer
from hr_approvals.models.notification import Notification
from hr_approvals.schemas.auth import Reviewer
from hr_approvals.schemas.notification import NotificationResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])

@router.get("", response_model=ApiResponse[List[NotificationResponse]])
def get_notifications(
    unread_only: bool = False,
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer)
):
    query = db.query(Notification).filter(Notification.user_id == reviewer.id)
    if unread_only:
        query = query.filter(Notification.is_read == False)  # noqa: E712
    rows = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()
    return ApiResponse.ok([NotificationResponse.model_validate(n) for n in rows], count=len(rows))

@router.patch("/{notification_id}/read", response_model=ApiResponse[NotificationResponse])
def mark_notification_as_read(
    notification_id: int,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer)
):
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == reviewer.id
    ).first()

    # Another user's notification is reported as missing
    if not notification:
        raise NotFoundError("Notification", notification_id)

    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return ApiResponse.ok(NotificationResponse.model_validate(notification))

@router.post("/mark-all-read", response_model=ApiResponse[dict])
def mark_all_notifications_as_read(
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer)
):
    updated = db.query(Notification).filter(
        Notification.user_id == reviewer.id,
        Notification.is_read == False  # noqa: E712
    ).update({Notification.is_read: True}, synchronize_session=False)
    db.commit()
    return ApiResponse.ok({"updated": updated})
