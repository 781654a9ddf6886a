from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List

from spendwise.auth import CurrentUser, get_current_user
from spendwise.crud import crud_notification
from spendwise.models.notification import NotificationResponse
from spendwise.db.core import get_db, NotFoundError

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
)


@router.get("/", response_model=List[NotificationResponse])
def read_notifications(
    unread_only: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    List the current user's notifications, newest first.
    """
    return crud_notification.read_db_notifications(
        db, user_id=current_user.user_id, unread_only=unread_only, skip=skip, limit=limit
    )


@router.put("/read-all")
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    updated = crud_notification.mark_all_notifications_as_read(db, user_id=current_user.user_id)
    return {"updated": updated}


@router.put("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    try:
        crud_notification.mark_notification_as_read(db, notification_id=notification_id, user_id=current_user.user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found") from e


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    try:
        crud_notification.delete_db_notification(db, notification_id=notification_id, user_id=current_user.user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found") from e
