from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import List
from datetime import datetime

from spendwise.db.core import NotificationDB, NotificationType, NotFoundError


def create_db_notification(db: Session, user_id: int, title: str, message: str,
                           notification_type: NotificationType) -> NotificationDB:
    """Insert a notification and commit it on its own"""

    db_notification = NotificationDB(
        user_id=user_id,
        title=title,
        message=message,
        notification_type=notification_type,
        is_read=False,
        created_at=datetime.utcnow()
    )
    db.add(db_notification)
    db.commit()
    db.refresh(db_notification)
    return db_notification


def read_db_notifications(db: Session, user_id: int, unread_only: bool = False,
                          skip: int = 0, limit: int = 100) -> List[NotificationDB]:
    """Read a user's notifications, newest first"""

    query = db.query(NotificationDB).filter(NotificationDB.user_id == user_id)
    if unread_only:
        query = query.filter(NotificationDB.is_read.is_(False))

    return query.order_by(desc(NotificationDB.created_at), desc(NotificationDB.id)).offset(skip).limit(limit).all()


def mark_notification_as_read(db: Session, notification_id: int, user_id: int) -> NotificationDB:
    """Flip is_read on one of the user's notifications"""

    db_notification = db.query(NotificationDB).filter(
        NotificationDB.id == notification_id,
        NotificationDB.user_id == user_id
    ).first()

    if not db_notification:
        raise NotFoundError(f"Notification with id {notification_id} not found")

    db_notification.is_read = True
    db.commit()
    db.refresh(db_notification)
    return db_notification


def mark_all_notifications_as_read(db: Session, user_id: int) -> int:
    """Mark every unread notification of the user as read; returns how many changed"""

    updated = db.query(NotificationDB).filter(
        NotificationDB.user_id == user_id,
        NotificationDB.is_read.is_(False)
    ).update({NotificationDB.is_read: True}, synchronize_session=False)
    db.commit()
    return updated


def delete_db_notification(db: Session, notification_id: int, user_id: int) -> bool:
    """Delete one of the user's notifications"""

    db_notification = db.query(NotificationDB).filter(
        NotificationDB.id == notification_id,
        NotificationDB.user_id == user_id
    ).first()

    if not db_notification:
        raise NotFoundError(f"Notification with id {notification_id} not found")

    db.delete(db_notification)
    db.commit()
    return True
