from __future__ import annotations

import logging
import threading
from typing import List, Optional

from sqlalchemy.orm import Session

from skill_swap import models
from skill_swap.models.notification import Notification
from skill_swap.services.effects import AfterCommit
from skill_swap.utils.email import is_email_enabled, send_email

logger = logging.getLogger(__name__)


class NotificationEvent:
    SWAP_REQUEST = "SWAP_REQUEST"
    SWAP_ACCEPTED = "SWAP_ACCEPTED"
    SWAP_DECLINED = "SWAP_DECLINED"
    SWAP_CANCELLED = "SWAP_CANCELLED"
    SWAP_COMPLETED = "SWAP_COMPLETED"
    SESSION_SCHEDULED = "SESSION_SCHEDULED"
    SESSION_CANCELLED = "SESSION_CANCELLED"
    REVIEW_RECEIVED = "REVIEW_RECEIVED"
    CREDIT_RECEIVED = "CREDIT_RECEIVED"
    ACHIEVEMENT_EARNED = "ACHIEVEMENT_EARNED"


# Events without a subject here stay in-app only
EMAIL_SUBJECT_BY_EVENT = {
    NotificationEvent.SWAP_REQUEST: "New swap request on Skill Swap",
    NotificationEvent.SWAP_ACCEPTED: "Your swap request was accepted on Skill Swap",
    NotificationEvent.SWAP_DECLINED: "Swap request update on Skill Swap",
    NotificationEvent.SWAP_CANCELLED: "Swap request cancelled on Skill Swap",
    NotificationEvent.SWAP_COMPLETED: "Swap marked completed on Skill Swap",
    NotificationEvent.SESSION_SCHEDULED: "Session scheduled on Skill Swap",
    NotificationEvent.SESSION_CANCELLED: "Session cancelled on Skill Swap",
    NotificationEvent.REVIEW_RECEIVED: "You received a new review on Skill Swap",
    NotificationEvent.ACHIEVEMENT_EARNED: "Achievement unlocked on Skill Swap",
}


def list_user_notifications(
    db: Session,
    *,
    user_id: int,
    unread_only: bool = False,
    limit: int = 50,
) -> List[Notification]:
    query = db.query(Notification).filter(Notification.recipient_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()


def mark_notification_read(
    db: Session,
    *,
    user_id: int,
    notification_id: int,
) -> Optional[Notification]:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.recipient_id == user_id,
    ).first()
    if not notification:
        return None
    notification.is_read = True
    db.commit()
    return notification


def mark_all_notifications_read(db: Session, *, user_id: int) -> int:
    updated = db.query(Notification).filter(
        Notification.recipient_id == user_id,
        Notification.is_read.is_(False),
    ).update({"is_read": True}, synchronize_session=False)
    db.commit()
    return int(updated)


def get_unread_count(db: Session, *, user_id: int) -> int:
    return db.query(Notification).filter(
        Notification.recipient_id == user_id,
        Notification.is_read.is_(False),
    ).count()


def create_notification(
    db: Session,
    *,
    recipient_id: int,
    title: str,
    message: str,
    event_type: str,
    action_url: Optional[str] = None,
    actor_id: Optional[int] = None,
    swap_request_id: Optional[int] = None,
) -> Notification:
    """Insert a notification in the caller's transaction. Flushes, never commits."""
    notification = Notification(
        recipient_id=recipient_id,
        actor_id=actor_id,
        swap_request_id=swap_request_id,
        event_type=event_type,
        title=title,
        message=message,
        action_url=action_url,
    )
    db.add(notification)
    db.flush()
    return notification


def notify(
    db: Session,
    effects: Optional[AfterCommit] = None,
    **fields,
) -> Notification:
    """
    create_notification plus, when an AfterCommit list is given, a queued
    email for the notification once the transaction commits.
    """
    notification = create_notification(db, **fields)
    if effects is not None and notification.event_type in EMAIL_SUBJECT_BY_EVENT:
        effects.add(
            f"email:notification:{notification.id}",
            dispatch_email_for_notification,
            db,
            notification,
        )
    return notification


def _send_notification_email(to_email: str, subject: str, body_text: str, *, notification_id: Optional[int], recipient_id: Optional[int]) -> None:
    """Send SMTP mail in a background thread so API latency stays low."""
    sent = send_email(
        to_email=to_email,
        subject=subject,
        body_text=body_text,
    )
    if not sent:
        logger.info(
            "Notification email not sent (recipient_id=%s, notification_id=%s)",
            recipient_id,
            notification_id,
        )


def dispatch_email_for_notification(db: Session, notification: Notification) -> bool:
    """
    Best-effort email delivery for a committed notification.
    This function never raises and should not impact request success.
    """
    try:
        if not is_email_enabled():
            return False

        recipient = db.query(models.User).filter(
            models.User.id == notification.recipient_id
        ).first()
        if not recipient or not recipient.email:
            return False

        subject = EMAIL_SUBJECT_BY_EVENT.get(
            notification.event_type,
            "New notification from Skill Swap",
        )
        recipient_name = (recipient.name or "there").strip() or "there"
        body_text = (
            f"Hi {recipient_name},\n\n"
            f"{notification.title}\n"
            f"{notification.message}\n\n"
            f"Swap request: {notification.swap_request_id or 'N/A'}\n\n"
            "Open Skill Swap to view details."
        )

        worker = threading.Thread(
            target=_send_notification_email,
            args=(
                recipient.email,
                subject,
                body_text,
            ),
            kwargs={
                "notification_id": notification.id,
                "recipient_id": notification.recipient_id,
            },
            daemon=True,
        )
        worker.start()
        return True
    except Exception as exc:
        logger.warning(
            "Notification email dispatch failed (notification_id=%s): %s",
            getattr(notification, "id", None),
            exc,
        )
        return False
