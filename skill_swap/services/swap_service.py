# skill_swap/services/swap_service.py
"""
Swap Request Lifecycle - Business Logic Service

Every transition writes the new status, any Message row and the
counterpart's notification in one database transaction. Emails and
meeting invites run after the commit and can never undo it.

    PENDING --accept--> ACCEPTED --schedule--> SCHEDULED --complete--> COMPLETED
       |                  |   ^------cancel session---'                 ^
       |                  '---------------complete----------------------'
       |--decline--> DECLINED
       '--cancel---> (deleted)          ACCEPTED --cancel--> (deleted)
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from skill_swap import models
from skill_swap.config import settings
from skill_swap.models.credit import CreditTransactionType
from skill_swap.models.swap import SessionStatus, SwapStatus
from skill_swap.schemas.swap import SessionScheduleRequest, SwapRequestCreate
from skill_swap.services import achievement_service, credit_service, notification_service, reputation_service
from skill_swap.services.achievement_service import AchievementCategory
from skill_swap.services.effects import AfterCommit, commit_then_run
from skill_swap.services.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from skill_swap.services.notification_service import NotificationEvent
from skill_swap.utils.email import send_meeting_invite
from skill_swap.utils.timeutil import utcnow

logger = logging.getLogger(__name__)

MEETING_INVITE_EFFECT = "meeting_invite"

# Targets accepted by the generic status endpoint
UPDATABLE_STATUSES = (
    SwapStatus.ACCEPTED,
    SwapStatus.DECLINED,
    SwapStatus.CANCELLED,
    SwapStatus.COMPLETED,
)


# ======================
# HELPERS
# ======================

def _swap_url(swap_id: int) -> str:
    return f"/swap-requests/{swap_id}"


def get_swap_request(db: Session, swap_id: int) -> models.SwapRequest:
    swap = db.query(models.SwapRequest).filter(models.SwapRequest.id == swap_id).first()
    if not swap:
        raise NotFoundError("Swap request not found")
    return swap


def get_swap_request_for_participant(db: Session, swap_id: int, user_id: int) -> models.SwapRequest:
    swap = get_swap_request(db, swap_id)
    if not swap.is_participant(user_id):
        raise AuthorizationError("Not authorized to view this swap request")
    return swap


def find_active_between(db: Session, user_a: int, user_b: int) -> Optional[models.SwapRequest]:
    """PENDING or ACCEPTED request between two users, in either direction."""
    return db.query(models.SwapRequest).filter(
        models.SwapRequest.status.in_(SwapStatus.ACTIVE),
        or_(
            and_(models.SwapRequest.requester_id == user_a, models.SwapRequest.receiver_id == user_b),
            and_(models.SwapRequest.requester_id == user_b, models.SwapRequest.receiver_id == user_a),
        ),
    ).first()


def _append_message(db: Session, swap: models.SwapRequest, sender_id: int, content: Optional[str]) -> None:
    if not content:
        return
    db.add(models.Message(
        sender_id=sender_id,
        receiver_id=swap.counterpart_of(sender_id),
        swap_request_id=swap.id,
        content=content,
        message_type="TEXT",
    ))
    db.flush()


# ======================
# CREATE
# ======================

def create_swap_request(db: Session, requester: models.User, data: SwapRequestCreate) -> models.SwapRequest:
    """
    Open a new PENDING swap request and notify the receiver.

    Raises:
        ValidationError: Self-target, or receiver inactive/private
        NotFoundError: Receiver does not exist
        ConflictError: An unfinished request already links the pair
    """
    if data.receiver_id == requester.id:
        raise ValidationError("Cannot send swap request to yourself")

    receiver = db.query(models.User).filter(models.User.id == data.receiver_id).first()
    if not receiver:
        raise NotFoundError("Receiver not found")

    if not receiver.is_active or not receiver.is_public:
        raise ValidationError("Receiver is not available for swaps")

    if find_active_between(db, requester.id, receiver.id):
        raise ConflictError("A pending request already exists between you and this user")

    effects = AfterCommit()
    swap = models.SwapRequest(
        requester_id=requester.id,
        receiver_id=receiver.id,
        skill_offered=data.skill_offered,
        skill_requested=data.skill_requested,
        message=data.message,
        proposed_schedule=data.proposed_schedule,
        format=data.format,
        duration=data.duration,
        priority=data.priority,
        status=SwapStatus.PENDING,
        expires_at=utcnow() + timedelta(days=settings.SWAP_REQUEST_EXPIRY_DAYS),
    )
    db.add(swap)
    db.flush()

    notification_service.notify(
        db,
        effects,
        recipient_id=receiver.id,
        actor_id=requester.id,
        swap_request_id=swap.id,
        title="New Swap Request",
        message=f"{requester.name} wants to swap {swap.skill_offered} for {swap.skill_requested}",
        event_type=NotificationEvent.SWAP_REQUEST,
        action_url=_swap_url(swap.id),
    )

    commit_then_run(db, effects, "create swap request")
    db.refresh(swap)
    logger.info("Swap request created (id=%s, requester_id=%s, receiver_id=%s)", swap.id, requester.id, receiver.id)
    return swap


# ======================
# READS
# ======================

def list_swap_requests(
    db: Session,
    user_id: int,
    request_type: str = "all",
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Dict[str, Any]:
    """Caller's requests, newest first, with pagination metadata."""
    query = db.query(models.SwapRequest)
    if request_type == "sent":
        query = query.filter(models.SwapRequest.requester_id == user_id)
    elif request_type == "received":
        query = query.filter(models.SwapRequest.receiver_id == user_id)
    elif request_type == "all":
        query = query.filter(or_(
            models.SwapRequest.requester_id == user_id,
            models.SwapRequest.receiver_id == user_id,
        ))
    else:
        raise ValidationError("type must be one of: all, sent, received")

    if status:
        status = status.upper()
        if status not in SwapStatus.ALL:
            raise ValidationError(f"Unknown status '{status}'")
        query = query.filter(models.SwapRequest.status == status)

    total = query.count()
    items = (
        query.order_by(models.SwapRequest.created_at.desc(), models.SwapRequest.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "swap_requests": items,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": (total + limit - 1) // limit,
        },
    }


def get_stats(db: Session, user_id: int) -> Dict[str, int]:
    """Count of the caller's requests per status; every status is present."""
    counts = {status: 0 for status in SwapStatus.ALL}
    rows = db.query(models.SwapRequest.status, func.count(models.SwapRequest.id)).filter(
        or_(models.SwapRequest.requester_id == user_id, models.SwapRequest.receiver_id == user_id)
    ).group_by(models.SwapRequest.status).all()
    for status, count in rows:
        counts[status] = count
    counts["total"] = sum(count for _, count in rows)
    return counts


# ======================
# TRANSITIONS (no commit)
# ======================

def _require_receiver_pending(swap: models.SwapRequest, user: models.User, action: str) -> None:
    if swap.receiver_id != user.id:
        raise AuthorizationError(f"Only the receiver can {action} this request")
    if swap.status != SwapStatus.PENDING:
        raise ValidationError(f"Cannot {action} a request that is {swap.status}")


def _apply_accept(
    db: Session,
    swap: models.SwapRequest,
    user: models.User,
    effects: AfterCommit,
    message: Optional[str] = None,
    meeting_link: Optional[str] = None,
    meeting_time: Optional[datetime] = None,
) -> None:
    _require_receiver_pending(swap, user, "accept")

    swap.status = SwapStatus.ACCEPTED
    _append_message(db, swap, user.id, message)

    notification_service.notify(
        db,
        effects,
        recipient_id=swap.requester_id,
        actor_id=user.id,
        swap_request_id=swap.id,
        title="Swap Request Accepted",
        message=f"{user.name} accepted your swap request for {swap.skill_requested}",
        event_type=NotificationEvent.SWAP_ACCEPTED,
        action_url=_swap_url(swap.id),
    )

    if not meeting_link:
        return

    requester = swap.requester
    meeting = models.Meeting(
        organizer_id=user.id,
        swap_request_id=swap.id,
        attendee_email=requester.email,
        attendee_name=requester.name,
        title=f"Skill Swap: {swap.skill_offered} <-> {swap.skill_requested}",
        description=message or "Your skill swap meeting is ready!",
        meeting_link=meeting_link,
        scheduled_at=meeting_time or swap.proposed_schedule,
        duration=swap.duration,
        status="SCHEDULED",
    )
    db.add(meeting)
    db.flush()

    effects.add(
        MEETING_INVITE_EFFECT,
        send_meeting_invite,
        organizer_name=user.name,
        attendee_email=meeting.attendee_email,
        attendee_name=meeting.attendee_name,
        title=meeting.title,
        description=meeting.description,
        meeting_link=meeting.meeting_link,
        scheduled_at=meeting.scheduled_at,
        duration=meeting.duration,
    )


def _apply_decline(
    db: Session,
    swap: models.SwapRequest,
    user: models.User,
    effects: AfterCommit,
    message: Optional[str] = None,
) -> None:
    _require_receiver_pending(swap, user, "decline")

    swap.status = SwapStatus.DECLINED
    _append_message(db, swap, user.id, message)

    notification_service.notify(
        db,
        effects,
        recipient_id=swap.requester_id,
        actor_id=user.id,
        swap_request_id=swap.id,
        title="Swap Request Declined",
        message=f"{user.name} declined your swap request for {swap.skill_requested}",
        event_type=NotificationEvent.SWAP_DECLINED,
        action_url=_swap_url(swap.id),
    )


def _require_requester_cancellable(swap: models.SwapRequest, user: models.User) -> None:
    if swap.requester_id != user.id:
        raise AuthorizationError("Only the requester can cancel this request")
    if swap.status not in SwapStatus.CANCELLABLE:
        raise ValidationError(f"Cannot cancel a request that is {swap.status}")


def _notify_cancelled(db: Session, swap: models.SwapRequest, user: models.User, effects: AfterCommit,
                      swap_request_id: Optional[int]) -> None:
    notification_service.notify(
        db,
        effects,
        recipient_id=swap.receiver_id,
        actor_id=user.id,
        swap_request_id=swap_request_id,
        title="Swap Request Cancelled",
        message=f"{user.name} cancelled their swap request for {swap.skill_requested}",
        event_type=NotificationEvent.SWAP_CANCELLED,
    )


def _apply_complete(
    db: Session,
    swap: models.SwapRequest,
    user: models.User,
    effects: AfterCommit,
    message: Optional[str] = None,
) -> int:
    if not swap.is_participant(user.id):
        raise AuthorizationError("Only participants can complete this swap")
    if swap.status not in (SwapStatus.ACCEPTED, SwapStatus.SCHEDULED):
        raise ValidationError(f"Cannot complete a request that is {swap.status}")

    swap.status = SwapStatus.COMPLETED
    if swap.scheduled_session is not None:
        swap.scheduled_session.status = SessionStatus.COMPLETED
    _append_message(db, swap, user.id, message)
    db.flush()

    credits = credit_service.session_credit_amount(swap.duration)
    participants = (swap.requester_id, swap.receiver_id)
    for participant_id in participants:
        if credits > 0:
            credit_service.award_credits(
                db,
                participant_id,
                credits,
                CreditTransactionType.SESSION_COMPLETED,
                f"Completed swap #{swap.id} ({swap.duration} min)",
            )
        reputation_service.recompute_reputation(db, participant_id)
        achievement_service.check_and_award(db, participant_id, AchievementCategory.SWAP, effects)

    notification_service.notify(
        db,
        effects,
        recipient_id=swap.counterpart_of(user.id),
        actor_id=user.id,
        swap_request_id=swap.id,
        title="Swap Completed",
        message=f"{user.name} marked your swap as completed. Leave a review!",
        event_type=NotificationEvent.SWAP_COMPLETED,
        action_url=_swap_url(swap.id),
    )
    return credits


# ======================
# TRANSITIONS (public)
# ======================

def accept_swap_request(
    db: Session,
    user: models.User,
    swap_id: int,
    message: Optional[str] = None,
    meeting_link: Optional[str] = None,
    meeting_time: Optional[datetime] = None,
) -> Tuple[models.SwapRequest, bool]:
    """
    Accept a PENDING request as its receiver.

    Returns:
        (swap request, whether a meeting invite email went out)
    """
    swap = get_swap_request(db, swap_id)
    effects = AfterCommit()
    _apply_accept(db, swap, user, effects, message, meeting_link, meeting_time)

    results = commit_then_run(db, effects, "accept swap request")
    email_sent = results.get(MEETING_INVITE_EFFECT, False)
    if meeting_link and not email_sent:
        logger.warning("Meeting invite not sent (swap_request_id=%s)", swap_id)

    db.refresh(swap)
    return swap, email_sent


def decline_swap_request(db: Session, user: models.User, swap_id: int, message: Optional[str] = None) -> models.SwapRequest:
    swap = get_swap_request(db, swap_id)
    effects = AfterCommit()
    _apply_decline(db, swap, user, effects, message)

    commit_then_run(db, effects, "decline swap request")
    db.refresh(swap)
    return swap


def cancel_swap_request(db: Session, user: models.User, swap_id: int) -> None:
    """
    Withdraw a PENDING or ACCEPTED request as its requester.

    The row and everything it owns are deleted; the receiver keeps a
    notification without a link.
    """
    swap = get_swap_request(db, swap_id)
    _require_requester_cancellable(swap, user)

    effects = AfterCommit()
    _notify_cancelled(db, swap, user, effects, swap_request_id=None)
    db.delete(swap)

    commit_then_run(db, effects, "cancel swap request")
    logger.info("Swap request cancelled and deleted (id=%s)", swap_id)


def complete_swap_request(db: Session, user: models.User, swap_id: int) -> Tuple[models.SwapRequest, int]:
    """
    Mark an ACCEPTED or SCHEDULED swap completed.

    Returns:
        (swap request, credits awarded to each participant)
    """
    swap = get_swap_request(db, swap_id)
    effects = AfterCommit()
    credits = _apply_complete(db, swap, user, effects)

    commit_then_run(db, effects, "complete swap request")
    db.refresh(swap)
    return swap, credits


def update_status(
    db: Session,
    user: models.User,
    swap_id: int,
    new_status: str,
    message: Optional[str] = None,
) -> models.SwapRequest:
    """
    Generic transition entry point with the same per-status rules as the
    dedicated endpoints. CANCELLED here keeps the row so the appended
    message stays attached.
    """
    if new_status not in UPDATABLE_STATUSES:
        raise ValidationError(f"Invalid status '{new_status}'")

    swap = get_swap_request(db, swap_id)
    effects = AfterCommit()

    if new_status == SwapStatus.ACCEPTED:
        _apply_accept(db, swap, user, effects, message)
    elif new_status == SwapStatus.DECLINED:
        _apply_decline(db, swap, user, effects, message)
    elif new_status == SwapStatus.COMPLETED:
        _apply_complete(db, swap, user, effects, message)
    else:
        _require_requester_cancellable(swap, user)
        swap.status = SwapStatus.CANCELLED
        _append_message(db, swap, user.id, message)
        _notify_cancelled(db, swap, user, effects, swap_request_id=swap.id)

    commit_then_run(db, effects, "update swap request status")
    db.refresh(swap)
    logger.info("Swap request status updated (id=%s, status=%s)", swap.id, swap.status)
    return swap


# ======================
# SESSIONS
# ======================

def schedule_session(db: Session, user: models.User, swap_id: int, data: SessionScheduleRequest) -> models.SwapRequest:
    """Create or replace the session of an ACCEPTED/SCHEDULED swap."""
    swap = get_swap_request_for_participant(db, swap_id, user.id)
    if swap.status not in (SwapStatus.ACCEPTED, SwapStatus.SCHEDULED):
        raise ValidationError("Can only schedule sessions for accepted requests")

    session = swap.scheduled_session
    if session is None:
        session = models.ScheduledSession(swap_request_id=swap.id)
        db.add(session)
    session.date = data.date
    session.duration = data.duration
    session.platform = data.platform
    session.meeting_link = data.meeting_link
    session.notes = data.notes
    session.status = SessionStatus.SCHEDULED
    swap.status = SwapStatus.SCHEDULED
    db.flush()

    effects = AfterCommit()
    notification_service.notify(
        db,
        effects,
        recipient_id=swap.counterpart_of(user.id),
        actor_id=user.id,
        swap_request_id=swap.id,
        title="Session Scheduled",
        message=f"{user.name} scheduled your swap session for {data.date:%Y-%m-%d %H:%M}",
        event_type=NotificationEvent.SESSION_SCHEDULED,
        action_url=_swap_url(swap.id),
    )

    commit_then_run(db, effects, "schedule session")
    db.refresh(swap)
    return swap


def cancel_session(db: Session, user: models.User, swap_id: int) -> models.SwapRequest:
    """Cancel the scheduled session and return the swap to ACCEPTED."""
    swap = get_swap_request_for_participant(db, swap_id, user.id)
    session = swap.scheduled_session
    if swap.status != SwapStatus.SCHEDULED or session is None:
        raise ValidationError("No scheduled session to cancel")

    session.status = SessionStatus.CANCELLED
    swap.status = SwapStatus.ACCEPTED

    effects = AfterCommit()
    notification_service.notify(
        db,
        effects,
        recipient_id=swap.counterpart_of(user.id),
        actor_id=user.id,
        swap_request_id=swap.id,
        title="Session Cancelled",
        message=f"{user.name} cancelled the scheduled swap session",
        event_type=NotificationEvent.SESSION_CANCELLED,
        action_url=_swap_url(swap.id),
    )

    commit_then_run(db, effects, "cancel session")
    db.refresh(swap)
    return swap
