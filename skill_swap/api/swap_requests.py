# skill_swap/api/swap_requests.py
"""
Swap Request API

Thin HTTP layer over services.swap_service; service errors are turned into
responses by the application's exception handlers.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from skill_swap import models
from skill_swap.database import get_db
from skill_swap.schemas.swap import (
    SessionScheduleRequest,
    SwapAcceptRequest,
    SwapDeclineRequest,
    SwapRequestCreate,
    SwapRequestDetail,
    SwapRequestOut,
    SwapStatusUpdate,
)
from skill_swap.services import swap_service
from skill_swap.utils.security import get_current_user

router = APIRouter(prefix="/swap-requests", tags=["Swap Requests"])


def _listing(db: Session, user: models.User, request_type: str, status_filter: Optional[str], page: int, limit: int):
    result = swap_service.list_swap_requests(
        db,
        user.id,
        request_type=request_type,
        status=status_filter,
        page=page,
        limit=limit,
    )
    return {
        "swap_requests": [SwapRequestOut.model_validate(s) for s in result["swap_requests"]],
        "pagination": result["pagination"],
    }


# ======================
# CREATE / LIST
# ======================

@router.post("", status_code=status.HTTP_201_CREATED)
def create_swap_request(
    payload: SwapRequestCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    swap = swap_service.create_swap_request(db, current_user, payload)
    return {
        "message": "Swap request sent successfully",
        "swap_request": SwapRequestOut.model_validate(swap),
    }


@router.get("")
def list_swap_requests(
    type: str = Query("all", pattern="^(all|sent|received)$"),
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return _listing(db, current_user, type, status_filter, page, limit)


@router.get("/sent")
def list_sent_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return _listing(db, current_user, "sent", status_filter, page, limit)


@router.get("/received")
def list_received_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return _listing(db, current_user, "received", status_filter, page, limit)


@router.get("/stats")
def get_swap_stats(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return {"stats": swap_service.get_stats(db, current_user.id)}


@router.get("/{swap_id}")
def get_swap_request(
    swap_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    swap = swap_service.get_swap_request_for_participant(db, swap_id, current_user.id)
    return {"swap_request": SwapRequestDetail.model_validate(swap)}


# ======================
# TRANSITIONS
# ======================

@router.post("/{swap_id}/accept")
def accept_swap_request(
    swap_id: int,
    payload: Optional[SwapAcceptRequest] = Body(None),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    payload = payload or SwapAcceptRequest()
    swap, email_sent = swap_service.accept_swap_request(
        db,
        current_user,
        swap_id,
        message=payload.message,
        meeting_link=payload.meeting_link,
        meeting_time=payload.meeting_time,
    )
    return {
        "message": "Swap request accepted",
        "swap_request": SwapRequestOut.model_validate(swap),
        "email_sent": email_sent,
    }


@router.post("/{swap_id}/decline")
def decline_swap_request(
    swap_id: int,
    payload: Optional[SwapDeclineRequest] = Body(None),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    swap = swap_service.decline_swap_request(
        db,
        current_user,
        swap_id,
        message=payload.message if payload else None,
    )
    return {
        "message": "Swap request declined",
        "swap_request": SwapRequestOut.model_validate(swap),
    }


@router.delete("/{swap_id}")
def cancel_swap_request(
    swap_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    swap_service.cancel_swap_request(db, current_user, swap_id)
    return {"message": "Swap request cancelled", "id": swap_id}


@router.put("/{swap_id}/status")
def update_swap_status(
    swap_id: int,
    payload: SwapStatusUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    swap = swap_service.update_status(db, current_user, swap_id, payload.status, payload.message)
    return {
        "message": f"Swap request {swap.status.lower()}",
        "swap_request": SwapRequestOut.model_validate(swap),
    }


@router.post("/{swap_id}/complete")
def complete_swap_request(
    swap_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    swap, credits = swap_service.complete_swap_request(db, current_user, swap_id)
    return {
        "message": "Swap completed",
        "swap_request": SwapRequestOut.model_validate(swap),
        "credits_awarded": credits,
    }


# ======================
# SESSIONS
# ======================

@router.post("/{swap_id}/schedule")
def schedule_session(
    swap_id: int,
    payload: SessionScheduleRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    swap = swap_service.schedule_session(db, current_user, swap_id, payload)
    return {
        "message": "Session scheduled",
        "swap_request": SwapRequestDetail.model_validate(swap),
    }


@router.post("/{swap_id}/schedule/cancel")
def cancel_session(
    swap_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    swap = swap_service.cancel_session(db, current_user, swap_id)
    return {
        "message": "Session cancelled",
        "swap_request": SwapRequestDetail.model_validate(swap),
    }
