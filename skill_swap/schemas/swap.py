# skill_swap/schemas/swap.py
"""
Swap Request Pydantic Schemas

Request bodies for the swap-request lifecycle and the response models the
router serializes swap requests through.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .user import Priority, UserSummary


SwapFormat = Literal["IN_PERSON", "VIRTUAL", "HYBRID"]


def _strip_optional(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


# ======================
# REQUEST SCHEMAS
# ======================

class SwapRequestCreate(BaseModel):
    """Body for POST /swap-requests"""
    receiver_id: int = Field(..., ge=1)
    skill_offered: str = Field(..., min_length=2, max_length=100)
    skill_requested: str = Field(..., min_length=2, max_length=100)
    message: Optional[str] = Field(None, max_length=500)
    proposed_schedule: Optional[datetime] = None
    format: SwapFormat = "VIRTUAL"
    duration: int = Field(60, ge=15, le=480, description="Session length in minutes")
    priority: Priority = "MEDIUM"

    @field_validator("skill_offered", "skill_requested")
    @classmethod
    def strip_skill(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Skill must be between 2 and 100 characters")
        return v

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class SwapAcceptRequest(BaseModel):
    """Optional body for POST /swap-requests/{id}/accept"""
    message: Optional[str] = Field(None, max_length=1000)
    meeting_link: Optional[str] = Field(None, max_length=255)
    meeting_time: Optional[datetime] = None

    @field_validator("message", "meeting_link")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class SwapDeclineRequest(BaseModel):
    message: Optional[str] = Field(None, max_length=1000)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class SwapStatusUpdate(BaseModel):
    """Body for the generic PUT /swap-requests/{id}/status"""
    status: str = Field(..., min_length=1, max_length=20)
    message: Optional[str] = Field(None, max_length=1000)

    @field_validator("status")
    @classmethod
    def upper_status(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class SessionScheduleRequest(BaseModel):
    date: datetime
    duration: int = Field(..., ge=15, le=480)
    platform: str = Field(..., min_length=2, max_length=50)
    meeting_link: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("meeting_link", "notes")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


# ======================
# RESPONSE SCHEMAS
# ======================

class MessageOut(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    message_type: str
    is_read: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ScheduledSessionOut(BaseModel):
    id: int
    date: datetime
    duration: int
    platform: str
    meeting_link: Optional[str] = None
    notes: Optional[str] = None
    status: str

    model_config = ConfigDict(from_attributes=True)


class MeetingOut(BaseModel):
    id: int
    title: str
    meeting_link: str
    attendee_email: str
    scheduled_at: Optional[datetime] = None
    duration: int
    status: str

    model_config = ConfigDict(from_attributes=True)


class SwapRequestOut(BaseModel):
    id: int
    requester_id: int
    receiver_id: int
    requester: Optional[UserSummary] = None
    receiver: Optional[UserSummary] = None
    skill_offered: str
    skill_requested: str
    message: Optional[str] = None
    proposed_schedule: Optional[datetime] = None
    format: str
    duration: int
    priority: str
    status: str
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SwapRequestDetail(SwapRequestOut):
    scheduled_session: Optional[ScheduledSessionOut] = None
    meeting: Optional[MeetingOut] = None
    messages: List[MessageOut] = []
