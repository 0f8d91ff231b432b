# skill_swap/models/swap.py
from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, TIMESTAMP, func
from sqlalchemy.orm import relationship
from skill_swap.database import Base


class SwapStatus:
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    CANCELLED = "CANCELLED"
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    EXPIRED = "EXPIRED"

    ALL = (PENDING, ACCEPTED, DECLINED, CANCELLED, SCHEDULED, COMPLETED, EXPIRED)
    # At most one of these may exist between the same two users
    ACTIVE = (PENDING, ACCEPTED, SCHEDULED)
    CANCELLABLE = (PENDING, ACCEPTED)


class SessionStatus:
    SCHEDULED = "SCHEDULED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class SwapRequest(Base):
    __tablename__ = "swap_requests"

    id = Column(Integer, primary_key=True, index=True)
    requester_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_offered = Column(String(100), nullable=False)
    skill_requested = Column(String(100), nullable=False)
    message = Column(String(500))
    proposed_schedule = Column(TIMESTAMP)
    format = Column(String(20), nullable=False, default="VIRTUAL")
    duration = Column(Integer, nullable=False, default=60)
    priority = Column(String(20), nullable=False, default="MEDIUM")
    status = Column(String(20), nullable=False, default=SwapStatus.PENDING, index=True)
    expires_at = Column(TIMESTAMP)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    requester = relationship("User", foreign_keys=[requester_id], back_populates="sent_swap_requests")
    receiver = relationship("User", foreign_keys=[receiver_id], back_populates="received_swap_requests")
    scheduled_session = relationship(
        "ScheduledSession", back_populates="swap_request", uselist=False, cascade="all, delete-orphan"
    )
    meeting = relationship("Meeting", back_populates="swap_request", uselist=False, cascade="all, delete-orphan")
    messages = relationship(
        "Message", back_populates="swap_request", cascade="all, delete-orphan", order_by="Message.id"
    )
    reviews = relationship("Review", back_populates="swap_request", cascade="all, delete-orphan")

    def is_participant(self, user_id: int) -> bool:
        return user_id in (self.requester_id, self.receiver_id)

    def counterpart_of(self, user_id: int) -> int:
        """Get the other party in a swap request"""
        return self.receiver_id if user_id == self.requester_id else self.requester_id


class ScheduledSession(Base):
    __tablename__ = "scheduled_sessions"

    id = Column(Integer, primary_key=True, index=True)
    swap_request_id = Column(
        Integer, ForeignKey("swap_requests.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    date = Column(TIMESTAMP, nullable=False)
    duration = Column(Integer, nullable=False)
    platform = Column(String(50), nullable=False)
    meeting_link = Column(String(255))
    notes = Column(String(500))
    status = Column(String(20), nullable=False, default=SessionStatus.SCHEDULED)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    swap_request = relationship("SwapRequest", back_populates="scheduled_session")


class Meeting(Base):
    """Simple meeting record created when a receiver accepts with a meeting link."""
    __tablename__ = "meetings"

    id = Column(Integer, primary_key=True, index=True)
    organizer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    swap_request_id = Column(
        Integer, ForeignKey("swap_requests.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    attendee_email = Column(String(255), nullable=False)
    attendee_name = Column(String(100))
    title = Column(String(200), nullable=False)
    description = Column(Text)
    meeting_link = Column(String(255), nullable=False)
    scheduled_at = Column(TIMESTAMP)
    duration = Column(Integer, nullable=False, default=60)
    status = Column(String(20), nullable=False, default="SCHEDULED")
    created_at = Column(TIMESTAMP, server_default=func.now())

    swap_request = relationship("SwapRequest", back_populates="meeting")
    organizer = relationship("User")


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    swap_request_id = Column(Integer, ForeignKey("swap_requests.id", ondelete="CASCADE"), index=True)
    content = Column(String(1000), nullable=False)
    message_type = Column(String(20), nullable=False, default="TEXT")
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    swap_request = relationship("SwapRequest", back_populates="messages")
    sender = relationship("User", foreign_keys=[sender_id])
