from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP, func
from sqlalchemy.orm import relationship
from skill_swap.database import Base


class UserStatus:
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    BANNED = "BANNED"


# ---------------- USER (AUTH TABLE) ----------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="member")
    status = Column(String(20), nullable=False, default=UserStatus.ACTIVE, index=True)
    is_public = Column(Boolean, nullable=False, default=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    bio = Column(String(250))
    location = Column(String(100))
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    skills_offered = relationship("SkillOffered", back_populates="user", cascade="all, delete-orphan")
    skills_wanted = relationship("SkillWanted", back_populates="user", cascade="all, delete-orphan")
    reputation = relationship("Reputation", back_populates="user", uselist=False, cascade="all, delete-orphan")
    credit_balance = relationship("CreditBalance", back_populates="user", uselist=False, cascade="all, delete-orphan")
    sent_swap_requests = relationship(
        "SwapRequest", foreign_keys="SwapRequest.requester_id", back_populates="requester"
    )
    received_swap_requests = relationship(
        "SwapRequest", foreign_keys="SwapRequest.receiver_id", back_populates="receiver"
    )

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE
