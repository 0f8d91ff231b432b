# skill_swap/models/review.py
from sqlalchemy import (
    Column, Integer, Text, Boolean, ForeignKey, TIMESTAMP, Float, func,
    CheckConstraint, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from skill_swap.database import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    swap_request_id = Column(Integer, ForeignKey("swap_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewee_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    overall = Column(Integer, nullable=False)
    teaching_quality = Column(Integer)
    reliability = Column(Integer)
    communication = Column(Integer)
    comment = Column(Text)
    is_public = Column(Boolean, nullable=False, default=True)
    helpful = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    # Constraints
    __table_args__ = (
        UniqueConstraint("swap_request_id", "reviewer_id", name="uq_review_swap_reviewer"),
        CheckConstraint("overall >= 1 AND overall <= 5", name="check_overall_range"),
    )

    # Relationships
    swap_request = relationship("SwapRequest", back_populates="reviews")
    reviewer = relationship("User", foreign_keys=[reviewer_id])
    reviewee = relationship("User", foreign_keys=[reviewee_id])


class Reputation(Base):
    __tablename__ = "reputations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    overall_rating = Column(Float, default=0.0, nullable=False)
    teaching_quality = Column(Float, default=0.0, nullable=False)
    reliability = Column(Float, default=0.0, nullable=False)
    communication = Column(Float, default=0.0, nullable=False)
    total_ratings = Column(Integer, default=0, nullable=False)
    trust_score = Column(Float, default=0.0, nullable=False)
    completed_swaps = Column(Integer, default=0, nullable=False)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # Relationship
    user = relationship("User", back_populates="reputation")
