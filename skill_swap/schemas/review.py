# skill_swap/schemas/review.py
"""
Review & Reputation Pydantic Schemas
Request/response models with validation
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, Optional
from datetime import datetime


def _clean_comment(v: Optional[str]) -> Optional[str]:
    """Validate comment is not just whitespace"""
    if v is not None and v.strip() == "":
        raise ValueError("Comment cannot be empty or just whitespace")
    return v.strip() if v else None


# ======================
# REVIEW SCHEMAS
# ======================

class ReviewCreate(BaseModel):
    """Schema for creating a review"""
    swap_request_id: int = Field(..., ge=1, description="Completed swap request being reviewed")
    reviewee_id: Optional[int] = Field(None, ge=1, description="Must be the other participant when given")
    overall: int = Field(..., ge=1, le=5, description="Overall rating from 1 to 5 stars")
    teaching_quality: Optional[int] = Field(None, ge=1, le=5)
    reliability: Optional[int] = Field(None, ge=1, le=5)
    communication: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000, description="Review comment (max 1000 chars)")
    is_public: bool = True

    @field_validator("comment")
    @classmethod
    def validate_comment(cls, v):
        return _clean_comment(v)


class ReviewUpdate(BaseModel):
    """Schema for updating a review"""
    overall: Optional[int] = Field(None, ge=1, le=5)
    teaching_quality: Optional[int] = Field(None, ge=1, le=5)
    reliability: Optional[int] = Field(None, ge=1, le=5)
    communication: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)
    is_public: Optional[bool] = None

    @field_validator("comment")
    @classmethod
    def validate_comment(cls, v):
        return _clean_comment(v)


class ReviewResponse(BaseModel):
    """Review response for API"""
    id: int
    swap_request_id: int
    reviewer_id: int
    reviewer_name: Optional[str] = None
    reviewee_id: int
    overall: int
    teaching_quality: Optional[int] = None
    reliability: Optional[int] = None
    communication: Optional[int] = None
    comment: Optional[str] = None
    is_public: bool
    helpful: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ======================
# REPUTATION SCHEMAS
# ======================

class ReputationResponse(BaseModel):
    """Derived rating aggregate for one user"""
    user_id: int
    overall_rating: float = Field(..., description="Average overall rating (0-5)")
    teaching_quality: float
    reliability: float
    communication: float
    total_ratings: int
    trust_score: float = Field(..., description="Bounded 0-100 trust heuristic")
    completed_swaps: int
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RatingStatsResponse(BaseModel):
    user_id: int
    average_rating: float
    total_reviews: int
    rating_distribution: Dict[int, int] = Field(..., description="Count of each overall rating (1-5)")
    rating_distribution_percentage: Dict[int, float]
