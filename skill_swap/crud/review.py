# skill_swap/crud/review.py
"""
Review & Reputation CRUD Operations

Flush-only database helpers; callers own the transaction.
"""

from sqlalchemy.orm import Session
from sqlalchemy import func, or_
from typing import Optional, List

from skill_swap.models.review import Review, Reputation
from skill_swap.models.swap import SwapRequest, SwapStatus


# ======================
# REVIEW CRUD
# ======================

def create_review(
    db: Session,
    swap_request_id: int,
    reviewer_id: int,
    reviewee_id: int,
    overall: int,
    teaching_quality: Optional[int] = None,
    reliability: Optional[int] = None,
    communication: Optional[int] = None,
    comment: Optional[str] = None,
    is_public: bool = True,
) -> Review:
    """
    Create a new review for a completed swap.

    Raises:
        ValueError: If a rating is out of range
    """
    for value in (overall, teaching_quality, reliability, communication):
        if value is not None and not (1 <= value <= 5):
            raise ValueError("Rating must be between 1 and 5")

    review = Review(
        swap_request_id=swap_request_id,
        reviewer_id=reviewer_id,
        reviewee_id=reviewee_id,
        overall=overall,
        teaching_quality=teaching_quality,
        reliability=reliability,
        communication=communication,
        comment=comment,
        is_public=is_public,
    )

    db.add(review)
    db.flush()
    return review


def get_review_by_id(db: Session, review_id: int) -> Optional[Review]:
    return db.query(Review).filter(Review.id == review_id).first()


def get_review_by_swap_and_reviewer(db: Session, swap_request_id: int, reviewer_id: int) -> Optional[Review]:
    """Get the review one participant left for a swap, if any."""
    return db.query(Review).filter(
        Review.swap_request_id == swap_request_id,
        Review.reviewer_id == reviewer_id,
    ).first()


def get_reviews_for_user(
    db: Session,
    reviewee_id: int,
    rating_filter: str = "all",
    public_only: bool = True,
    limit: int = 50,
    offset: int = 0
) -> List[Review]:
    """
    Get reviews received by a user, newest first.

    rating_filter: "positive" keeps overall >= 4, "negative" keeps overall <= 2.
    """
    query = db.query(Review).filter(Review.reviewee_id == reviewee_id)
    if public_only:
        query = query.filter(Review.is_public.is_(True))
    if rating_filter == "positive":
        query = query.filter(Review.overall >= 4)
    elif rating_filter == "negative":
        query = query.filter(Review.overall <= 2)

    return (
        query
        .order_by(Review.created_at.desc(), Review.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )


def get_reviews_for_swap(db: Session, swap_request_id: int, public_only: bool = True) -> List[Review]:
    query = db.query(Review).filter(Review.swap_request_id == swap_request_id)
    if public_only:
        query = query.filter(Review.is_public.is_(True))
    return query.order_by(Review.id).all()


RATING_FIELDS = ("overall", "teaching_quality", "reliability", "communication")
REQUIRED_FIELDS = ("overall", "is_public")


def update_review(db: Session, review: Review, **fields) -> Review:
    """
    Apply the given fields to a review. An explicit None clears an
    optional field.

    Raises:
        ValueError: If a rating is out of range or a required field is cleared
    """
    for key, value in fields.items():
        if value is None and key in REQUIRED_FIELDS:
            raise ValueError(f"{key} cannot be cleared")
        if value is not None and key in RATING_FIELDS and not (1 <= value <= 5):
            raise ValueError("Rating must be between 1 and 5")

    for key, value in fields.items():
        setattr(review, key, value)

    db.flush()
    return review


def delete_review(db: Session, review: Review) -> None:
    db.delete(review)
    db.flush()


# ======================
# REPUTATION CRUD
# ======================

def get_or_create_reputation(db: Session, user_id: int) -> Reputation:
    """
    Get or create the single reputation record for a user.
    """
    reputation = db.query(Reputation).filter(
        Reputation.user_id == user_id
    ).first()

    if not reputation:
        reputation = Reputation(
            user_id=user_id,
            overall_rating=0.0,
            teaching_quality=0.0,
            reliability=0.0,
            communication=0.0,
            total_ratings=0,
            trust_score=0.0,
            completed_swaps=0,
        )
        db.add(reputation)
        db.flush()

    return reputation


def get_reputation(db: Session, user_id: int) -> Optional[Reputation]:
    return db.query(Reputation).filter(Reputation.user_id == user_id).first()


def calculate_rating_averages(db: Session, reviewee_id: int) -> dict:
    """
    Average every rating dimension over all reviews a user received.

    Returns:
        Dictionary with overall, teaching_quality, reliability,
        communication (0.0 when there is nothing to average) and total
    """
    result = db.query(
        func.avg(Review.overall).label("overall"),
        func.avg(Review.teaching_quality).label("teaching_quality"),
        func.avg(Review.reliability).label("reliability"),
        func.avg(Review.communication).label("communication"),
        func.count(Review.id).label("total"),
    ).filter(
        Review.reviewee_id == reviewee_id
    ).first()

    return {
        "overall": float(result.overall) if result.overall else 0.0,
        "teaching_quality": float(result.teaching_quality) if result.teaching_quality else 0.0,
        "reliability": float(result.reliability) if result.reliability else 0.0,
        "communication": float(result.communication) if result.communication else 0.0,
        "total": int(result.total) if result.total else 0,
    }


def count_completed_swaps(db: Session, user_id: int) -> int:
    """Completed swap requests where the user is either participant."""
    return db.query(func.count(SwapRequest.id)).filter(
        SwapRequest.status == SwapStatus.COMPLETED,
        or_(SwapRequest.requester_id == user_id, SwapRequest.receiver_id == user_id),
    ).scalar() or 0


def get_rating_distribution(db: Session, reviewee_id: int) -> dict:
    """
    Get distribution of overall ratings for a user.

    Returns:
        Dictionary with rating counts: {1: count, 2: count, ...}
    """
    distribution = {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}

    results = db.query(
        Review.overall,
        func.count(Review.id).label('count')
    ).filter(
        Review.reviewee_id == reviewee_id
    ).group_by(
        Review.overall
    ).all()

    for rating, count in results:
        distribution[rating] = count

    return distribution
