# skill_swap/services/review_service.py
"""
Review Service Layer
Business logic for review submission and reputation upkeep
"""

import logging
from typing import Dict, Any, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skill_swap import models
from skill_swap.config import settings
from skill_swap.crud import review as review_crud
from skill_swap.models.credit import CreditTransactionType
from skill_swap.models.review import Review
from skill_swap.models.swap import SwapStatus
from skill_swap.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from skill_swap.services import achievement_service, credit_service, notification_service, reputation_service
from skill_swap.services.achievement_service import AchievementCategory
from skill_swap.services.effects import AfterCommit, commit_then_run
from skill_swap.services.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from skill_swap.services.notification_service import NotificationEvent

logger = logging.getLogger(__name__)


# ======================
# REVIEW SUBMISSION
# ======================

def submit_review(db: Session, reviewer: models.User, data: ReviewCreate) -> Review:
    """
    Submit a review for a completed swap.

    Creates the review, recomputes the reviewee's reputation, notifies the
    reviewee, rewards the reviewer and checks rating achievements, all in
    one transaction.

    Raises:
        NotFoundError: Swap request does not exist
        ValidationError: Swap not completed, or reviewee is not the other participant
        AuthorizationError: Reviewer did not take part in the swap
        ConflictError: Reviewer already reviewed this swap
    """
    swap = db.query(models.SwapRequest).filter(
        models.SwapRequest.id == data.swap_request_id
    ).first()
    if not swap:
        raise NotFoundError("Swap request not found")

    if swap.status != SwapStatus.COMPLETED:
        raise ValidationError("Can only review completed swaps")

    if not swap.is_participant(reviewer.id):
        raise AuthorizationError("Not authorized to review this swap")

    reviewee_id = swap.counterpart_of(reviewer.id)
    if data.reviewee_id is not None and data.reviewee_id != reviewee_id:
        raise ValidationError("Reviewee must be the other participant of the swap")

    if review_crud.get_review_by_swap_and_reviewer(db, swap.id, reviewer.id):
        raise ConflictError("You have already reviewed this swap")

    effects = AfterCommit()
    try:
        review = review_crud.create_review(
            db,
            swap_request_id=swap.id,
            reviewer_id=reviewer.id,
            reviewee_id=reviewee_id,
            overall=data.overall,
            teaching_quality=data.teaching_quality,
            reliability=data.reliability,
            communication=data.communication,
            comment=data.comment,
            is_public=data.is_public,
        )
    except IntegrityError:
        db.rollback()
        raise ConflictError("You have already reviewed this swap")

    reputation_service.recompute_reputation(db, reviewee_id)

    notification_service.notify(
        db,
        effects,
        recipient_id=reviewee_id,
        actor_id=reviewer.id,
        swap_request_id=swap.id,
        title="New Review",
        message=f"{reviewer.name} left you a {data.overall}-star review",
        event_type=NotificationEvent.REVIEW_RECEIVED,
        action_url=f"/profile/{reviewee_id}",
    )

    credit_service.award_credits(
        db,
        reviewer.id,
        settings.REVIEW_CREDIT_REWARD,
        CreditTransactionType.REVIEW_GIVEN,
        "Review given",
    )

    achievement_service.check_and_award(db, reviewee_id, AchievementCategory.RATING, effects)

    commit_then_run(db, effects, "submit review")
    db.refresh(review)
    logger.info("Review submitted (review_id=%s, swap_request_id=%s)", review.id, swap.id)
    return review


def _get_owned_review(db: Session, review_id: int, user_id: int) -> Review:
    review = review_crud.get_review_by_id(db, review_id)
    if not review:
        raise NotFoundError("Review not found")
    if review.reviewer_id != user_id:
        raise AuthorizationError("Only the reviewer can change this review")
    return review


def update_review(db: Session, user: models.User, review_id: int, data: ReviewUpdate) -> Review:
    """
    Update an existing review and recompute the reviewee's reputation.

    Raises:
        NotFoundError: Review does not exist
        AuthorizationError: Caller did not write the review
    """
    review = _get_owned_review(db, review_id, user.id)

    try:
        review_crud.update_review(db, review, **data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise ValidationError(str(e))

    reputation_service.recompute_reputation(db, review.reviewee_id)
    commit_then_run(db, None, "update review")
    db.refresh(review)
    return review


def delete_review(db: Session, user: models.User, review_id: int) -> None:
    """
    Delete a review and recompute the reviewee's reputation.
    """
    review = _get_owned_review(db, review_id, user.id)
    reviewee_id = review.reviewee_id

    review_crud.delete_review(db, review)
    reputation_service.recompute_reputation(db, reviewee_id)
    commit_then_run(db, None, "delete review")


def mark_helpful(db: Session, review_id: int) -> Review:
    review = review_crud.get_review_by_id(db, review_id)
    if not review:
        raise NotFoundError("Review not found")

    review.helpful = (review.helpful or 0) + 1
    commit_then_run(db, None, "mark review helpful")
    db.refresh(review)
    return review


# ======================
# READS
# ======================

def serialize_review(review: Review) -> ReviewResponse:
    out = ReviewResponse.model_validate(review)
    return out.model_copy(update={"reviewer_name": review.reviewer.name if review.reviewer else None})


def get_reviews_for_user(
    db: Session,
    user_id: int,
    rating_filter: str = "all",
    page: int = 1,
    limit: int = 10,
) -> List[ReviewResponse]:
    if rating_filter not in ("all", "positive", "negative"):
        raise ValidationError("filter must be one of: all, positive, negative")

    reviews = review_crud.get_reviews_for_user(
        db,
        user_id,
        rating_filter=rating_filter,
        limit=limit,
        offset=(page - 1) * limit,
    )
    return [serialize_review(r) for r in reviews]


def get_reviews_for_swap(db: Session, swap_id: int) -> List[ReviewResponse]:
    return [serialize_review(r) for r in review_crud.get_reviews_for_swap(db, swap_id)]


def get_rating_stats(db: Session, user_id: int) -> Dict[str, Any]:
    """
    Averages and distribution of overall ratings received by a user.
    """
    averages = review_crud.calculate_rating_averages(db, user_id)
    distribution = review_crud.get_rating_distribution(db, user_id)
    total = averages["total"]

    percentages = {
        stars: round(count / total * 100, 1) if total > 0 else 0.0
        for stars, count in distribution.items()
    }

    return {
        "user_id": user_id,
        "average_rating": round(averages["overall"], 2),
        "total_reviews": total,
        "rating_distribution": distribution,
        "rating_distribution_percentage": percentages,
    }


def get_reputation(db: Session, user_id: int) -> models.Reputation:
    if not db.query(models.User.id).filter(models.User.id == user_id).first():
        raise NotFoundError("User not found")

    reputation = review_crud.get_reputation(db, user_id)
    if reputation is None:
        reputation = reputation_service.recompute_reputation(db, user_id)
        commit_then_run(db, None, "initialize reputation")
    return reputation
