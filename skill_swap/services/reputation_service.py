# skill_swap/services/reputation_service.py
"""
Reputation recomputation.

A user's Reputation row is derived data: it is rebuilt from the user's
reviews and completed swaps whenever either changes. Writes are flushed
into the caller's transaction; last writer wins.
"""

import logging

from sqlalchemy.orm import Session

from skill_swap.crud import review as review_crud
from skill_swap.models.review import Reputation
from skill_swap.utils.timeutil import utcnow

logger = logging.getLogger(__name__)


class TrustPolicy:
    """Trust score weighting."""
    RATING_WEIGHT = 20         # 5.0 average -> 100 points
    POINTS_PER_SWAP = 2
    MAX_SWAP_POINTS = 20
    MAX_SCORE = 100


def calculate_trust_score(average_rating: float, completed_swaps: int) -> float:
    """
    min(avg * 20 + min(completed * 2, 20), 100)
    """
    swap_points = min(completed_swaps * TrustPolicy.POINTS_PER_SWAP, TrustPolicy.MAX_SWAP_POINTS)
    return float(min(average_rating * TrustPolicy.RATING_WEIGHT + swap_points, TrustPolicy.MAX_SCORE))


def recompute_reputation(db: Session, user_id: int) -> Reputation:
    """
    Rebuild the reputation of one user from current reviews and swaps.

    Creates the row when missing. A user with no reviews averages 0.
    """
    averages = review_crud.calculate_rating_averages(db, user_id)
    completed = review_crud.count_completed_swaps(db, user_id)

    reputation = review_crud.get_or_create_reputation(db, user_id)
    reputation.overall_rating = averages["overall"]
    reputation.teaching_quality = averages["teaching_quality"]
    reputation.reliability = averages["reliability"]
    reputation.communication = averages["communication"]
    reputation.total_ratings = averages["total"]
    reputation.completed_swaps = completed
    reputation.trust_score = calculate_trust_score(averages["overall"], completed)
    reputation.updated_at = utcnow()

    db.flush()
    logger.debug(
        "Reputation recomputed (user_id=%s, rating=%.2f, swaps=%s, trust=%.1f)",
        user_id,
        reputation.overall_rating,
        completed,
        reputation.trust_score,
    )
    return reputation
