# skill_swap/services/achievement_service.py
"""
Achievements, progress and leaderboards.

Achievements are catalogue rows whose JSON criteria are evaluated when a
matching event happens (a swap completes, a review lands, a skill is
added). Awards happen in the caller's transaction.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from skill_swap import models
from skill_swap.config import settings
from skill_swap.models.credit import CreditTransactionType
from skill_swap.models.swap import SwapStatus
from skill_swap.services import credit_service, notification_service
from skill_swap.services.effects import AfterCommit
from skill_swap.services.errors import ValidationError
from skill_swap.services.notification_service import NotificationEvent

logger = logging.getLogger(__name__)


class AchievementCategory:
    SWAP = "SWAP"
    RATING = "RATING"
    SKILL = "SKILL"


DEFAULT_ACHIEVEMENTS: List[Dict[str, Any]] = [
    {
        "name": "First Swap",
        "description": "Complete your first skill swap",
        "category": AchievementCategory.SWAP,
        "criteria": {"type": "FIRST_SWAP", "credits": 10},
    },
    {
        "name": "Swap Regular",
        "description": "Complete 5 skill swaps",
        "category": AchievementCategory.SWAP,
        "criteria": {"type": "SWAP_COUNT", "count": 5, "credits": 25},
    },
    {
        "name": "Swap Master",
        "description": "Complete 25 skill swaps",
        "category": AchievementCategory.SWAP,
        "criteria": {"type": "SWAP_COUNT", "count": 25, "credits": 100},
    },
    {
        "name": "Highly Rated",
        "description": "Keep a 4.5 average over at least 5 reviews",
        "category": AchievementCategory.RATING,
        "criteria": {"type": "RATING_AVERAGE", "min_reviews": 5, "min_rating": 4.5, "credits": 50},
    },
    {
        "name": "Renaissance Learner",
        "description": "Offer skills in 3 different categories",
        "category": AchievementCategory.SKILL,
        "criteria": {"type": "SKILL_DIVERSITY", "count": 3, "credits": 20},
    },
]


def seed_default_achievements(db: Session) -> int:
    """Insert missing catalogue entries. Returns how many were added."""
    existing = {name for (name,) in db.query(models.Achievement.name).all()}
    added = 0
    for entry in DEFAULT_ACHIEVEMENTS:
        if entry["name"] in existing:
            continue
        db.add(models.Achievement(**entry))
        added += 1
    if added:
        db.commit()
        logger.info("Seeded %s achievements", added)
    return added


# =====================================
# CRITERIA
# =====================================

def _completed_swaps_query(db: Session, user_id: int):
    return db.query(models.SwapRequest).filter(
        models.SwapRequest.status == SwapStatus.COMPLETED,
        or_(models.SwapRequest.requester_id == user_id, models.SwapRequest.receiver_id == user_id),
    )


def criteria_met(db: Session, user_id: int, criteria: Dict[str, Any]) -> bool:
    kind = criteria.get("type")

    if kind == "FIRST_SWAP":
        return _completed_swaps_query(db, user_id).first() is not None

    if kind == "SWAP_COUNT":
        return _completed_swaps_query(db, user_id).count() >= int(criteria.get("count", 0))

    if kind == "RATING_AVERAGE":
        avg, total = db.query(
            func.avg(models.Review.overall),
            func.count(models.Review.id),
        ).filter(models.Review.reviewee_id == user_id).one()
        return (
            (total or 0) >= int(criteria.get("min_reviews", 1))
            and float(avg or 0) >= float(criteria.get("min_rating", 5))
        )

    if kind == "SKILL_DIVERSITY":
        categories = db.query(func.count(func.distinct(models.SkillOffered.category))).filter(
            models.SkillOffered.user_id == user_id
        ).scalar()
        return (categories or 0) >= int(criteria.get("count", 0))

    logger.debug("Unknown achievement criteria type %r", kind)
    return False


def check_and_award(
    db: Session,
    user_id: int,
    category: str,
    effects: Optional[AfterCommit] = None,
) -> List[models.Achievement]:
    """
    Award every active achievement in a category the user now qualifies for.

    Each achievement is awarded at most once. Flushes only.
    """
    already = {
        achievement_id
        for (achievement_id,) in db.query(models.UserAchievement.achievement_id).filter(
            models.UserAchievement.user_id == user_id
        )
    }
    candidates = db.query(models.Achievement).filter(
        models.Achievement.is_active.is_(True),
        models.Achievement.category == category,
    ).all()

    awarded = []
    for achievement in candidates:
        if achievement.id in already or not criteria_met(db, user_id, achievement.criteria or {}):
            continue

        db.add(models.UserAchievement(user_id=user_id, achievement_id=achievement.id))
        db.flush()

        notification_service.notify(
            db,
            effects,
            recipient_id=user_id,
            title="Achievement Unlocked!",
            message=f'You\'ve earned the "{achievement.name}" achievement!',
            event_type=NotificationEvent.ACHIEVEMENT_EARNED,
            action_url="/achievements",
        )
        credits = int((achievement.criteria or {}).get("credits", settings.ACHIEVEMENT_DEFAULT_CREDITS))
        if credits > 0:
            credit_service.award_credits(
                db,
                user_id,
                credits,
                CreditTransactionType.ACHIEVEMENT,
                f"Achievement: {achievement.name}",
                effects=effects,
            )
        awarded.append(achievement)
        logger.info("Achievement awarded (user_id=%s, achievement=%s)", user_id, achievement.name)

    return awarded


# =====================================
# QUERIES
# =====================================

def get_user_achievements(db: Session, user_id: int) -> Dict[str, Any]:
    earned_rows = (
        db.query(models.UserAchievement)
        .filter(models.UserAchievement.user_id == user_id)
        .order_by(models.UserAchievement.earned_at.desc(), models.UserAchievement.id.desc())
        .all()
    )
    earned_ids = {row.achievement_id for row in earned_rows}
    available = (
        db.query(models.Achievement)
        .filter(models.Achievement.is_active.is_(True))
        .order_by(models.Achievement.id)
        .all()
    )

    return {
        "user_id": user_id,
        "earned": [
            {
                "id": row.achievement.id,
                "name": row.achievement.name,
                "description": row.achievement.description,
                "category": row.achievement.category,
                "criteria": row.achievement.criteria or {},
                "earned_at": row.earned_at,
            }
            for row in earned_rows
        ],
        "available": [a for a in available if a.id not in earned_ids],
    }


def get_progress(db: Session, user_id: int) -> Dict[str, Any]:
    completed = _completed_swaps_query(db, user_id)
    avg, total = db.query(
        func.avg(models.Review.overall),
        func.count(models.Review.id),
    ).filter(models.Review.reviewee_id == user_id).one()
    balance = db.query(models.CreditBalance).filter(models.CreditBalance.user_id == user_id).first()

    return {
        "user_id": user_id,
        "completed_swaps": completed.count(),
        "skills_taught": completed.filter(models.SwapRequest.requester_id == user_id).count(),
        "skills_learned": completed.filter(models.SwapRequest.receiver_id == user_id).count(),
        "average_rating": float(avg or 0),
        "total_reviews": int(total or 0),
        "achievements_earned": db.query(models.UserAchievement).filter(
            models.UserAchievement.user_id == user_id
        ).count(),
        "credit_balance": balance.balance if balance else 0,
        "credits_earned": balance.earned if balance else 0,
    }


LEADERBOARD_METRICS = {
    "trust": (models.Reputation, models.Reputation.trust_score),
    "credits": (models.CreditBalance, models.CreditBalance.earned),
}


def get_leaderboard(db: Session, metric: str = "trust", limit: int = 10) -> List[Dict[str, Any]]:
    """Top public, active users by trust score or lifetime credits earned."""
    if metric not in LEADERBOARD_METRICS:
        raise ValidationError(f"Unknown leaderboard metric '{metric}'")

    model, column = LEADERBOARD_METRICS[metric]
    rows = (
        db.query(models.User.id, models.User.name, column)
        .join(model, model.user_id == models.User.id)
        .filter(
            models.User.is_public.is_(True),
            models.User.status == models.UserStatus.ACTIVE,
        )
        .order_by(column.desc(), models.User.id)
        .limit(limit)
        .all()
    )
    return [
        {"rank": index, "user_id": user_id, "name": name, "value": float(value or 0)}
        for index, (user_id, name, value) in enumerate(rows, start=1)
    ]
