from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from skill_swap import models
from skill_swap.database import get_db
from skill_swap.schemas.gamification import AchievementsResponse, LeaderboardEntry, ProgressResponse
from skill_swap.services import achievement_service
from skill_swap.utils.security import get_current_user

router = APIRouter(prefix="/gamification", tags=["Gamification"])


@router.get("/achievements", response_model=AchievementsResponse)
def get_my_achievements(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return achievement_service.get_user_achievements(db, current_user.id)


@router.get("/achievements/{user_id}", response_model=AchievementsResponse)
def get_user_achievements(
    user_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if not db.query(models.User.id).filter(models.User.id == user_id).first():
        raise HTTPException(status_code=404, detail="User not found")
    return achievement_service.get_user_achievements(db, user_id)


@router.get("/progress", response_model=ProgressResponse)
def get_my_progress(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return achievement_service.get_progress(db, current_user.id)


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
def get_leaderboard(
    metric: str = Query("trust", pattern="^(trust|credits)$"),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    return achievement_service.get_leaderboard(db, metric=metric, limit=limit)
