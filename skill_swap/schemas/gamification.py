from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class AchievementOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: str
    criteria: Dict[str, Any]

    model_config = ConfigDict(from_attributes=True)


class EarnedAchievementOut(AchievementOut):
    earned_at: Optional[datetime] = None


class AchievementsResponse(BaseModel):
    user_id: int
    earned: List[EarnedAchievementOut]
    available: List[AchievementOut]


class ProgressResponse(BaseModel):
    user_id: int
    completed_swaps: int
    skills_taught: int
    skills_learned: int
    average_rating: float
    total_reviews: int
    achievements_earned: int
    credit_balance: int
    credits_earned: int


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    name: str
    value: float
