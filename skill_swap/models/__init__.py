# skill_swap/models/__init__.py
# Import models in dependency order
from .user import User, UserStatus
from .skill import SkillOffered, SkillWanted
from .swap import SwapRequest, SwapStatus, ScheduledSession, SessionStatus, Meeting, Message
from .review import Review, Reputation
from .credit import CreditBalance, CreditTransaction, CreditTransactionType
from .achievement import Achievement, UserAchievement
from .notification import Notification

__all__ = [
    "User",
    "UserStatus",
    "SkillOffered",
    "SkillWanted",
    "SwapRequest",
    "SwapStatus",
    "ScheduledSession",
    "SessionStatus",
    "Meeting",
    "Message",
    "Review",
    "Reputation",
    "CreditBalance",
    "CreditTransaction",
    "CreditTransactionType",
    "Achievement",
    "UserAchievement",
    "Notification",
]
