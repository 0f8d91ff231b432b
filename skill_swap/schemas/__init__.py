# skill_swap/schemas/__init__.py

# Auth schemas
from .auth import Token, TokenData, LoginRequest, RegisterRequest

# User schemas
from .user import (
    User,
    UserSummary,
    UserUpdate,
    SkillOffered,
    SkillOfferedCreate,
    SkillWanted,
    SkillWantedCreate,
)

# Swap request schemas
from .swap import (
    SwapRequestCreate,
    SwapAcceptRequest,
    SwapDeclineRequest,
    SwapStatusUpdate,
    SessionScheduleRequest,
    SwapRequestOut,
    SwapRequestDetail,
)

__all__ = [
    "Token",
    "TokenData",
    "LoginRequest",
    "RegisterRequest",
    "User",
    "UserSummary",
    "UserUpdate",
    "SkillOffered",
    "SkillOfferedCreate",
    "SkillWanted",
    "SkillWantedCreate",
    "SwapRequestCreate",
    "SwapAcceptRequest",
    "SwapDeclineRequest",
    "SwapStatusUpdate",
    "SessionScheduleRequest",
    "SwapRequestOut",
    "SwapRequestDetail",
]
