# skill_swap/api/__init__.py
# This file makes the api directory a Python package.

from . import auth
from . import credits
from . import gamification
from . import notifications
from . import reviews
from . import swap_requests
from . import users

__all__ = [
    "auth",
    "users",
    "swap_requests",
    "reviews",
    "credits",
    "gamification",
    "notifications",
]
