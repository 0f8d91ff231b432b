"""
Exception hierarchy for the Skill Swap services.

Services raise these and never build HTTP responses themselves. Each
exception carries the HTTP status the API layer maps it to.
"""


class SkillSwapError(Exception):
    """Base exception for all Skill Swap errors."""
    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class ValidationError(SkillSwapError):
    """Input or state failed a business rule (bad target, wrong status, etc.)."""
    status_code = 400


class AuthorizationError(SkillSwapError):
    """Caller is authenticated but not allowed to act on the resource."""
    status_code = 403


class NotFoundError(SkillSwapError):
    """Referenced entity does not exist."""
    status_code = 404


class ConflictError(SkillSwapError):
    """Duplicate of an existing active request or review."""
    status_code = 400


class InsufficientFundsError(SkillSwapError):
    """Credit balance is lower than the requested debit."""
    status_code = 400


class InternalError(SkillSwapError):
    """Unexpected persistence or collaborator failure."""
    status_code = 500
