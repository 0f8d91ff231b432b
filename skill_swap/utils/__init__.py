__all__ = [
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "authenticate_user",
    "get_current_user",
    "oauth2_scheme",
    "is_email_enabled",
    "send_email",
    "send_meeting_invite",
    "utcnow",
]


def __getattr__(name):
    if name in {
        "verify_password",
        "get_password_hash",
        "create_access_token",
        "authenticate_user",
        "get_current_user",
        "oauth2_scheme",
    }:
        from . import security as _security
        return getattr(_security, name)
    if name in {"is_email_enabled", "send_email", "send_meeting_invite"}:
        from . import email as _email
        return getattr(_email, name)
    if name == "utcnow":
        from . import timeutil as _timeutil
        return _timeutil.utcnow
    raise AttributeError(f"module 'skill_swap.utils' has no attribute '{name}'")
