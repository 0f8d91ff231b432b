from datetime import datetime, UTC


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the TIMESTAMP columns."""
    return datetime.now(UTC).replace(tzinfo=None)
