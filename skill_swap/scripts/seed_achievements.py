"""Create tables if needed and insert the default achievement catalogue.

Usage: python -m skill_swap.scripts.seed_achievements
Set SEED_CREATE_TABLES=false when Alembic owns the schema.
"""

import logging
import os
import sys
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from skill_swap import models  # noqa: F401 - register all tables on Base.metadata
from skill_swap.database import Base, SessionLocal, engine
from skill_swap.services.achievement_service import seed_default_achievements

logger = logging.getLogger(__name__)


def _is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "y", "on"}


def seed() -> int:
    try:
        if _is_truthy(os.getenv("SEED_CREATE_TABLES", "true")):
            Base.metadata.create_all(bind=engine)

        db = SessionLocal()
        try:
            added = seed_default_achievements(db)
        finally:
            db.close()
    except SQLAlchemyError as exc:
        print(f"Seeding failed: {exc}", file=sys.stderr)
        return 1

    print(f"Seeded {added} achievement(s).")
    return 0


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    sys.exit(seed())


if __name__ == "__main__":
    main()
