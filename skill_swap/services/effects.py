from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skill_swap.services.errors import InternalError

logger = logging.getLogger(__name__)


class AfterCommit:
    """
    Best-effort follow-ups collected during a request and run once the
    primary transaction has committed.

    A failing effect is logged and reported as False; it never raises.
    """

    def __init__(self) -> None:
        self._effects: List[Tuple[str, Callable[..., Any], tuple, dict]] = []

    def add(self, name: str, func: Callable[..., Any], *args, **kwargs) -> None:
        self._effects.append((name, func, args, kwargs))

    def __len__(self) -> int:
        return len(self._effects)

    def run(self) -> Dict[str, bool]:
        results: Dict[str, bool] = {}
        effects, self._effects = self._effects, []
        for name, func, args, kwargs in effects:
            try:
                outcome = func(*args, **kwargs)
                results[name] = outcome is not False
            except Exception as exc:
                logger.warning("Post-commit effect '%s' failed: %s", name, exc)
                results[name] = False
        return results


def commit_then_run(db: Session, effects: Optional[AfterCommit], action: str) -> Dict[str, bool]:
    """
    Commit the request's transaction, then run its post-commit effects.

    Raises:
        InternalError: If the commit fails; the session is rolled back and
            no effect runs
    """
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Commit failed while trying to %s", action)
        raise InternalError(f"Failed to {action}") from e

    if effects is None:
        return {}
    return effects.run()
