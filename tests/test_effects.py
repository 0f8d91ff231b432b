import logging

import pytest
from sqlalchemy.exc import OperationalError

from skill_swap import models
from skill_swap.services.effects import AfterCommit, commit_then_run
from skill_swap.services.errors import InternalError


def test_after_commit_reports_each_effect(caplog):
    effects = AfterCommit()
    calls = []

    def boom():
        raise RuntimeError("smtp down")

    effects.add("ok", calls.append, "ran")
    effects.add("refused", lambda: False)
    effects.add("broken", boom)

    with caplog.at_level(logging.WARNING, logger="skill_swap.services.effects"):
        results = effects.run()

    assert results == {"ok": True, "refused": False, "broken": False}
    assert calls == ["ran"]
    assert "broken" in caplog.text
    assert len(effects) == 0


def test_commit_then_run_commits_before_effects(db_session, make_user):
    user = make_user()
    seen = []
    effects = AfterCommit()
    effects.add("check", lambda: seen.append(db_session.in_transaction()))

    user.bio = "Updated"
    results = commit_then_run(db_session, effects, "update bio")

    assert results == {"check": True}
    assert seen == [False]
    db_session.expire_all()
    assert db_session.get(models.User, user.id).bio == "Updated"


def test_commit_failure_rolls_back_and_skips_effects(db_session, make_user, monkeypatch):
    user = make_user()
    ran = []
    effects = AfterCommit()
    effects.add("never", ran.append, 1)

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", failing_commit)
    user.bio = "Lost"

    with pytest.raises(InternalError, match="Failed to update bio"):
        commit_then_run(db_session, effects, "update bio")

    assert ran == []
    monkeypatch.undo()
    db_session.expire_all()
    assert db_session.get(models.User, user.id).bio is None
