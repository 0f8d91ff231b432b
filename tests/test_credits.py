import pytest
from sqlalchemy import func

from skill_swap import models
from skill_swap.config import settings
from skill_swap.models.credit import CreditTransactionType
from skill_swap.services import credit_service
from skill_swap.services.errors import InsufficientFundsError, NotFoundError, ValidationError


def _balance(db, user):
    db.expire_all()
    return db.query(models.CreditBalance).filter_by(user_id=user.id).one()


def _ledger_sum(db, balance):
    return db.query(func.coalesce(func.sum(models.CreditTransaction.amount), 0)).filter(
        models.CreditTransaction.credit_balance_id == balance.id
    ).scalar()


def _assert_consistent(db, user):
    balance = _balance(db, user)
    assert balance.balance == balance.earned - balance.spent
    assert balance.balance == _ledger_sum(db, balance)
    return balance


# ======================
# AWARDS
# ======================

def test_award_credits_updates_balance_ledger_and_notifies(db_session, make_user):
    user = make_user()

    transaction = credit_service.award_credits(
        db_session, user.id, 15, CreditTransactionType.SESSION_COMPLETED, "Completed swap #1 (45 min)"
    )
    db_session.commit()

    assert transaction.amount == 15
    assert transaction.type == CreditTransactionType.SESSION_COMPLETED
    balance = _assert_consistent(db_session, user)
    assert balance.balance == 15
    assert balance.earned == 15

    note = db_session.query(models.Notification).filter_by(recipient_id=user.id).one()
    assert note.event_type == "CREDIT_RECEIVED"
    assert "15" in note.message


@pytest.mark.parametrize("amount", [0, -5])
def test_award_credits_rejects_non_positive(db_session, make_user, amount):
    user = make_user()
    with pytest.raises(ValidationError):
        credit_service.award_credits(db_session, user.id, amount, CreditTransactionType.EARNED, "nope")


def test_award_creates_missing_balance(db_session, make_user):
    user = make_user()
    db_session.delete(_balance(db_session, user))
    db_session.commit()

    credit_service.award_credits(db_session, user.id, 5, CreditTransactionType.REVIEW_GIVEN, "Review given")
    db_session.commit()

    assert _assert_consistent(db_session, user).balance == 5


@pytest.mark.parametrize("duration,expected", [
    (14, 0),
    (15, 5),
    (50, 15),
    (60, 20),
    (480, 160),
])
def test_session_credit_amount(duration, expected):
    assert credit_service.session_credit_amount(duration) == expected


def test_initial_credits_recorded_as_transaction(db_session, make_user):
    user = make_user(credits=100)

    balance = _assert_consistent(db_session, user)
    assert balance.balance == 100
    assert balance.transactions[0].type == CreditTransactionType.INITIAL


# ======================
# TRANSFERS
# ======================

def test_transfer_moves_credits_atomically(db_session, make_user):
    alice = make_user("Alice", credits=100)
    bob = make_user("Bob")

    result = credit_service.transfer_credits(db_session, alice, bob.id, 30, "Thanks for the lesson")

    assert result["amount"] == 30
    assert result["receiver_id"] == bob.id
    assert result["new_balance"] == 70

    sender = _assert_consistent(db_session, alice)
    receiver = _assert_consistent(db_session, bob)
    assert (sender.balance, sender.spent) == (70, 30)
    assert (receiver.balance, receiver.earned) == (30, 30)

    out_tx = [t for t in sender.transactions if t.type == CreditTransactionType.TRANSFER_OUT]
    in_tx = [t for t in receiver.transactions if t.type == CreditTransactionType.TRANSFER_IN]
    assert out_tx[0].amount == -30
    assert in_tx[0].amount == 30
    assert "Thanks for the lesson" in in_tx[0].description

    note = db_session.query(models.Notification).filter_by(recipient_id=bob.id).one()
    assert note.actor_id == alice.id


def test_transfer_entire_balance(db_session, make_user):
    alice, bob = make_user(credits=40), make_user()

    credit_service.transfer_credits(db_session, alice, bob.id, 40)

    assert _assert_consistent(db_session, alice).balance == 0


def test_transfer_insufficient_funds_changes_nothing(db_session, make_user):
    alice, bob = make_user(credits=10), make_user()

    with pytest.raises(InsufficientFundsError, match="Required: 11, Available: 10"):
        credit_service.transfer_credits(db_session, alice, bob.id, 11)

    assert _assert_consistent(db_session, alice).balance == 10
    assert _assert_consistent(db_session, bob).balance == 0
    assert db_session.query(models.Notification).count() == 0


def test_transfer_to_self_is_rejected(db_session, make_user):
    alice = make_user(credits=10)
    with pytest.raises(ValidationError, match="yourself"):
        credit_service.transfer_credits(db_session, alice, alice.id, 5)


def test_transfer_to_unknown_user_is_not_found(db_session, make_user):
    alice = make_user(credits=10)
    with pytest.raises(NotFoundError):
        credit_service.transfer_credits(db_session, alice, 4242, 5)


@pytest.mark.parametrize("amount", [0, -1])
def test_transfer_amount_lower_bound(db_session, make_user, amount):
    alice, bob = make_user(credits=10), make_user()
    with pytest.raises(ValidationError):
        credit_service.transfer_credits(db_session, alice, bob.id, amount)


def test_transfer_amount_upper_bound(db_session, make_user):
    alice, bob = make_user(credits=settings.MAX_CREDIT_TRANSFER + 10), make_user()

    with pytest.raises(ValidationError):
        credit_service.transfer_credits(db_session, alice, bob.id, settings.MAX_CREDIT_TRANSFER + 1)

    credit_service.transfer_credits(db_session, alice, bob.id, settings.MAX_CREDIT_TRANSFER)
    assert _assert_consistent(db_session, bob).balance == settings.MAX_CREDIT_TRANSFER


# ======================
# QUERIES
# ======================

def test_balance_summary_and_history(db_session, make_user):
    alice, bob = make_user(credits=50), make_user()
    for _ in range(3):
        credit_service.transfer_credits(db_session, alice, bob.id, 5)

    summary = credit_service.get_balance_summary(db_session, alice.id)
    assert summary["balance"] == 35
    assert summary["spent"] == 15
    assert len(summary["transactions"]) == 4
    assert summary["transactions"][0].type == CreditTransactionType.TRANSFER_OUT

    page = credit_service.get_transaction_history(db_session, alice.id, page=2, limit=3)
    assert page["pagination"]["total"] == 4
    assert page["pagination"]["pages"] == 2
    assert [t.type for t in page["transactions"]] == [CreditTransactionType.INITIAL]


def test_balance_summary_without_balance_row(db_session, make_user):
    user = make_user()
    db_session.delete(_balance(db_session, user))
    db_session.commit()

    summary = credit_service.get_balance_summary(db_session, user.id)
    assert summary["balance"] == 0
    assert summary["transactions"] == []
