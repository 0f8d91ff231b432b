# skill_swap/services/credit_service.py
"""
Credit Ledger - Business Logic Service

Awards and peer-to-peer transfers of credits. Every change to a balance
is paired with an append-only transaction row, so a balance always equals
earned - spent and the sum of its signed transaction amounts.
"""

import logging
from typing import Optional, Dict, Any

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from skill_swap import models
from skill_swap.config import settings
from skill_swap.crud import credit as credit_crud
from skill_swap.models.credit import CreditTransactionType
from skill_swap.services import notification_service
from skill_swap.services.effects import AfterCommit
from skill_swap.services.errors import (
    InsufficientFundsError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from skill_swap.services.notification_service import NotificationEvent

logger = logging.getLogger(__name__)


# =====================================
# AWARDS
# =====================================

def award_credits(
    db: Session,
    user_id: int,
    amount: int,
    transaction_type: CreditTransactionType,
    description: str,
    effects: Optional[AfterCommit] = None,
) -> models.CreditTransaction:
    """
    Credit a user's balance inside the caller's transaction.

    Increments earned and balance, appends one transaction and notifies the
    user. Flushes only; the caller commits.

    Args:
        db: Database session
        user_id: User receiving the credits
        amount: Positive number of credits
        transaction_type: Ledger category for the award
        description: Human readable reason
        effects: Optional post-commit list for the notification email

    Returns:
        Created CreditTransaction

    Raises:
        ValidationError: If amount is not positive
    """
    if amount <= 0:
        raise ValidationError("Credit award must be positive")

    balance = credit_crud.get_or_create_balance(db, user_id, for_update=True)
    balance.balance += amount
    balance.earned += amount

    transaction = credit_crud.create_transaction(
        db,
        balance_id=balance.id,
        amount=amount,
        transaction_type=transaction_type,
        description=description,
    )

    notification_service.notify(
        db,
        effects,
        recipient_id=user_id,
        title="Credits Earned",
        message=f"You earned {amount} credits: {description}",
        event_type=NotificationEvent.CREDIT_RECEIVED,
        action_url="/credits",
    )
    return transaction


def session_credit_amount(duration_minutes: int) -> int:
    """Credits for a completed session: 5 per full quarter hour."""
    return (duration_minutes // 15) * settings.SESSION_CREDITS_PER_QUARTER_HOUR


# =====================================
# TRANSFERS
# =====================================

def transfer_credits(
    db: Session,
    sender: models.User,
    receiver_id: int,
    amount: int,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Move credits from the caller to another user.

    Debit, credit, both ledger rows and the receiver's notification commit
    in one database transaction; a failure leaves both balances untouched.

    Args:
        db: Database session
        sender: Authenticated user sending credits
        receiver_id: User ID receiving credits
        amount: Credits to move (1 to MAX_CREDIT_TRANSFER)
        description: Optional note shown in both ledgers

    Returns:
        Dictionary with transfer details and the sender's new balance

    Raises:
        ValidationError: Amount out of range or self-transfer
        NotFoundError: Receiver does not exist
        InsufficientFundsError: Sender balance lower than amount
        InternalError: If the database transaction fails
    """
    if amount < 1 or amount > settings.MAX_CREDIT_TRANSFER:
        raise ValidationError(f"Amount must be between 1 and {settings.MAX_CREDIT_TRANSFER}")

    if receiver_id == sender.id:
        raise ValidationError("Cannot transfer credits to yourself")

    receiver = db.query(models.User).filter(models.User.id == receiver_id).first()
    if not receiver:
        raise NotFoundError("Receiver not found")

    effects = AfterCommit()
    note = description or "Credit transfer"

    try:
        # Lock in user id order so concurrent opposite transfers cannot deadlock
        first_id, second_id = sorted((sender.id, receiver.id))
        locked = {
            first_id: credit_crud.get_or_create_balance(db, first_id, for_update=True),
            second_id: credit_crud.get_or_create_balance(db, second_id, for_update=True),
        }
        sender_balance = locked[sender.id]
        receiver_balance = locked[receiver.id]

        if sender_balance.balance < amount:
            db.rollback()
            raise InsufficientFundsError(
                f"Insufficient credits. Required: {amount}, Available: {sender_balance.balance}"
            )

        sender_balance.balance -= amount
        sender_balance.spent += amount
        receiver_balance.balance += amount
        receiver_balance.earned += amount

        credit_crud.create_transaction(
            db,
            balance_id=sender_balance.id,
            amount=-amount,
            transaction_type=CreditTransactionType.TRANSFER_OUT,
            description=f"Sent to {receiver.name}: {note}",
        )
        credit_crud.create_transaction(
            db,
            balance_id=receiver_balance.id,
            amount=amount,
            transaction_type=CreditTransactionType.TRANSFER_IN,
            description=f"Received from {sender.name}: {note}",
        )

        notification_service.notify(
            db,
            effects,
            recipient_id=receiver.id,
            actor_id=sender.id,
            title="Credits Received",
            message=f"{sender.name} sent you {amount} credits",
            event_type=NotificationEvent.CREDIT_RECEIVED,
            action_url="/credits",
        )

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Credit transfer failed (sender_id=%s, receiver_id=%s)", sender.id, receiver_id)
        raise InternalError("Failed to transfer credits") from e

    effects.run()
    db.refresh(sender_balance)

    logger.info("Transferred %s credits (sender_id=%s, receiver_id=%s)", amount, sender.id, receiver.id)
    return {
        "message": "Credits transferred successfully",
        "amount": amount,
        "receiver_id": receiver.id,
        "new_balance": sender_balance.balance,
    }


# =====================================
# QUERIES
# =====================================

def get_balance_summary(db: Session, user_id: int, recent: int = 20) -> Dict[str, Any]:
    """
    Balance, earned and spent plus the most recent transactions.
    """
    balance = credit_crud.get_balance_by_user_id(db, user_id)
    if balance is None:
        return {"user_id": user_id, "balance": 0, "earned": 0, "spent": 0, "transactions": []}

    return {
        "user_id": user_id,
        "balance": balance.balance,
        "earned": balance.earned,
        "spent": balance.spent,
        "transactions": credit_crud.get_transactions(db, balance.id, limit=recent),
    }


def get_transaction_history(db: Session, user_id: int, page: int = 1, limit: int = 20) -> Dict[str, Any]:
    balance = credit_crud.get_balance_by_user_id(db, user_id)
    if balance is None:
        return {"transactions": [], "pagination": {"page": page, "limit": limit, "total": 0, "pages": 0}}

    total = credit_crud.count_transactions(db, balance.id)
    transactions = credit_crud.get_transactions(db, balance.id, limit=limit, offset=(page - 1) * limit)
    return {
        "transactions": transactions,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": (total + limit - 1) // limit,
        },
    }
