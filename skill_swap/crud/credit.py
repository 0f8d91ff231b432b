# skill_swap/crud/credit.py
"""
Credit Ledger - CRUD Operations

Database operations for credit balances and their append-only
transaction log. Nothing here commits.
"""

from sqlalchemy.orm import Session
from typing import Optional, List

from skill_swap import models
from skill_swap.models.credit import CreditTransactionType


# =====================================
# BALANCE CRUD OPERATIONS
# =====================================

def get_balance_by_user_id(
    db: Session,
    user_id: int,
    for_update: bool = False
) -> Optional[models.CreditBalance]:
    """
    Retrieve a user's credit balance.

    Args:
        db: Database session
        user_id: User ID
        for_update: Lock the row until the surrounding transaction ends

    Returns:
        CreditBalance object or None if not found
    """
    query = db.query(models.CreditBalance).filter(
        models.CreditBalance.user_id == user_id
    )
    if for_update:
        query = query.with_for_update()
    return query.first()


def create_balance(db: Session, user_id: int, initial_credits: int = 0) -> models.CreditBalance:
    """
    Create a new credit balance for a user.

    A positive initial allocation is recorded as an INITIAL transaction so
    the ledger sums to the balance.
    """
    balance = models.CreditBalance(
        user_id=user_id,
        balance=initial_credits,
        earned=initial_credits,
        spent=0,
    )
    db.add(balance)
    db.flush()  # Get balance ID without committing

    if initial_credits > 0:
        create_transaction(
            db,
            balance_id=balance.id,
            amount=initial_credits,
            transaction_type=CreditTransactionType.INITIAL,
            description="Initial credit allocation",
        )

    return balance


def get_or_create_balance(db: Session, user_id: int, for_update: bool = False) -> models.CreditBalance:
    balance = get_balance_by_user_id(db, user_id, for_update=for_update)
    if balance is None:
        balance = create_balance(db, user_id)
    return balance


# =====================================
# TRANSACTION CRUD OPERATIONS
# =====================================

def create_transaction(
    db: Session,
    balance_id: int,
    amount: int,
    transaction_type: CreditTransactionType,
    description: Optional[str] = None
) -> models.CreditTransaction:
    """
    Append a credit transaction record.

    Args:
        amount: Signed amount (positive for credit, negative for debit)
    """
    transaction = models.CreditTransaction(
        credit_balance_id=balance_id,
        amount=amount,
        type=transaction_type,
        description=description,
    )
    db.add(transaction)
    db.flush()
    return transaction


def get_transactions(
    db: Session,
    balance_id: int,
    limit: int = 50,
    offset: int = 0
) -> List[models.CreditTransaction]:
    """
    Get transaction history for a balance, newest first.
    """
    return (
        db.query(models.CreditTransaction)
        .filter(models.CreditTransaction.credit_balance_id == balance_id)
        .order_by(models.CreditTransaction.created_at.desc(), models.CreditTransaction.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )


def count_transactions(db: Session, balance_id: int) -> int:
    return db.query(models.CreditTransaction).filter(
        models.CreditTransaction.credit_balance_id == balance_id
    ).count()
