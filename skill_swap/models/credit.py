# skill_swap/models/credit.py
from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP, Enum, func
from sqlalchemy.orm import relationship
from skill_swap.database import Base
import enum


class CreditTransactionType(str, enum.Enum):
    INITIAL = "INITIAL"
    EARNED = "EARNED"
    SPENT = "SPENT"
    REVIEW_GIVEN = "REVIEW_GIVEN"
    ACHIEVEMENT = "ACHIEVEMENT"
    SESSION_COMPLETED = "SESSION_COMPLETED"
    TRANSFER_IN = "TRANSFER_IN"
    TRANSFER_OUT = "TRANSFER_OUT"


class CreditBalance(Base):
    __tablename__ = "credit_balances"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    balance = Column(Integer, default=0, nullable=False)
    earned = Column(Integer, default=0, nullable=False)
    spent = Column(Integer, default=0, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="credit_balance")
    transactions = relationship(
        "CreditTransaction", back_populates="credit_balance", cascade="all, delete-orphan"
    )


class CreditTransaction(Base):
    __tablename__ = "credit_transactions"

    id = Column(Integer, primary_key=True, index=True)
    credit_balance_id = Column(Integer, ForeignKey("credit_balances.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    type = Column(Enum(CreditTransactionType), nullable=False)
    description = Column(String(255))
    created_at = Column(TIMESTAMP, server_default=func.now())

    # Relationships
    credit_balance = relationship("CreditBalance", back_populates="transactions")
