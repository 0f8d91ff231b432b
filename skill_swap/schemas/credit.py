from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from skill_swap.config import settings
from skill_swap.models.credit import CreditTransactionType


class CreditTransferRequest(BaseModel):
    receiver_id: int = Field(..., ge=1)
    amount: int = Field(..., ge=1, le=settings.MAX_CREDIT_TRANSFER)
    description: Optional[str] = Field(None, max_length=255)


class CreditTransactionOut(BaseModel):
    id: int
    amount: int
    type: CreditTransactionType
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CreditBalanceOut(BaseModel):
    user_id: int
    balance: int
    earned: int
    spent: int
    transactions: List[CreditTransactionOut] = []

    model_config = ConfigDict(from_attributes=True)
