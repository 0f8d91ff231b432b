from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skill_swap import models
from skill_swap.database import get_db
from skill_swap.schemas.credit import CreditBalanceOut, CreditTransactionOut, CreditTransferRequest
from skill_swap.services import credit_service
from skill_swap.utils.security import get_current_user

router = APIRouter(prefix="/credits", tags=["Credits"])


@router.get("", response_model=CreditBalanceOut)
def get_my_credits(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Balance, lifetime earned/spent and the 20 most recent transactions."""
    return credit_service.get_balance_summary(db, current_user.id)


@router.get("/transactions")
def get_my_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    history = credit_service.get_transaction_history(db, current_user.id, page=page, limit=limit)
    return {
        "transactions": [CreditTransactionOut.model_validate(t) for t in history["transactions"]],
        "pagination": history["pagination"],
    }


@router.post("/transfer")
def transfer_credits(
    payload: CreditTransferRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return credit_service.transfer_credits(
        db,
        current_user,
        payload.receiver_id,
        payload.amount,
        payload.description,
    )
