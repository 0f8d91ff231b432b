import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skill_swap import models
from skill_swap.config import settings
from skill_swap.crud import user as user_crud
from skill_swap.database import get_db
from skill_swap.schemas.auth import LoginRequest, RegisterRequest, Token
from skill_swap.utils.security import authenticate_user, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _issue_token(user: models.User) -> dict:
    if not user.is_active:
        raise HTTPException(status_code=403, detail=f"Account is {user.status.lower()}")

    access_token = create_access_token(data={"sub": user.email, "role": user.role})
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "role": user.role
    }


# ===== REGISTER ENDPOINT =====

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user_data: RegisterRequest, db: Session = Depends(get_db)):
    """Register a user together with its reputation and credit balance"""
    if user_crud.get_user_by_email(db, user_data.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    try:
        user = user_crud.create_user(db, user_data, initial_credits=settings.INITIAL_CREDITS)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Registration failed for '%s'", user_data.email)
        raise HTTPException(status_code=500, detail="Internal server error")

    db.refresh(user)
    return {"message": "Registration successful", "user_id": user.id, **_issue_token(user)}

# ===== LOGIN ENDPOINTS =====

@router.post("/login", response_model=Token)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Verify credentials and return access token"""
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return _issue_token(user)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """OAuth2 password flow; the username field carries the email."""
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=401,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return _issue_token(user)
