from typing import Optional

from sqlalchemy.orm import Session

from skill_swap import models, schemas
from skill_swap.crud import credit as credit_crud
from skill_swap.crud import review as review_crud
from skill_swap.utils.security import get_password_hash


def create_user(db: Session, data: schemas.RegisterRequest, initial_credits: int = 0) -> models.User:
    """Create a user with its reputation and credit balance. Flushes only."""
    db_user = models.User(
        name=data.name.strip(),
        email=data.email.strip().lower(),
        password_hash=get_password_hash(data.password),
        bio=data.bio,
        location=data.location,
        role="member",
        status=models.UserStatus.ACTIVE,
    )
    db.add(db_user)
    db.flush()

    review_crud.get_or_create_reputation(db, db_user.id)
    credit_crud.create_balance(db, db_user.id, initial_credits=initial_credits)
    return db_user

def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.strip().lower()).first()

def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()

def add_skill_offered(db: Session, user_id: int, skill: schemas.SkillOfferedCreate) -> models.SkillOffered:
    db_skill = models.SkillOffered(user_id=user_id, **skill.model_dump())
    db.add(db_skill)
    db.flush()
    return db_skill

def add_skill_wanted(db: Session, user_id: int, skill: schemas.SkillWantedCreate) -> models.SkillWanted:
    db_skill = models.SkillWanted(user_id=user_id, **skill.model_dump())
    db.add(db_skill)
    db.flush()
    return db_skill

def get_skill_offered(db: Session, user_id: int, skill_id: int) -> Optional[models.SkillOffered]:
    return db.query(models.SkillOffered).filter(
        models.SkillOffered.id == skill_id,
        models.SkillOffered.user_id == user_id,
    ).first()

def get_skill_wanted(db: Session, user_id: int, skill_id: int) -> Optional[models.SkillWanted]:
    return db.query(models.SkillWanted).filter(
        models.SkillWanted.id == skill_id,
        models.SkillWanted.user_id == user_id,
    ).first()
