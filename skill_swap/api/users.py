from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from skill_swap import models, schemas
from skill_swap.crud import user as user_crud
from skill_swap.database import get_db
from skill_swap.schemas.review import ReputationResponse
from skill_swap.services import achievement_service
from skill_swap.services.achievement_service import AchievementCategory
from skill_swap.services.effects import AfterCommit, commit_then_run
from skill_swap.utils.security import get_current_user

router = APIRouter(prefix="/users", tags=["Users"])


# ======================
# PROFILE
# ======================

@router.get("/me", response_model=schemas.User)
def get_me(current_user: models.User = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=schemas.User)
def update_me(
    payload: schemas.UserUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(current_user, key, value)
    commit_then_run(db, None, "update profile")
    db.refresh(current_user)
    return current_user


@router.get("/{user_id}")
def get_public_profile(
    user_id: int,
    db: Session = Depends(get_db)
):
    user = db.query(models.User).filter(
        models.User.id == user_id,
        models.User.status == models.UserStatus.ACTIVE,
        models.User.is_public.is_(True),
    ).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return {
        "id": user.id,
        "name": user.name,
        "bio": user.bio,
        "location": user.location,
        "is_verified": user.is_verified,
        "skills_offered": [schemas.SkillOffered.model_validate(s) for s in user.skills_offered],
        "skills_wanted": [schemas.SkillWanted.model_validate(s) for s in user.skills_wanted],
        "reputation": ReputationResponse.model_validate(user.reputation) if user.reputation else None,
    }


# ======================
# SKILLS
# ======================

@router.post("/me/skills/offered", status_code=status.HTTP_201_CREATED, response_model=schemas.SkillOffered)
def add_skill_offered(
    payload: schemas.SkillOfferedCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    skill = user_crud.add_skill_offered(db, current_user.id, payload)
    effects = AfterCommit()
    achievement_service.check_and_award(db, current_user.id, AchievementCategory.SKILL, effects)
    commit_then_run(db, effects, "add offered skill")
    db.refresh(skill)
    return skill


@router.delete("/me/skills/offered/{skill_id}")
def remove_skill_offered(
    skill_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    skill = user_crud.get_skill_offered(db, current_user.id, skill_id)
    if not skill:
        raise HTTPException(status_code=404, detail="Skill not found")
    db.delete(skill)
    commit_then_run(db, None, "remove offered skill")
    return {"message": "Skill removed", "id": skill_id}


@router.post("/me/skills/wanted", status_code=status.HTTP_201_CREATED, response_model=schemas.SkillWanted)
def add_skill_wanted(
    payload: schemas.SkillWantedCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    skill = user_crud.add_skill_wanted(db, current_user.id, payload)
    commit_then_run(db, None, "add wanted skill")
    db.refresh(skill)
    return skill


@router.delete("/me/skills/wanted/{skill_id}")
def remove_skill_wanted(
    skill_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    skill = user_crud.get_skill_wanted(db, current_user.id, skill_id)
    if not skill:
        raise HTTPException(status_code=404, detail="Skill not found")
    db.delete(skill)
    commit_then_run(db, None, "remove wanted skill")
    return {"message": "Skill removed", "id": skill_id}
