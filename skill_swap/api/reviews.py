from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from skill_swap import models
from skill_swap.database import get_db
from skill_swap.schemas.review import ReputationResponse, ReviewCreate, ReviewUpdate
from skill_swap.services import review_service
from skill_swap.utils.security import get_current_user

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    review = review_service.submit_review(db, current_user, payload)
    return {
        "message": "Review submitted successfully",
        "review": review_service.serialize_review(review),
    }


@router.put("/{review_id}")
def update_review(
    review_id: int,
    payload: ReviewUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    review = review_service.update_review(db, current_user, review_id, payload)
    return {
        "message": "Review updated successfully",
        "review": review_service.serialize_review(review),
    }


@router.delete("/{review_id}")
def delete_review(
    review_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    review_service.delete_review(db, current_user, review_id)
    return {"message": "Review deleted successfully", "id": review_id}


@router.post("/{review_id}/helpful")
def mark_review_helpful(
    review_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    review = review_service.mark_helpful(db, review_id)
    return {"message": "Marked as helpful", "helpful": review.helpful}


@router.get("/user/{user_id}")
def get_user_reviews(
    user_id: int,
    filter: str = Query("all", pattern="^(all|positive|negative)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    return {
        "reviews": review_service.get_reviews_for_user(
            db, user_id, rating_filter=filter, page=page, limit=limit
        )
    }


@router.get("/user/{user_id}/stats")
def get_user_rating_stats(user_id: int, db: Session = Depends(get_db)):
    return review_service.get_rating_stats(db, user_id)


@router.get("/user/{user_id}/reputation", response_model=ReputationResponse)
def get_user_reputation(user_id: int, db: Session = Depends(get_db)):
    return review_service.get_reputation(db, user_id)


@router.get("/swap/{swap_id}")
def get_swap_reviews(swap_id: int, db: Session = Depends(get_db)):
    reviews = review_service.get_reviews_for_swap(db, swap_id)
    return {"reviews": reviews}
