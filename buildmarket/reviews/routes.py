from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from buildmarket.database import get_db
from buildmarket.dependencies import get_current_user
from buildmarket.reviews.crud import create_review, get_user_reviews
from buildmarket.reviews.schemas import ReviewCreate, ReviewResponse
from buildmarket.users.crud import get_user_by_id
from buildmarket.users.models import User

router = APIRouter(tags=["reviews"])


@router.post("/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review_endpoint(
    payload: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if payload.reviewee_id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot review yourself")
    if not get_user_by_id(db, payload.reviewee_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return create_review(db, current_user.id, payload.reviewee_id, payload.rating, payload.comment)


@router.get("/users/{user_id}/reviews", response_model=list[ReviewResponse])
def list_user_reviews(user_id: int, db: Session = Depends(get_db)):
    if not get_user_by_id(db, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return get_user_reviews(db, user_id)
