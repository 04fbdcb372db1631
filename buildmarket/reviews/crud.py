from sqlalchemy.orm import Session, joinedload
import logging
import math

from buildmarket.reviews.models import Review
from buildmarket.users.models import User

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    # round() would send 4.5 to 4
    return int(math.floor(value + 0.5))


def calculate_rating(ratings) -> int:
    ratings = list(ratings)
    if not ratings:
        return 0
    return round_half_up(sum(ratings) / len(ratings))


def update_user_rating(db: Session, user_id: int) -> int:
    """Recompute a user's rating from the reviews about them.

    The new value is staged on the session; committing is up to the caller.
    """
    ratings = [r for (r,) in db.query(Review.rating).filter(Review.reviewee_id == user_id).all()]
    rating = calculate_rating(ratings)
    user = db.query(User).filter(User.id == user_id).first()
    if user is not None:
        user.rating = rating
    return rating


def create_review(db: Session, reviewer_id: int, reviewee_id: int, rating: int, comment: str = None):
    """Insert a review and refresh the reviewee's rating in the same transaction."""
    try:
        review = Review(
            reviewer_id=reviewer_id,
            reviewee_id=reviewee_id,
            rating=rating,
            comment=comment,
        )
        db.add(review)
        db.flush()
        new_rating = update_user_rating(db, reviewee_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(review)
    logger.info("Review %s for user %s, rating now %s", review.id, reviewee_id, new_rating)
    return review


def get_user_reviews(db: Session, user_id: int):
    return (
        db.query(Review)
        .options(joinedload(Review.reviewer))
        .filter(Review.reviewee_id == user_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )
