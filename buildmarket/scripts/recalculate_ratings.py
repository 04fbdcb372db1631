#!/usr/bin/env python3
"""
Recompute every user's rating from the reviews written about them.
"""
from buildmarket.database import SessionLocal, init_db
from buildmarket.reviews.crud import update_user_rating
from buildmarket.users.models import User


def recalculate_all_ratings(db):
    ratings = {}
    for (user_id,) in db.query(User.id).order_by(User.id).all():
        ratings[user_id] = update_user_rating(db, user_id)
    db.commit()
    return ratings


def main():
    init_db()
    db = SessionLocal()
    try:
        ratings = recalculate_all_ratings(db)
    finally:
        db.close()
    for user_id, rating in ratings.items():
        print(f"  - user {user_id}: rating {rating}")
    print(f"Recalculated ratings for {len(ratings)} users")


if __name__ == "__main__":
    main()
