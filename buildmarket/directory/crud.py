from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_
import logging
from typing import Optional

from buildmarket.moderation import ModerationStatus, apply_visibility

logger = logging.getLogger(__name__)


def create_profile(db: Session, model, user_id: int, data: dict):
    profile = model(user_id=user_id, moderation_status=ModerationStatus.PENDING, **data)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("%s %s created by user %s, awaiting moderation", model.__name__, profile.id, user_id)
    return profile


def get_profile(db: Session, model, profile_id: int):
    return (
        db.query(model)
        .options(joinedload(model.owner))
        .filter(model.id == profile_id)
        .first()
    )


def list_profiles(
    db: Session,
    model,
    specialty: Optional[str] = None,
    location: Optional[str] = None,
    search: Optional[str] = None,
    user_id: Optional[int] = None,
    viewer=None,
    show_all: bool = False,
    limit: int = 50,
    offset: int = 0,
):
    query = db.query(model).options(joinedload(model.owner))
    query = apply_visibility(query, model, viewer, show_all)

    if specialty:
        query = query.filter(model.specialty == specialty)
    if location:
        query = query.filter(model.location.ilike(f"%{location}%"))
    if user_id:
        query = query.filter(model.user_id == user_id)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(model.title.ilike(pattern), model.description.ilike(pattern)))

    return (
        query.order_by(model.created_at.desc(), model.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def update_profile(db: Session, profile, changes: dict):
    for field, value in changes.items():
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    return profile


def delete_profile(db: Session, profile):
    db.delete(profile)
    db.commit()
    logger.info("%s %s deleted", type(profile).__name__, profile.id)
