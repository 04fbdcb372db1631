from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_
import logging
from typing import Optional

from buildmarket.marketplace.models import MarketplaceListing
from buildmarket.moderation import ModerationStatus, apply_visibility

logger = logging.getLogger(__name__)


def create_listing(db: Session, user_id: int, data: dict):
    listing = MarketplaceListing(user_id=user_id, moderation_status=ModerationStatus.PENDING, **data)
    db.add(listing)
    db.commit()
    db.refresh(listing)
    logger.info("Listing %s created by user %s, awaiting moderation", listing.id, user_id)
    return listing


def get_listing(db: Session, listing_id: int):
    return (
        db.query(MarketplaceListing)
        .options(joinedload(MarketplaceListing.owner))
        .filter(MarketplaceListing.id == listing_id)
        .first()
    )


def list_listings(
    db: Session,
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    listing_type: Optional[str] = None,
    location: Optional[str] = None,
    min_price: Optional[int] = None,
    max_price: Optional[int] = None,
    user_id: Optional[int] = None,
    search: Optional[str] = None,
    viewer=None,
    show_all: bool = False,
    limit: int = 50,
    offset: int = 0,
):
    query = db.query(MarketplaceListing).options(joinedload(MarketplaceListing.owner))
    query = apply_visibility(query, MarketplaceListing, viewer, show_all)

    if category:
        query = query.filter(MarketplaceListing.category == category)
    if subcategory:
        query = query.filter(MarketplaceListing.subcategory == subcategory)
    if listing_type:
        query = query.filter(MarketplaceListing.listing_type == listing_type)
    if location:
        query = query.filter(MarketplaceListing.location.ilike(f"%{location}%"))
    if min_price is not None:
        query = query.filter(MarketplaceListing.price >= min_price)
    if max_price is not None:
        query = query.filter(MarketplaceListing.price <= max_price)
    if user_id:
        query = query.filter(MarketplaceListing.user_id == user_id)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            MarketplaceListing.title.ilike(pattern),
            MarketplaceListing.description.ilike(pattern),
        ))

    return (
        query.order_by(MarketplaceListing.created_at.desc(), MarketplaceListing.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def get_user_listings(db: Session, user_id: int):
    return (
        db.query(MarketplaceListing)
        .filter(MarketplaceListing.user_id == user_id)
        .order_by(MarketplaceListing.created_at.desc(), MarketplaceListing.id.desc())
        .all()
    )


def increment_listing_views(db: Session, listing: MarketplaceListing):
    listing.view_count = (listing.view_count or 0) + 1
    db.commit()
    db.refresh(listing)
    return listing


def update_listing(db: Session, listing: MarketplaceListing, changes: dict):
    for field, value in changes.items():
        setattr(listing, field, value)
    db.commit()
    db.refresh(listing)
    return listing


def delete_listing(db: Session, listing: MarketplaceListing):
    db.delete(listing)
    db.commit()
    logger.info("Listing %s deleted", listing.id)
