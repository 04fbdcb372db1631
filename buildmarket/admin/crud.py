from sqlalchemy.orm import Session
from sqlalchemy import func, union

from buildmarket.marketplace.models import MarketplaceListing
from buildmarket.tenders.models import Tender
from buildmarket.users.crud import count_users


def get_admin_stats(db: Session) -> dict:
    """Totals for the admin dashboard.

    ``activeUsers`` counts users who own at least one tender or listing.
    """
    owners = union(
        db.query(Tender.user_id.label("user_id")).statement,
        db.query(MarketplaceListing.user_id.label("user_id")).statement,
    ).subquery()
    active_users = db.query(func.count(func.distinct(owners.c.user_id))).scalar()

    return {
        "users": count_users(db),
        "tenders": db.query(func.count(Tender.id)).scalar() or 0,
        "listings": db.query(func.count(MarketplaceListing.id)).scalar() or 0,
        "activeUsers": active_users or 0,
    }
