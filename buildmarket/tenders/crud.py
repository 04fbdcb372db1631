from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func, or_
import logging
from typing import Optional

from buildmarket.messaging.crud import add_message
from buildmarket.moderation import ModerationStatus, apply_visibility
from buildmarket.notifications.crud import add_notification
from buildmarket.notifications.models import NotificationType
from buildmarket.tenders.models import Tender, TenderBid, BidStatus

logger = logging.getLogger(__name__)


class BidStateError(Exception):
    """Raised when a bid cannot make the requested transition."""


# ------- Tenders -------
def create_tender(db: Session, user_id: int, data: dict):
    tender = Tender(user_id=user_id, moderation_status=ModerationStatus.PENDING, **data)
    db.add(tender)
    db.commit()
    db.refresh(tender)
    logger.info("Tender %s created by user %s, awaiting moderation", tender.id, user_id)
    return tender


def get_tender(db: Session, tender_id: int):
    return (
        db.query(Tender)
        .options(joinedload(Tender.owner))
        .filter(Tender.id == tender_id)
        .first()
    )


def list_tenders(
    db: Session,
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    location: Optional[str] = None,
    status: Optional[str] = None,
    user_id: Optional[int] = None,
    search: Optional[str] = None,
    person_type: Optional[str] = None,
    required_professions: Optional[list] = None,
    viewer=None,
    show_all: bool = False,
    limit: int = 50,
    offset: int = 0,
):
    query = db.query(Tender).options(joinedload(Tender.owner))
    query = apply_visibility(query, Tender, viewer, show_all)

    if category:
        query = query.filter(Tender.category == category)
    if subcategory:
        query = query.filter(Tender.subcategory == subcategory)
    if location:
        query = query.filter(Tender.location.ilike(f"%{location}%"))
    if status:
        query = query.filter(Tender.status == status)
    if user_id:
        query = query.filter(Tender.user_id == user_id)
    if person_type:
        query = query.filter(Tender.person_type == person_type)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Tender.title.ilike(pattern), Tender.description.ilike(pattern)))

    tenders = query.order_by(Tender.created_at.desc(), Tender.id.desc()).all()

    # Professions live in a JSON array column, so match them after loading
    if required_professions:
        wanted = {p.strip().lower() for p in required_professions if p.strip()}
        tenders = [
            t for t in tenders
            if wanted & {p.lower() for p in t.required_professions}
        ]

    return tenders[offset:offset + limit]


def get_user_tenders(db: Session, user_id: int):
    return (
        db.query(Tender)
        .filter(Tender.user_id == user_id)
        .order_by(Tender.created_at.desc(), Tender.id.desc())
        .all()
    )


def increment_tender_views(db: Session, tender: Tender):
    tender.view_count = (tender.view_count or 0) + 1
    db.commit()
    db.refresh(tender)
    return tender


def update_tender(db: Session, tender: Tender, changes: dict):
    for field, value in changes.items():
        setattr(tender, field, value)
    db.commit()
    db.refresh(tender)
    return tender


def delete_tender(db: Session, tender: Tender):
    db.delete(tender)
    db.commit()
    logger.info("Tender %s deleted", tender.id)


def count_bids(db: Session, tender_id: int) -> int:
    return db.query(func.count(TenderBid.id)).filter(TenderBid.tender_id == tender_id).scalar() or 0


# ------- Bids -------
def get_bid(db: Session, bid_id: int):
    return (
        db.query(TenderBid)
        .options(joinedload(TenderBid.tender), joinedload(TenderBid.bidder))
        .filter(TenderBid.id == bid_id)
        .first()
    )


def get_tender_bids(db: Session, tender: Tender, viewer):
    """All bids for the tender owner or an admin, otherwise only the viewer's own."""
    query = (
        db.query(TenderBid)
        .options(joinedload(TenderBid.bidder))
        .filter(TenderBid.tender_id == tender.id)
    )
    if not (viewer.is_admin or tender.user_id == viewer.id):
        query = query.filter(TenderBid.user_id == viewer.id)
    return query.order_by(TenderBid.created_at.desc(), TenderBid.id.desc()).all()


def submit_bid(db: Session, tender: Tender, bidder, amount: int, description: str, timeframe: int, documents: list):
    """Create a pending bid, notify the tender owner and open a chat thread.

    All three rows are written in one transaction.
    """
    try:
        bid = TenderBid(
            tender_id=tender.id,
            user_id=bidder.id,
            amount=amount,
            description=description,
            timeframe=timeframe,
            documents=documents,
            status=BidStatus.PENDING,
        )
        db.add(bid)
        db.flush()

        add_notification(
            db,
            user_id=tender.user_id,
            type=NotificationType.TENDER_BID,
            title="New bid on your tender",
            message=f'{bidder.username} submitted a bid of {amount} on "{tender.title}".',
            related_id=bid.id,
        )
        add_message(
            db,
            sender_id=bidder.id,
            receiver_id=tender.user_id,
            content=(
                f'Hello! I have submitted a bid on your tender "{tender.title}". '
                "I am ready to discuss the project details."
            ),
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(bid)
    logger.info("Bid %s submitted on tender %s by user %s", bid.id, tender.id, bidder.id)
    return bid


def _ensure_pending(bid: TenderBid):
    if bid.status != BidStatus.PENDING:
        raise BidStateError(f"Bid has already been {bid.status.value}")


def approve_bid(db: Session, bid: TenderBid):
    _ensure_pending(bid)
    already_approved = (
        db.query(TenderBid.id)
        .filter(
            TenderBid.tender_id == bid.tender_id,
            TenderBid.status == BidStatus.APPROVED,
        )
        .first()
    )
    if already_approved:
        raise BidStateError("Another bid has already been approved for this tender")

    try:
        bid.status = BidStatus.APPROVED
        bid.is_accepted = True
        add_notification(
            db,
            user_id=bid.user_id,
            type=NotificationType.BID_APPROVED,
            title="Your bid was approved",
            message=f'Your bid on "{bid.tender.title}" was approved by the customer.',
            related_id=bid.id,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(bid)
    logger.info("Bid %s approved on tender %s", bid.id, bid.tender_id)
    return bid


def reject_bid(db: Session, bid: TenderBid, reason: Optional[str] = None):
    _ensure_pending(bid)
    reason = (reason or "").strip() or None

    message = f'Your bid on "{bid.tender.title}" was rejected.'
    if reason:
        message = f"{message} Reason: {reason}"

    try:
        bid.status = BidStatus.REJECTED
        bid.is_accepted = False
        bid.rejection_reason = reason
        add_notification(
            db,
            user_id=bid.user_id,
            type=NotificationType.BID_REJECTED,
            title="Your bid was rejected",
            message=message,
            related_id=bid.id,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(bid)
    logger.info("Bid %s rejected on tender %s", bid.id, bid.tender_id)
    return bid
