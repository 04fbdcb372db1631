from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging
from typing import Optional

from buildmarket.admin.crud import get_admin_stats
from buildmarket.admin.schemas import (
    ModerationKind, AdminUserUpdate, MakeAdminRequest, MakeAdminResponse,
    ModerationDecision, ModerationResult, AdminStats,
)
from buildmarket.database import get_db
from buildmarket.dependencies import get_admin_user
from buildmarket.directory.models import Specialist, Crew
from buildmarket.directory.schemas import SpecialistResponse, CrewResponse
from buildmarket.marketplace.crud import get_listing, delete_listing
from buildmarket.marketplace.models import MarketplaceListing
from buildmarket.marketplace.schemas import ListingResponse
from buildmarket.moderation import ModerationStatus, list_pending, moderate
from buildmarket.tenders.crud import get_tender, delete_tender
from buildmarket.tenders.models import Tender
from buildmarket.tenders.schemas import TenderResponse
from buildmarket.users.crud import get_user_by_id, list_users, update_user, ADMIN_EDITABLE_FIELDS
from buildmarket.users.models import User
from buildmarket.users.schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

MODERATED = {
    ModerationKind.TENDERS: (Tender, TenderResponse, "Tender"),
    ModerationKind.MARKETPLACE: (MarketplaceListing, ListingResponse, "Listing"),
    ModerationKind.SPECIALISTS: (Specialist, SpecialistResponse, "Specialist"),
    ModerationKind.CREWS: (Crew, CrewResponse, "Crew"),
}


@router.get("/stats", response_model=AdminStats)
def admin_stats(db: Session = Depends(get_db), admin: User = Depends(get_admin_user)):
    return {"stats": get_admin_stats(db)}


@router.get("/users", response_model=list[UserResponse])
def admin_list_users(
    limit: int = 500,
    offset: int = 0,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    return list_users(db, limit=limit, offset=offset)


@router.put("/users/{user_id}", response_model=UserResponse)
def admin_update_user(
    user_id: int,
    payload: AdminUserUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    user = update_user(db, user, changes, allowed=ADMIN_EDITABLE_FIELDS)
    logger.info("Admin %s updated user %s: %s", admin.id, user.id, sorted(changes))
    return user


@router.post("/make-admin", response_model=MakeAdminResponse)
def make_admin(
    payload: MakeAdminRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    user = get_user_by_id(db, payload.user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    user = update_user(db, user, {"is_admin": True}, allowed=ADMIN_EDITABLE_FIELDS)
    logger.info("Admin %s promoted user %s", admin.id, user.id)
    return {"message": "User is now an admin", "user": user}


# ------- Moderation -------
@router.get("/moderation/{kind}")
def pending_items(
    kind: ModerationKind,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    model, response_schema, _ = MODERATED[kind]
    return [
        response_schema.model_validate(item).model_dump(mode="json")
        for item in list_pending(db, model)
    ]


def _decide(kind: ModerationKind, item_id: int, decision: ModerationStatus, payload, db: Session, admin: User):
    model, _, label = MODERATED[kind]
    item = db.query(model).filter(model.id == item_id).first()
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    comment = payload.comment if payload else None
    item = moderate(db, item, admin, decision, comment)
    return {
        "message": f"{label} {decision.value}",
        "id": item.id,
        "moderation_status": item.moderation_status,
        "moderation_comment": item.moderation_comment,
        "moderated_by": item.moderated_by,
        "moderated_at": item.moderated_at,
    }


@router.post("/moderation/{kind}/{item_id}/approve", response_model=ModerationResult)
def approve_item(
    kind: ModerationKind,
    item_id: int,
    payload: Optional[ModerationDecision] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    return _decide(kind, item_id, ModerationStatus.APPROVED, payload, db, admin)


@router.post("/moderation/{kind}/{item_id}/reject", response_model=ModerationResult)
def reject_item(
    kind: ModerationKind,
    item_id: int,
    payload: Optional[ModerationDecision] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    return _decide(kind, item_id, ModerationStatus.REJECTED, payload, db, admin)


# ------- Content removal -------
@router.delete("/tenders/{tender_id}")
def admin_delete_tender(
    tender_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    tender = get_tender(db, tender_id)
    if not tender:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tender not found")
    delete_tender(db, tender)
    return {"message": "Tender deleted"}


@router.delete("/marketplace/{listing_id}")
def admin_delete_listing(
    listing_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    listing = get_listing(db, listing_id)
    if not listing:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    delete_listing(db, listing)
    return {"message": "Listing deleted"}
