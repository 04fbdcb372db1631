from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from buildmarket.database import get_db
from buildmarket.dependencies import get_current_user, get_optional_user
from buildmarket.moderation import can_view
from buildmarket.tenders.crud import (
    BidStateError, create_tender, get_tender, list_tenders, increment_tender_views,
    update_tender, delete_tender, count_bids, get_bid, get_tender_bids,
    submit_bid, approve_bid, reject_bid,
)
from buildmarket.tenders.models import Tender
from buildmarket.tenders.schemas import (
    TenderCreate, TenderUpdate, TenderResponse, BidCreate, BidRejectRequest, BidResponse,
)
from buildmarket.users.models import User

router = APIRouter(prefix="/tenders", tags=["tenders"])


def enrich_tender(tender: Tender, db: Session) -> TenderResponse:
    response = TenderResponse.model_validate(tender)
    response.bids_count = count_bids(db, tender.id)
    return response


def get_visible_tender(tender_id: int, db: Session, viewer) -> Tender:
    tender = get_tender(db, tender_id)
    if not tender or not can_view(tender, viewer):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tender not found")
    return tender


def split_csv(value: Optional[str]):
    if not value:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


@router.get("", response_model=list[TenderResponse])
def list_tenders_endpoint(
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    location: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    user_id: Optional[int] = None,
    search: Optional[str] = None,
    person_type: Optional[str] = None,
    required_professions: Optional[str] = None,
    show_all: bool = False,
    limit: int = 50,
    offset: int = 0,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
):
    tenders = list_tenders(
        db,
        category=category,
        subcategory=subcategory,
        location=location,
        status=status_filter,
        user_id=user_id,
        search=search,
        person_type=person_type,
        required_professions=split_csv(required_professions),
        viewer=viewer,
        show_all=show_all,
        limit=limit,
        offset=offset,
    )
    return [enrich_tender(t, db) for t in tenders]


@router.get("/{tender_id}", response_model=TenderResponse)
def get_tender_endpoint(
    tender_id: int,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
):
    tender = get_visible_tender(tender_id, db, viewer)
    increment_tender_views(db, tender)
    return enrich_tender(tender, db)


@router.post("", response_model=TenderResponse, status_code=status.HTTP_201_CREATED)
def create_tender_endpoint(
    payload: TenderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tender = create_tender(db, current_user.id, payload.model_dump())
    return enrich_tender(tender, db)


@router.put("/{tender_id}", response_model=TenderResponse)
def update_tender_endpoint(
    tender_id: int,
    payload: TenderUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tender = get_tender(db, tender_id)
    if not tender:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tender not found")
    if tender.user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only edit your own tenders")
    tender = update_tender(db, tender, payload.model_dump(exclude_unset=True))
    return enrich_tender(tender, db)


@router.delete("/{tender_id}")
def delete_tender_endpoint(
    tender_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tender = get_tender(db, tender_id)
    if not tender:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tender not found")
    if tender.user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only delete your own tenders")
    delete_tender(db, tender)
    return {"message": "Tender deleted"}


# ------- Bids -------
@router.get("/{tender_id}/bids", response_model=list[BidResponse])
def get_tender_bids_endpoint(
    tender_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tender = get_visible_tender(tender_id, db, current_user)
    return get_tender_bids(db, tender, current_user)


@router.post("/{tender_id}/bids", response_model=BidResponse, status_code=status.HTTP_201_CREATED)
def create_bid_endpoint(
    tender_id: int,
    payload: BidCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tender = get_visible_tender(tender_id, db, current_user)
    if tender.user_id == current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You cannot bid on your own tender")

    documents = [d.strip() for d in (payload.documents or []) if d and d.strip()]
    if not documents:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="At least one document is required")

    return submit_bid(
        db,
        tender,
        current_user,
        amount=payload.amount,
        description=payload.description,
        timeframe=payload.timeframe,
        documents=documents,
    )


def get_owned_bid(bid_id: int, db: Session, current_user: User):
    bid = get_bid(db, bid_id)
    if not bid:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bid not found")
    if bid.tender.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the tender owner can decide on bids"
        )
    return bid


@router.post("/bids/{bid_id}/approve", response_model=BidResponse)
@router.post("/bids/{bid_id}/accept", response_model=BidResponse)
def approve_bid_endpoint(
    bid_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    bid = get_owned_bid(bid_id, db, current_user)
    try:
        return approve_bid(db, bid)
    except BidStateError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post("/bids/{bid_id}/reject", response_model=BidResponse)
def reject_bid_endpoint(
    bid_id: int,
    payload: Optional[BidRejectRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    bid = get_owned_bid(bid_id, db, current_user)
    reason = payload.reason if payload else None
    try:
        return reject_bid(db, bid, reason)
    except BidStateError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
