from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional

from buildmarket.database import get_db
from buildmarket.dependencies import get_current_user, get_optional_user
from buildmarket.marketplace.crud import (
    create_listing, get_listing, list_listings, increment_listing_views,
    update_listing, delete_listing,
)
from buildmarket.marketplace.schemas import ListingCreate, ListingUpdate, ListingResponse
from buildmarket.moderation import can_view
from buildmarket.users.models import User

router = APIRouter(prefix="/marketplace", tags=["marketplace"])


@router.get("", response_model=list[ListingResponse])
def list_listings_endpoint(
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    listing_type: Optional[str] = None,
    location: Optional[str] = None,
    min_price: Optional[int] = None,
    max_price: Optional[int] = None,
    user_id: Optional[int] = None,
    search: Optional[str] = None,
    show_all: bool = False,
    limit: int = 50,
    offset: int = 0,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
):
    return list_listings(
        db,
        category=category,
        subcategory=subcategory,
        listing_type=listing_type,
        location=location,
        min_price=min_price,
        max_price=max_price,
        user_id=user_id,
        search=search,
        viewer=viewer,
        show_all=show_all,
        limit=limit,
        offset=offset,
    )


@router.get("/{listing_id}", response_model=ListingResponse)
def get_listing_endpoint(
    listing_id: int,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
):
    listing = get_listing(db, listing_id)
    if not listing or not can_view(listing, viewer):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    return increment_listing_views(db, listing)


@router.post("", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
def create_listing_endpoint(
    payload: ListingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return create_listing(db, current_user.id, payload.model_dump())


@router.put("/{listing_id}", response_model=ListingResponse)
def update_listing_endpoint(
    listing_id: int,
    payload: ListingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    listing = get_listing(db, listing_id)
    if not listing:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    if listing.user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only edit your own listings")
    return update_listing(db, listing, payload.model_dump(exclude_unset=True))


@router.delete("/{listing_id}")
def delete_listing_endpoint(
    listing_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    listing = get_listing(db, listing_id)
    if not listing:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    if listing.user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only delete your own listings")
    delete_listing(db, listing)
    return {"message": "Listing deleted"}
