from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional

from buildmarket.database import get_db
from buildmarket.dependencies import get_current_user, get_optional_user
from buildmarket.directory.crud import create_profile, get_profile, list_profiles, update_profile, delete_profile
from buildmarket.directory.models import Specialist, Crew
from buildmarket.directory.schemas import (
    SpecialistCreate, SpecialistUpdate, SpecialistResponse,
    CrewCreate, CrewUpdate, CrewResponse,
)
from buildmarket.moderation import can_view
from buildmarket.reviews.crud import get_user_reviews
from buildmarket.reviews.schemas import ReviewResponse
from buildmarket.users.models import User


def build_profile_router(prefix, model, create_schema, update_schema, response_schema, label):
    """Routes for a moderated directory profile (specialists, crews)."""
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])
    not_found = f"{label} not found"

    def load_visible(profile_id: int, db: Session, viewer):
        profile = get_profile(db, model, profile_id)
        if not profile or not can_view(profile, viewer):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        return profile

    def load_owned(profile_id: int, db: Session, current_user: User, allow_admin: bool = False):
        profile = get_profile(db, model, profile_id)
        if not profile:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        if profile.user_id != current_user.id and not (allow_admin and current_user.is_admin):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"You can only manage your own {label.lower()} profiles"
            )
        return profile

    @router.get("", response_model=list[response_schema])
    def list_endpoint(
        specialty: Optional[str] = None,
        location: Optional[str] = None,
        search: Optional[str] = None,
        user_id: Optional[int] = None,
        show_all: bool = False,
        limit: int = 50,
        offset: int = 0,
        db: Session = Depends(get_db),
        viewer: Optional[User] = Depends(get_optional_user),
    ):
        return list_profiles(
            db, model,
            specialty=specialty,
            location=location,
            search=search,
            user_id=user_id,
            viewer=viewer,
            show_all=show_all,
            limit=limit,
            offset=offset,
        )

    @router.get("/{profile_id}", response_model=response_schema)
    def get_endpoint(
        profile_id: int,
        db: Session = Depends(get_db),
        viewer: Optional[User] = Depends(get_optional_user),
    ):
        return load_visible(profile_id, db, viewer)

    @router.get("/{profile_id}/reviews", response_model=list[ReviewResponse])
    def reviews_endpoint(
        profile_id: int,
        db: Session = Depends(get_db),
        viewer: Optional[User] = Depends(get_optional_user),
    ):
        profile = load_visible(profile_id, db, viewer)
        return get_user_reviews(db, profile.user_id)

    @router.post("", response_model=response_schema, status_code=status.HTTP_201_CREATED)
    def create_endpoint(
        payload: create_schema,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        return create_profile(db, model, current_user.id, payload.model_dump())

    @router.put("/{profile_id}", response_model=response_schema)
    def update_endpoint(
        profile_id: int,
        payload: update_schema,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        profile = load_owned(profile_id, db, current_user)
        return update_profile(db, profile, payload.model_dump(exclude_unset=True))

    @router.delete("/{profile_id}")
    def delete_endpoint(
        profile_id: int,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        profile = load_owned(profile_id, db, current_user, allow_admin=True)
        delete_profile(db, profile)
        return {"message": f"{label} deleted"}

    return router


specialists_router = build_profile_router(
    "/specialists", Specialist, SpecialistCreate, SpecialistUpdate, SpecialistResponse, "Specialist",
)
crews_router = build_profile_router(
    "/crews", Crew, CrewCreate, CrewUpdate, CrewResponse, "Crew",
)
