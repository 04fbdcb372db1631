from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional

from buildmarket.auth import create_user_token
from buildmarket.database import get_db
from buildmarket.dependencies import get_current_user
from buildmarket.marketplace.crud import get_user_listings
from buildmarket.marketplace.schemas import ListingResponse
from buildmarket.tenders.crud import get_user_tenders
from buildmarket.tenders.routes import enrich_tender
from buildmarket.tenders.schemas import TenderResponse
from buildmarket.users.crud import (
    get_user_by_username, get_user_by_email, get_user_by_id, create_user,
    authenticate_user, update_user, list_users, get_top_users, get_platform_stats,
)
from buildmarket.users.models import User
from buildmarket.users.schemas import (
    UserRegister, UserLogin, UserUpdate, UserSummary, UserResponse, AuthResponse, PlatformStats,
)

auth_router = APIRouter(prefix="/auth", tags=["auth"])
router = APIRouter(prefix="/users", tags=["users"])
stats_router = APIRouter(tags=["stats"])


@auth_router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    if get_user_by_username(db, payload.username):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")
    if get_user_by_email(db, payload.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    profile = payload.model_dump(exclude={"username", "email", "password", "user_type"})
    user = create_user(
        db,
        username=payload.username,
        email=payload.email,
        password=payload.password,
        user_type=payload.user_type,
        **profile,
    )
    return {"message": "Registration successful", "user": user, "token": create_user_token(user)}


@auth_router.post("/login", response_model=AuthResponse)
def login(payload: UserLogin, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.username, payload.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )
    return {"message": "Login successful", "user": user, "token": create_user_token(user)}


@router.get("", response_model=list[UserSummary])
def list_users_endpoint(limit: int = 100, offset: int = 0, db: Session = Depends(get_db)):
    return list_users(db, limit=limit, offset=offset)


@router.get("/top", response_model=list[UserSummary])
def top_users(person_type: Optional[str] = None, limit: int = 10, db: Session = Depends(get_db)):
    return get_top_users(db, person_type=person_type, limit=limit)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=UserResponse)
def update_me(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    changes = payload.model_dump(exclude_unset=True)
    email = changes.get("email")
    if email and email != current_user.email:
        existing = get_user_by_email(db, email)
        if existing and existing.id != current_user.id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    return update_user(db, current_user, changes)


@router.get("/me/tenders", response_model=list[TenderResponse])
def my_tenders(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return [enrich_tender(t, db) for t in get_user_tenders(db, current_user.id)]


@router.get("/me/marketplace", response_model=list[ListingResponse])
def my_listings(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_user_listings(db, current_user.id)


@router.get("/{user_id}", response_model=UserSummary)
def get_user_endpoint(user_id: int, db: Session = Depends(get_db)):
    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@stats_router.get("/stats", response_model=PlatformStats)
def platform_stats(db: Session = Depends(get_db)):
    return get_platform_stats(db)
