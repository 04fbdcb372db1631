from sqlalchemy.orm import Session
from sqlalchemy import func, or_
from passlib.context import CryptContext
import hashlib
import logging
from typing import Optional

from buildmarket.users.models import User, UserType

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Fields a user may change on their own profile
SELF_EDITABLE_FIELDS = (
    "email", "user_type", "first_name", "last_name", "phone",
    "address", "avatar", "inn", "website",
)

# Fields only an administrator may change
ADMIN_EDITABLE_FIELDS = ("is_admin", "is_verified", "wallet_balance", "is_top_specialist")


def _prehash_password(password: str) -> str:
    """
    Pre-hash the raw password using SHA-256 before passing it to bcrypt.
    bcrypt only looks at the first 72 bytes of its input.
    """
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def hash_password(password: str) -> str:
    return pwd_context.hash(_prehash_password(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_prehash_password(plain_password), hashed_password)


def get_user_by_id(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str):
    return db.query(User).filter(User.username == username).first()


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def get_user_by_login(db: Session, login: str):
    return db.query(User).filter(or_(User.username == login, User.email == login)).first()


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    user_type=UserType.INDIVIDUAL,
    is_admin: bool = False,
    **profile,
):
    db_user = User(
        username=username,
        email=email,
        password=hash_password(password),
        user_type=user_type,
        is_admin=is_admin,
        **profile,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Registered user %s (id=%s)", db_user.username, db_user.id)
    return db_user


def authenticate_user(db: Session, login: str, password: str) -> Optional[User]:
    user = get_user_by_login(db, login)
    if not user or not verify_password(password, user.password):
        return None
    return user


def update_user(db: Session, user: User, changes: dict, allowed=SELF_EDITABLE_FIELDS):
    for field, value in changes.items():
        if field in allowed:
            setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


def set_password(db: Session, user: User, password: str):
    user.password = hash_password(password)
    db.commit()


def list_users(db: Session, limit: int = 100, offset: int = 0):
    return (
        db.query(User)
        .order_by(User.created_at.desc(), User.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def get_top_users(db: Session, person_type: Optional[str] = None, limit: int = 10):
    query = db.query(User)
    if person_type == "individual":
        query = query.filter(User.user_type.in_([UserType.INDIVIDUAL, UserType.CONTRACTOR]))
    elif person_type in ("company", "legal"):
        query = query.filter(User.user_type == UserType.COMPANY)
    return (
        query.order_by(
            User.is_top_specialist.desc(),
            User.rating.desc(),
            User.completed_projects.desc(),
            User.id.asc(),
        )
        .limit(limit)
        .all()
    )


def count_users(db: Session) -> int:
    return db.query(func.count(User.id)).scalar() or 0


def get_platform_stats(db: Session) -> dict:
    from buildmarket.marketplace.models import MarketplaceListing
    from buildmarket.moderation import ModerationStatus
    from buildmarket.tenders.models import Tender, TenderStatus

    active_tenders = (
        db.query(func.count(Tender.id))
        .filter(
            Tender.status == TenderStatus.OPEN,
            Tender.moderation_status == ModerationStatus.APPROVED,
        )
        .scalar()
    )
    listings = (
        db.query(func.count(MarketplaceListing.id))
        .filter(MarketplaceListing.moderation_status == ModerationStatus.APPROVED)
        .scalar()
    )
    completed = db.query(func.sum(User.completed_projects)).scalar()
    return {
        "active_tenders": active_tenders or 0,
        "users": count_users(db),
        "listings": listings or 0,
        "completed_projects": completed or 0,
    }
