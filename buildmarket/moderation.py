"""Admin moderation shared by tenders, marketplace listings, specialists and crews.

Every moderated entity starts out ``pending``. Only an administrator moves it to
``approved`` or ``rejected``; public listings show approved rows only.
"""
from datetime import datetime, timezone
import enum
import logging

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Session, declared_attr, joinedload

from buildmarket.column_types import EnumValue

logger = logging.getLogger(__name__)


class ModerationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ModerationMixin:
    moderation_status = Column(
        EnumValue(ModerationStatus, length=20),
        nullable=False,
        default=ModerationStatus.PENDING,
        index=True,
    )
    moderated_at = Column(DateTime(timezone=True), nullable=True)
    moderation_comment = Column(Text, nullable=True)

    @declared_attr
    def moderated_by(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)


def is_admin(user) -> bool:
    return bool(user is not None and user.is_admin)


def apply_visibility(query, model, user=None, show_all: bool = False):
    """Restrict a listing query to approved rows unless an admin asks for everything."""
    if show_all and is_admin(user):
        return query
    return query.filter(model.moderation_status == ModerationStatus.APPROVED)


def can_view(entity, user=None) -> bool:
    if entity.moderation_status == ModerationStatus.APPROVED:
        return True
    if user is None:
        return False
    return user.is_admin or entity.user_id == user.id


def list_pending(db: Session, model):
    return (
        db.query(model)
        .options(joinedload(model.owner))
        .filter(model.moderation_status == ModerationStatus.PENDING)
        .order_by(model.created_at.desc(), model.id.desc())
        .all()
    )


def moderate(db: Session, entity, admin, decision: ModerationStatus, comment=None):
    entity.moderation_status = decision
    entity.moderated_by = admin.id
    entity.moderated_at = datetime.now(timezone.utc)
    entity.moderation_comment = comment
    db.commit()
    db.refresh(entity)
    logger.info(
        "%s %s %s by admin %s",
        entity.__tablename__, entity.id, decision.value, admin.id,
    )
    return entity
