from sqlalchemy.orm import Session
from sqlalchemy import or_, and_, func

from buildmarket.messaging.models import Message


def add_message(db: Session, sender_id: int, receiver_id: int, content: str):
    """Stage a message on the session without committing."""
    message = Message(sender_id=sender_id, receiver_id=receiver_id, content=content)
    db.add(message)
    return message


def create_message(db: Session, sender_id: int, receiver_id: int, content: str):
    message = add_message(db, sender_id, receiver_id, content)
    db.commit()
    db.refresh(message)
    return message


def get_message(db: Session, message_id: int):
    return db.query(Message).filter(Message.id == message_id).first()


def get_user_messages(db: Session, user_id: int, limit: int = 200):
    return (
        db.query(Message)
        .filter(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(limit)
        .all()
    )


def get_conversation(db: Session, user_id: int, other_user_id: int):
    """Messages between two users, oldest first."""
    participant_filter = or_(
        and_(Message.sender_id == user_id, Message.receiver_id == other_user_id),
        and_(Message.sender_id == other_user_id, Message.receiver_id == user_id),
    )
    return (
        db.query(Message)
        .filter(participant_filter)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )


def get_recent_conversations(db: Session, user_id: int):
    """Latest message exchanged with each counterpart, newest conversation first."""
    latest = {}
    for message in get_user_messages(db, user_id, limit=None):
        other_id = message.receiver_id if message.sender_id == user_id else message.sender_id
        if other_id not in latest:
            latest[other_id] = message
    return [(other_id, message) for other_id, message in latest.items()]


def count_unread(db: Session, user_id: int) -> int:
    return (
        db.query(func.count(Message.id))
        .filter(Message.receiver_id == user_id, Message.is_read == False)  # noqa: E712
        .scalar()
        or 0
    )


def count_unread_from(db: Session, user_id: int, other_user_id: int) -> int:
    return (
        db.query(func.count(Message.id))
        .filter(
            Message.receiver_id == user_id,
            Message.sender_id == other_user_id,
            Message.is_read == False,  # noqa: E712
        )
        .scalar()
        or 0
    )


def mark_message_read(db: Session, message: Message):
    if not message.is_read:
        message.is_read = True
        db.commit()
        db.refresh(message)
    return message


def mark_conversation_read(db: Session, user_id: int, other_user_id: int) -> int:
    updated = db.query(Message).filter(
        Message.receiver_id == user_id,
        Message.sender_id == other_user_id,
        Message.is_read == False  # noqa: E712
    ).update({"is_read": True}, synchronize_session=False)
    db.commit()
    return updated
