from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from buildmarket.database import get_db
from buildmarket.dependencies import get_current_user
from buildmarket.messaging.crud import (
    create_message, get_message, get_user_messages, get_conversation,
    get_recent_conversations, count_unread, count_unread_from,
    mark_message_read, mark_conversation_read,
)
from buildmarket.messaging.schemas import (
    MessageCreate, MessageResponse, ConversationResponse, UnreadCountResponse,
)
from buildmarket.users.crud import get_user_by_id
from buildmarket.users.models import User

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("", response_model=list[MessageResponse])
def list_my_messages(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_user_messages(db, current_user.id)


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"count": count_unread(db, current_user.id)}


@router.get("/conversations", response_model=list[ConversationResponse])
def list_conversations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    conversations = []
    for other_id, message in get_recent_conversations(db, current_user.id):
        other = get_user_by_id(db, other_id)
        if not other:
            continue
        conversations.append({
            "user": other,
            "last_message": message,
            "unread_count": count_unread_from(db, current_user.id, other_id),
        })
    return conversations


@router.get("/{user_id}", response_model=list[MessageResponse])
def conversation_with(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_conversation(db, current_user.id, user_id)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
    payload: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if payload.receiver_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot send a message to yourself"
        )
    if not get_user_by_id(db, payload.receiver_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Receiver not found"
        )
    return create_message(db, current_user.id, payload.receiver_id, payload.content)


@router.put("/{message_id}/read", response_model=MessageResponse)
def mark_read(
    message_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    message = get_message(db, message_id)
    if not message:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Message not found"
        )
    if message.receiver_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the receiver can mark a message as read"
        )
    return mark_message_read(db, message)


@router.put("/{user_id}/read-all")
def mark_thread_read(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    updated = mark_conversation_read(db, current_user.id, user_id)
    return {"message": "Conversation marked as read", "updated": updated}
