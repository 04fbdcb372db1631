from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from buildmarket.auth import verify_token
from buildmarket.database import get_db
from buildmarket.users.crud import get_user_by_id
from buildmarket.users.models import User

http_bearer = HTTPBearer(auto_error=False)


def _user_from_token(token: str, db: Session) -> User:
    payload = verify_token(token)
    user_id = payload.get("id")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication payload",
        )

    # Always re-read the row so role changes take effect immediately
    user = get_user_by_id(db, int(user_id))
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(http_bearer),
    db: Session = Depends(get_db),
) -> User:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _user_from_token(credentials.credentials, db)


def get_optional_user(
    credentials: HTTPAuthorizationCredentials = Depends(http_bearer),
    db: Session = Depends(get_db),
):
    """Resolve the caller when a valid token is sent, otherwise return None.

    Public pages stay readable with an expired or unknown token.
    """
    if not credentials or credentials.scheme.lower() != "bearer":
        return None
    try:
        return _user_from_token(credentials.credentials, db)
    except HTTPException:
        return None


def ensure_admin_user(user: User):
    if not user or not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required"
        )


def get_admin_user(user: User = Depends(get_current_user)) -> User:
    ensure_admin_user(user)
    return user
