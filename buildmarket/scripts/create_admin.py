#!/usr/bin/env python3
"""
Create the administrator account, or promote it if the user already exists.

Credentials come from ADMIN_USERNAME / ADMIN_EMAIL / ADMIN_PASSWORD.
"""
from buildmarket.config import ADMIN_USERNAME, ADMIN_EMAIL, ADMIN_PASSWORD
from buildmarket.database import SessionLocal, init_db
from buildmarket.users.crud import create_user, get_user_by_username, set_password
from buildmarket.users.models import UserType


def ensure_admin(db, username=ADMIN_USERNAME, email=ADMIN_EMAIL, password=ADMIN_PASSWORD, reset_password=False):
    user = get_user_by_username(db, username)
    if user is None:
        return create_user(
            db,
            username=username,
            email=email,
            password=password,
            user_type=UserType.COMPANY,
            is_admin=True,
            is_verified=True,
            first_name="Admin",
        ), True

    user.is_admin = True
    user.is_verified = True
    db.commit()
    if reset_password:
        set_password(db, user, password)
    db.refresh(user)
    return user, False


def main():
    init_db()
    db = SessionLocal()
    try:
        user, created = ensure_admin(db)
        action = "Created" if created else "Promoted"
        print(f"{action} admin '{user.username}' (id={user.id})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
