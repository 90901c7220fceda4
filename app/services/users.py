"""User store: lookups, registration and credential checks."""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth import get_password_hash, verify_password
from app.exceptions import Conflict
from app.models.user import User
from app.schemas.user import UserCreate

logger = logging.getLogger(__name__)


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def create_user(db: Session, user_data: UserCreate) -> User:
    """Register a new user.

    Email and username are checked up front so a duplicate is reported as
    a Conflict naming the offending field. A concurrent insert that slips
    past the checks is caught at commit and reported the same way.
    """
    if get_user_by_email(db, user_data.email):
        raise Conflict("User with this email already exists")
    if get_user_by_username(db, user_data.username):
        raise Conflict("Username already taken")

    db_user = User(
        username=user_data.username,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User with this email or username already exists")
    db.refresh(db_user)
    logger.info("Registered user %s with role %s", db_user.username, db_user.role.value)
    return db_user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user if the credentials match, otherwise None."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user
