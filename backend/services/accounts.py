# backend/services/accounts.py
import logging
from typing import Optional, Protocol

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database import transaction
from models.users import User
from utils.errors import AuthError, DuplicateEntry, NotFound, StorageError, ValidationError
from utils.hashing import get_password_hash, verify_password

logger = logging.getLogger(__name__)


class CredentialVerifier(Protocol):
    """Checks an email/secret pair and returns the matching user or raises AuthError."""

    def verify(self, email: str, secret: str) -> User: ...


def _normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def find_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == _normalize_email(email)).first()


def get_user(db: Session, user_id: int) -> User:
    try:
        user = db.query(User).filter(User.id == user_id).first()
    except SQLAlchemyError as e:
        logger.exception("User lookup failed: %s", e)
        raise StorageError("Failed to fetch user")
    if not user:
        raise NotFound("User not found")
    return user


class PasswordVerifier:
    """Verifies against the bcrypt hash stored on the user row."""

    def __init__(self, db: Session):
        self.db = db

    def verify(self, email: str, secret: str) -> User:
        try:
            user = find_user_by_email(self.db, email)
        except SQLAlchemyError as e:
            logger.exception("User lookup failed: %s", e)
            raise StorageError("Login failed")
        if not user or not verify_password(secret, user.password_hash):
            raise AuthError("Invalid credentials")
        return user


def register_user(db: Session, name: str, email: str, password: str) -> User:
    if not name or not email or not password:
        raise ValidationError("Name, email, and password are required")

    normalized_email = _normalize_email(email)
    if find_user_by_email(db, normalized_email):
        raise DuplicateEntry("Email already exists")

    user = User(name=name.strip(), email=normalized_email, password_hash=get_password_hash(password))
    try:
        with transaction(db):
            db.add(user)
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email
        raise DuplicateEntry("Email already exists")
    except SQLAlchemyError as e:
        logger.exception("Registration failed: %s", e)
        raise StorageError("Registration failed")

    logger.info("Registered user %s", user.id)
    return user
