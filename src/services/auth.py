"""Authentication service for password handling and the credential store."""

import logging
from functools import lru_cache

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from src.database import create_tables
from src.exceptions import AuthenticationError, ConflictError
from src.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 10

DUPLICATE_EMAIL_MESSAGE = "Email is already registered"


@lru_cache
def get_pwd_context(rounds: int = DEFAULT_BCRYPT_ROUNDS) -> CryptContext:
    """Password hashing context for a bcrypt cost factor."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. A malformed hash never matches."""
    try:
        return get_pwd_context().verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be identified")
        return False


def get_password_hash(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password."""
    return get_pwd_context(rounds).hash(password)


def ensure_users_table(db: Session) -> None:
    """Create the users table if it is missing. Safe to call on every request."""
    create_tables(db.connection())


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


async def register_user(
    db: Session, name: str, email: str, password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS
) -> User:
    """Create a new user.

    Raises ConflictError when the email is taken, whether the pre-check sees
    the existing row or the unique constraint rejects a concurrent insert.
    """
    ensure_users_table(db)

    if get_user_by_email(db, email):
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

    password_hash = await run_in_threadpool(get_password_hash, password, rounds)
    user = User(name=name, email=email, password_hash=password_hash)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Concurrent registration rejected for {email}")
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from None
    db.refresh(user)

    logger.info(f"Registered user {user.id}")
    return user


async def authenticate_user(db: Session, email: str, password: str) -> User:
    """Authenticate a user by email and password.

    Unknown email and wrong password raise the same AuthenticationError.
    """
    user = get_user_by_email(db, email)
    if not user:
        logger.info("Login failed: unknown email")
        raise AuthenticationError()

    if not await run_in_threadpool(verify_password, password, user.password_hash):
        logger.info(f"Login failed: bad password for user {user.id}")
        raise AuthenticationError()

    return user
