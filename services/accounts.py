"""
Sign-up and login.

Passwords are hashed with passlib's ``pbkdf2_sha256``; the hash never
leaves this module except as the ``password_hash`` column. Email
uniqueness is the store's job (a UNIQUE index on ``users.email``), so
signup just inserts and translates the integrity failure.
"""

import logging

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from errors import AuthError, ConflictError, ValidationError
from models import User
from schemas import UserCreate

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "receiver"

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def sign_up(session: Session, user_in: UserCreate) -> User:
    """
    Create a user with a hashed password.

    The requested role sets exactly one of the three role flags; no role
    means receiver. Raises ConflictError if the email is taken.
    """
    display_name = user_in.display_name.strip()
    if not display_name:
        raise ValidationError("email, password, and display_name are required")

    role = user_in.role or DEFAULT_ROLE

    user = User(
        email=user_in.email,
        password_hash=hash_password(user_in.password),
        display_name=display_name,
        zip_code=user_in.zip_code,
        lat=user_in.lat,
        lng=user_in.lng,
        is_giver=role == "giver",
        is_receiver=role == "receiver",
        is_driver=role == "driver",
    )

    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.warning("Signup refused: email already registered")
        raise ConflictError("Email already registered")

    session.refresh(user)
    logger.info("Created user %s as %s", user.id, role)
    return user


def log_in(session: Session, email: str, password: str) -> User:
    """Return the user whose credentials match, or raise AuthError."""
    if not email or not password:
        raise ValidationError("email and password are required")

    user = session.exec(select(User).where(User.email == email)).first()

    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt")
        raise AuthError()

    return user
