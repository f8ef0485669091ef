from typing import Annotated, Optional

from fastapi import APIRouter, Cookie, Depends, status
from itsdangerous import BadSignature, URLSafeTimedSerializer

from config import settings
from db import SessionDep
from models import User
from schemas import LoginData, UserCreate, UserResponse
from services import accounts

router = APIRouter(prefix="/api", tags=["auth"])

SESSION_COOKIE = "session"

serializer = URLSafeTimedSerializer(settings.secret_key, salt="foodshare-session")


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(user_in: UserCreate, session: SessionDep):
    """
    Register a new account. The role picks which of the giver / receiver /
    driver flags is set; it defaults to receiver.
    """
    user = accounts.sign_up(session, user_in)
    return {"user": user}


@router.post("/login", response_model=UserResponse)
def login(payload: LoginData, session: SessionDep):
    user = accounts.log_in(session, payload.email, payload.password)
    return {"user": user}


# Session cookie used by the form client under /ui.


def create_session_token(user_id: int) -> str:
    return serializer.dumps({"user_id": user_id})


def verify_session_token(token: str, max_age_seconds: Optional[int] = None) -> Optional[dict]:
    """
    Returns {'user_id': ...} if the token is valid,
    or None if it is tampered with or expired.
    """
    if max_age_seconds is None:
        max_age_seconds = settings.session_max_age
    try:
        return serializer.loads(token, max_age=max_age_seconds)
    except BadSignature:
        return None


def get_optional_user(
    session: SessionDep,
    session_token: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE),
) -> Optional[User]:
    """The logged-in user, or None when there is no valid session cookie."""
    if session_token is None:
        return None

    data = verify_session_token(session_token)
    if not data:
        return None

    return session.get(User, data["user_id"])


OptionalUserDep = Annotated[Optional[User], Depends(get_optional_user)]
