from fastapi import APIRouter

from db import SessionDep
from schemas import UserResponse, UserUpdate
from services import profiles

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("/{user_id}", response_model=UserResponse)
def get_profile(user_id: int, session: SessionDep):
    """
    Get a user's public profile (never the password hash).
    """
    return {"user": profiles.get_profile(session, user_id)}


@router.put("/{user_id}", response_model=UserResponse)
def update_profile(user_id: int, changes: UserUpdate, session: SessionDep):
    """
    Update roles and preferences. Only the fields present in the body
    are changed.
    """
    return {"user": profiles.update_profile(session, user_id, changes)}
