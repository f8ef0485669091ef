import logging

from sqlmodel import Session

from errors import NotFoundError, ValidationError
from models import User
from schemas import UserUpdate

logger = logging.getLogger(__name__)

# Columns that may not be cleared with an explicit null.
REQUIRED_FIELDS = {
    "display_name",
    "is_giver",
    "is_receiver",
    "is_driver",
    "no_contact",
    "notification_level",
}


def get_profile(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(session: Session, user_id: int, changes: UserUpdate) -> User:
    """
    Merge the fields present in ``changes`` over the stored profile.

    Fields the caller did not send keep their current value; an explicit
    null clears an optional field such as ``zip_code``.
    """
    user = get_profile(session, user_id)

    data = changes.model_dump(exclude_unset=True)
    cleared = sorted(name for name in REQUIRED_FIELDS if name in data and data[name] is None)
    if cleared:
        raise ValidationError(f"{', '.join(cleared)} cannot be null")
    if "display_name" in data:
        data["display_name"] = data["display_name"].strip()
        if not data["display_name"]:
            raise ValidationError("display_name cannot be empty")

    user.sqlmodel_update(data)
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Updated profile %s (%s)", user_id, ", ".join(sorted(data)) or "no changes")
    return user
