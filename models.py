from datetime import date, datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel

# Listing lifecycle: available -> claimed -> completed
STATUS_AVAILABLE = "available"
STATUS_CLAIMED = "claimed"
STATUS_COMPLETED = "completed"

EVENT_CLAIM_REQUESTED = "claim_requested"
EVENT_COMPLETED = "completed"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    password_hash: str
    display_name: str

    zip_code: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

    is_giver: bool = False
    is_receiver: bool = False
    is_driver: bool = False

    no_contact: bool = False
    pickup_notes: Optional[str] = None
    notification_level: str = "all"

    created_at: datetime = Field(default_factory=utcnow)


class FoodListing(SQLModel, table=True):
    __tablename__ = "food_listings"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)

    title: str
    description: str
    pickup_location: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

    category: Optional[str] = None
    quantity: Optional[str] = None
    expiry_date: Optional[date] = None

    status: str = Field(default=STATUS_AVAILABLE, index=True)
    created_at: datetime = Field(default_factory=utcnow)


class ClaimEvent(SQLModel, table=True):
    __tablename__ = "claim_events"

    id: Optional[int] = Field(default=None, primary_key=True)
    listing_id: int = Field(foreign_key="food_listings.id", index=True)
    event_type: str  # claim_requested | completed
    actor_id: int = Field(foreign_key="users.id")
    owner_id: int = Field(foreign_key="users.id")
    note: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
