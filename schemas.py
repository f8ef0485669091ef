from datetime import date, datetime
from typing import List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, EmailStr, Field

Role = Literal["giver", "receiver", "driver"]
NotificationLevel = Literal["all", "claims", "none"]
Category = Literal["produce", "dairy", "meat", "grains", "prepared", "other"]

ROLES = get_args(Role)
NOTIFICATION_LEVELS = get_args(NotificationLevel)
CATEGORIES = get_args(Category)


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    zip_code: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    role: Optional[Role] = None


class LoginData(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserRead(BaseModel):
    id: int
    email: str
    display_name: str
    zip_code: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    is_giver: bool
    is_receiver: bool
    is_driver: bool
    no_contact: bool
    pickup_notes: Optional[str] = None
    notification_level: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    """Profile changes. Only the fields the caller sends are applied."""

    display_name: Optional[str] = Field(default=None, min_length=1)
    zip_code: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    is_giver: Optional[bool] = None
    is_receiver: Optional[bool] = None
    is_driver: Optional[bool] = None
    no_contact: Optional[bool] = None
    pickup_notes: Optional[str] = None
    notification_level: Optional[NotificationLevel] = None


class ListingCreate(BaseModel):
    user_id: int
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    pickup_location: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    category: Optional[Category] = None
    quantity: Optional[str] = None
    expiry_date: Optional[date] = None


class ListingRead(BaseModel):
    id: int
    user_id: int
    title: str
    description: str
    pickup_location: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    category: Optional[str] = None
    quantity: Optional[str] = None
    expiry_date: Optional[date] = None
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ListingWithOwner(ListingRead):
    display_name: Optional[str] = None
    zip_code: Optional[str] = None


class ClaimRequest(BaseModel):
    receiver_id: Optional[int] = None


class ClaimEventRead(BaseModel):
    id: int
    listing_id: int
    event_type: str
    actor_id: int
    owner_id: int
    note: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    user: UserRead


class ListingResponse(BaseModel):
    listing: ListingWithOwner


class ListingsResponse(BaseModel):
    listings: List[ListingWithOwner]


class ListingActionResponse(BaseModel):
    listing: ListingRead
    message: str


class ClaimEventsResponse(BaseModel):
    events: List[ClaimEventRead]
