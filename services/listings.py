"""
Food listings and their lifecycle.

A listing only ever moves available -> claimed -> completed. Both
transitions are a single conditional UPDATE, so when two receivers
claim the same listing at once the store lets exactly one of them
through and the other sees zero rows updated.
"""

import logging
from typing import List, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from errors import NotFoundError, ValidationError
from models import (
    EVENT_CLAIM_REQUESTED,
    EVENT_COMPLETED,
    STATUS_AVAILABLE,
    STATUS_CLAIMED,
    STATUS_COMPLETED,
    ClaimEvent,
    FoodListing,
    User,
)
from schemas import ListingCreate, ListingWithOwner

logger = logging.getLogger(__name__)

FEED_LIMIT = 20


def _with_owner(listing: FoodListing, display_name: Optional[str], zip_code: Optional[str]) -> ListingWithOwner:
    return ListingWithOwner(
        **listing.model_dump(),
        display_name=display_name,
        zip_code=zip_code,
    )


def _owner_query():
    return select(FoodListing, User.display_name, User.zip_code).join(
        User, User.id == FoodListing.user_id
    )


def create_listing(session: Session, listing_in: ListingCreate) -> FoodListing:
    if not listing_in.title.strip() or not listing_in.description.strip():
        raise ValidationError("user_id, title, and description are required")
    if session.get(User, listing_in.user_id) is None:
        raise ValidationError(f"No user with id {listing_in.user_id}")

    listing = FoodListing(
        **listing_in.model_dump(),
        status=STATUS_AVAILABLE,
    )
    session.add(listing)
    session.commit()
    session.refresh(listing)
    logger.info("User %s created listing %s", listing.user_id, listing.id)
    return listing


def list_available(session: Session, limit: int = FEED_LIMIT) -> List[ListingWithOwner]:
    """Newest available listings, joined with the donor's name and zip code."""
    stmt = (
        _owner_query()
        .where(FoodListing.status == STATUS_AVAILABLE)
        .order_by(FoodListing.created_at.desc(), FoodListing.id.desc())
        .limit(limit)
    )
    rows = session.exec(stmt).all()
    return [_with_owner(listing, name, zip_code) for listing, name, zip_code in rows]


def list_mine(session: Session, user_id: int) -> List[FoodListing]:
    stmt = (
        select(FoodListing)
        .where(FoodListing.user_id == user_id)
        .order_by(FoodListing.created_at.desc(), FoodListing.id.desc())
    )
    return list(session.exec(stmt).all())


def get_listing(session: Session, listing_id: int) -> ListingWithOwner:
    row = session.exec(_owner_query().where(FoodListing.id == listing_id)).first()
    if row is None:
        raise NotFoundError("Listing not found")
    listing, name, zip_code = row
    return _with_owner(listing, name, zip_code)


def _transition(session: Session, listing_id: int, from_status: str, to_status: str) -> bool:
    stmt = (
        update(FoodListing)
        .where(FoodListing.id == listing_id, FoodListing.status == from_status)
        .values(status=to_status)
    )
    result = session.execute(stmt)
    return result.rowcount == 1


def claim_listing(session: Session, listing_id: int, receiver_id: Optional[int]) -> FoodListing:
    """
    Reserve an available listing for a receiver and log a claim event.

    Raises NotFoundError when the listing does not exist or someone else
    already claimed it.
    """
    if receiver_id is None:
        raise ValidationError("receiver_id is required")
    if session.get(User, receiver_id) is None:
        raise ValidationError(f"No user with id {receiver_id}")

    if not _transition(session, listing_id, STATUS_AVAILABLE, STATUS_CLAIMED):
        session.rollback()
        logger.warning("Claim of listing %s by user %s refused", listing_id, receiver_id)
        raise NotFoundError("Listing not found or already claimed")

    listing = session.get(FoodListing, listing_id)
    session.refresh(listing)
    session.add(
        ClaimEvent(
            listing_id=listing_id,
            event_type=EVENT_CLAIM_REQUESTED,
            actor_id=receiver_id,
            owner_id=listing.user_id,
        )
    )
    session.commit()
    session.refresh(listing)
    logger.info("Listing %s claimed by user %s", listing_id, receiver_id)
    return listing


def complete_listing(session: Session, listing_id: int) -> FoodListing:
    if not _transition(session, listing_id, STATUS_CLAIMED, STATUS_COMPLETED):
        session.rollback()
        logger.warning("Completion of listing %s refused", listing_id)
        raise NotFoundError("Listing not found or not claimed")

    listing = session.get(FoodListing, listing_id)
    session.refresh(listing)

    last_claim = session.exec(
        select(ClaimEvent)
        .where(
            ClaimEvent.listing_id == listing_id,
            ClaimEvent.event_type == EVENT_CLAIM_REQUESTED,
        )
        .order_by(ClaimEvent.id.desc())
    ).first()

    session.add(
        ClaimEvent(
            listing_id=listing_id,
            event_type=EVENT_COMPLETED,
            actor_id=last_claim.actor_id if last_claim else listing.user_id,
            owner_id=listing.user_id,
        )
    )
    session.commit()
    session.refresh(listing)
    logger.info("Listing %s completed", listing_id)
    return listing


def list_events(session: Session, listing_id: int) -> List[ClaimEvent]:
    """Lifecycle events for a listing, oldest first."""
    if session.get(FoodListing, listing_id) is None:
        raise NotFoundError("Listing not found")
    stmt = (
        select(ClaimEvent)
        .where(ClaimEvent.listing_id == listing_id)
        .order_by(ClaimEvent.created_at, ClaimEvent.id)
    )
    return list(session.exec(stmt).all())
