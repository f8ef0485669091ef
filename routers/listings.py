from fastapi import APIRouter, status

from db import SessionDep
from schemas import (
    ClaimEventsResponse,
    ClaimRequest,
    ListingActionResponse,
    ListingCreate,
    ListingResponse,
    ListingsResponse,
)
from services import listings

router = APIRouter(prefix="/api/listings", tags=["listings"])


@router.post("", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
def create_listing(listing_in: ListingCreate, session: SessionDep):
    """
    Post a new food listing. It starts out available.
    """
    return {"listing": listings.create_listing(session, listing_in)}


@router.get("", response_model=ListingsResponse)
def list_available(session: SessionDep):
    """
    The 20 newest available listings, with the donor's name and zip code.
    """
    return {"listings": listings.list_available(session)}


@router.get("/my/{user_id}", response_model=ListingsResponse)
def list_mine(user_id: int, session: SessionDep):
    """
    Every listing a giver has posted, whatever its status.
    """
    return {"listings": listings.list_mine(session, user_id)}


@router.get("/{listing_id}", response_model=ListingResponse)
def get_listing(listing_id: int, session: SessionDep):
    return {"listing": listings.get_listing(session, listing_id)}


@router.patch("/{listing_id}/claim", response_model=ListingActionResponse)
def claim_listing(listing_id: int, claim: ClaimRequest, session: SessionDep):
    listing = listings.claim_listing(session, listing_id, claim.receiver_id)
    return {"listing": listing, "message": "Listing claimed"}


@router.patch("/{listing_id}/complete", response_model=ListingActionResponse)
def complete_listing(listing_id: int, session: SessionDep):
    listing = listings.complete_listing(session, listing_id)
    return {"listing": listing, "message": "Listing completed"}


@router.get("/{listing_id}/events", response_model=ClaimEventsResponse)
def list_events(listing_id: int, session: SessionDep):
    """
    Claim history for a listing, oldest first.
    """
    return {"events": listings.list_events(session, listing_id)}
