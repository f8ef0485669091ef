from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError as SchemaValidationError

from config import BASE_DIR, settings
from db import SessionDep
from errors import FoodShareError, describe_validation_errors
from models import STATUS_AVAILABLE, STATUS_CLAIMED, User
from schemas import CATEGORIES, NOTIFICATION_LEVELS, ListingCreate, LoginData, UserCreate, UserUpdate
from services import accounts, listings, profiles
from .auth import SESSION_COOKIE, OptionalUserDep, create_session_token

router = APIRouter(prefix="/ui", tags=["ui"], include_in_schema=False)
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


FLASH_SUCCESS = "success"
FLASH_ERROR = "error"


def _field(form, name: str) -> str:
    value = form.get(name)
    return value.strip() if isinstance(value, str) else ""


def _optional(form, name: str) -> Optional[str]:
    return _field(form, name) or None


def _login_redirect() -> RedirectResponse:
    return RedirectResponse(url="/ui", status_code=status.HTTP_303_SEE_OTHER)


def _logged_in_redirect(user: User, url: str = "/ui/browse") -> RedirectResponse:
    response = RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        key=SESSION_COOKIE,
        value=create_session_token(user.id),
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=settings.session_max_age,
    )
    return response


def _render(
    request: Request,
    name: str,
    user: Optional[User],
    status_code: int = status.HTTP_200_OK,
    **context,
) -> HTMLResponse:
    context.setdefault("flash_message", None)
    context.setdefault("errors", [])
    response = templates.TemplateResponse(
        request,
        name,
        {"current_user": user, **context},
    )
    response.status_code = status_code
    return response


def _error_messages(exc: Exception) -> List[str]:
    if isinstance(exc, SchemaValidationError):
        return [describe_validation_errors(exc.errors())]
    return [exc.message]


# Sign up / log in


@router.get("", response_class=HTMLResponse)
def auth_page(request: Request, current_user: OptionalUserDep):
    if current_user is not None:
        return RedirectResponse(url="/ui/browse", status_code=status.HTTP_303_SEE_OTHER)
    return _render(request, "index.html", None, tab="signup", form_data={})


@router.post("/signup", response_class=HTMLResponse)
async def signup_form(request: Request, session: SessionDep):
    form = await request.form()
    form_data = {
        "display_name": _field(form, "display_name"),
        "email": _field(form, "email"),
        "zip_code": _field(form, "zip_code"),
        "role": _field(form, "role") or "receiver",
    }

    try:
        user_in = UserCreate(
            email=form_data["email"],
            password=_field(form, "password"),
            display_name=form_data["display_name"],
            zip_code=form_data["zip_code"] or None,
            role=form_data["role"],
        )
        user = accounts.sign_up(session, user_in)
    except (SchemaValidationError, FoodShareError) as exc:
        code = getattr(exc, "status_code", status.HTTP_400_BAD_REQUEST)
        return _render(
            request,
            "index.html",
            None,
            status_code=code,
            tab="signup",
            form_data=form_data,
            errors=_error_messages(exc),
        )

    return _logged_in_redirect(user)


@router.post("/login", response_class=HTMLResponse)
async def login_form(request: Request, session: SessionDep):
    form = await request.form()
    email = _field(form, "email")

    try:
        payload = LoginData(email=email, password=_field(form, "password"))
        user = accounts.log_in(session, payload.email, payload.password)
    except (SchemaValidationError, FoodShareError) as exc:
        code = getattr(exc, "status_code", status.HTTP_400_BAD_REQUEST)
        return _render(
            request,
            "index.html",
            None,
            status_code=code,
            tab="login",
            form_data={"email": email},
            errors=_error_messages(exc),
        )

    return _logged_in_redirect(user)


@router.post("/logout")
def logout():
    response = _login_redirect()
    response.delete_cookie(SESSION_COOKIE)
    return response


# Browse and claim


def _render_browse(request, session, user, flash_message=None, status_code=status.HTTP_200_OK):
    return _render(
        request,
        "browse.html",
        user,
        status_code=status_code,
        listings=listings.list_available(session),
        flash_message=flash_message,
    )


@router.get("/browse", response_class=HTMLResponse)
def browse_page(request: Request, session: SessionDep, current_user: OptionalUserDep):
    if current_user is None:
        return _login_redirect()
    return _render_browse(request, session, current_user)


@router.post("/listings/{listing_id}/claim", response_class=HTMLResponse)
def claim_from_browse(
    listing_id: int,
    request: Request,
    session: SessionDep,
    current_user: OptionalUserDep,
):
    if current_user is None:
        return _login_redirect()

    try:
        listing = listings.claim_listing(session, listing_id, current_user.id)
    except FoodShareError as exc:
        return _render_browse(
            request,
            session,
            current_user,
            {"kind": FLASH_ERROR, "text": exc.message},
            status_code=exc.status_code,
        )

    return _render_browse(
        request,
        session,
        current_user,
        {"kind": FLASH_SUCCESS, "text": f"You claimed \"{listing.title}\"."},
    )


# Share food


@router.get("/share", response_class=HTMLResponse)
def share_page(request: Request, current_user: OptionalUserDep):
    if current_user is None:
        return _login_redirect()
    return _render(request, "share.html", current_user, form_data={}, categories=CATEGORIES)


@router.post("/share", response_class=HTMLResponse)
async def share_form(request: Request, session: SessionDep, current_user: OptionalUserDep):
    if current_user is None:
        return _login_redirect()

    form = await request.form()
    form_data = {
        "title": _field(form, "title"),
        "description": _field(form, "description"),
        "category": _field(form, "category"),
        "quantity": _field(form, "quantity"),
        "expiry_date": _field(form, "expiry_date"),
        "pickup_location": _field(form, "pickup_location"),
    }

    errors: List[str] = []
    for field, label in (("title", "Title"), ("description", "Description")):
        if not form_data[field]:
            errors.append(f"{label} is required.")

    expiry: Optional[date] = None
    if form_data["expiry_date"]:
        try:
            expiry = date.fromisoformat(form_data["expiry_date"])
        except ValueError:
            errors.append("Expiry date must look like YYYY-MM-DD.")

    if not errors:
        try:
            listing_in = ListingCreate(
                user_id=current_user.id,
                title=form_data["title"],
                description=form_data["description"],
                category=form_data["category"] or None,
                quantity=form_data["quantity"] or None,
                expiry_date=expiry,
                pickup_location=form_data["pickup_location"] or None,
            )
            listings.create_listing(session, listing_in)
        except (SchemaValidationError, FoodShareError) as exc:
            errors.extend(_error_messages(exc))

    if errors:
        return _render(
            request,
            "share.html",
            current_user,
            status_code=status.HTTP_400_BAD_REQUEST,
            form_data=form_data,
            categories=CATEGORIES,
            errors=errors,
        )

    return _render(
        request,
        "share.html",
        current_user,
        form_data={},
        categories=CATEGORIES,
        flash_message={"kind": FLASH_SUCCESS, "text": "Food shared successfully!"},
    )


# My listings


def _render_mine(request, session, user, flash_message=None, status_code=status.HTTP_200_OK):
    return _render(
        request,
        "my_listings.html",
        user,
        status_code=status_code,
        listings=listings.list_mine(session, user.id),
        flash_message=flash_message,
        claimed=STATUS_CLAIMED,
        available=STATUS_AVAILABLE,
    )


@router.get("/my", response_class=HTMLResponse)
def my_listings_page(request: Request, session: SessionDep, current_user: OptionalUserDep):
    if current_user is None:
        return _login_redirect()
    return _render_mine(request, session, current_user)


@router.post("/listings/{listing_id}/complete", response_class=HTMLResponse)
def complete_from_mine(
    listing_id: int,
    request: Request,
    session: SessionDep,
    current_user: OptionalUserDep,
):
    if current_user is None:
        return _login_redirect()

    try:
        listing = listings.get_listing(session, listing_id)
        if listing.user_id != current_user.id:
            return _render_mine(
                request,
                session,
                current_user,
                {"kind": FLASH_ERROR, "text": "You can only complete your own listings."},
                status_code=status.HTTP_403_FORBIDDEN,
            )
        listings.complete_listing(session, listing_id)
    except FoodShareError as exc:
        return _render_mine(
            request,
            session,
            current_user,
            {"kind": FLASH_ERROR, "text": exc.message},
            status_code=exc.status_code,
        )

    return _render_mine(
        request,
        session,
        current_user,
        {"kind": FLASH_SUCCESS, "text": "Listing marked completed."},
    )


# Profile


@router.get("/profile", response_class=HTMLResponse)
def profile_page(request: Request, current_user: OptionalUserDep):
    if current_user is None:
        return _login_redirect()
    return _render(
        request,
        "profile.html",
        current_user,
        notification_levels=NOTIFICATION_LEVELS,
    )


@router.post("/profile", response_class=HTMLResponse)
async def profile_form(request: Request, session: SessionDep, current_user: OptionalUserDep):
    if current_user is None:
        return _login_redirect()

    form = await request.form()

    try:
        changes = UserUpdate(
            display_name=_field(form, "display_name"),
            zip_code=_optional(form, "zip_code"),
            is_giver="is_giver" in form,
            is_receiver="is_receiver" in form,
            is_driver="is_driver" in form,
            no_contact="no_contact" in form,
            pickup_notes=_optional(form, "pickup_notes"),
            notification_level=_field(form, "notification_level") or "all",
        )
        user = profiles.update_profile(session, current_user.id, changes)
    except (SchemaValidationError, FoodShareError) as exc:
        code = getattr(exc, "status_code", status.HTTP_400_BAD_REQUEST)
        return _render(
            request,
            "profile.html",
            current_user,
            status_code=code,
            notification_levels=NOTIFICATION_LEVELS,
            errors=_error_messages(exc),
        )

    return _render(
        request,
        "profile.html",
        user,
        notification_levels=NOTIFICATION_LEVELS,
        flash_message={"kind": FLASH_SUCCESS, "text": "Profile saved."},
    )
