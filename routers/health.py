import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from db import SessionDep

router = APIRouter(tags=["health"])

logger = logging.getLogger(__name__)


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
def read_root():
    return "FoodShare API is running"


@router.get("/api/health")
def health(session: SessionDep):
    """
    Round-trip to the database and report its clock.
    """
    try:
        now = session.exec(select(func.now())).one()
    except SQLAlchemyError:
        logger.exception("Health check error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"ok": False, "error": "Database error"},
        )
    return {"ok": True, "time": now}
