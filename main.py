import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from config import BASE_DIR, settings
from db import engine
from errors import FoodShareError, InternalError, describe_validation_errors
from logging_config import setup_logging
from migrations import run_migrations
from routers import auth, health, listings, profile, ui

setup_logging(settings.log_level, settings.log_file)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.project_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")


@app.on_event("startup")
def on_startup() -> None:
    run_migrations(engine)
    logger.info("%s ready on port %s", settings.project_name, settings.port)


@app.exception_handler(FoodShareError)
async def foodshare_error_handler(request: Request, exc: FoodShareError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": describe_validation_errors(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


app.include_router(health.router)
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(listings.router)
app.include_router(ui.router)


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.host, port=settings.port)
