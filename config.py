"""
Application settings read from the environment.

A ``.env`` file in the working directory is loaded first, so local
development can keep ``DATABASE_URL`` and friends out of the shell.
Values are read once, when this module is imported.
"""

import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_list(name: str, default: str) -> List[str]:
    return [part.strip() for part in os.getenv(name, default).split(",") if part.strip()]


@dataclass
class Settings:
    """Settings for the API server and the form client."""

    project_name: str = "FoodShare"
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./foodshare.db")
    database_echo: bool = _env_bool("DATABASE_ECHO")
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "3000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Signs the client's session cookie. A random key means every restart
    # logs everyone out, which is fine for development.
    secret_key: str = os.getenv("SECRET_KEY") or secrets.token_hex(32)
    session_max_age: int = int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 8)))

    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", "*"))


settings = Settings()
