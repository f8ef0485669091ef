"""
Logging setup for the FoodShare server and the migration script.

Everything logs through ``logging.getLogger(__name__)``; this module only
decides where those records go. SQL echo stays with ``DATABASE_ECHO``
(SQLAlchemy's own switch), so a DEBUG log level does not also dump every
statement.
"""

import logging
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are noisy below WARNING.
QUIET_LOGGERS = ("sqlalchemy.engine", "passlib", "multipart", "python_multipart")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> bool:
    """
    Send records to stderr, and to ``logfile`` when one is given.

    Returns False and changes nothing when the root logger already has
    handlers (uvicorn's or pytest's, or an earlier call).
    """
    if logging.getLogger().handlers:
        return False

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(logfile, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return True
