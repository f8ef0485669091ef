"""
Domain errors raised by the services.

Each error carries the HTTP status the API layer answers with, so the
exception handlers in ``main`` never need to know which service raised.
"""


class FoodShareError(Exception):
    """Base class for errors that map to a client-facing response."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(FoodShareError):
    """Missing or malformed input."""

    status_code = 400


class AuthError(FoodShareError):
    """Bad credentials. Same message whether the email or the password was wrong."""

    status_code = 401

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class NotFoundError(FoodShareError):
    """Missing row, or a conditional status update that matched nothing."""

    status_code = 404


class ConflictError(FoodShareError):
    status_code = 409


class InternalError(FoodShareError):
    """Unexpected store failure. The detail goes to the log, never to the client."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


def describe_validation_errors(errors) -> str:
    """Turn pydantic's error list into one readable sentence."""
    parts = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc)
        parts.append(f"{field}: {err['msg']}" if field else err["msg"])
    return "; ".join(parts) or "Invalid request"
