"""
schemas/errors.py — Structured error response model

Shared by the HTTPException and RequestValidationError handlers in main.py.
`code` is a stable machine-readable value so clients never have to
string-match the human message.
"""

from pydantic import BaseModel

# Stable error codes shared with the item store client
UNAUTHORIZED = "UNAUTHORIZED"
FORBIDDEN = "FORBIDDEN"
NOT_FOUND = "NOT_FOUND"
VALIDATION = "VALIDATION"
RATE_LIMITED = "RATE_LIMITED"
SERVER = "SERVER"
NETWORK = "NETWORK"

_CODES_BY_STATUS = {
    400: VALIDATION,
    401: UNAUTHORIZED,
    403: FORBIDDEN,
    404: NOT_FOUND,
    422: VALIDATION,
    429: RATE_LIMITED,
}


def code_for_status(status_code: int) -> str:
    """Map an HTTP status to an error code. Unknown 4xx/5xx fall back to SERVER."""
    return _CODES_BY_STATUS.get(status_code, SERVER)


class ErrorResponse(BaseModel):
    error: str
    status_code: int
    code: str = SERVER
    request_id: str = ""
    detail: list | None = None
