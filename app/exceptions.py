"""
Expected, user-facing failures raised by the core services.

Each carries the HTTP status and a stable ``code`` the API returns next to the
message, so clients can tell e.g. a full plan from a duplicate join.
"""

from __future__ import annotations


class TravelBuddyError(Exception):
    status_code: int = 400
    code: str = "error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(TravelBuddyError):
    status_code = 404
    code = "not_found"


class ForbiddenError(TravelBuddyError):
    status_code = 403
    code = "forbidden"


class ConflictError(TravelBuddyError):
    status_code = 409
    code = "conflict"


class RosterFullError(TravelBuddyError):
    status_code = 409
    code = "roster_full"


class InvalidStateError(TravelBuddyError):
    status_code = 409
    code = "invalid_state"


class InvalidRequestError(TravelBuddyError):
    status_code = 400
    code = "invalid_request"


class NotMemberError(TravelBuddyError):
    status_code = 400
    code = "not_member"
