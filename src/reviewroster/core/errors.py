"""Error taxonomy shared by services and the HTTP layer."""
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Classified failure kinds returned to callers."""
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    PR_EXISTS = "PR_EXISTS"
    TEAM_EXISTS = "TEAM_EXISTS"
    PR_MERGED = "PR_MERGED"
    NOT_ASSIGNED = "NOT_ASSIGNED"
    NO_CANDIDATE = "NO_CANDIDATE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


HTTP_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.PR_EXISTS: 409,
    ErrorCode.TEAM_EXISTS: 400,
    ErrorCode.PR_MERGED: 409,
    ErrorCode.NOT_ASSIGNED: 409,
    ErrorCode.NO_CANDIDATE: 409,
    ErrorCode.INTERNAL_ERROR: 500,
}

DEFAULT_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_INPUT: "please check your input",
    ErrorCode.NOT_FOUND: "resource not found",
    ErrorCode.PR_EXISTS: "pull request already exists",
    ErrorCode.TEAM_EXISTS: "team_name already exists",
    ErrorCode.PR_MERGED: "cannot reassign on merged PR",
    ErrorCode.NOT_ASSIGNED: "reviewer is not assigned to this PR",
    ErrorCode.NO_CANDIDATE: "no active replacement candidate in team",
    ErrorCode.INTERNAL_ERROR: "internal server error",
}


class ReviewRosterError(Exception):
    """Classified error raised by every service operation.

    Args:
        code: Error kind
        message: Human readable message (defaults per code)
        transient: For INTERNAL_ERROR, whether the underlying store failure
            was transient and the request may be retried
    """

    def __init__(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        *,
        transient: bool = False,
    ):
        self.code = code
        self.message = message or DEFAULT_MESSAGES[code]
        self.transient = transient
        super().__init__(f"{code.value}: {self.message}")

    @property
    def status_code(self) -> int:
        """HTTP status code for this error."""
        return HTTP_STATUS_CODES[self.code]

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Serialize to the error envelope used by the API."""
        return {"error": {"code": self.code.value, "message": self.message}}

    def __repr__(self) -> str:
        return f"<ReviewRosterError(code='{self.code.value}', transient={self.transient})>"
