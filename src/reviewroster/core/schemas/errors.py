"""Error response schema."""
from pydantic import BaseModel

from ..errors import ErrorCode


class ErrorDetail(BaseModel):
    code: ErrorCode
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned for every failed request."""
    error: ErrorDetail
