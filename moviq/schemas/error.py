"""Error schemas shared by the catalog client and the views."""

from enum import Enum

from pydantic import BaseModel, Field


class ErrorType(str, Enum):
    """Types of errors a catalog fetch can end with."""

    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    HTTP_ERROR = "http_error"
    MALFORMED_RESPONSE = "malformed_response"
    CONFIGURATION_ERROR = "configuration_error"
    VALIDATION_ERROR = "validation_error"


class FetchError(BaseModel):
    """Typed failure reason carried by :class:`moviq.schemas.result.Failure`."""

    error_type: ErrorType = Field(..., description="Category of error")
    message: str = Field(..., description="Human-readable error message")
    status_code: int | None = Field(None, description="HTTP status code, when one was received")
    retry_after: float | None = Field(
        None, description="Seconds to wait before retrying (for rate limit errors)"
    )

    @property
    def is_not_found(self) -> bool:
        return self.error_type is ErrorType.NOT_FOUND

    @property
    def is_rate_limited(self) -> bool:
        return self.error_type is ErrorType.RATE_LIMITED
