"""
Shared error handling for the REST dispatcher.
"""

from typing import Dict, Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class APIErrorPayload(BaseModel):
    """Machine-readable error body returned by the remote API.

    Every field is optional; the commit loop checks presence explicitly
    instead of trusting the body shape.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    code: Optional[int] = None
    message: Optional[str] = None
    errors: Optional[Dict[str, Any]] = None
    retry_after: Optional[float] = None
    is_global: bool = Field(default=False, alias="global")

    @classmethod
    def from_body(cls, data: Any) -> Optional["APIErrorPayload"]:
        """Parse a decoded JSON body, or None when it is not an error object."""
        if not isinstance(data, dict):
            return None
        try:
            return cls.model_validate(data)
        except PydanticValidationError:
            return None


class RestClientException(Exception):
    """Base exception for the REST dispatcher."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class TransportError(RestClientException):
    """Connection-level failure: no HTTP response was received."""

    def __init__(self, message: str = "Transport failure", details: Optional[Dict[str, Any]] = None):
        super().__init__("TRANSPORT_ERROR", message, details)


class DispatchContextError(RestClientException, RuntimeError):
    """A request was issued outside of a running asyncio task."""

    def __init__(self, message: str = "Cannot make HTTP request outside of an asyncio task",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__("DISPATCH_CONTEXT_ERROR", message, details)


class APIRequestError(RestClientException):
    """A dispatched request ended in a failure outcome."""

    def __init__(self, kind: str, message: str, status: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.kind = kind
        self.status = status
        super().__init__(kind.upper(), message, details)
