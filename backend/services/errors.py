"""Error taxonomy for the AI proxy.

Two layers live here:

* ``ErrorClass`` - the closed set of upstream failure classes produced by the
  HTTP client boundary (``gemini_client.classify_error``). The retry executor
  only ever looks at this.
* ``ErrorCode`` - the codes surfaced to the mobile client in error bodies.
"""

from enum import Enum


class ErrorClass(str, Enum):
    TRANSIENT_NETWORK = "transient-network"
    RATE_LIMIT = "rate-limit"
    SERVER_ERROR = "server-error"
    FATAL = "fatal"

    @property
    def retryable(self) -> bool:
        return self is not ErrorClass.FATAL


class ErrorCode(str, Enum):
    MISSING_API_KEY = "MISSING_API_KEY"
    CLIENT_INIT_ERROR = "CLIENT_INIT_ERROR"
    INVALID_JSON = "INVALID_JSON"
    MISSING_FIELDS = "MISSING_FIELDS"
    INVALID_TYPE = "INVALID_TYPE"
    NETWORK_ERROR = "NETWORK_ERROR"
    RATE_LIMIT = "RATE_LIMIT"
    INVALID_API_KEY = "INVALID_API_KEY"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class AIServiceError(Exception):
    """Base error rendered to the client as ``{error, code, details}``."""

    code: ErrorCode = ErrorCode.UNKNOWN_ERROR
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_body(self) -> dict:
        body = {"error": self.message, "code": self.code.value}
        if self.details:
            body["details"] = self.details
        return body


class InvalidRequestError(AIServiceError):
    status_code = 400


class MissingApiKeyError(AIServiceError):
    code = ErrorCode.MISSING_API_KEY


class ClientInitError(AIServiceError):
    code = ErrorCode.CLIENT_INIT_ERROR


class UpstreamError(AIServiceError):
    """A failed upstream generation call, already classified."""

    def __init__(
        self,
        message: str,
        error_class: ErrorClass,
        *,
        http_status: int | None = None,
    ) -> None:
        super().__init__(message, code=_code_for(error_class, http_status))
        self.error_class = error_class
        self.http_status = http_status

    @property
    def retryable(self) -> bool:
        return self.error_class.retryable


class ResponseValidationError(AIServiceError):
    """Upstream output was received but did not match the expected schema."""


def _code_for(error_class: ErrorClass, http_status: int | None) -> ErrorCode:
    if error_class is ErrorClass.RATE_LIMIT:
        return ErrorCode.RATE_LIMIT
    if error_class in (ErrorClass.TRANSIENT_NETWORK, ErrorClass.SERVER_ERROR):
        return ErrorCode.NETWORK_ERROR
    if http_status in (401, 403):
        return ErrorCode.INVALID_API_KEY
    return ErrorCode.UNKNOWN_ERROR
