"""
Failure classification for user-facing errors.

Reconciliation itself never fails. Everything around it (file uploads,
the card database, shared collection pages, wizard navigation) can, and
each such failure is raised as a KnownError subclass carrying a
classification, a user-appropriate message and an HTTP status code.

The API layer turns any KnownError into a JSON body of the form
``{"failure": FailureDetail}``.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    FILE_TOO_LARGE = "file_too_large"
    UNSUPPORTED_FILE_TYPE = "unsupported_file_type"
    PARSE_FAILED = "parse_failed"

    # Resource failures
    NOT_FOUND = "not_found"
    EMPTY_RESULT = "empty_result"

    # Wizard navigation
    STEP_NOT_ACCESSIBLE = "step_not_accessible"

    # Service failures
    EXTERNAL_API_ERROR = "external_api_error"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class FileTooLargeError(KnownError):
    """Raised when an upload exceeds the configured size limit."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            kind=FailureKind.FILE_TOO_LARGE,
            message=f"File size too large. Maximum size is {limit // (1024 * 1024)}MB.",
            detail=f"Received {size} bytes",
            status_code=413,
        )


class UnsupportedFileTypeError(KnownError):
    """Raised when an upload is not a YDK, CSV or TXT file."""

    def __init__(self, file_name: str):
        self.file_name = file_name
        super().__init__(
            kind=FailureKind.UNSUPPORTED_FILE_TYPE,
            message="Unsupported file type. Please upload a .ydk, .csv, or .txt file.",
            detail=f"File: {file_name}",
            status_code=415,
        )


class ParseError(KnownError):
    """Raised when a file cannot be turned into cards."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.PARSE_FAILED,
            message=message,
            detail=detail,
            suggestion="Check that the file was exported from YGOPRODeck or a compatible tool.",
            status_code=422,
        )


class SessionNotFoundError(KnownError):
    """Raised when a wizard session id is unknown."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Session '{session_id}' not found",
            suggestion="Start a new session.",
            status_code=404,
        )


class StepNotAccessibleError(KnownError):
    """Raised when a wizard action needs a step that is still locked."""

    def __init__(self, step_id: int, message: str):
        self.step_id = step_id
        super().__init__(
            kind=FailureKind.STEP_NOT_ACCESSIBLE,
            message=message,
            detail=f"Step {step_id} is not accessible",
            status_code=409,
        )


class ExternalServiceError(KnownError):
    """Raised when an upstream website or API cannot be reached."""

    def __init__(self, message: str, detail: str | None = None, status_code: int = 502):
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=message,
            detail=detail,
            suggestion="Try again in a few minutes.",
            status_code=status_code,
        )
