"""
Failure taxonomy for generated-content synchronization.

Every failure carries a stable ``kind`` used in refresh outcomes and in the
API error envelope.
"""
from typing import Optional


class ContentSyncError(Exception):
    """Base class for all typed failures raised by the content services."""

    kind = "content_sync_error"

    def __init__(self, message: str = "", detail: Optional[str] = None):
        super().__init__(message or self.kind)
        self.message = message or self.kind
        self.detail = detail


class GenerationFailure(ContentSyncError):
    """The external generative call failed (timeout, transport, non-2xx, empty)."""

    kind = "generation_failure"

    def __init__(self, message: str, reason: str = "transport", status_code: Optional[int] = None):
        super().__init__(message, detail=reason)
        self.reason = reason
        self.status_code = status_code


class MalformedOutputFailure(ContentSyncError):
    """Model output was not valid JSON (or was empty) after fence stripping."""

    kind = "malformed_output"


class SchemaValidationFailure(ContentSyncError):
    """Parsed output failed structural validation on ``field``."""

    kind = "schema_validation_failure"

    def __init__(self, field: str, message: str = ""):
        super().__init__(message or f"invalid field: {field}", detail=field)
        self.field = field


class ConflictRetryExhausted(ContentSyncError):
    """Atomic find-or-create could not settle within its bounded attempts."""

    kind = "conflict_retry_exhausted"


class NotFound(ContentSyncError):
    kind = "not_found"


GENERATION_ERRORS = (GenerationFailure, MalformedOutputFailure, SchemaValidationFailure)
