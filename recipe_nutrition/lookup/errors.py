"""Structured error types for the nutrition lookup pipeline.

Every failure in the dispatch path is one of four typed errors. Each carries
a machine-readable code, a human-readable message, opaque ``details`` and the
HTTP status the API layer answers with, so the caller always receives the
same ``{"error": ..., "details": ...}`` envelope.

    ┌──────────────────────────────────────────────────────┐
    │ Caller input      → MissingInputError          (400) │
    └──────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌──────────────────────────────────────────────────────┐
    │ Settings check    → ConfigurationMissingError  (500) │
    └──────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌──────────────────────────────────────────────────────┐
    │ Upstream call     → UpstreamUnreachableError   (500) │
    │ Upstream response → UpstreamRejectedError      (502) │
    └──────────────────────────────────────────────────────┘

Nothing is retried.
"""

from enum import Enum
from typing import Any, Dict, Optional


class LookupErrorCode(Enum):
    """Error codes for the lookup pipeline (string values for logging)."""

    MISSING_INPUT = "MISSING_INPUT"
    CONFIGURATION_MISSING = "CONFIGURATION_MISSING"
    UPSTREAM_REJECTED = "UPSTREAM_REJECTED"
    UPSTREAM_UNREACHABLE = "UPSTREAM_UNREACHABLE"


class NutritionLookupError(Exception):
    """Base exception for all lookup pipeline errors.

    Attributes:
        code: LookupErrorCode identifying the error type
        message: Human-readable error description
        details: Opaque extra information (upstream body, network message)
        http_status: Status code the API layer responds with
    """

    http_status = 500

    def __init__(
        self,
        code: LookupErrorCode,
        message: str,
        details: Any = None,
    ):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(f"[{code.value}] {message}")

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code!r}, "
            f"message={self.message!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the client-facing ``UpstreamError`` envelope.

        ``details`` is omitted when there is nothing to report.
        """
        envelope: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            envelope["details"] = self.details
        return envelope


class MissingInputError(NutritionLookupError):
    """Raised when the caller omitted a required field.

    Raised before any network call.
    """

    http_status = 400

    def __init__(self, field_name: str, message: Optional[str] = None):
        super().__init__(
            code=LookupErrorCode.MISSING_INPUT,
            message=message or f"No {field_name} provided",
        )
        self.field_name = field_name


class ConfigurationMissingError(NutritionLookupError):
    """Raised when a required setting (credential, target URL) is absent."""

    http_status = 500

    def __init__(self, setting: str, message: Optional[str] = None):
        super().__init__(
            code=LookupErrorCode.CONFIGURATION_MISSING,
            message=message or f"{setting} not configured",
        )
        self.setting = setting


class UpstreamRejectedError(NutritionLookupError):
    """Raised when the upstream provider answered with a non-2xx (or empty) response.

    The original upstream body is preserved in ``details``; the API layer
    always answers 502 regardless of the upstream status.
    """

    http_status = 502

    def __init__(self, status_code: Optional[int], message: str, details: Any = None):
        super().__init__(
            code=LookupErrorCode.UPSTREAM_REJECTED,
            message=message,
            details=details,
        )
        self.status_code = status_code


class UpstreamUnreachableError(NutritionLookupError):
    """Raised when no response was received (timeout, DNS, refused connection)."""

    http_status = 500

    def __init__(self, message: str, network_message: str):
        super().__init__(
            code=LookupErrorCode.UPSTREAM_UNREACHABLE,
            message=message,
            details=network_message,
        )
        self.network_message = network_message
