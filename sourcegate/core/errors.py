"""Error Hierarchy — typed, categorized exceptions for every SourceGate failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Raw engine exceptions never cross the public boundary — they are chained
      as __cause__ of exactly one SourceGateError subclass
    - Engine diagnostic payloads survive translation in ErrorContext.debug_info
    - to_response() produces the REST envelope used by the HTTP surface

Design Decisions:
    - Single hierarchy with SourceGateError base: one except clause (and one
      FastAPI handler) catches every failure (ADR: uniform error shape)
    - UsageError is a caller contract violation, not an engine failure —
      kept in the same hierarchy so callers handle one type
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    CONFIGURATION = "configuration"
    FILE_REGISTRATION = "file_registration"
    ANALYSIS = "analysis"
    PRINTING = "printing"
    USAGE = "usage"
    BOOTSTRAP = "bootstrap"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    file_path: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class SourceGateError(Exception):
    """Base exception for all SourceGate errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    @property
    def diagnostic(self) -> dict | None:
        """Engine diagnostic payload carried over from the original failure."""
        if not self.context.debug_info:
            return None
        return self.context.debug_info.get("diagnostic")

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "file_path": self.context.file_path,
                    "operation": self.context.operation,
                    "diagnostic": self.diagnostic,
                },
            }
        }


# ─── Engine Errors ──────────────────────────────────────────────

class ConfigurationError(SourceGateError):
    """Settings payload rejected by validation or by the engine."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.ERROR, context, 400,
        )


class FileRegistrationError(SourceGateError):
    """Opening or closing a scoped file failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FILE_REGISTRATION_ERROR", ErrorCategory.FILE_REGISTRATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


class AnalysisError(SourceGateError):
    """Diagnostic pull, formatting or IR retrieval failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "ANALYSIS_ERROR", ErrorCategory.ANALYSIS,
            ErrorSeverity.ERROR, context, 422,
        )


class PrintError(SourceGateError):
    """Diagnostic rendering or printer finalization failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "PRINT_ERROR", ErrorCategory.PRINTING,
            ErrorSeverity.ERROR, context, 500,
        )


class EngineBootstrapError(SourceGateError):
    """Engine module could not be loaded or its workspace constructed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "ENGINE_BOOTSTRAP_ERROR", ErrorCategory.BOOTSTRAP,
            ErrorSeverity.CRITICAL, context, 503,
        )


# ─── Caller Errors ──────────────────────────────────────────────

class UsageError(SourceGateError):
    """Operation invoked on a shut-down or not-yet-created session."""
    def __init__(
        self, message: str, context: ErrorContext | None = None,
        code: str = "USAGE_ERROR", http_status: int = 409,
    ):
        super().__init__(
            message, code, ErrorCategory.USAGE,
            ErrorSeverity.ERROR, context, http_status,
        )


class OptionsValidationError(UsageError):
    """Operation options failed validation before reaching the engine."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, context, code="OPTIONS_VALIDATION_ERROR", http_status=400,
        )
        self.field = field
