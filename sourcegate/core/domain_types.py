"""Domain Types — rich types that replace bare strings and magic numbers at the engine boundary.

Invariants:
    - MAX_DIAGNOSTICS is the largest integer a JS-backed engine represents exactly (2**53 - 1)
    - Only FATAL and ERROR block formatting — every other severity is informational
    - Category and severity values match the engine's wire spelling exactly

Design Decisions:
    - str Enums: compare equal to the raw strings the engine returns, serialize
      to JSON without custom encoders
    - Diagnostic.severity stays a plain str (see schemas/diagnostics.py) —
      engines may add severities this layer does not know about
"""

from enum import Enum


# ─── Limits ──────────────────────────────────────────────────────

# "Unbounded" diagnostic count requested from the engine
MAX_DIAGNOSTICS = 2**53 - 1

# Every file opened by this layer is registered at this version
INITIAL_FILE_VERSION = 0


# ─── Enums ───────────────────────────────────────────────────────

class Severity(str, Enum):
    """Diagnostic severities produced by the engine."""
    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


class DiagnosticCategory(str, Enum):
    """Diagnostic categories accepted by pull_diagnostics."""
    SYNTAX = "Syntax"
    LINT = "Lint"


class SessionStatus(str, Enum):
    """Session facade lifecycle states."""
    ACTIVE = "active"
    SHUT_DOWN = "shut_down"


BLOCKING_SEVERITIES = frozenset({Severity.FATAL.value, Severity.ERROR.value})

# Format path checks parse validity only; lint path adds rule diagnostics
FORMAT_CATEGORIES = (DiagnosticCategory.SYNTAX,)
LINT_CATEGORIES = (DiagnosticCategory.SYNTAX, DiagnosticCategory.LINT)
