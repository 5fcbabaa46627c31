"""Format Decisions — pure rules deciding what format_content is allowed to do.

Invariants:
    - Blocking = at least one diagnostic with severity fatal or error
    - IR is requested only when formatting actually ran AND debug was requested
    - Ranged and whole-file formatting are mutually exclusive per call

Design Decisions:
    - Pure functions over orchestrator methods: decisions testable without a stub engine
      (ADR: functional core, imperative shell)
"""

from collections.abc import Iterable
from enum import Enum

from sourcegate.core.domain_types import BLOCKING_SEVERITIES
from sourcegate.schemas.diagnostics import Diagnostic


class FormatMode(str, Enum):
    """Which engine formatter a call uses."""
    SKIP = "skip"
    FILE = "file"
    RANGE = "range"


def has_blocking_diagnostics(diagnostics: Iterable[Diagnostic]) -> bool:
    """True when any diagnostic prevents formatting."""
    return any(d.severity in BLOCKING_SEVERITIES for d in diagnostics)


def choose_format_mode(blocking: bool, has_range: bool) -> FormatMode:
    if blocking:
        return FormatMode.SKIP
    return FormatMode.RANGE if has_range else FormatMode.FILE


def should_fetch_ir(mode: FormatMode, debug: bool) -> bool:
    return debug and mode is not FormatMode.SKIP
