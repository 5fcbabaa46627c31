"""Diagnostic Schemas — immutable engine diagnostics and pull results.

Invariants:
    - Diagnostic is frozen: produced by the engine, never mutated by this layer
    - Only `severity` is interpreted (blocking check); every other field is opaque
      and accepted in whatever shape the engine reports it
    - to_engine() returns the mapping exactly as it was received, explicit nulls
      and unknown fields included
    - severity is a plain str: unknown severities pass through, never block

Design Decisions:
    - Pydantic over TypedDict: a payload without a severity, or a pull result that
      is not a mapping, is still rejected at the engine boundary (AnalysisError)
    - The received mapping is kept as a private attribute instead of re-dumping
      the model: a dump cannot tell an explicit null from a missing field
    - `message` and `description` both optional: engines disagree on which one
      carries the human text; `text` resolves it
"""

from collections.abc import Mapping
from typing import Any

from pydantic import (
    BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator,
)


class FilePath(BaseModel):
    """Address of a registered file inside the engine."""
    model_config = ConfigDict(frozen=True)

    path: str = Field(min_length=1)


class Diagnostic(BaseModel):
    """Single engine diagnostic."""
    model_config = ConfigDict(frozen=True, extra="allow")

    severity: str
    message: Any = None
    description: Any = None
    category: Any = None
    location: Any = None

    _payload: dict | None = PrivateAttr(default=None)

    @field_validator("severity", mode="before")
    @classmethod
    def coerce_severity(cls, v: Any) -> Any:
        """Accept Severity enum members as well as raw strings."""
        return getattr(v, "value", v)

    @model_validator(mode="wrap")
    @classmethod
    def keep_payload(cls, data: Any, handler):
        diagnostic = handler(data)
        if isinstance(data, Mapping):
            diagnostic._payload = dict(data)
        return diagnostic

    @property
    def text(self) -> str:
        """Human-readable message, whichever field the engine filled."""
        if isinstance(self.message, str) and self.message:
            return self.message
        if isinstance(self.description, str):
            return self.description
        return ""

    def to_engine(self) -> dict:
        """Payload handed back to engine-side consumers (printer) and callers."""
        if self._payload is None:
            return self.model_dump(mode="json", exclude_unset=True)
        return {**self._payload, "severity": self.severity}


class PullDiagnosticsResult(BaseModel):
    """Result of Workspace.pull_diagnostics."""
    model_config = ConfigDict(extra="allow")

    diagnostics: list[Diagnostic] = Field(default_factory=list)
    errors: int = 0
    skipped_diagnostics: int = 0
