"""Request Schemas — Pydantic bodies for the HTTP surface.

Invariants:
    - content is bounded (max 5M chars) to keep a single request from
      monopolizing the engine
    - Option fields are NOT re-validated here — the facade validates them
      through schemas/content.py and raises OptionsValidationError

Design Decisions:
    - Flat bodies (content + option fields side by side) over nested
      {content, options}: mirrors how editors post a buffer
    - option_fields() hands the facade a plain mapping so route handlers and
      library callers share one validation path
"""

from typing import Any

from pydantic import BaseModel, Field

from sourcegate.schemas.diagnostics import Diagnostic

MAX_CONTENT_CHARS = 5_000_000


class ConfigurationUpdate(BaseModel):
    """PUT /configuration body."""
    configuration: dict[str, Any]


class FormatRequest(BaseModel):
    """POST /content/format body."""
    content: str = Field(max_length=MAX_CONTENT_CHARS)
    file_path: str
    range: tuple[int, int] | None = None
    debug: bool = False

    def option_fields(self) -> dict:
        return self.model_dump(exclude={"content"})


class LintRequest(BaseModel):
    """POST /content/lint body."""
    content: str = Field(max_length=MAX_CONTENT_CHARS)
    file_path: str

    def option_fields(self) -> dict:
        return self.model_dump(exclude={"content"})


class LintResponse(BaseModel):
    diagnostics: list[dict]


class PrintRequest(BaseModel):
    """POST /diagnostics/print body."""
    diagnostics: list[Diagnostic]
    file_path: str
    file_source: str = Field(max_length=MAX_CONTENT_CHARS)
    verbose: bool = False

    def option_fields(self) -> dict:
        return self.model_dump(exclude={"diagnostics"})


class PrintResponse(BaseModel):
    output: str
