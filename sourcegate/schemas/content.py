"""Content Schemas — options and results of the format / lint / print operations.

Invariants:
    - file_path is non-empty and stripped
    - range is (start, end) with 0 <= start <= end
    - FormatResult.ir is None unless debug was requested AND formatting ran;
      serialized output omits the key entirely when absent

Design Decisions:
    - Options as pydantic models, but the facade also accepts plain mappings
      (validated through the same models) — callers coming from JSON need no wrapper
    - range as a (start, end) offset pair: the engine's TextRange wire shape
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sourcegate.schemas.diagnostics import Diagnostic


def _strip_path(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("file_path cannot be empty or whitespace")
    return v


class FormatContentOptions(BaseModel):
    """Options for format_content."""
    model_config = ConfigDict(frozen=True)

    file_path: str
    range: tuple[int, int] | None = None
    debug: bool = False

    @field_validator("file_path")
    @classmethod
    def strip_file_path(cls, v: str) -> str:
        return _strip_path(v)

    @field_validator("range")
    @classmethod
    def validate_range(cls, v: tuple[int, int] | None) -> tuple[int, int] | None:
        if v is None:
            return v
        start, end = v
        if start < 0 or end < start:
            raise ValueError("range must satisfy 0 <= start <= end")
        return v


class LintContentOptions(BaseModel):
    """Options for lint_content."""
    model_config = ConfigDict(frozen=True)

    file_path: str

    @field_validator("file_path")
    @classmethod
    def strip_file_path(cls, v: str) -> str:
        return _strip_path(v)


class PrintDiagnosticsOptions(BaseModel):
    """Options for print_diagnostics — file_source gives the printer context around spans."""
    model_config = ConfigDict(frozen=True)

    file_path: str
    file_source: str
    verbose: bool = False

    @field_validator("file_path")
    @classmethod
    def strip_file_path(cls, v: str) -> str:
        return _strip_path(v)


class FormattedCode(BaseModel):
    """Engine format_file / format_range result; only `code` is consumed."""
    model_config = ConfigDict(extra="allow")

    code: str


class FormatResult(BaseModel):
    """Output of format_content."""
    model_config = ConfigDict(frozen=True)

    content: str
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    ir: str | None = None

    def to_response(self) -> dict:
        """JSON shape for API callers — no `ir` key unless present."""
        data = {
            "content": self.content,
            "diagnostics": [d.to_engine() for d in self.diagnostics],
        }
        if self.ir is not None:
            data["ir"] = self.ir
        return data
