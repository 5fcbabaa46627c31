"""Engine Handle — owns one engine Workspace and the scoped-file protocol.

Invariants:
    - Every file opened through scoped_file() is closed exactly once, whether the
      body returns, raises, or returns early
    - If open_file fails nothing was registered, so close_file is NOT attempted
    - A close_file failure after the body already failed is logged and never
      replaces the original failure; it is raised only when nothing failed before it
    - Open/close failures -> FileRegistrationError; body/engine-call failures -> AnalysisError
    - The workspace is freed exactly once; any later use raises UsageError

Design Decisions:
    - Context manager over manual cleanup at call sites: "one close per open"
      is visible in a single function (ADR: guaranteed-release scope)
    - Engine results validated through pydantic inside the translation scope, so
      a malformed engine payload is an AnalysisError like any other engine failure
    - No locking: the open-file table is shared engine state and callers must
      serialize operations on one handle
"""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeVar

from sourcegate.core.domain_types import (
    DiagnosticCategory, INITIAL_FILE_VERSION, MAX_DIAGNOSTICS,
)
from sourcegate.core.engine_protocols import Workspace
from sourcegate.core.errors import (
    AnalysisError, ConfigurationError, ErrorContext, FileRegistrationError,
    UsageError,
)
from sourcegate.infrastructure.error_translation import translate_errors
from sourcegate.schemas.content import FormattedCode
from sourcegate.schemas.diagnostics import FilePath, PullDiagnosticsResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EngineHandle:
    """Exclusive owner of one engine workspace."""

    def __init__(self, workspace: Workspace):
        self._workspace = workspace
        self._freed = False

    @property
    def is_freed(self) -> bool:
        return self._freed

    @property
    def workspace(self) -> Workspace:
        if self._freed:
            raise UsageError(
                "Engine workspace has been freed",
                ErrorContext(operation="workspace"),
            )
        return self._workspace

    def free(self) -> None:
        """Release the engine workspace. Second call raises UsageError."""
        workspace = self.workspace
        self._freed = True
        with translate_errors(FileRegistrationError, "free_workspace"):
            workspace.free()

    # ─── Workspace-wide settings ──────────────────────────────────

    def update_settings(self, configuration: Mapping[str, Any]) -> None:
        """Apply settings engine-wide with an empty ignore-pattern set."""
        workspace = self.workspace
        with translate_errors(ConfigurationError, "update_settings"):
            workspace.update_settings({
                "configuration": dict(configuration),
                "gitignore_matches": [],
            })

    # ─── Scoped files ─────────────────────────────────────────────

    @contextmanager
    def scoped_file(self, path: str, content: str) -> Iterator[FilePath]:
        """Register `path -> content` for the duration of the with-block."""
        workspace = self.workspace
        with translate_errors(FileRegistrationError, "open_file", path):
            file_path = FilePath(path=path)
            workspace.open_file({
                "path": file_path.model_dump(),
                "content": content,
                "version": INITIAL_FILE_VERSION,
            })
        logger.debug(
            "Scoped file opened",
            extra={"file_path": path, "operation": "open_file"},
        )
        try:
            with translate_errors(AnalysisError, "scoped_operation", path):
                yield file_path
        except BaseException:
            self._close_after_failure(workspace, file_path)
            raise
        with translate_errors(FileRegistrationError, "close_file", path):
            workspace.close_file({"path": file_path.model_dump()})

    def with_file(
        self, path: str, content: str, operation: Callable[[FilePath], T],
    ) -> T:
        """Run `operation(file_path)` against a scoped registration of `content`."""
        with self.scoped_file(path, content) as file_path:
            return operation(file_path)

    def _close_after_failure(self, workspace: Workspace, file_path: FilePath) -> None:
        try:
            workspace.close_file({"path": file_path.model_dump()})
        except Exception as e:
            logger.warning(
                f"close_file failed while propagating an earlier failure: {e}",
                extra={"file_path": file_path.path, "operation": "close_file"},
            )

    # ─── Engine operations on an open file ────────────────────────

    def pull_diagnostics(
        self, file_path: FilePath, categories: Iterable[DiagnosticCategory],
    ) -> PullDiagnosticsResult:
        with translate_errors(AnalysisError, "pull_diagnostics", file_path.path):
            raw = self.workspace.pull_diagnostics({
                "path": file_path.model_dump(),
                "categories": [c.value for c in categories],
                "max_diagnostics": MAX_DIAGNOSTICS,
            })
            return PullDiagnosticsResult.model_validate(raw)

    def format_file(self, file_path: FilePath) -> str:
        with translate_errors(AnalysisError, "format_file", file_path.path):
            raw = self.workspace.format_file({"path": file_path.model_dump()})
            return FormattedCode.model_validate(raw).code

    def format_range(self, file_path: FilePath, text_range: tuple[int, int]) -> str:
        with translate_errors(AnalysisError, "format_range", file_path.path):
            raw = self.workspace.format_range({
                "path": file_path.model_dump(),
                "range": list(text_range),
            })
            return FormattedCode.model_validate(raw).code

    def get_formatter_ir(self, file_path: FilePath) -> str:
        with translate_errors(AnalysisError, "get_formatter_ir", file_path.path):
            ir = self.workspace.get_formatter_ir({"path": file_path.model_dump()})
            if not isinstance(ir, str):
                raise TypeError(f"formatter IR must be str, got {type(ir).__name__}")
            return ir
