"""Content Orchestrator — format_content and lint_content over a scoped engine file.

Invariants:
    - Syntax diagnostics are pulled BEFORE any formatting; fatal/error blocks formatting
    - Blocked content is returned unchanged, alongside the diagnostics that blocked it
    - Returned diagnostics are always the syntax pull, whether or not formatting ran
    - Ranged and whole-file formatting never both run in one call
    - IR is fetched only when formatting ran and debug was requested
    - The file is closed before either operation returns or raises (EngineHandle.scoped_file)

Design Decisions:
    - Decisions delegated to core/format_decisions.py (pure), engine calls stay here
      (ADR: functional core, imperative shell)
    - lint_content returns the engine's diagnostics verbatim — no filtering, no sorting
"""

import logging

from sourcegate.core.domain_types import FORMAT_CATEGORIES, LINT_CATEGORIES
from sourcegate.core.format_decisions import (
    FormatMode, choose_format_mode, has_blocking_diagnostics, should_fetch_ir,
)
from sourcegate.schemas.content import (
    FormatContentOptions, FormatResult, LintContentOptions,
)
from sourcegate.schemas.diagnostics import Diagnostic, FilePath
from sourcegate.services.engine_handle import EngineHandle

logger = logging.getLogger(__name__)


class ContentOrchestrator:
    """Stateless-looking format/lint operations on top of a stateful engine."""

    def __init__(self, handle: EngineHandle):
        self.handle = handle

    def format_content(
        self, content: str, options: FormatContentOptions,
    ) -> FormatResult:
        """Format `content` unless its syntax diagnostics block it."""
        def run(path: FilePath) -> FormatResult:
            diagnostics = self.handle.pull_diagnostics(
                path, FORMAT_CATEGORIES,
            ).diagnostics
            blocking = has_blocking_diagnostics(diagnostics)
            mode = choose_format_mode(blocking, options.range is not None)

            code = content
            if mode is FormatMode.RANGE:
                code = self.handle.format_range(path, options.range)
            elif mode is FormatMode.FILE:
                code = self.handle.format_file(path)

            ir = None
            if should_fetch_ir(mode, options.debug):
                ir = self.handle.get_formatter_ir(path)

            logger.info(
                "Content formatted" if not blocking else "Formatting blocked by syntax diagnostics",
                extra={
                    "file_path": path.path,
                    "operation": "format_content",
                    "format_mode": mode.value,
                    "blocking": blocking,
                    "diagnostics_count": len(diagnostics),
                },
            )
            return FormatResult(content=code, diagnostics=diagnostics, ir=ir)

        return self.handle.with_file(options.file_path, content, run)

    def lint_content(
        self, content: str, options: LintContentOptions,
    ) -> list[Diagnostic]:
        """Syntax + lint diagnostics for `content`."""
        def run(path: FilePath) -> list[Diagnostic]:
            diagnostics = self.handle.pull_diagnostics(
                path, LINT_CATEGORIES,
            ).diagnostics
            logger.info(
                "Content linted",
                extra={
                    "file_path": path.path,
                    "operation": "lint_content",
                    "diagnostics_count": len(diagnostics),
                },
            )
            return diagnostics

        return self.handle.with_file(options.file_path, content, run)
