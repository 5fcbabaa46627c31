"""Diagnostic Printer Resource — one engine printer per print request, released exactly once.

Invariants:
    - Success path: finish() both extracts the output AND releases the printer;
      free() is never called after it
    - Render failure: free() is called exactly once, then the failure propagates;
      no partial output is returned
    - finish() failure: free() is NOT called (finish releases even when it fails)
    - A second release attempt raises UsageError instead of double-freeing
    - Printing never re-runs analysis — diagnostics come from earlier lint/format calls

Design Decisions:
    - Asymmetric cleanup encapsulated in print_all() so no call site repeats the
      two-branch logic (ADR: single well-tested exit path)
    - A free() failure during render-failure cleanup is logged and never masks
      the render failure, mirroring EngineHandle.scoped_file close handling
"""

import logging
from collections.abc import Iterable

from sourcegate.core.engine_protocols import DiagnosticPrinter, EngineModule
from sourcegate.core.errors import ErrorContext, PrintError, UsageError
from sourcegate.infrastructure.error_translation import translate_errors
from sourcegate.schemas.content import PrintDiagnosticsOptions
from sourcegate.schemas.diagnostics import Diagnostic

logger = logging.getLogger(__name__)


class PrinterResource:
    """Scoped wrapper around an engine DiagnosticPrinter."""

    def __init__(self, printer: DiagnosticPrinter, file_path: str):
        self._printer = printer
        self._file_path = file_path
        self._released = False

    @classmethod
    def create(
        cls, engine: EngineModule, options: PrintDiagnosticsOptions,
    ) -> "PrinterResource":
        with translate_errors(PrintError, "create_printer", options.file_path):
            printer = engine.DiagnosticPrinter(
                options.file_path, options.file_source,
            )
        return cls(printer, options.file_path)

    @property
    def released(self) -> bool:
        return self._released

    def _mark_released(self) -> None:
        if self._released:
            raise UsageError(
                "Printer resource already released",
                ErrorContext(file_path=self._file_path, operation="release_printer"),
            )
        self._released = True

    def render(self, diagnostic: Diagnostic, verbose: bool) -> None:
        if self._released:
            raise UsageError(
                "Cannot render on a released printer",
                ErrorContext(file_path=self._file_path, operation="render"),
            )
        payload = diagnostic.to_engine()
        if verbose:
            self._printer.print_verbose(payload)
        else:
            self._printer.print_simple(payload)

    def finish(self) -> str:
        """Extract the accumulated output; releases the printer even if it fails."""
        self._mark_released()
        return self._printer.finish()

    def free(self) -> None:
        self._mark_released()
        self._printer.free()

    def print_all(self, diagnostics: Iterable[Diagnostic], verbose: bool) -> str:
        """Render every diagnostic in order, then finish."""
        with translate_errors(PrintError, "print_diagnostics", self._file_path):
            try:
                for diagnostic in diagnostics:
                    self.render(diagnostic, verbose)
            except BaseException:
                self._free_after_failure()
                raise
            return self.finish()

    def _free_after_failure(self) -> None:
        try:
            self.free()
        except Exception as e:
            logger.warning(
                f"Printer free failed while propagating a render failure: {e}",
                extra={"file_path": self._file_path, "operation": "free_printer"},
            )


def print_diagnostics(
    engine: EngineModule,
    diagnostics: Iterable[Diagnostic],
    options: PrintDiagnosticsOptions,
) -> str:
    """Render `diagnostics` into the engine's printer output for one file."""
    diagnostics = list(diagnostics)
    printer = PrinterResource.create(engine, options)
    output = printer.print_all(diagnostics, options.verbose)
    logger.info(
        "Diagnostics printed",
        extra={
            "file_path": options.file_path,
            "operation": "print_diagnostics",
            "diagnostics_count": len(diagnostics),
            "verbose": options.verbose,
        },
    )
    return output
