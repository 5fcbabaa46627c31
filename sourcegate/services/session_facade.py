"""Session Facade — single entry point: lifecycle, configuration, format, lint, print.

Invariants:
    - create() is the only suspending operation; everything else runs to completion synchronously
    - Exactly one EngineHandle per Session, created in create(), freed in shutdown()
    - After shutdown() every operation (including a second shutdown) raises UsageError
    - Options accepted as pydantic models or plain mappings; invalid options raise
      OptionsValidationError before the engine is touched
    - apply_configuration() is not scoped — settings persist until changed again

Design Decisions:
    - Loader injected (defaults to engine_loader.load_module): tests pass a stub
      engine without touching sys.modules
    - No internal locking: callers serialize operations on one session
      (the HTTP surface does so by never awaiting between engine calls)
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable, Mapping
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from sourcegate.config import Settings, get_settings
from sourcegate.core.domain_types import SessionStatus
from sourcegate.core.engine_protocols import EngineModule
from sourcegate.core.errors import (
    ConfigurationError, EngineBootstrapError, ErrorContext,
    OptionsValidationError, UsageError,
)
from sourcegate.infrastructure.engine_loader import check_engine_module, load_module
from sourcegate.infrastructure.error_translation import translate_errors
from sourcegate.schemas.content import (
    FormatContentOptions, FormatResult, LintContentOptions,
    PrintDiagnosticsOptions,
)
from sourcegate.schemas.diagnostics import Diagnostic
from sourcegate.services.content_orchestrator import ContentOrchestrator
from sourcegate.services.diagnostic_printer import print_diagnostics
from sourcegate.services.engine_handle import EngineHandle

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
EngineLoader = Callable[[str], Awaitable[EngineModule]]


def _first_error_field(e: ValidationError) -> str:
    errors = e.errors()
    if not errors:
        return ""
    return ".".join(str(loc) for loc in errors[0]["loc"])


def coerce_options(
    model: type[ModelT], options: ModelT | Mapping[str, Any], operation: str,
) -> ModelT:
    """Validate caller-supplied options into `model`."""
    if isinstance(options, model):
        return options
    if not isinstance(options, Mapping):
        raise OptionsValidationError(
            f"{operation} options must be a mapping or {model.__name__}",
            field="options", context=ErrorContext(operation=operation),
        )
    try:
        return model.model_validate(dict(options))
    except ValidationError as e:
        field = _first_error_field(e)
        raise OptionsValidationError(
            f"Invalid {operation} options: {field or 'options'}",
            field=field, context=ErrorContext(operation=operation),
        ) from e


def coerce_diagnostics(
    diagnostics: Iterable[Diagnostic | Mapping[str, Any]],
) -> list[Diagnostic]:
    result = []
    for index, diag in enumerate(diagnostics):
        if isinstance(diag, Diagnostic):
            result.append(diag)
            continue
        try:
            result.append(Diagnostic.model_validate(diag))
        except ValidationError as e:
            raise OptionsValidationError(
                f"Invalid diagnostic at index {index}",
                field=f"diagnostics.{index}",
                context=ErrorContext(operation="print_diagnostics"),
            ) from e
    return result


class Session:
    """One engine workspace driven by one logical caller."""

    def __init__(self, engine: EngineModule, handle: EngineHandle):
        self._engine = engine
        self._handle = handle
        self._orchestrator = ContentOrchestrator(handle)

    # ─── Lifecycle ────────────────────────────────────────────────

    @classmethod
    async def create(
        cls,
        settings: Settings | None = None,
        loader: EngineLoader | None = None,
    ) -> "Session":
        """Load the engine module and construct the session's workspace."""
        settings = settings or get_settings()
        loader = loader or load_module
        with translate_errors(EngineBootstrapError, "load_module"):
            engine = check_engine_module(
                await loader(settings.engine_module), settings.engine_module,
            )
        with translate_errors(EngineBootstrapError, "create_workspace"):
            workspace = engine.Workspace()
        logger.info(
            "Session created", extra={"engine_module": settings.engine_module},
        )
        return cls(engine, EngineHandle(workspace))

    @classmethod
    @asynccontextmanager
    async def open(
        cls,
        settings: Settings | None = None,
        loader: EngineLoader | None = None,
    ) -> AsyncIterator["Session"]:
        """Create a session and shut it down when the block exits."""
        session = await cls.create(settings, loader)
        try:
            yield session
        finally:
            if session.is_active:
                session.shutdown()

    @property
    def status(self) -> SessionStatus:
        return SessionStatus.SHUT_DOWN if self._handle.is_freed else SessionStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    def shutdown(self) -> None:
        """Free the engine workspace. The session is unusable afterward."""
        self._require_active("shutdown")
        self._handle.free()
        logger.info("Session shut down", extra={"operation": "shutdown"})

    def _require_active(self, operation: str) -> None:
        if not self.is_active:
            raise UsageError(
                f"Cannot {operation}: session has been shut down",
                ErrorContext(operation=operation),
            )

    # ─── Operations ───────────────────────────────────────────────

    def apply_configuration(self, configuration: Mapping[str, Any] | BaseModel) -> None:
        """Apply engine-wide settings; persists until changed again."""
        self._require_active("apply_configuration")
        if isinstance(configuration, BaseModel):
            configuration = configuration.model_dump(mode="json", exclude_none=True)
        if not isinstance(configuration, Mapping):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(configuration).__name__}",
                ErrorContext(operation="apply_configuration"),
            )
        self._handle.update_settings(configuration)
        logger.info(
            "Configuration applied", extra={"operation": "apply_configuration"},
        )

    def format_content(
        self, content: str, options: FormatContentOptions | Mapping[str, Any],
    ) -> FormatResult:
        self._require_active("format_content")
        opts = coerce_options(FormatContentOptions, options, "format_content")
        return self._orchestrator.format_content(content, opts)

    def lint_content(
        self, content: str, options: LintContentOptions | Mapping[str, Any],
    ) -> list[Diagnostic]:
        self._require_active("lint_content")
        opts = coerce_options(LintContentOptions, options, "lint_content")
        return self._orchestrator.lint_content(content, opts)

    def print_diagnostics(
        self,
        diagnostics: Iterable[Diagnostic | Mapping[str, Any]],
        options: PrintDiagnosticsOptions | Mapping[str, Any],
    ) -> str:
        self._require_active("print_diagnostics")
        opts = coerce_options(PrintDiagnosticsOptions, options, "print_diagnostics")
        return print_diagnostics(self._engine, coerce_diagnostics(diagnostics), opts)
