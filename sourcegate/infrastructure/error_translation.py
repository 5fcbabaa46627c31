"""Error Translation — maps raw engine failures onto the SourceGateError taxonomy.

Invariants:
    - No raw engine exception escapes translate_errors(): every Exception becomes
      exactly one SourceGateError subclass, chained via `raise ... from err`
    - Already-translated SourceGateErrors pass through untouched (no double wrapping)
    - Engine diagnostic payloads are preserved in ErrorContext.debug_info["diagnostic"]
    - BaseException (KeyboardInterrupt, SystemExit) is never translated

Design Decisions:
    - Context manager over decorator: one public operation may call several
      engine methods, each needing its own error kind (open vs pull vs format)
    - Engines report failures either as an exception carrying a `diagnostic`
      attribute or as an exception whose first arg IS the diagnostic mapping;
      both shapes are recognized
"""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from sourcegate.core.errors import ErrorContext, SourceGateError

logger = logging.getLogger(__name__)


def extract_diagnostic(err: BaseException) -> dict | None:
    """Pull the engine's diagnostic payload out of a raw failure, if any."""
    payload: Any = getattr(err, "diagnostic", None)
    if payload is None and err.args and isinstance(err.args[0], Mapping):
        payload = err.args[0]
    if payload is None:
        return None
    if hasattr(payload, "model_dump"):
        return payload.model_dump(mode="json")
    if isinstance(payload, Mapping):
        return dict(payload)
    return {"message": str(payload)}


def _message_for(err: BaseException, diagnostic: dict | None) -> str:
    if diagnostic:
        for key in ("description", "message"):
            text = diagnostic.get(key)
            if isinstance(text, str) and text:
                return text
    return str(err) or type(err).__name__


def wrap_error(
    err: BaseException,
    error_type: type[SourceGateError],
    operation: str,
    file_path: str | None = None,
) -> SourceGateError:
    """Convert an engine failure into `error_type`. SourceGateErrors are returned as-is."""
    if isinstance(err, SourceGateError):
        return err
    diagnostic = extract_diagnostic(err)
    debug_info = {"engine_error": type(err).__name__}
    if diagnostic is not None:
        debug_info["diagnostic"] = diagnostic
    context = ErrorContext(
        file_path=file_path, operation=operation, debug_info=debug_info,
    )
    return error_type(_message_for(err, diagnostic), context=context)


@contextmanager
def translate_errors(
    error_type: type[SourceGateError],
    operation: str,
    file_path: str | None = None,
) -> Iterator[None]:
    """Re-raise any engine failure inside the block as `error_type`."""
    try:
        yield
    except SourceGateError:
        raise
    except Exception as err:
        translated = wrap_error(err, error_type, operation, file_path)
        logger.error(
            f"Engine {operation} failed: {translated.message}",
            extra={
                "operation": operation,
                "file_path": file_path,
                "error_code": translated.code,
            },
        )
        raise translated from err
