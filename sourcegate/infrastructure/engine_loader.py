"""Engine Loader — imports the analysis engine module named in settings.

Invariants:
    - Loading is the ONLY suspension point of a session (runs in a worker thread)
    - A loaded module exposes callable Workspace and DiagnosticPrinter factories
    - Every failure (missing module, import-time crash, incomplete module)
      surfaces as EngineBootstrapError

Design Decisions:
    - importlib by dotted path over a hard dependency: the engine binding is
      deployment-specific (native extension, wasm runtime, test stub)
    - asyncio.to_thread: native extensions may do heavy init at import time;
      the event loop stays responsive meanwhile
"""

import asyncio
import importlib
import logging
from types import ModuleType

from sourcegate.core.engine_protocols import EngineModule
from sourcegate.core.errors import EngineBootstrapError, ErrorContext

logger = logging.getLogger(__name__)

REQUIRED_FACTORIES = ("Workspace", "DiagnosticPrinter")


def check_engine_module(module: ModuleType | object, name: str) -> EngineModule:
    """Verify a loaded module exposes every engine factory."""
    missing = [
        attr for attr in REQUIRED_FACTORIES
        if not callable(getattr(module, attr, None))
    ]
    if missing:
        raise EngineBootstrapError(
            f"Engine module '{name}' is missing: {', '.join(missing)}",
            ErrorContext(operation="load_module"),
        )
    return module  # type: ignore[return-value]


async def load_module(module_path: str) -> EngineModule:
    """Import `module_path` off the event loop and validate it."""
    try:
        module = await asyncio.to_thread(importlib.import_module, module_path)
    except Exception as e:
        logger.error(
            f"Engine module import failed: {e}",
            extra={"engine_module": module_path, "operation": "load_module"},
        )
        raise EngineBootstrapError(
            f"Cannot load engine module '{module_path}': {e}",
            ErrorContext(operation="load_module"),
        ) from e
    engine = check_engine_module(module, module_path)
    logger.info("Engine module loaded", extra={"engine_module": module_path})
    return engine
