"""Engine Protocols — contracts between the orchestration core and the analysis engine.

Invariants:
    - Core NEVER imports an engine implementation — only these Protocols
    - All engine params are plain dicts keyed in the engine's snake_case spelling
    - A Workspace is freed exactly once; a DiagnosticPrinter is either finished or freed, never both

Design Decisions:
    - Protocol over ABC: structural subtyping, any engine binding (native,
      wasm, test stub) satisfies the contract without inheriting from us
    - Synchronous methods: the engine is an in-process capability object,
      only module loading suspends (see infrastructure/engine_loader.py)
"""

from typing import Any, Protocol


class Workspace(Protocol):
    """Engine-side workspace holding settings and the open-file table."""
    def update_settings(self, params: dict) -> None: ...
    def open_file(self, params: dict) -> None: ...
    def close_file(self, params: dict) -> None: ...
    def pull_diagnostics(self, params: dict) -> dict: ...
    def format_file(self, params: dict) -> dict: ...
    def format_range(self, params: dict) -> dict: ...
    def get_formatter_ir(self, params: dict) -> str: ...
    def free(self) -> None: ...


class DiagnosticPrinter(Protocol):
    """Engine-owned accumulator of rendered diagnostic text."""
    def print_simple(self, diagnostic: dict) -> None: ...
    def print_verbose(self, diagnostic: dict) -> None: ...
    def finish(self) -> str: ...
    def free(self) -> None: ...


class EngineModule(Protocol):
    """Loaded engine module — factory for workspaces and printers."""
    Workspace: Any
    DiagnosticPrinter: Any
