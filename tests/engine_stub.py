"""Stub Engine — instrumented stand-in for the analysis engine module.

Invariants:
    - StubEngine satisfies EngineModule: Workspace() and DiagnosticPrinter(path, source)
    - Every open/close/free/finish is recorded so tests can assert exactly-once release
    - open_file on an already-open path and close_file on a closed path both raise,
      like a real engine's open-file table
    - Formatting is deterministic and idempotent (whitespace normalization)

Design Decisions:
    - Flat classes, no inheritance from engine Protocols: structural typing is the contract
    - Failures injected per method name via `fail` — one dict covers workspace and printer
    - Default syntax rule = unbalanced braces (error); default lint rule = `var ` (warning)
    - Module-level Workspace / DiagnosticPrinter make this file importable as an engine
      module by dotted path (engine_loader tests)
"""

import re


class EngineFailure(Exception):
    """Raw engine exception carrying a diagnostic payload, like a native binding raises."""

    def __init__(self, message, diagnostic=None):
        super().__init__(message)
        self.diagnostic = diagnostic


# -- Default analysis rules ----------------------------------------------------


def brace_syntax_rule(path, content):
    depth = 0
    for ch in content:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        if depth < 0:
            break
    if depth == 0:
        return []
    return [_diag("error", "Unbalanced braces", "parse", path, (0, len(content)))]


def var_lint_rule(path, content):
    return [
        _diag("warning", "Use let or const instead of var", "lint/style/noVar", path, m.span())
        for m in re.finditer(r"\bvar ", content)
    ]


def _diag(severity, message, category, path, span):
    return {
        "severity": severity,
        "message": message,
        "category": category,
        "location": {"path": {"path": path}, "span": list(span)},
    }


def normalize(code):
    """Collapse runs of spaces, strip trailing whitespace, end with one newline."""
    lines = [re.sub(r" {2,}", " ", line).rstrip() for line in code.splitlines()]
    return "\n".join(lines).rstrip("\n") + "\n"


# -- Engine objects ------------------------------------------------------------


class StubWorkspace:
    def __init__(self, engine):
        self._engine = engine
        self.open_files = {}
        self.free_calls = 0

    def _call(self, name, params=None):
        self._engine.calls.append((name, params))
        failure = self._engine.fail.get(name)
        if failure is not None:
            raise failure

    def update_settings(self, params):
        self._call("update_settings", params)
        self._engine.settings.append(params)

    def open_file(self, params):
        self._call("open_file", params)
        path = params["path"]["path"]
        if path in self.open_files:
            raise EngineFailure(f"file already open: {path}")
        self.open_files[path] = params["content"]
        self._engine.open_count += 1

    def close_file(self, params):
        path = params["path"]["path"]
        self._engine.close_count += 1
        self.open_files.pop(path, None)
        self._call("close_file", params)

    def _content(self, params):
        path = params["path"]["path"]
        if path not in self.open_files:
            raise EngineFailure(f"file not open: {path}")
        return path, self.open_files[path]

    def pull_diagnostics(self, params):
        self._call("pull_diagnostics", params)
        path, content = self._content(params)
        diagnostics = []
        if "Syntax" in params["categories"]:
            diagnostics += self._engine.syntax_rule(path, content)
        if "Lint" in params["categories"]:
            diagnostics += self._engine.lint_rule(path, content)
        diagnostics = diagnostics[: params["max_diagnostics"]]
        errors = sum(1 for d in diagnostics if d["severity"] in ("fatal", "error"))
        return {"diagnostics": diagnostics, "errors": errors, "skipped_diagnostics": 0}

    def format_file(self, params):
        self._call("format_file", params)
        _, content = self._content(params)
        return {"code": normalize(content), "sourcemap": []}

    def format_range(self, params):
        self._call("format_range", params)
        _, content = self._content(params)
        start, end = params["range"]
        formatted = normalize(content[start:end]).rstrip("\n")
        return {"code": content[:start] + formatted + content[end:]}

    def get_formatter_ir(self, params):
        self._call("get_formatter_ir", params)
        _, content = self._content(params)
        return f"[group([\"{normalize(content).strip()}\"])]"

    def free(self):
        self.free_calls += 1
        self._call("free")


class StubPrinter:
    def __init__(self, engine, file_path, file_source):
        self._engine = engine
        self.file_path = file_path
        self.file_source = file_source
        self.rendered = []
        self.finish_calls = 0
        self.free_calls = 0

    def _render(self, name, diagnostic, line):
        self._engine.calls.append((name, diagnostic))
        if len(self.rendered) == self._engine.fail_render_at:
            raise EngineFailure("render failed", diagnostic=diagnostic)
        self.rendered.append(line)

    def print_simple(self, diagnostic):
        self._render("print_simple", diagnostic, simple_line(diagnostic))

    def print_verbose(self, diagnostic):
        self._render("print_verbose", diagnostic, verbose_line(diagnostic, self.file_path))

    def finish(self):
        self.finish_calls += 1
        failure = self._engine.fail.get("finish")
        if failure is not None:
            raise failure
        return "".join(self.rendered)

    def free(self):
        self.free_calls += 1
        failure = self._engine.fail.get("free_printer")
        if failure is not None:
            raise failure


def simple_line(diagnostic):
    return f"{diagnostic['severity']}: {diagnostic['message']}\n"


def verbose_line(diagnostic, file_path):
    category = diagnostic.get("category", "unknown")
    return f"{file_path} {category} {diagnostic['severity']}: {diagnostic['message']}\n"


class StubEngine:
    """Configurable engine module. Pass `fail={"method": exc}` to inject failures."""

    def __init__(
        self, syntax_rule=brace_syntax_rule, lint_rule=var_lint_rule,
        fail=None, fail_render_at=None,
    ):
        self.syntax_rule = syntax_rule
        self.lint_rule = lint_rule
        self.fail = dict(fail or {})
        self.fail_render_at = fail_render_at
        self.calls = []
        self.settings = []
        self.open_count = 0
        self.close_count = 0
        self.workspaces = []
        self.printers = []

    def Workspace(self):
        workspace = StubWorkspace(self)
        self.workspaces.append(workspace)
        return workspace

    def DiagnosticPrinter(self, file_path, file_source):
        failure = self.fail.get("create_printer")
        if failure is not None:
            raise failure
        printer = StubPrinter(self, file_path, file_source)
        self.printers.append(printer)
        return printer

    def called(self, name):
        return [params for call, params in self.calls if call == name]

    def loader(self):
        """Async loader for Session.create(loader=...)."""
        async def _load(module_path):
            return self
        return _load


# Importable-as-engine-module surface
DEFAULT_ENGINE = StubEngine()
Workspace = DEFAULT_ENGINE.Workspace
DiagnosticPrinter = DEFAULT_ENGINE.DiagnosticPrinter
