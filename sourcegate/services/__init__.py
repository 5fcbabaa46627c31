"""Services Layer — engine handle, content orchestration, diagnostic printing, session facade.

Invariants:
    - Every engine resource (open file, printer, workspace) is released exactly once
    - Public operations raise only SourceGateError subclasses

Design Decisions:
    - One file per component, leaf-first: engine_handle → orchestrator/printer → facade
"""
