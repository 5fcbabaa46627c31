"""Core Layer — error taxonomy, domain types, engine contracts, pure format decisions.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - No engine calls, no IO — everything here is testable without a stub engine

Design Decisions:
    - Functional core separated from imperative shell
"""
