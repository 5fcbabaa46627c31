"""Infrastructure — engine module loading, error translation, logging setup.

Invariants:
    - Every raw engine failure is translated here before reaching services/ callers

Design Decisions:
    - Isolated from core/: core never depends on how the engine is loaded
"""
