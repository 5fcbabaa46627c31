"""Schemas — Pydantic models for engine payloads, operation options and HTTP bodies.

Invariants:
    - Engine-produced models are frozen; unknown engine fields are preserved

Design Decisions:
    - One module per boundary: diagnostics (engine), content (operations), requests (HTTP)
"""
