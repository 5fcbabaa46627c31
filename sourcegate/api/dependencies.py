"""API Dependencies — resolves the process-wide Session for route handlers.

Invariants:
    - The Session lives on app.state, created by the lifespan, one per process
    - A missing or shut-down session raises UsageError (409), never AttributeError

Design Decisions:
    - app.state over a module-level singleton: tests build an app with a stub
      engine session without patching globals
"""

from fastapi import Request

from sourcegate.core.errors import ErrorContext, UsageError
from sourcegate.services.session_facade import Session


def get_engine_session(request: Request) -> Session:
    """FastAPI dependency returning the active engine session."""
    session: Session | None = getattr(request.app.state, "engine_session", None)
    if session is None:
        raise UsageError(
            "Engine session has not been created",
            ErrorContext(operation="get_engine_session"),
        )
    if not session.is_active:
        raise UsageError(
            "Engine session has been shut down",
            ErrorContext(operation="get_engine_session"),
        )
    return session
