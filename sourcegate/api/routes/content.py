"""Content Routes — format and lint a posted buffer.

Invariants:
    - Handlers are `async def` and call the (synchronous) session directly with no
      await in between, so engine calls from concurrent requests never interleave
    - Format responses omit `ir` unless the engine produced one

Design Decisions:
    - No threadpool offload: the engine's open-file table has no locking and the
      event loop is the serialization point (ADR: caller-side serialization)
"""

from fastapi import APIRouter, Depends

from sourcegate.api.dependencies import get_engine_session
from sourcegate.schemas.requests import FormatRequest, LintRequest, LintResponse
from sourcegate.services.session_facade import Session

router = APIRouter(prefix="/api/v1/content", tags=["content"])


@router.post("/format")
async def format_content(
    body: FormatRequest, session: Session = Depends(get_engine_session),
):
    result = session.format_content(body.content, body.option_fields())
    return result.to_response()


@router.post("/lint", response_model=LintResponse)
async def lint_content(
    body: LintRequest, session: Session = Depends(get_engine_session),
):
    diagnostics = session.lint_content(body.content, body.option_fields())
    return LintResponse(diagnostics=[d.to_engine() for d in diagnostics])
