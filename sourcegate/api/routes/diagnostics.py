"""Diagnostics Route — render previously collected diagnostics through the engine printer."""

from fastapi import APIRouter, Depends

from sourcegate.api.dependencies import get_engine_session
from sourcegate.schemas.requests import PrintRequest, PrintResponse
from sourcegate.services.session_facade import Session

router = APIRouter(prefix="/api/v1/diagnostics", tags=["diagnostics"])


@router.post("/print", response_model=PrintResponse)
async def print_diagnostics(
    body: PrintRequest, session: Session = Depends(get_engine_session),
):
    output = session.print_diagnostics(body.diagnostics, body.option_fields())
    return PrintResponse(output=output)
