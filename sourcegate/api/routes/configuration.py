"""Configuration Route — engine-wide settings update.

Invariants:
    - Settings apply to every later request until replaced (no per-request scoping)
    - Rejected settings → 400 CONFIGURATION_ERROR via the global handler
"""

from fastapi import APIRouter, Depends, Response, status

from sourcegate.api.dependencies import get_engine_session
from sourcegate.schemas.requests import ConfigurationUpdate
from sourcegate.services.session_facade import Session

router = APIRouter(prefix="/api/v1/configuration", tags=["configuration"])


@router.put("", status_code=status.HTTP_204_NO_CONTENT)
async def apply_configuration(
    body: ConfigurationUpdate,
    session: Session = Depends(get_engine_session),
):
    session.apply_configuration(body.configuration)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
