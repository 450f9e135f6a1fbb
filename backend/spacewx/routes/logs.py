"""GET/POST /api/logs: operator mission feedback."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from spacewx.errors import ValidationFailure
from spacewx.models import MissionLogEntry, MissionLogRequest
from spacewx.service import RiskService, get_service

router = APIRouter(prefix="/api/logs", tags=["logs"])


@router.get("", response_model=list[MissionLogEntry], response_model_by_alias=True)
async def read_logs(service: RiskService = Depends(get_service)):
    """Newest first."""
    return service.get_logs()


@router.post("", response_model=MissionLogEntry, response_model_by_alias=True, status_code=201)
async def submit_log(request: MissionLogRequest, service: RiskService = Depends(get_service)):
    try:
        return service.append_log(request.equipment, request.impact_level, time=request.time)
    except ValidationFailure as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
