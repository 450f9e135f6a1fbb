"""GET/PUT /api/profile: unit name, global threshold and equipment list."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from spacewx.errors import ValidationFailure
from spacewx.models import UnitProfile
from spacewx.service import RiskService, get_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("", response_model=UnitProfile, response_model_by_alias=True)
async def read_profile(service: RiskService = Depends(get_service)):
    return service.get_profile()


@router.put("", response_model=UnitProfile, response_model_by_alias=True)
async def save_profile(payload: dict, service: RiskService = Depends(get_service)):
    """Replace the whole profile. The previous profile is kept if validation fails."""
    try:
        return service.save_profile(payload)
    except ValidationFailure as exc:
        logger.info("Rejected profile update: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
