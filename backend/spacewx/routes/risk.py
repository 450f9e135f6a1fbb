"""Kp series and derived risk view: /api/series, /api/series/refresh, /api/risk."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from spacewx.models import RiskView, SeriesResponse
from spacewx.service import RiskService, get_service

router = APIRouter(prefix="/api", tags=["risk"])


def _series_response(service: RiskService) -> SeriesResponse:
    series = service.get_series()
    return SeriesResponse(
        count=len(series),
        last_refreshed=service.feed.last_refreshed,
        measurements=[m.as_row() for m in series],
    )


@router.get("/series", response_model=SeriesResponse, response_model_by_alias=True)
async def read_series(service: RiskService = Depends(get_service)):
    return _series_response(service)


@router.post("/series/refresh", response_model=SeriesResponse, response_model_by_alias=True)
async def refresh_series(service: RiskService = Depends(get_service)):
    """Fetch now instead of waiting for the next tick. Failures yield an empty series."""
    await service.refresh_series()
    return _series_response(service)


@router.get("/risk", response_model=RiskView, response_model_by_alias=True)
async def read_risk(service: RiskService = Depends(get_service)):
    return service.get_risk_view()
