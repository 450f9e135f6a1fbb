"""Kp risk classification for a unit and its equipment.

Overall status, first match wins:
- danger:  max Kp > unit threshold
- caution: max Kp > 0.7 x unit threshold
- normal:  otherwise

Equipment is at risk when max Kp > its sensitivity. All comparisons are strict,
so a Kp exactly at a threshold is not flagged.
"""

from __future__ import annotations

from collections.abc import Iterable

from spacewx.models import (
    Equipment,
    EquipmentRisk,
    EquipmentStatus,
    Measurement,
    RiskStatus,
    RiskView,
    UnitProfile,
)

CAUTION_RATIO = 0.7


def max_kp(series: Iterable[Measurement]) -> float:
    """Highest Kp in the series, 0.0 when the series is empty."""
    return max((m.kp_index for m in series), default=0.0)


def classify_overall(peak_kp: float, threshold: float) -> RiskStatus:
    if peak_kp > threshold:
        return RiskStatus.DANGER
    if peak_kp > threshold * CAUTION_RATIO:
        return RiskStatus.CAUTION
    return RiskStatus.NORMAL


def equipment_status(peak_kp: float, equipment: Equipment) -> EquipmentStatus:
    if peak_kp > equipment.sensitivity:
        return EquipmentStatus.AT_RISK
    return EquipmentStatus.NORMAL


def evaluate(series: Iterable[Measurement], profile: UnitProfile) -> RiskView:
    """Full risk view for a series against a profile. Reads only; mutates nothing."""
    peak = max_kp(series)
    return RiskView(
        max_kp=peak,
        threshold=profile.default_threshold,
        overall_status=classify_overall(peak, profile.default_threshold),
        equipment=[
            EquipmentRisk(
                id=e.id,
                name=e.name,
                sensitivity=e.sensitivity,
                status=equipment_status(peak, e),
            )
            for e in profile.equipment
        ],
    )
