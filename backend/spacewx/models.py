from __future__ import annotations

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# --- Parsed tabular data ---

class CellKind(str, Enum):
    NUMBER = "number"
    TEXT = "text"


class Cell(BaseModel):
    """One typed field of a parsed row: either a finite number or the original text."""

    model_config = ConfigDict(frozen=True)

    kind: CellKind
    value: float | str

    @classmethod
    def number(cls, value: float) -> Cell:
        return cls(kind=CellKind.NUMBER, value=float(value))

    @classmethod
    def text(cls, value: str) -> Cell:
        return cls(kind=CellKind.TEXT, value=value)

    @model_validator(mode="after")
    def _check_kind(self) -> Cell:
        if self.kind is CellKind.NUMBER:
            if not isinstance(self.value, float) or not math.isfinite(self.value):
                raise ValueError("number cell must hold a finite float")
        elif not isinstance(self.value, str):
            raise ValueError("text cell must hold a string")
        return self

    @property
    def is_number(self) -> bool:
        return self.kind is CellKind.NUMBER

    def plain(self) -> float | str:
        return self.value


# A parsed row: column name -> typed cell, in header order
Record = dict[str, Cell]


class Measurement(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: str
    kp_index: float = Field(description="Planetary K-index, 0-9 scale")
    extra: dict[str, Cell] = Field(default_factory=dict, description="Other columns, passed through")

    def as_row(self) -> dict[str, Any]:
        """Flat row as the chart layer expects it."""
        row: dict[str, Any] = {"time": self.time, "kp_index": self.kp_index}
        row.update({k: c.plain() for k, c in self.extra.items()})
        return row


# --- Unit profile ---

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Equipment(_CamelModel):
    id: int
    name: str
    sensitivity: float = Field(gt=0, allow_inf_nan=False, description="Kp value above which the equipment is at risk")


class UnitProfile(_CamelModel):
    unit_name: str
    default_threshold: float = Field(ge=0, allow_inf_nan=False, description="Unit-wide Kp risk threshold")
    equipment: list[Equipment] = []

    @field_validator("equipment")
    @classmethod
    def _unique_ids(cls, equipment: list[Equipment]) -> list[Equipment]:
        ids = [e.id for e in equipment]
        if len(ids) != len(set(ids)):
            raise ValueError("equipment ids must be unique")
        return equipment

    def next_equipment_id(self) -> int:
        return max((e.id for e in self.equipment), default=0) + 1


def default_profile() -> UnitProfile:
    return UnitProfile(
        unit_name="17th Fighter Wing",
        default_threshold=4.0,
        equipment=[
            Equipment(id=1, name="JDAM", sensitivity=5.0),
            Equipment(id=2, name="Recon Drone (Type A)", sensitivity=6.0),
            Equipment(id=3, name="Tactical Data Link", sensitivity=4.0),
        ],
    )


# --- Mission feedback ---

class ImpactLevel(str, Enum):
    NORMAL = "normal"
    CAUTION = "caution"
    DANGER = "danger"


class MissionLogEntry(_CamelModel):
    model_config = ConfigDict(frozen=True)

    id: int
    time: str = Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$", description="HH:MM")
    equipment: str = Field(description="Equipment name as entered, not a foreign key")
    impact_level: ImpactLevel


class MissionLogRequest(_CamelModel):
    equipment: str = ""
    impact_level: ImpactLevel = ImpactLevel.NORMAL
    time: str | None = None


# --- Risk view ---

class RiskStatus(str, Enum):
    NORMAL = "normal"
    CAUTION = "caution"
    DANGER = "danger"


class EquipmentStatus(str, Enum):
    NORMAL = "normal"
    AT_RISK = "at_risk"


class EquipmentRisk(_CamelModel):
    id: int
    name: str
    sensitivity: float
    status: EquipmentStatus


class RiskView(_CamelModel):
    max_kp: float
    threshold: float
    overall_status: RiskStatus
    equipment: list[EquipmentRisk] = []

    @property
    def at_risk(self) -> list[EquipmentRisk]:
        return [e for e in self.equipment if e.status is EquipmentStatus.AT_RISK]


# --- API responses ---

class SeriesResponse(_CamelModel):
    count: int
    last_refreshed: float | None = None
    measurements: list[dict[str, Any]] = []


class HealthResponse(BaseModel):
    status: str = "ok"
    feed_running: bool = False
