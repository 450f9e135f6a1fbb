"""Boundary facade for presentation code.

Read/derive: get_profile, get_risk_view, get_logs (and get_series).
Write: save_profile, append_log, refresh_series.
"""

from __future__ import annotations

import logging
from typing import Any

from spacewx import risk
from spacewx.config import Settings
from spacewx.feed import DataFeed
from spacewx.mission_log import MissionLogStore
from spacewx.models import ImpactLevel, Measurement, MissionLogEntry, RiskView, UnitProfile
from spacewx.persistence import FileBackend, StateBackend
from spacewx.profile_store import ProfileDraft, UnitProfileStore

logger = logging.getLogger(__name__)


class RiskService:
    def __init__(self, profiles: UnitProfileStore, logs: MissionLogStore, feed: DataFeed):
        self.profiles = profiles
        self.logs = logs
        self.feed = feed

    @classmethod
    def from_settings(cls, settings: Settings, backend: StateBackend | None = None) -> RiskService:
        """Wire stores and feed from settings and load persisted state."""
        backend = backend or FileBackend(settings.state_dir)
        service = cls(
            profiles=UnitProfileStore(backend),
            logs=MissionLogStore(backend),
            feed=DataFeed.from_settings(settings),
        )
        service.load()
        logger.info("Risk service ready (state: %s, source: %s).", settings.state_dir, service.feed.source)
        return service

    def load(self) -> None:
        self.profiles.load()
        self.logs.load()

    # --- Read / derive ---

    def get_profile(self) -> UnitProfile:
        return self.profiles.profile

    def get_series(self) -> list[Measurement]:
        return self.feed.series

    def get_risk_view(
        self,
        series: list[Measurement] | None = None,
        profile: UnitProfile | None = None,
    ) -> RiskView:
        return risk.evaluate(
            self.feed.series if series is None else series,
            self.profiles.profile if profile is None else profile,
        )

    def get_logs(self) -> list[MissionLogEntry]:
        return self.logs.list()

    # --- Write ---

    def edit_profile(self) -> ProfileDraft:
        return self.profiles.edit()

    def save_profile(self, profile: UnitProfile | dict[str, Any]) -> UnitProfile:
        return self.profiles.replace(profile)

    def append_log(
        self,
        equipment: str,
        impact_level: ImpactLevel | str = ImpactLevel.NORMAL,
        time: str | None = None,
    ) -> MissionLogEntry:
        return self.logs.append(equipment, impact_level, time=time)

    async def refresh_series(self) -> list[Measurement]:
        return await self.feed.refresh()


# Singleton
_service: RiskService | None = None


def get_service() -> RiskService:
    global _service
    if _service is None:
        _service = RiskService.from_settings(Settings.from_env())
    return _service
