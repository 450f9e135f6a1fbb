"""Append-only mission feedback log.

Entries are stored in append order and never edited or removed. The whole log
is rewritten to the backend after every append.
"""

from __future__ import annotations

import json
import logging
import time as _time
from collections.abc import Callable
from datetime import datetime

from pydantic import TypeAdapter, ValidationError

from spacewx.errors import PersistedStateCorrupt, ValidationFailure
from spacewx.models import ImpactLevel, MissionLogEntry
from spacewx.persistence import StateBackend, write_best_effort

logger = logging.getLogger(__name__)

LOG_KEY = "missionLogs"

_entries_adapter = TypeAdapter(list[MissionLogEntry])


def decode_log(text: str) -> list[MissionLogEntry]:
    try:
        return _entries_adapter.validate_json(text)
    except ValidationError as exc:
        raise PersistedStateCorrupt(LOG_KEY, f"{exc.error_count()} validation error(s)") from exc


class MissionLogStore:
    def __init__(self, backend: StateBackend, clock: Callable[[], float] = _time.time):
        self.backend = backend
        self.clock = clock
        self._entries: list[MissionLogEntry] = []

    def load(self) -> list[MissionLogEntry]:
        try:
            text = self.backend.read(LOG_KEY)
            self._entries = [] if text is None else decode_log(text)
        except OSError as exc:
            logger.warning("Could not read mission log, starting empty: %s", exc)
            self._entries = []
        except PersistedStateCorrupt as exc:
            logger.warning("%s; starting with an empty log.", exc)
            self._entries = []
        logger.info("Loaded %d mission log entries.", len(self._entries))
        return self.entries

    @property
    def entries(self) -> list[MissionLogEntry]:
        """Entries in storage (append) order."""
        return list(self._entries)

    def list(self) -> list[MissionLogEntry]:
        """Entries newest first, for display."""
        return self._entries[::-1]

    def _next_id(self, now: float) -> int:
        # Millisecond creation timestamp, bumped past the last id if the clock has not moved
        candidate = int(now * 1000)
        if self._entries and candidate <= self._entries[-1].id:
            candidate = self._entries[-1].id + 1
        return candidate

    def append(
        self,
        equipment: str,
        impact_level: ImpactLevel | str = ImpactLevel.NORMAL,
        time: str | None = None,
    ) -> MissionLogEntry:
        """
        Record one piece of operator feedback.

        Raises:
            ValidationFailure: no equipment given, unknown impact level, or a
                time that is not HH:MM. The log is left unchanged.
        """
        if not equipment or not equipment.strip():
            raise ValidationFailure("select the equipment the feedback is about")

        now = self.clock()
        entry_time = time if time is not None else datetime.fromtimestamp(now).strftime("%H:%M")
        try:
            entry = MissionLogEntry(
                id=self._next_id(now),
                time=entry_time,
                equipment=equipment,
                impact_level=impact_level,
            )
        except ValidationError as exc:
            raise ValidationFailure(
                "; ".join(f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors())
            ) from exc

        self._entries.append(entry)
        self._persist()
        logger.info("Mission feedback %d: %s at %s -> %s", entry.id, entry.equipment, entry.time, entry.impact_level.value)
        return entry

    def _persist(self) -> None:
        payload = json.dumps([e.model_dump(mode="json", by_alias=True) for e in self._entries])
        write_best_effort(self.backend, LOG_KEY, payload)
