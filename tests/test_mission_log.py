"""Tests for the append-only mission feedback log."""

from __future__ import annotations

import json
import pathlib
import re
import time

import pytest

from conftest import FixedClock
from spacewx.errors import ValidationFailure
from spacewx.mission_log import LOG_KEY, MissionLogStore
from spacewx.models import ImpactLevel
from spacewx.persistence import FileBackend, MemoryBackend


class TestAppend:
    def test_storage_and_display_order(self, backend: MemoryBackend, clock: FixedClock) -> None:
        store = MissionLogStore(backend, clock=clock)
        a = store.append("JDAM", ImpactLevel.CAUTION, time="10:15")
        clock.now += 5
        b = store.append("Recon Drone", "danger", time="10:20")

        assert store.entries == [a, b]
        assert store.list() == [b, a]
        assert store.list() == [b, a]

    def test_id_from_creation_time(self, backend: MemoryBackend, clock: FixedClock) -> None:
        entry = MissionLogStore(backend, clock=clock).append("JDAM", time="00:00")
        assert entry.id == 1_700_000_000_000

    def test_ids_unique_when_clock_stalls(self, backend: MemoryBackend, clock: FixedClock) -> None:
        store = MissionLogStore(backend, clock=clock)
        ids = [store.append("JDAM", time="00:00").id for _ in range(3)]
        assert len(set(ids)) == 3
        assert ids == sorted(ids)

    def test_default_time_is_hh_mm(self, backend: MemoryBackend, clock: FixedClock) -> None:
        entry = MissionLogStore(backend, clock=clock).append("JDAM")
        assert re.fullmatch(r"\d{2}:\d{2}", entry.time)
        assert entry.impact_level is ImpactLevel.NORMAL

    def test_default_clock_is_wall_time(self, backend: MemoryBackend) -> None:
        before = int(time.time() * 1000)
        entry = MissionLogStore(backend).append("JDAM", time="09:30")
        assert entry.id >= before
        assert entry.time == "09:30"

    def test_persists_full_log_after_every_append(self, backend: MemoryBackend, clock: FixedClock) -> None:
        store = MissionLogStore(backend, clock=clock)
        store.append("JDAM", "caution", time="08:00")
        assert len(json.loads(backend.data[LOG_KEY])) == 1
        store.append("Data Link", "normal", time="08:30")

        data = json.loads(backend.data[LOG_KEY])
        assert [d["equipment"] for d in data] == ["JDAM", "Data Link"]
        assert data[0]["impactLevel"] == "caution"

    @pytest.mark.parametrize(
        "equipment,impact,time",
        [
            ("", "normal", "10:00"),
            ("   ", "normal", "10:00"),
            ("JDAM", "catastrophic", "10:00"),
            ("JDAM", "normal", "25:00"),
            ("JDAM", "normal", "9:5"),
        ],
    )
    def test_invalid_submission_rejected(
        self, backend: MemoryBackend, clock: FixedClock, equipment: str, impact: str, time: str
    ) -> None:
        store = MissionLogStore(backend, clock=clock)
        with pytest.raises(ValidationFailure):
            store.append(equipment, impact, time=time)
        assert store.entries == []
        assert LOG_KEY not in backend.data


class TestLoad:
    def test_survives_restart(self, backend: MemoryBackend, clock: FixedClock) -> None:
        first = MissionLogStore(backend, clock=clock)
        a = first.append("JDAM", "danger", time="01:00")
        clock.now += 1
        b = first.append("Drone", "normal", time="02:00")

        second = MissionLogStore(backend, clock=clock)
        assert second.load() == [a, b]
        assert second.list() == [b, a]

    def test_missing_log_is_empty(self, backend: MemoryBackend) -> None:
        assert MissionLogStore(backend).load() == []

    @pytest.mark.parametrize("text", ["nope", "{}", '[{"id": 1}]'])
    def test_corrupt_log_is_empty(self, text: str) -> None:
        assert MissionLogStore(MemoryBackend({LOG_KEY: text})).load() == []

    def test_corrupt_log_leaves_profile_alone(self, profile) -> None:
        from spacewx.profile_store import UnitProfileStore

        backend = MemoryBackend({LOG_KEY: "garbage"})
        UnitProfileStore(backend).replace(profile)

        assert MissionLogStore(backend).load() == []
        assert UnitProfileStore(backend).load() == profile

    def test_undecodable_log_file_is_empty(self, tmp_path: pathlib.Path, caplog) -> None:
        (tmp_path / f"{LOG_KEY}.json").write_bytes(b"\xff\xfe garbage")
        with caplog.at_level("WARNING", logger="spacewx.mission_log"):
            assert MissionLogStore(FileBackend(tmp_path)).load() == []
        assert "not valid UTF-8" in caplog.text
