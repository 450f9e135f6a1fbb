"""Unit profile store with a copy-on-write settings draft.

The committed profile only changes through replace() (directly, or via
ProfileDraft.save()). Draft edits touch a private copy until saved.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from spacewx.errors import PersistedStateCorrupt, ValidationFailure
from spacewx.models import Equipment, UnitProfile, default_profile
from spacewx.persistence import StateBackend, write_best_effort

logger = logging.getLogger(__name__)

PROFILE_KEY = "unitProfile"

NEW_EQUIPMENT_NAME = "New Equipment"
NEW_EQUIPMENT_SENSITIVITY = 5.0

EDITABLE_FIELDS = frozenset({"name", "sensitivity"})


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'profile'}: {err['msg']}" for err in exc.errors()
    )


def decode_profile(text: str) -> UnitProfile:
    try:
        return UnitProfile.model_validate_json(text)
    except ValidationError as exc:
        raise PersistedStateCorrupt(PROFILE_KEY, _validation_message(exc)) from exc


class UnitProfileStore:
    def __init__(self, backend: StateBackend):
        self.backend = backend
        self._profile = default_profile()

    def load(self) -> UnitProfile:
        """Read the persisted profile, falling back to the built-in default."""
        try:
            text = self.backend.read(PROFILE_KEY)
            if text is None:
                self._profile = default_profile()
                logger.info("No stored unit profile, using defaults.")
                return self.profile
            self._profile = decode_profile(text)
        except OSError as exc:
            logger.warning("Could not read unit profile, using defaults: %s", exc)
            self._profile = default_profile()
        except PersistedStateCorrupt as exc:
            logger.warning("%s; using defaults.", exc)
            self._profile = default_profile()
        return self.profile

    @property
    def profile(self) -> UnitProfile:
        return self._profile.model_copy(deep=True)

    def replace(self, new_profile: UnitProfile | dict[str, Any]) -> UnitProfile:
        """
        Validate and swap in a whole new profile, then persist it.

        Raises:
            ValidationFailure: if the profile is invalid. The committed profile is kept.
        """
        try:
            if isinstance(new_profile, UnitProfile):
                # Revalidate; the instance may have been mutated after construction
                validated = UnitProfile.model_validate(new_profile.model_dump())
            else:
                validated = UnitProfile.model_validate(new_profile)
        except ValidationError as exc:
            raise ValidationFailure(_validation_message(exc)) from exc

        self._profile = validated
        write_best_effort(self.backend, PROFILE_KEY, validated.model_dump_json(by_alias=True))
        logger.info(
            "Unit profile saved: %s, threshold Kp %.1f, %d equipment.",
            validated.unit_name, validated.default_threshold, len(validated.equipment),
        )
        return self.profile

    def edit(self) -> ProfileDraft:
        return ProfileDraft(self)


class ProfileDraft:
    """Working copy of the committed profile for a settings session."""

    def __init__(self, store: UnitProfileStore):
        self._store = store
        self._working = store.profile
        self.closed = False

    @property
    def profile(self) -> UnitProfile:
        return self._working.model_copy(deep=True)

    def _check_open(self) -> None:
        if self.closed:
            raise ValidationFailure("draft already saved or cancelled")

    def _index_of(self, equipment_id: int) -> int | None:
        for i, e in enumerate(self._working.equipment):
            if e.id == equipment_id:
                return i
        return None

    def _apply(self, **changes: Any) -> None:
        try:
            self._working = UnitProfile.model_validate({**self._working.model_dump(), **changes})
        except ValidationError as exc:
            raise ValidationFailure(_validation_message(exc)) from exc

    def set_unit_name(self, name: str) -> None:
        self._check_open()
        self._apply(unit_name=name)

    def set_default_threshold(self, value: float) -> None:
        self._check_open()
        self._apply(default_threshold=value)

    def add_equipment(self) -> Equipment:
        """Append equipment with the next free id (max id + 1, or 1 for an empty list)."""
        self._check_open()
        item = Equipment(
            id=self._working.next_equipment_id(),
            name=NEW_EQUIPMENT_NAME,
            sensitivity=NEW_EQUIPMENT_SENSITIVITY,
        )
        self._working = self._working.model_copy(update={"equipment": [*self._working.equipment, item]})
        return item

    def remove_equipment(self, equipment_id: int) -> None:
        self._check_open()
        remaining = [e for e in self._working.equipment if e.id != equipment_id]
        self._working = self._working.model_copy(update={"equipment": remaining})

    def update_equipment_field(self, equipment_id: int, field: str, value: Any) -> Equipment:
        """
        Change the name or sensitivity of one piece of equipment.

        Raises:
            ValidationFailure: unknown id, non-editable field, or invalid value.
        """
        self._check_open()
        if field not in EDITABLE_FIELDS:
            raise ValidationFailure(f"field '{field}' is not editable")
        idx = self._index_of(equipment_id)
        if idx is None:
            raise ValidationFailure(f"no equipment with id {equipment_id}")

        current = self._working.equipment[idx]
        try:
            updated = Equipment.model_validate({**current.model_dump(), field: value})
        except ValidationError as exc:
            raise ValidationFailure(_validation_message(exc)) from exc

        equipment = list(self._working.equipment)
        equipment[idx] = updated
        self._working = self._working.model_copy(update={"equipment": equipment})
        return updated

    def save(self) -> UnitProfile:
        self._check_open()
        committed = self._store.replace(self._working)
        self.closed = True
        return committed

    def cancel(self) -> None:
        self.closed = True
