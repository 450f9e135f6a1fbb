"""
Comma-separated text -> typed records.

Each field is typed on its own: a field that reads as a finite number becomes a
number cell, anything else keeps its original text. A single column may
therefore mix numbers and text across rows.

Rows whose field count does not match the header are skipped (and counted in a
log warning) rather than padded.
"""

from __future__ import annotations

import logging
import math

from spacewx.models import Cell, Measurement, Record

logger = logging.getLogger(__name__)

TIME_COLUMN = "time"
KP_COLUMN = "kp_index"


def parse_cell(field: str) -> Cell:
    """Type a single field. Only finite numbers count as numbers."""
    text = field.strip()
    # float() also accepts digit separators ("1_000"), which are not CSV numbers
    if not text or "_" in text:
        return Cell.text(text)
    try:
        value = float(text)
    except ValueError:
        return Cell.text(text)
    if not math.isfinite(value):
        return Cell.text(text)
    return Cell.number(value)


def parse(raw_text: str) -> list[Record]:
    """
    Parse comma-separated text into records, one per data row, in source order.

    The first non-blank line holds the column headers. Empty or header-only
    input yields an empty list.
    """
    lines = [line.strip() for line in raw_text.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return []

    # Plain comma split: quotes are ordinary characters and never join lines
    headers = [h.strip() for h in lines[0].split(",")]

    records: list[Record] = []
    skipped = 0
    for line in lines[1:]:
        fields = line.split(",")
        if len(fields) != len(headers):
            skipped += 1
            continue
        records.append({h: parse_cell(f) for h, f in zip(headers, fields)})

    if skipped:
        logger.warning("Skipped %d row(s) whose field count differs from the %d header columns.", skipped, len(headers))
    return records


def _cell_text(cell: Cell) -> str:
    if cell.is_number:
        value = float(cell.value)
        return str(int(value)) if value.is_integer() else str(value)
    return str(cell.value)


def to_measurements(records: list[Record]) -> list[Measurement]:
    """
    Convert parsed records into measurements.

    Records without a numeric kp_index cannot be evaluated and are dropped.
    """
    measurements: list[Measurement] = []
    dropped = 0
    for rec in records:
        kp = rec.get(KP_COLUMN)
        if kp is None or not kp.is_number:
            dropped += 1
            continue
        time_cell = rec.get(TIME_COLUMN)
        measurements.append(
            Measurement(
                time=_cell_text(time_cell) if time_cell is not None else "",
                kp_index=float(kp.value),
                extra={k: c for k, c in rec.items() if k not in (TIME_COLUMN, KP_COLUMN)},
            )
        )
    if dropped:
        logger.warning("Dropped %d record(s) without a numeric %s.", dropped, KP_COLUMN)
    return measurements


def parse_series(raw_text: str) -> list[Measurement]:
    """parse() followed by to_measurements()."""
    return to_measurements(parse(raw_text))
