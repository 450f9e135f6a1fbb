"""
Space weather risk assessment console entry point.

Run as:
    python -m spacewx.assess [--csv PATH] [--state-dir DIR] [--chart PNG]

Evaluates one Kp series against the stored unit profile (defaults if none is
stored) and prints the equipment table plus a summary.

Environment variables (see spacewx.config):
    SPACEWX_DATA_SOURCE, SPACEWX_BASE_URL, SPACEWX_STATE_DIR, SPACEWX_LOG_LEVEL
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import pathlib
import sys

import matplotlib.pyplot as plt

from spacewx import risk
from spacewx.config import Settings
from spacewx.feed import DataFeed, resolve_source
from spacewx.persistence import FileBackend
from spacewx.profile_store import UnitProfileStore
from spacewx.visualisation import plot_kp_series, print_risk_table

log = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="spacewx.assess", description=__doc__.strip().splitlines()[0])
    parser.add_argument("--csv", help="Kp CSV file or URL (default: SPACEWX_DATA_SOURCE)")
    parser.add_argument("--state-dir", type=pathlib.Path, help="directory holding unitProfile.json")
    parser.add_argument("--chart", help="write a Kp chart PNG to this path")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """
    Steps:
        1. Load the unit profile
        2. Fetch and parse the Kp series once
        3. Evaluate and print the risk table and summary
        4. Optionally save the chart
    """
    args = _parse_args(argv)
    logging.basicConfig(
        level=os.getenv("SPACEWX_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        log.error("Configuration error: %s", exc)
        return 1

    state_dir = args.state_dir or settings.state_dir
    profile = UnitProfileStore(FileBackend(state_dir)).load()

    feed = DataFeed.from_settings(settings)
    if args.csv:
        feed.source = resolve_source(args.csv, settings.base_url)

    async def _fetch():
        try:
            return await feed.refresh()
        finally:
            await feed.stop()

    series = asyncio.run(_fetch())
    if not series:
        log.error("No Kp measurements could be read from %s.", feed.source)
        return 1

    view = risk.evaluate(series, profile)
    print_risk_table(view)

    if args.chart:
        fig = plot_kp_series(series, profile.default_threshold, args.chart)
        plt.close(fig)

    print("=" * 60)
    print("ASSESSMENT SUMMARY")
    print("=" * 60)
    print(f"  Unit:                 {profile.unit_name}")
    print(f"  Measurements:         {len(series)} ({series[0].time} .. {series[-1].time})")
    print(f"  Max Kp:               {view.max_kp:.1f}")
    print(f"  Unit threshold:       {view.threshold:.1f}")
    print(f"  Overall status:       {view.overall_status.value.upper()}")
    print(f"  Equipment at risk:    {len(view.at_risk)} of {len(view.equipment)}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
