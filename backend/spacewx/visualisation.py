"""
Console and chart output for a Kp risk assessment.

Produces:
    - Console table: per-equipment risk with sensitivity thresholds
    - kp_chart.png:  Kp index over the series window with the unit threshold line

The chart y-axis is pinned to the full 0-9 Kp scale so charts from quiet and
stormy periods stay comparable.
"""

from __future__ import annotations

import logging

import matplotlib
import matplotlib.pyplot as plt

from spacewx.models import EquipmentStatus, Measurement, RiskView

matplotlib.use("Agg")  # non-interactive, headless

log = logging.getLogger(__name__)

KP_SCALE_MAX = 9.0

# ---------------------------------------------------------------------------
# Console table
# ---------------------------------------------------------------------------

_TABLE_HEADER = f"{'ID':>4}  {'Equipment':<30}  {'Sensitivity':>11}  {'Status':<8}"
_TABLE_DIVIDER = "-" * len(_TABLE_HEADER)


def print_risk_table(view: RiskView) -> None:
    """Print one row per equipment, in profile order. At-risk rows are starred."""
    print()
    print(f"=== EQUIPMENT RISK: MAX Kp {view.max_kp:.1f} / THRESHOLD {view.threshold:.1f} ===")
    print(_TABLE_DIVIDER)
    print(_TABLE_HEADER)
    print(_TABLE_DIVIDER)

    for e in view.equipment:
        flag = "*" if e.status is EquipmentStatus.AT_RISK else " "
        print(f"{e.id:>4}  {e.name[:29] + flag:<30}  {'Kp ' + format(e.sensitivity, '.1f'):>11}  {e.status.value:<8}")

    print(_TABLE_DIVIDER)
    print("  * max Kp exceeds the equipment sensitivity")
    print()


# ---------------------------------------------------------------------------
# Chart
# ---------------------------------------------------------------------------


def plot_kp_series(
    series: list[Measurement],
    threshold: float,
    output_path: str = "kp_chart.png",
) -> matplotlib.figure.Figure:
    """
    Plot Kp index against the measurement time labels.

    Chart elements:
        - Kp line (red)
        - Dashed horizontal line at the unit threshold (teal)

    Returns:
        matplotlib Figure object.
    """
    fig, ax = plt.subplots(figsize=(10, 5))

    labels = [m.time for m in series]
    positions = range(len(series))
    ax.plot(positions, [m.kp_index for m in series], color="#F56565", linewidth=2.0, label="Kp index")
    ax.axhline(threshold, color="#4FD1C5", linewidth=1.5, linestyle="--", label=f"Unit threshold (Kp {threshold:.1f})")

    # Thin out tick labels on long series
    step = max(1, len(labels) // 12)
    ax.set_xticks(list(positions)[::step])
    ax.set_xticklabels(labels[::step], rotation=45, ha="right", fontsize=9)

    ax.set_ylim(0, KP_SCALE_MAX)
    ax.set_xlabel("Time", fontsize=12)
    ax.set_ylabel("Kp Index", fontsize=12)
    ax.set_title("Planetary K-index", fontsize=13, fontweight="bold")
    ax.legend(loc="upper left", fontsize=10)
    ax.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    log.info("Saved Kp chart to '%s'.", output_path)
    return fig
