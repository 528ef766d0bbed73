"""
src/analytics/statistics.py
────────────────────────────
Fleet-level status roll-ups and trend statistics.

  - Bay status from its node statuses
  - Status distribution for the overview donut
  - Severity sort and dashboard filters
  - Per-channel level counts over a trend window
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence

import pandas as pd

from config.alarms import ALL_LEVELS, LEVEL_VALUE, SEVERITY_ORDER, VALUE_LEVEL, AlarmLevel
from config.channels import CHANNEL_CONFIG
from src.analytics.classifier import classify_channel


def compute_device_status(node_levels: Iterable[AlarmLevel]) -> AlarmLevel:
    """
    Bay status: the worst node level, ignoring NO_DATA nodes.
    NO_DATA only when every node (or no node at all) reports NO_DATA.
    """
    levels = [lv for lv in node_levels if lv != AlarmLevel.NO_DATA]
    if not levels:
        return AlarmLevel.NO_DATA
    return VALUE_LEVEL[max(LEVEL_VALUE[lv] for lv in levels)]


def count_by_level(statuses: Iterable[AlarmLevel]) -> dict[AlarmLevel, int]:
    """Count statuses; every level is present, zeros included."""
    counts = {lv: 0 for lv in ALL_LEVELS}
    for status in statuses:
        counts[AlarmLevel(status)] += 1
    return counts


def sort_by_severity(devices: Sequence) -> list:
    """Most severe first (CRITICAL → NO_DATA), then by name."""
    return sorted(devices, key=lambda d: (-SEVERITY_ORDER[d.status], d.name))


def filter_devices(
    devices: Sequence,
    statuses: Iterable[str] | None = None,
    query: str = "",
    project_id: str | None = None,
) -> list:
    """
    Filter dashboard devices.

    Args:
        devices: Objects with .status, .name, .station, .project_id
        statuses: Levels to keep; empty or None keeps all
        query: Case-insensitive substring of name or station
        project_id: Keep a single project; None or "all" keeps all
    """
    wanted = {AlarmLevel(s) for s in statuses or []}
    q = query.strip().lower()
    out = []
    for d in devices:
        if wanted and d.status not in wanted:
            continue
        if q and q not in d.name.lower() and q not in d.station.lower():
            continue
        if project_id and project_id != "all" and d.project_id != project_id:
            continue
        out.append(d)
    return out


def channel_alarm_stats(df: pd.DataFrame, channel: str) -> dict:
    """
    Level distribution of one channel over a trend frame.

    Returns:
        {"counts": {level: n}, "total": n, "alarm_ratio": pct, "peak_amp": x, "peak_freq": y}
    """
    counts = {lv: 0 for lv in ALL_LEVELS if lv != AlarmLevel.NO_DATA}
    if df.empty:
        return {"counts": counts, "total": 0, "alarm_ratio": 0.0, "peak_amp": None, "peak_freq": None}

    cfg = CHANNEL_CONFIG[channel]
    levels = [
        classify_channel(channel, amp, freq)
        for amp, freq in zip(df[cfg["amp_key"]], df[cfg["freq_key"]])
    ]
    for lv in levels:
        counts[lv] += 1

    total = len(levels)
    n_alarm = total - counts[AlarmLevel.NORMAL]
    return {
        "counts": counts,
        "total": total,
        "alarm_ratio": round(100.0 * n_alarm / total, 1),
        "peak_amp": round(float(df[cfg["amp_key"]].max()), 2),
        "peak_freq": round(float(df[cfg["freq_key"]].max()), 2),
    }
