"""
src/data/export.py
──────────────────
Trend export: filtered frames, CSV / JSON payloads and size estimates.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime

import pandas as pd

from config.alarms import AlarmLevel

logger = logging.getLogger("pd.export")

# Export channel → frame columns
EXPORT_CHANNELS: dict[str, list[str]] = {
    "UHF": ["uhf_amp", "uhf_freq"],
    "TEV": ["tev_amp", "tev_freq"],
    "HFCT": ["hfct_amp", "hfct_freq"],
    "AE": ["ae_amp", "ae_freq"],
    "温度": ["temperature"],
    "湿度": ["humidity"],
}

EXPORT_FORMATS = ("csv", "json")

# Rough raw-data volume per sensor per day
BYTES_PER_SENSOR_DAY = 2 * 1024 * 1024

_ALARM_LEVELS = {AlarmLevel.WARNING, AlarmLevel.DANGER, AlarmLevel.CRITICAL}


def build_export_frame(
    df: pd.DataFrame,
    channels: Iterable[str],
    statuses: Iterable[str],
    device_id: str | None = None,
) -> pd.DataFrame:
    """
    Keep the rows whose point level is one of `statuses` and the columns of
    the selected `channels` (plus timestamp and level).
    """
    columns = ["timestamp", "level"]
    for ch in channels:
        columns.extend(EXPORT_CHANNELS[ch])

    if df.empty:
        return pd.DataFrame(columns=(["device_id"] if device_id else []) + columns)

    wanted = {AlarmLevel(s).value for s in statuses}
    out = df.loc[df["level"].isin(wanted), columns].reset_index(drop=True)
    if device_id:
        out.insert(0, "device_id", device_id)
    return out


def to_csv_bytes(df: pd.DataFrame) -> bytes:
    """CSV with a UTF-8 BOM so spreadsheet tools read the Chinese headers."""
    return df.to_csv(index=False).encode("utf-8-sig")


def to_json_str(df: pd.DataFrame) -> str:
    return df.to_json(orient="records", date_format="iso", force_ascii=False)


def export_payload(df: pd.DataFrame, fmt: str) -> str | bytes:
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")
    payload = to_csv_bytes(df) if fmt == "csv" else to_json_str(df)
    logger.info("Export generated: %d rows, %s, %s", len(df), fmt, format_size(len(payload)))
    return payload


# ── Size estimate ─────────────────────────────────────────────────────────────

def estimate_export_size(
    n_sensors: int,
    start: date | datetime | None,
    end: date | datetime | None,
    statuses: Iterable[str],
) -> int:
    """
    Estimated export size in bytes: sensors × days × 2 MiB × factor.

    Days count both ends of the range. Normal data is the bulk of the
    volume (0.9), alarm data the rest (0.1).
    """
    if n_sensors <= 0 or start is None or end is None:
        return 0
    start_d = start.date() if isinstance(start, datetime) else start
    end_d = end.date() if isinstance(end, datetime) else end
    days = (end_d - start_d).days + 1
    if days <= 0:
        return 0

    selected = {AlarmLevel(s) for s in statuses}
    factor = 0.0
    if AlarmLevel.NORMAL in selected:
        factor += 0.9
    if selected & _ALARM_LEVELS:
        factor += 0.1
    factor = max(factor, 0.01)

    return int(n_sensors * days * BYTES_PER_SENSOR_DAY * factor)


def format_size(n_bytes: float) -> str:
    if n_bytes < 1024:
        return f"{int(n_bytes)} B"
    for unit in ("KB", "MB", "GB"):
        n_bytes /= 1024
        if n_bytes < 1024 or unit == "GB":
            return f"{n_bytes:.2f} {unit}"
    return f"{n_bytes:.2f} GB"
