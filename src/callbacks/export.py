"""
src/callbacks/export.py
────────────────────────
Data export page callbacks: size estimate and CSV / JSON download.
"""
from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta

import pandas as pd
from dash import Input, Output, State, dcc, no_update

from src.data import store
from src.data.export import build_export_frame, estimate_export_size, export_payload, format_size
from src.i18n.translator import t


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value[:10]) if value else None


def collect_export_frame(
    device_ids: list[str],
    start: date,
    end: date,
    channels: list[str],
    statuses: list[str],
) -> pd.DataFrame:
    """Stored trend of every device between start and end (inclusive days), filtered."""
    start_ts = datetime.combine(start, time(), tzinfo=UTC)
    end_ts = datetime.combine(end + timedelta(days=1), time(), tzinfo=UTC)

    frames = []
    for device_id in device_ids:
        df = store.get_trend(device_id, start=start_ts, end=end_ts, limit=1_000_000)
        frames.append(build_export_frame(df, channels, statuses, device_id=device_id))

    frames = [f for f in frames if not f.empty]
    if not frames:
        return pd.DataFrame()
    return pd.concat(frames, ignore_index=True)


def register(app) -> None:

    @app.callback(
        Output("export-estimate", "children"),
        [
            Input("export-devices", "value"),
            Input("export-dates", "start_date"),
            Input("export-dates", "end_date"),
            Input("export-statuses", "value"),
        ],
    )
    def update_estimate(device_ids: list, start: str | None, end: str | None, statuses: list) -> str:
        n_sensors = sum(len(store.list_sensors(d)) for d in device_ids or [])
        size = estimate_export_size(n_sensors, _parse_date(start), _parse_date(end), statuses or [])
        return format_size(size)

    @app.callback(
        [
            Output("export-download", "data"),
            Output("export-message", "children"),
        ],
        Input("export-btn", "n_clicks"),
        [
            State("export-devices", "value"),
            State("export-dates", "start_date"),
            State("export-dates", "end_date"),
            State("export-statuses", "value"),
            State("export-channels", "value"),
            State("export-format", "value"),
            State("store-lang", "data"),
        ],
        prevent_initial_call=True,
    )
    def download(n_clicks: int, device_ids: list, start: str | None, end: str | None,
                 statuses: list, channels: list, fmt: str, lang: str):
        start_d, end_d = _parse_date(start), _parse_date(end)
        if not device_ids or start_d is None or end_d is None or not statuses:
            return no_update, t("export.nothing", lang)

        df = collect_export_frame(device_ids, start_d, end_d, channels or [], statuses)
        if df.empty:
            return no_update, t("export.nothing", lang)

        payload = export_payload(df, fmt)
        filename = f"pd_export_{start_d:%Y%m%d}_{end_d:%Y%m%d}.{fmt}"
        message = t("export.done", lang, rows=len(df), size=format_size(len(payload)))
        if fmt == "csv":
            return dcc.send_bytes(payload, filename), message
        return {"content": payload, "filename": filename}, message
