"""
src/callbacks/trends.py
────────────────────────
Historical trends page callbacks.
"""
from __future__ import annotations

import math
from datetime import UTC, date, datetime, time, timedelta

import plotly.graph_objects as go
from dash import Input, Output, State, html

from config.alarms import LEVEL_COLORS, AlarmLevel, level_label
from config.channels import AMP_UNIT, CHANNEL_CONFIG, FREQ_UNIT
from src.analytics.classifier import get_threshold_lines
from src.analytics.diagnosis import diagnose_discharge
from src.analytics.statistics import channel_alarm_stats
from src.data import store
from src.data.simulator import RANGE_HOURS
from src.i18n.translator import t

CARD_BG = "#161b22"
GRID_CLR = "#30363d"
MUTED = "#8b949e"
PLOTLY_TMPL = "plotly_dark"
MAX_CUSTOM_DAYS = 90


def _layout(height: int = 300) -> dict:
    return {
        "template": PLOTLY_TMPL,
        "paper_bgcolor": CARD_BG,
        "plot_bgcolor": CARD_BG,
        "margin": {"l": 10, "r": 10, "t": 10, "b": 10},
        "font": {"color": "#c9d1d9", "size": 11},
        "xaxis": {"gridcolor": GRID_CLR},
        "yaxis": {"gridcolor": GRID_CLR},
        "legend": {"bgcolor": "rgba(0,0,0,0)", "font": {"size": 10}},
        "height": height,
        "showlegend": True,
    }


def trend_window(
    time_range: str,
    start_date: str | date | None = None,
    end_date: str | date | None = None,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """
    Resolve the range selector to a UTC [start, end) window.

    "custom" spans whole days from start_date through end_date, clipped to
    `now` and to MAX_CUSTOM_DAYS; a missing or reversed pair falls back to 24 h.
    """
    now = now or datetime.now(tz=UTC)
    if time_range == "custom" and start_date and end_date:
        first, last = date.fromisoformat(str(start_date)[:10]), date.fromisoformat(str(end_date)[:10])
        if first <= last:
            start = datetime.combine(first, time(), tzinfo=UTC)
            end = min(datetime.combine(last + timedelta(days=1), time(), tzinfo=UTC), now)
            return max(start, end - timedelta(days=MAX_CUSTOM_DAYS)), end
    return now - timedelta(hours=RANGE_HOURS.get(time_range, 24)), now


def _add_thresholds(fig: go.Figure, channel: str, key: str, lang: str) -> None:
    for line in get_threshold_lines(channel):
        color = LEVEL_COLORS[line["level"]]
        fig.add_hline(y=line[key], line_dash="dot", line_color=color, line_width=1,
                      annotation_text=level_label(line["level"], lang), annotation_font_color=color,
                      annotation_font_size=9)


def _stats_block(stats: dict, lang: str) -> html.Div:
    if stats["total"] == 0:
        return html.Div(t("common.no_data", lang), style={"color": MUTED})
    tiles = [
        html.Div(
            [
                html.Div(str(n), style={"fontSize": "1.3rem", "fontWeight": "700", "color": LEVEL_COLORS[lv]}),
                html.Div(level_label(lv, lang), style={"fontSize": ".65rem", "color": MUTED}),
            ],
            style={"textAlign": "center", "minWidth": "60px"},
        )
        for lv, n in stats["counts"].items()
    ]
    return html.Div(
        [
            html.Div(tiles, style={"display": "flex", "gap": "12px", "marginBottom": "12px"}),
            html.Div(f"{t('trends.points', lang)}: {stats['total']}", style={"fontSize": ".78rem"}),
            html.Div(f"{t('trends.alarm_ratio', lang)}: {stats['alarm_ratio']:.1f}%", style={"fontSize": ".78rem"}),
            html.Div(
                f"{t('trends.peak', lang)}: {stats['peak_amp']:.1f} {AMP_UNIT} / {stats['peak_freq']:.0f} {FREQ_UNIT}",
                style={"fontSize": ".78rem"},
            ),
        ]
    )


def register(app) -> None:

    @app.callback(
        Output("store-device", "data", allow_duplicate=True),
        Input("trends-device", "value"),
        prevent_initial_call=True,
    )
    def select_device(device_id: str) -> str:
        return device_id

    @app.callback(
        Output("trends-dates", "disabled"),
        Input("trends-range", "value"),
    )
    def toggle_dates(time_range: str) -> bool:
        return time_range != "custom"

    @app.callback(
        [
            Output("trends-amp-chart", "figure"),
            Output("trends-freq-chart", "figure"),
            Output("trends-env-chart", "figure"),
            Output("trends-stats", "children"),
            Output("trends-diagnosis", "children"),
            Output("trends-chart-title", "children"),
        ],
        [
            Input("trends-device", "value"),
            Input("trends-channel", "value"),
            Input("trends-range", "value"),
            Input("trends-dates", "start_date"),
            Input("trends-dates", "end_date"),
            Input("trends-options", "value"),
            Input("interval-live", "n_intervals"),
        ],
        State("store-lang", "data"),
    )
    def update_trends(device_id: str, channel: str, time_range: str, start_date, end_date,
                      options: list, n_intervals: int, lang: str):
        options = options or []
        cfg = CHANNEL_CONFIG[channel]
        amp_col, freq_col = cfg["amp_key"], cfg["freq_key"]
        device = store.get_device(device_id) if device_id else None
        chart_title = f"{device.name if device else ''} · {channel} {t('trends.amp_chart', lang)}"

        start, end = trend_window(time_range, start_date, end_date)
        df = store.get_trend_window(device_id, start, end) if device else None
        if df is None or df.empty:
            empty = go.Figure()
            empty.update_layout(**_layout())
            no_data = html.Div(t("common.no_data", lang), style={"color": MUTED})
            return empty, empty, empty, no_data, no_data, chart_title

        # ── Amplitude chart ───────────────────────────────────────────────────
        fig = go.Figure()
        fig.add_scatter(
            x=df["timestamp"],
            y=df[amp_col],
            mode="lines",
            line={"color": cfg["color"], "width": 1.3},
            name=f"{channel} ({AMP_UNIT})",
            hovertemplate="%{x|%m/%d %H:%M}<br>%{y:.1f}<extra></extra>",
        )
        if "thresholds" in options:
            _add_thresholds(fig, channel, "amp", lang)
        if "markers" in options:
            days = math.ceil((datetime.now(tz=UTC) - start).total_seconds() / 86400)
            alarms = store.get_alarms(device_id=device_id, days=days)
            if not alarms.empty:
                alarms = alarms[(alarms["channel"] == channel) & (alarms["timestamp"] < end)]
            for lv in (AlarmLevel.WARNING, AlarmLevel.DANGER, AlarmLevel.CRITICAL):
                sub = alarms[alarms["level"] == lv.value] if not alarms.empty else alarms
                if sub.empty:
                    continue
                fig.add_scatter(
                    x=sub["timestamp"],
                    y=sub["amplitude"],
                    mode="markers",
                    marker={"color": LEVEL_COLORS[lv], "size": 8, "symbol": "triangle-up"},
                    name=level_label(lv, lang),
                )
        fig.update_layout(**_layout(300))

        # ── Frequency chart ───────────────────────────────────────────────────
        freq_fig = go.Figure()
        freq_fig.add_scatter(
            x=df["timestamp"],
            y=df[freq_col],
            mode="lines",
            line={"color": cfg["color"], "width": 1.2},
            name=f"{channel} ({FREQ_UNIT})",
        )
        if "thresholds" in options:
            _add_thresholds(freq_fig, channel, "freq", lang)
        freq_fig.update_layout(**_layout(220))

        # ── Environment chart ─────────────────────────────────────────────────
        env_fig = go.Figure()
        env_fig.add_scatter(x=df["timestamp"], y=df["temperature"], mode="lines",
                            line={"color": "#f97316", "width": 1.2}, name=f"{t('device.temperature', lang)} (°C)")
        env_fig.add_scatter(x=df["timestamp"], y=df["humidity"], mode="lines", yaxis="y2",
                            line={"color": "#38bdf8", "width": 1.2}, name=f"{t('device.humidity', lang)} (%)")
        env_fig.update_layout(**_layout(220))
        env_fig.update_layout(yaxis2={"overlaying": "y", "side": "right", "showgrid": False})

        # ── Stats + diagnosis at the peak ─────────────────────────────────────
        stats = channel_alarm_stats(df, channel)
        peak = df.loc[df[amp_col].idxmax()]
        diag = diagnose_discharge(channel, float(peak[amp_col]), float(peak[freq_col]))
        diagnosis = html.Div(
            [
                html.Div(diag.type, style={"fontSize": "1.2rem", "fontWeight": "700", "color": diag.color}),
                html.Div(f"{t('trends.confidence', lang)}: {diag.confidence:.0%}",
                         style={"fontSize": ".78rem", "color": MUTED}),
                html.Div(diag.description, style={"fontSize": ".8rem", "marginTop": "6px"}),
                html.Div(
                    f"{peak['timestamp']:%Y-%m-%d %H:%M} · {peak[amp_col]:.1f} {AMP_UNIT} / {peak[freq_col]:.0f} {FREQ_UNIT}",
                    style={"fontSize": ".7rem", "color": MUTED, "marginTop": "6px"},
                ),
            ]
        )

        return fig, freq_fig, env_fig, _stats_block(stats, lang), diagnosis, chart_title

