"""
src/pages/trends.py
────────────────────
Historical trend analysis page with threshold and alarm overlays.
"""
from datetime import UTC, datetime, timedelta

import dash_bootstrap_components as dbc
from dash import html, dcc

from config.channels import CHANNEL_TYPES
from src.i18n.translator import t
from src.layout.sidebar import device_options

MUTED = "#8b949e"


def _label(text: str) -> html.Label:
    return html.Label(text, style={"fontSize": ".72rem", "color": MUTED, "textTransform": "uppercase"})


def _card(title_id: str | None, title: str, body) -> html.Div:
    return html.Div(
        [html.Div(title, id=title_id, className="chart-title") if title_id else html.Div(title, className="chart-title"), body],
        className="chart-card",
    )


def layout(lang: str = "zh", device_id: str | None = None) -> html.Div:
    today = datetime.now(tz=UTC).date()
    return html.Div(
        [
            html.Div(
                [
                    html.H2(t("trends.title", lang), className="page-title"),
                    html.P(t("trends.subtitle", lang), className="page-subtitle"),
                ],
                className="page-header",
            ),

            # ── Controls ───────────────────────────────────────────────────────
            dbc.Row(
                [
                    dbc.Col(
                        [
                            _label(t("common.device", lang)),
                            dcc.Dropdown(
                                id="trends-device",
                                options=device_options(),
                                value=device_id,
                                clearable=False,
                                className="dark-dropdown",
                            ),
                        ],
                        md=4,
                    ),
                    dbc.Col(
                        [
                            _label(t("common.channel", lang)),
                            dcc.Dropdown(
                                id="trends-channel",
                                options=[{"label": ch, "value": ch} for ch in CHANNEL_TYPES],
                                value="TEV",
                                clearable=False,
                                className="dark-dropdown",
                            ),
                        ],
                        md=2,
                    ),
                    dbc.Col(
                        [
                            _label(t("trends.range", lang)),
                            dcc.Dropdown(
                                id="trends-range",
                                options=[
                                    {"label": t("trends.range_24h", lang), "value": "24h"},
                                    {"label": t("trends.range_7d", lang), "value": "7d"},
                                    {"label": t("trends.range_1m", lang), "value": "1m"},
                                    {"label": t("trends.range_custom", lang), "value": "custom"},
                                ],
                                value="24h",
                                clearable=False,
                                className="dark-dropdown",
                            ),
                        ],
                        md=2,
                    ),
                    dbc.Col(
                        [
                            _label(t("export.date_range", lang)),
                            html.Div(dcc.DatePickerRange(
                                id="trends-dates",
                                start_date=today - timedelta(days=6),
                                end_date=today,
                                max_date_allowed=today,
                                display_format="YYYY-MM-DD",
                                disabled=True,
                            )),
                        ],
                        md=4,
                    ),
                    dbc.Col(
                        [
                            _label(t("trends.options", lang)),
                            dbc.Checklist(
                                id="trends-options",
                                options=[
                                    {"label": " " + t("trends.thresholds", lang), "value": "thresholds"},
                                    {"label": " " + t("trends.markers", lang), "value": "markers"},
                                ],
                                value=["thresholds", "markers"],
                                inline=True,
                                style={"fontSize": ".82rem", "color": "#c9d1d9", "paddingTop": "8px"},
                                inputStyle={"marginRight": "4px"},
                            ),
                        ],
                        md=4,
                    ),
                ],
                className="g-3 mb-3",
            ),

            # ── Amplitude chart ────────────────────────────────────────────────
            dbc.Row(
                dbc.Col(
                    _card("trends-chart-title", t("trends.amp_chart", lang),
                          dcc.Graph(id="trends-amp-chart", config={"displayModeBar": True})),
                    md=12,
                ),
                className="g-3 mb-3",
            ),

            # ── Frequency + environment ────────────────────────────────────────
            dbc.Row(
                [
                    dbc.Col(_card(None, t("trends.freq_chart", lang),
                                  dcc.Graph(id="trends-freq-chart", config={"displayModeBar": False})), md=6),
                    dbc.Col(_card(None, t("trends.env_chart", lang),
                                  dcc.Graph(id="trends-env-chart", config={"displayModeBar": False})), md=6),
                ],
                className="g-3 mb-3",
            ),

            # ── Stats + diagnosis ──────────────────────────────────────────────
            dbc.Row(
                [
                    dbc.Col(_card(None, t("trends.stats", lang), html.Div(id="trends-stats")), md=6),
                    dbc.Col(_card(None, t("trends.diagnosis", lang), html.Div(id="trends-diagnosis")), md=6),
                ],
                className="g-3",
            ),
        ],
        style={"padding": "1.5rem"},
    )
