"""
src/pages/export.py
────────────────────
Data export page: pick devices, dates, levels and channels, download CSV/JSON.
"""
from datetime import UTC, datetime, timedelta

import dash_bootstrap_components as dbc
from dash import dcc, html

from config.alarms import ALL_LEVELS, AlarmLevel, level_label
from config.settings import settings
from src.data import store
from src.data.export import EXPORT_CHANNELS, EXPORT_FORMATS
from src.i18n.translator import t

MUTED = "#8b949e"


def _label(text: str) -> html.Label:
    return html.Label(text, style={"fontSize": ".72rem", "color": MUTED, "textTransform": "uppercase"})


def layout(lang: str = "zh") -> html.Div:
    today = datetime.now(tz=UTC).date()
    return html.Div(
        [
            html.Div(
                [
                    html.H2(t("export.title", lang), className="page-title"),
                    html.P(t("export.subtitle", lang), className="page-subtitle"),
                ],
                className="page-header",
            ),
            html.Div(
                [
                    dbc.Row(
                        [
                            dbc.Col(
                                [
                                    _label(t("export.devices", lang)),
                                    dcc.Dropdown(
                                        id="export-devices",
                                        options=[{"label": d.name, "value": d.id} for d in store.list_devices()],
                                        value=[],
                                        multi=True,
                                        className="dark-dropdown",
                                    ),
                                ],
                                md=6,
                            ),
                            dbc.Col(
                                [
                                    _label(t("export.date_range", lang)),
                                    html.Div(dcc.DatePickerRange(
                                        id="export-dates",
                                        start_date=today - timedelta(days=settings.HISTORY_DAYS - 1),
                                        end_date=today,
                                        display_format="YYYY-MM-DD",
                                    )),
                                ],
                                md=6,
                            ),
                        ],
                        className="g-3 mb-3",
                    ),
                    dbc.Row(
                        [
                            dbc.Col(
                                [
                                    _label(t("export.statuses", lang)),
                                    dbc.Checklist(
                                        id="export-statuses",
                                        options=[
                                            {"label": " " + level_label(lv, lang), "value": lv.value}
                                            for lv in ALL_LEVELS if lv != AlarmLevel.NO_DATA
                                        ],
                                        value=[AlarmLevel.WARNING.value, AlarmLevel.DANGER.value,
                                               AlarmLevel.CRITICAL.value],
                                        inline=True,
                                        inputStyle={"marginRight": "4px"},
                                    ),
                                ],
                                md=4,
                            ),
                            dbc.Col(
                                [
                                    _label(t("export.channels", lang)),
                                    dbc.Checklist(
                                        id="export-channels",
                                        options=[{"label": " " + ch, "value": ch} for ch in EXPORT_CHANNELS],
                                        value=["UHF", "TEV"],
                                        inline=True,
                                        inputStyle={"marginRight": "4px"},
                                    ),
                                ],
                                md=5,
                            ),
                            dbc.Col(
                                [
                                    _label(t("export.format", lang)),
                                    dbc.RadioItems(
                                        id="export-format",
                                        options=[{"label": " " + f.upper(), "value": f} for f in EXPORT_FORMATS],
                                        value="csv",
                                        inline=True,
                                        inputStyle={"marginRight": "4px"},
                                    ),
                                ],
                                md=3,
                            ),
                        ],
                        className="g-3 mb-3",
                    ),
                    html.Div(
                        [
                            html.Span(t("export.estimate", lang) + ": ", style={"color": MUTED, "fontSize": ".8rem"}),
                            html.Span(id="export-estimate", style={"fontWeight": "700"}),
                        ],
                        className="mb-3",
                    ),
                    dbc.Button(t("export.download", lang), id="export-btn", n_clicks=0, color="primary"),
                    html.Div(id="export-message", className="mt-2", style={"fontSize": ".8rem", "color": MUTED}),
                    dcc.Download(id="export-download"),
                ],
                className="chart-card",
            ),
        ],
        style={"padding": "1.5rem"},
    )
