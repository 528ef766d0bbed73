"""
src/pages/alarms.py
────────────────────
Alarm management page with filters and acknowledgement.
"""

import dash_bootstrap_components as dbc
from dash import dcc, html

from config.alarms import AlarmLevel, level_label
from src.data import store
from src.i18n.translator import t

MUTED = "#8b949e"

_LEVELS = [AlarmLevel.CRITICAL, AlarmLevel.DANGER, AlarmLevel.WARNING]


def _label(text: str) -> html.Label:
    return html.Label(text, style={"fontSize": ".72rem", "color": MUTED, "textTransform": "uppercase"})


def layout(lang: str = "zh") -> html.Div:
    all_option = {"label": t("common.all", lang), "value": "all"}
    return html.Div(
        [
            html.Div(
                [
                    html.H2(t("alarms.title", lang), className="page-title"),
                    html.P(t("alarms.subtitle", lang), className="page-subtitle"),
                ],
                className="page-header",
            ),
            # ── Summary badges ─────────────────────────────────────────────────
            html.Div(id="alarms-summary-badges", className="mb-3"),
            # ── Filter row ─────────────────────────────────────────────────────
            dbc.Row(
                [
                    dbc.Col(
                        [
                            _label(t("common.level", lang)),
                            dcc.Dropdown(
                                id="alarms-filter-level",
                                options=[all_option] + [
                                    {"label": level_label(lv, lang), "value": lv.value} for lv in _LEVELS
                                ],
                                value="all",
                                clearable=False,
                                style={"fontSize": ".85rem"},
                                className="dark-dropdown",
                            ),
                        ],
                        md=3,
                    ),
                    dbc.Col(
                        [
                            _label(t("common.device", lang)),
                            dcc.Dropdown(
                                id="alarms-filter-device",
                                options=[all_option] + [
                                    {"label": d.name, "value": d.id} for d in store.list_devices()
                                ],
                                value="all",
                                clearable=False,
                                style={"fontSize": ".85rem"},
                                className="dark-dropdown",
                            ),
                        ],
                        md=4,
                    ),
                    dbc.Col(
                        [
                            _label(t("common.status", lang)),
                            dcc.Dropdown(
                                id="alarms-filter-status",
                                options=[
                                    all_option,
                                    {"label": t("common.unacked", lang), "value": "unacked"},
                                    {"label": t("common.acked", lang), "value": "acked"},
                                ],
                                value="all",
                                clearable=False,
                                style={"fontSize": ".85rem"},
                                className="dark-dropdown",
                            ),
                        ],
                        md=3,
                    ),
                ],
                className="g-3 mb-3",
            ),
            # ── Alarm table ────────────────────────────────────────────────────
            html.Div(
                html.Div(id="alarms-table"),
                className="chart-card",
            ),
        ],
        style={"padding": "1.5rem"},
    )
