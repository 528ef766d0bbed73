"""
src/pages/overview.py
──────────────────────
Monitoring overview page.

Static structure; KPI banner, donut and device table injected via callbacks.
"""

import dash_bootstrap_components as dbc
from dash import dcc, html

from config.alarms import ALL_LEVELS, level_label
from src.data import store
from src.i18n.translator import t

CARD_BG = "#161b22"
BORDER = "#30363d"
MUTED = "#8b949e"


def _label(text: str) -> html.Label:
    return html.Label(text, style={"fontSize": ".72rem", "color": MUTED, "textTransform": "uppercase"})


def layout(lang: str = "zh") -> html.Div:
    project_options = [{"label": t("common.all", lang), "value": "all"}] + [
        {"label": p.name, "value": p.id} for p in store.list_projects()
    ]
    return html.Div(
        [
            # ── Page header ───────────────────────────────────────────────────
            html.Div(
                [
                    html.H2(t("overview.title", lang), className="page-title"),
                    html.P(t("overview.subtitle", lang), className="page-subtitle"),
                ],
                className="page-header",
            ),
            # ── Fleet KPI banner (dynamic) ────────────────────────────────────
            html.Div(id="overview-kpi-banner", className="mb-4"),
            dbc.Row(
                [
                    # ── Status donut (dynamic) ────────────────────────────────
                    dbc.Col(
                        html.Div(
                            [
                                html.Div(t("overview.distribution", lang), className="chart-title"),
                                html.Div(id="overview-donut"),
                            ],
                            className="chart-card",
                        ),
                        md=4,
                    ),
                    # ── Filters + device table ────────────────────────────────
                    dbc.Col(
                        html.Div(
                            [
                                html.Div(t("overview.devices", lang), className="chart-title"),
                                dbc.Row(
                                    [
                                        dbc.Col(
                                            [
                                                _label(t("common.project", lang)),
                                                dcc.Dropdown(
                                                    id="overview-filter-project",
                                                    options=project_options,
                                                    value="all",
                                                    clearable=False,
                                                    className="dark-dropdown",
                                                ),
                                            ],
                                            md=4,
                                        ),
                                        dbc.Col(
                                            [
                                                _label(t("common.status", lang)),
                                                dcc.Dropdown(
                                                    id="overview-filter-status",
                                                    options=[
                                                        {"label": level_label(lv, lang), "value": lv.value}
                                                        for lv in ALL_LEVELS
                                                    ],
                                                    value=[],
                                                    multi=True,
                                                    className="dark-dropdown",
                                                ),
                                            ],
                                            md=4,
                                        ),
                                        dbc.Col(
                                            [
                                                _label(t("common.search", lang)),
                                                dbc.Input(
                                                    id="overview-filter-query",
                                                    type="text",
                                                    debounce=True,
                                                    size="sm",
                                                ),
                                            ],
                                            md=4,
                                        ),
                                    ],
                                    className="g-2 mb-3",
                                ),
                                html.Div(id="overview-device-table"),
                            ],
                            className="chart-card",
                        ),
                        md=8,
                    ),
                ],
                className="g-3",
            ),
        ],
        style={"padding": "1.5rem"},
    )
