"""
src/pages/configuration.py
───────────────────────────
Site configuration page: projects, devices, IPCs and sensors.

Each tab has a table of current records and a form. Choosing an existing
record in the form's target dropdown edits it; leaving it empty adds a new one.
"""

import dash_bootstrap_components as dbc
from dash import dcc, html

from config.sites import DEVICE_TYPES
from src.i18n.translator import t

MUTED = "#8b949e"


def _field(label: str, control) -> dbc.Col:
    return dbc.Col(
        [html.Label(label, style={"fontSize": ".72rem", "color": MUTED, "textTransform": "uppercase"}), control],
        md=4,
    )


def _buttons(prefix: str, lang: str) -> html.Div:
    return html.Div(
        [
            dbc.Button(t("common.save", lang), id=f"config-{prefix}-save", n_clicks=0, color="primary", size="sm"),
            dbc.Button(t("common.delete", lang), id=f"config-{prefix}-delete", n_clicks=0, color="danger",
                       outline=True, size="sm", className="ms-2"),
        ],
        className="mt-3",
    )


def _target(prefix: str, lang: str) -> dbc.Col:
    return _field(
        t("config.target", lang),
        dcc.Dropdown(id=f"config-{prefix}-target", options=[], value=None, className="dark-dropdown"),
    )


def _project_tab(lang: str) -> html.Div:
    return html.Div(
        [
            dbc.Row(
                [
                    _target("project", lang),
                    _field(t("common.name", lang), dbc.Input(id="config-project-name", size="sm")),
                    _field(t("common.type", lang), dbc.Input(id="config-project-type", value="变电站", size="sm")),
                    _field(t("common.description", lang), dbc.Input(id="config-project-desc", size="sm")),
                ],
                className="g-2",
            ),
            _buttons("project", lang),

            # ── Config bundle export / import ──────────────────────────────────
            dbc.Row(
                [
                    dbc.Col(
                        [
                            dbc.Button(t("config.export_config", lang), id="config-export-btn", n_clicks=0,
                                       color="secondary", outline=True, size="sm"),
                            dcc.Download(id="config-export-download"),
                        ],
                        md="auto",
                    ),
                    dbc.Col(
                        dcc.Upload(
                            id="config-import-upload",
                            children=html.Div(t("config.import_config", lang)),
                            accept=".json,application/json",
                            multiple=False,
                            style={"border": f"1px dashed {MUTED}", "borderRadius": "6px", "padding": "4px 12px",
                                   "fontSize": ".78rem", "color": MUTED, "cursor": "pointer", "textAlign": "center"},
                        ),
                        md=5,
                    ),
                ],
                className="g-2 mt-3 align-items-center",
            ),
            html.Div(id="config-projects-table", className="mt-3"),
        ],
        style={"padding": "1rem 0"},
    )


def _ipc_tab(lang: str) -> html.Div:
    return html.Div(
        [
            dbc.Row(
                [
                    _target("ipc", lang),
                    _field(t("common.name", lang), dbc.Input(id="config-ipc-name", size="sm")),
                    _field(t("config.sn", lang), dbc.Input(id="config-ipc-sn", size="sm")),
                    _field(t("config.ip", lang), dbc.Input(id="config-ipc-ip", placeholder="192.168.1.10", size="sm")),
                    _field(t("common.description", lang), dbc.Input(id="config-ipc-desc", size="sm")),
                ],
                className="g-2",
            ),
            _buttons("ipc", lang),
            html.Div(id="config-ipcs-table", className="mt-3"),
        ],
        style={"padding": "1rem 0"},
    )


def _device_tab(lang: str) -> html.Div:
    return html.Div(
        [
            dbc.Row(
                [
                    _target("device", lang),
                    _field(t("common.project", lang),
                           dcc.Dropdown(id="config-device-project", options=[], className="dark-dropdown")),
                    _field(t("common.name", lang), dbc.Input(id="config-device-name", size="sm")),
                    _field(t("common.type", lang),
                           dcc.Dropdown(id="config-device-type", options=DEVICE_TYPES, value=DEVICE_TYPES[3],
                                        clearable=False, className="dark-dropdown")),
                    _field(t("common.station", lang), dbc.Input(id="config-device-station", size="sm")),
                    _field(t("common.description", lang), dbc.Input(id="config-device-desc", size="sm")),
                ],
                className="g-2",
            ),
            _buttons("device", lang),
            html.Div(id="config-devices-table", className="mt-3"),
        ],
        style={"padding": "1rem 0"},
    )


def _sensor_tab(lang: str) -> html.Div:
    return html.Div(
        [
            dbc.Row(
                [
                    _target("sensor", lang),
                    _field(t("common.device", lang),
                           dcc.Dropdown(id="config-sensor-device", options=[], className="dark-dropdown")),
                    _field(t("common.name", lang), dbc.Input(id="config-sensor-name", size="sm")),
                    _field(t("config.sn", lang), dbc.Input(id="config-sensor-sn", size="sm")),
                    _field(t("config.model", lang), dbc.Input(id="config-sensor-model", size="sm")),
                    _field(t("config.ipc", lang),
                           dcc.Dropdown(id="config-sensor-ipc", options=[], className="dark-dropdown")),
                    _field(t("config.channels", lang),
                           dbc.Input(id="config-sensor-channels", placeholder="UHF, TEV", size="sm")),
                ],
                className="g-2",
            ),
            _buttons("sensor", lang),
            html.Div(id="config-sensors-table", className="mt-3"),
        ],
        style={"padding": "1rem 0"},
    )


def layout(lang: str = "zh") -> html.Div:
    return html.Div(
        [
            html.Div(
                [
                    html.H2(t("config.title", lang), className="page-title"),
                    html.P(t("config.subtitle", lang), className="page-subtitle"),
                ],
                className="page-header",
            ),
            html.Div(id="config-message", className="mb-2"),
            html.Div(
                dbc.Tabs(
                    [
                        dbc.Tab(_project_tab(lang), label=t("config.projects", lang), tab_id="projects"),
                        dbc.Tab(_device_tab(lang), label=t("config.devices", lang), tab_id="devices"),
                        dbc.Tab(_ipc_tab(lang), label=t("config.ipcs", lang), tab_id="ipcs"),
                        dbc.Tab(_sensor_tab(lang), label=t("config.sensors", lang), tab_id="sensors"),
                    ],
                    active_tab="projects",
                ),
                className="chart-card",
            ),
        ],
        style={"padding": "1.5rem"},
    )
