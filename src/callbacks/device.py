"""
src/callbacks/device.py
────────────────────────
Device detail page callbacks.
Renders the node tree, PD source and advice for the selected device.
"""
from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import Input, Output, State, html

from config.alarms import LEVEL_COLORS, AlarmLevel
from src.analytics.diagnosis import LEVEL_SUMMARY, level_advice
from src.data import store
from src.data.models import PDSource, SensorNode
from src.data.simulator import live_snapshot
from src.i18n.translator import t
from src.layout.components.kpi_card import channel_card
from src.layout.components.level_badge import level_badge

CARD_BG = "#161b22"
BORDER = "#30363d"
MUTED = "#8b949e"


def _node_block(node: SensorNode, lang: str) -> html.Div:
    status = node.status
    color = LEVEL_COLORS[status.level]
    return html.Div(
        [
            html.Div(
                [
                    html.Span(node.name, style={"fontWeight": "700", "fontSize": ".88rem"}),
                    html.Span(node.sn, style={"fontSize": ".68rem", "color": MUTED, "margin": "0 8px"}),
                    level_badge(status.level, lang),
                ],
                style={"marginBottom": "4px"},
            ),
            html.Div(
                f"{t('device.weighted_sum', lang)} {status.weighted_sum:.2f} · "
                f"{t('device.alarm_count', lang)} {status.alarm_count}",
                style={"fontSize": ".7rem", "color": MUTED, "marginBottom": "8px"},
            ),
            dbc.Row(
                [
                    dbc.Col(channel_card(ch.channel_type, ch.amplitude, ch.frequency, ch.status, ch.location), md=6)
                    for ch in node.channels
                ],
                className="g-2",
            ),
        ],
        style={
            "borderLeft": f"3px solid {color}",
            "paddingLeft": "10px",
            "marginBottom": "14px",
        },
    )


def _pd_source_block(source: PDSource | None, lang: str) -> html.Div:
    if source is None:
        return html.Div(t("device.no_source", lang), style={"color": LEVEL_COLORS[AlarmLevel.NORMAL], "fontSize": ".82rem"})
    x, y, z = source.position3d
    return html.Div(
        [
            html.Div(source.location_name, style={"fontWeight": "700", "color": LEVEL_COLORS[AlarmLevel.CRITICAL]}),
            html.Div(f"({x:.0f}, {y:.0f}, {z:.0f})", style={"fontSize": ".75rem", "color": MUTED}),
            html.Div(f"{t('device.intensity', lang)}: {source.intensity:.0f}", style={"fontSize": ".78rem"}),
        ]
    )


def register(app) -> None:

    @app.callback(
        Output("store-device", "data"),
        Input("device-selector", "value"),
        prevent_initial_call=True,
    )
    def select_device(device_id: str) -> str:
        return device_id

    @app.callback(
        [
            Output("device-header", "children"),
            Output("device-nodes", "children"),
            Output("device-pd-source", "children"),
            Output("device-advice", "children"),
        ],
        [
            Input("device-selector", "value"),
            Input("interval-live", "n_intervals"),
        ],
        State("store-lang", "data"),
    )
    def update_device(device_id: str, n_intervals: int, lang: str):
        device = store.get_device(device_id) if device_id else None
        if device is None:
            empty = html.Div(t("common.no_data", lang), style={"color": MUTED})
            return empty, html.Div(), html.Div(), html.Div()

        trend = store.get_trend(device.id, hours=24)
        _, source, nodes, summary = live_snapshot(device.model_dump(), trend)

        header = html.Div(
            [
                html.Div(
                    [
                        html.Span(device.name, style={"fontWeight": "700", "fontSize": "1.1rem", "marginRight": "10px"}),
                        level_badge(summary.status, lang),
                    ]
                ),
                html.Div(
                    f"{device.station} · {device.device_type} · {device.id}",
                    style={"fontSize": ".75rem", "color": MUTED, "marginTop": "2px"},
                ),
                html.Div(
                    f"{t('device.temperature', lang)} {summary.temp:.1f} °C · "
                    f"{t('device.humidity', lang)} {summary.humidity:.0f} %",
                    style={"fontSize": ".75rem", "color": MUTED},
                ),
            ]
        )

        advice = html.Div(
            [
                html.Div(LEVEL_SUMMARY[summary.status],
                         style={"fontWeight": "700", "color": LEVEL_COLORS[summary.status], "marginBottom": "6px"}),
                html.Div(level_advice(summary.status), style={"fontSize": ".8rem", "lineHeight": "1.5"}),
            ]
        )

        return header, html.Div([_node_block(n, lang) for n in nodes]), _pd_source_block(source, lang), advice
