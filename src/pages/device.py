"""
src/pages/device.py
────────────────────
Device detail page.

Layout: sidebar selector + detail panel with node tree, channel readings,
PD source location and maintenance advice.
"""
import dash_bootstrap_components as dbc
from dash import html

from src.i18n.translator import t
from src.layout.sidebar import create_sidebar

MUTED = "#8b949e"


def _section_title(text: str) -> html.Div:
    return html.Div(text, style={"fontSize": ".68rem", "color": MUTED, "textTransform": "uppercase", "marginBottom": "6px"})


def layout(lang: str = "zh", device_id: str | None = None) -> html.Div:
    return html.Div(
        [
            html.Div(
                [
                    html.H2(t("device.title", lang), className="page-title"),
                    html.P(t("device.subtitle", lang), className="page-subtitle"),
                ],
                className="page-header",
            ),

            dbc.Row(
                [
                    # ── Sidebar ───────────────────────────────────────────────
                    dbc.Col(create_sidebar(device_id, lang), md=3),

                    # ── Main detail panel ─────────────────────────────────────
                    dbc.Col(
                        [
                            html.Div(id="device-header", className="chart-card mb-3"),
                            dbc.Row(
                                [
                                    dbc.Col(
                                        html.Div(
                                            [_section_title(t("device.nodes", lang)), html.Div(id="device-nodes")],
                                            className="chart-card",
                                        ),
                                        md=7,
                                    ),
                                    dbc.Col(
                                        [
                                            html.Div(
                                                [_section_title(t("device.pd_source", lang)), html.Div(id="device-pd-source")],
                                                className="chart-card mb-3",
                                            ),
                                            html.Div(
                                                [_section_title(t("device.advice", lang)), html.Div(id="device-advice")],
                                                className="chart-card",
                                            ),
                                        ],
                                        md=5,
                                    ),
                                ],
                                className="g-3",
                            ),
                        ],
                        md=9,
                    ),
                ],
                className="g-3",
            ),
        ],
        style={"padding": "1.5rem"},
    )
