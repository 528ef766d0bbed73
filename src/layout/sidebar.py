"""
src/layout/sidebar.py
──────────────────────
Device selector sidebar (shown on /device and /trends pages).
"""
import dash_bootstrap_components as dbc
from dash import html

from src.data import store
from src.i18n.translator import t

SIDEBAR_BG = "#0d1117"
CARD_BG = "#161b22"
BORDER = "#30363d"
MUTED = "#8b949e"


def device_options() -> list[dict]:
    """Selector options for every configured device, grouped by project order."""
    projects = {p.id: p.name for p in store.list_projects()}
    return [
        {
            "label": html.Div(
                [
                    html.Span(d.name, style={"fontWeight": "600", "fontSize": ".85rem"}),
                    html.Div(
                        f"{d.station or projects.get(d.project_id, d.project_id)} · {d.id}",
                        style={"fontSize": ".68rem", "color": MUTED},
                    ),
                ]
            ),
            "value": d.id,
        }
        for d in sorted(store.list_devices(), key=lambda d: d.project_id)
    ]


def create_sidebar(selected: str | None, lang: str = "zh", selector_id: str = "device-selector") -> html.Div:
    """Device selector with the currently selected device checked."""
    return html.Div(
        [
            html.Div(
                t("common.device", lang),
                style={
                    "fontSize": ".68rem",
                    "color": MUTED,
                    "textTransform": "uppercase",
                    "letterSpacing": ".08em",
                    "marginBottom": "8px",
                },
            ),
            dbc.RadioItems(
                id=selector_id,
                options=device_options(),
                value=selected,
                inputStyle={"marginRight": "8px"},
                labelStyle={"cursor": "pointer", "marginBottom": "8px"},
                style={"display": "flex", "flexDirection": "column", "gap": "4px"},
            ),
        ],
        style={
            "backgroundColor": CARD_BG,
            "border": f"1px solid {BORDER}",
            "borderRadius": "8px",
            "padding": "14px",
            "minWidth": "160px",
            "maxHeight": "75vh",
            "overflowY": "auto",
        },
    )
