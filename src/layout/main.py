"""
src/layout/main.py
───────────────────
Main application layout composition.

Contains:
  - dcc.Location for routing
  - dcc.Store for shared client-side state
  - dcc.Interval for live updates
  - Navbar + page content container
"""
from dash import html, dcc

from config.settings import settings
from config.sites import DEVICE_IDS
from src.i18n.translator import t
from src.layout.navbar import create_navbar


def create_layout() -> html.Div:
    """Assemble the root application layout."""
    lang = settings.DEFAULT_LANG
    return html.Div(
        [
            # ── Client-side state stores ──────────────────────────────────────
            dcc.Store(id="store-device", data=DEVICE_IDS[0]),
            dcc.Store(id="store-lang", data=lang),
            dcc.Store(id="store-ack-alarms", data=[]),  # list of acknowledged alarm IDs
            dcc.Store(id="store-config-rev", data=0),   # bumped on every config mutation

            # ── Routing ───────────────────────────────────────────────────────
            dcc.Location(id="url", refresh=False),

            # ── Live update interval ──────────────────────────────────────────
            dcc.Interval(
                id="interval-live",
                interval=settings.UPDATE_INTERVAL_MS,
                n_intervals=0,
            ),

            # ── Navigation bar ────────────────────────────────────────────────
            create_navbar(lang),

            # ── Page content ──────────────────────────────────────────────────
            html.Div(
                id="page-content",
                style={"minHeight": "calc(100vh - 60px)"},
            ),

            # ── Footer ────────────────────────────────────────────────────────
            html.Footer(
                html.Span(t("footer.text", lang), id="footer-text"),
                style={
                    "textAlign": "center",
                    "padding": ".7rem",
                    "fontSize": ".72rem",
                    "color": "#8b949e",
                    "borderTop": "1px solid #30363d",
                    "marginTop": "2rem",
                },
            ),
        ],
        style={"backgroundColor": "#0d1117", "minHeight": "100vh", "color": "#c9d1d9"},
    )
