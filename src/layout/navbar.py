"""
src/layout/navbar.py
─────────────────────
Navigation bar with page links and language toggle.
"""

import dash_bootstrap_components as dbc
from dash import html

from src.i18n.translator import t

NAV_BG = "#0d1117"
BORDER = "#30363d"
ACCENT = "#58a6ff"

# (page key, href) in menu order
NAV_PAGES = [
    ("overview", "/"),
    ("device", "/device"),
    ("trends", "/trends"),
    ("alarms", "/alarms"),
    ("config", "/config"),
    ("export", "/export"),
]


def create_navbar(lang: str = "zh") -> dbc.Navbar:
    links = [
        dbc.NavItem(dbc.NavLink(t(f"nav.{key}", lang), href=href, id=f"nav-{key}", active="exact"))
        for key, href in NAV_PAGES
    ]
    # Language toggle
    links.append(
        dbc.NavItem(
            html.Div(
                [
                    html.Button("中", id="lang-zh-btn", n_clicks=0, style=lang_btn_style(lang == "zh")),
                    html.Button("EN", id="lang-en-btn", n_clicks=0, style=lang_btn_style(lang == "en")),
                ],
                style={
                    "display": "flex",
                    "gap": "4px",
                    "alignItems": "center",
                    "marginLeft": "12px",
                },
            )
        )
    )

    return dbc.Navbar(
        dbc.Container(
            [
                # Brand
                dbc.NavbarBrand(
                    [
                        html.Span("⚡", style={"marginRight": "8px", "fontSize": "1.1rem"}),
                        html.Span(
                            t("nav.brand", lang),
                            id="nav-brand",
                            style={"fontWeight": "700", "letterSpacing": ".04em"},
                        ),
                    ],
                    href="/",
                    style={"color": ACCENT, "textDecoration": "none"},
                ),
                dbc.NavbarToggler(id="navbar-toggler", n_clicks=0),
                dbc.Collapse(
                    dbc.Nav(links, className="ms-auto", navbar=True),
                    id="navbar-collapse",
                    navbar=True,
                    is_open=False,
                ),
            ],
            fluid=True,
        ),
        color=NAV_BG,
        dark=True,
        sticky="top",
        style={"borderBottom": f"1px solid {BORDER}", "padding": ".5rem 1rem"},
    )


def lang_btn_style(active: bool) -> dict:
    return {
        "background": "rgba(88,166,255,0.15)" if active else "transparent",
        "border": "1px solid #30363d",
        "color": "#58a6ff" if active else "#8b949e",
        "borderRadius": "4px",
        "fontSize": ".72rem",
        "fontWeight": "700",
        "padding": "2px 8px",
        "cursor": "pointer",
    }
