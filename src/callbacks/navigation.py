"""
src/callbacks/navigation.py: routing, language toggle and overview page callbacks.
"""
from __future__ import annotations

from urllib.parse import parse_qs

import dash_bootstrap_components as dbc
from dash import Input, Output, State, ctx, dcc, html

from config.alarms import LEVEL_COLORS, AlarmLevel
from src.analytics.statistics import count_by_level, filter_devices, sort_by_severity
from src.data import store
from src.data.models import DeviceSummary
from src.data.simulator import live_snapshot
from src.i18n.translator import t
from src.layout.components.kpi_card import kpi_card
from src.layout.components.level_badge import level_badge, level_dot
from src.layout.components.status_donut import status_donut
from src.layout.navbar import NAV_PAGES, lang_btn_style

BORDER = "#30363d"
MUTED = "#8b949e"
ACCENT = "#58a6ff"


def fleet_summaries() -> list[DeviceSummary]:
    """Live dashboard card for every configured device."""
    summaries = []
    for device in store.list_devices():
        trend = store.get_trend(device.id, hours=24)
        summaries.append(live_snapshot(device.model_dump(), trend)[3])
    return summaries


def _device_table(devices: list[DeviceSummary], lang: str) -> html.Div:
    if not devices:
        return html.Div(t("common.no_data", lang), style={"color": MUTED, "padding": "12px"})

    rows = []
    for d in devices:
        rows.append(html.Tr(
            [
                html.Td(level_badge(d.status, lang)),
                html.Td(
                    dcc.Link(
                        [level_dot(d.status, 8), d.name],
                        href=f"/device?device={d.id}",
                        style={"color": ACCENT, "fontSize": ".8rem", "textDecoration": "none"},
                    )
                ),
                html.Td(d.station, style={"fontSize": ".75rem", "color": MUTED}),
                html.Td(f"{d.uhf_amp:.0f}", style={"fontSize": ".78rem"}),
                html.Td(f"{d.tev_amp:.0f}", style={"fontSize": ".78rem"}),
                html.Td(f"{d.hfct_amp:.0f}", style={"fontSize": ".78rem"}),
                html.Td(f"{d.ae_amp:.0f}", style={"fontSize": ".78rem"}),
                html.Td(f"{d.temp:.1f} °C / {d.humidity:.0f} %", style={"fontSize": ".72rem", "color": MUTED}),
                html.Td(d.last_updated.strftime("%H:%M"), style={"fontSize": ".72rem", "color": MUTED}),
            ],
            style={"borderBottom": f"1px solid {BORDER}"},
        ))

    headers = [
        t("common.level", lang), t("common.device", lang), t("common.station", lang),
        "UHF", "TEV", "HFCT", "AE",
        f"{t('device.temperature', lang)} / {t('device.humidity', lang)}",
        t("overview.updated", lang),
    ]
    return html.Div(
        html.Table(
            [
                html.Thead(html.Tr([html.Th(h) for h in headers],
                                   style={"color": MUTED, "fontSize": ".65rem", "textTransform": "uppercase"})),
                html.Tbody(rows),
            ],
            style={"width": "100%", "borderCollapse": "collapse", "fontSize": ".8rem"},
        ),
        style={"overflowX": "auto"},
    )


def register(app) -> None:
    """Register navigation + overview page callbacks."""

    # ── Page routing ──────────────────────────────────────────────────────────
    from src.pages import alarms, configuration, device, export, overview, trends

    @app.callback(
        Output("page-content", "children"),
        Input("url", "pathname"),
        Input("url", "search"),
        Input("store-lang", "data"),
        State("store-device", "data"),
    )
    def display_page(pathname: str, search: str, lang: str, device_id: str):
        query = parse_qs((search or "").lstrip("?"))
        device_id = query.get("device", [device_id])[0]
        routes = {
            "/": lambda: overview.layout(lang),
            "/device": lambda: device.layout(lang, device_id),
            "/trends": lambda: trends.layout(lang, device_id),
            "/alarms": lambda: alarms.layout(lang),
            "/config": lambda: configuration.layout(lang),
            "/export": lambda: export.layout(lang),
        }
        return routes.get(pathname, routes["/"])()

    # ── Navbar collapse ───────────────────────────────────────────────────────
    @app.callback(
        Output("navbar-collapse", "is_open"),
        Input("navbar-toggler", "n_clicks"),
        State("navbar-collapse", "is_open"),
        prevent_initial_call=True,
    )
    def toggle_navbar(n_clicks: int, is_open: bool) -> bool:
        return not is_open

    # ── Language toggle ───────────────────────────────────────────────────────
    @app.callback(
        Output("store-lang", "data"),
        Input("lang-zh-btn", "n_clicks"),
        Input("lang-en-btn", "n_clicks"),
        prevent_initial_call=True,
    )
    def update_lang(n_zh: int, n_en: int) -> str:
        return "en" if ctx.triggered_id == "lang-en-btn" else "zh"

    @app.callback(
        [Output(f"nav-{key}", "children") for key, _ in NAV_PAGES]
        + [
            Output("nav-brand", "children"),
            Output("footer-text", "children"),
            Output("lang-zh-btn", "style"),
            Output("lang-en-btn", "style"),
        ],
        Input("store-lang", "data"),
    )
    def translate_chrome(lang: str):
        labels = [t(f"nav.{key}", lang) for key, _ in NAV_PAGES]
        return labels + [
            t("nav.brand", lang),
            t("footer.text", lang),
            lang_btn_style(lang == "zh"),
            lang_btn_style(lang == "en"),
        ]

    # ── Overview: KPI banner, donut, device table ─────────────────────────────
    @app.callback(
        [
            Output("overview-kpi-banner", "children"),
            Output("overview-donut", "children"),
            Output("overview-device-table", "children"),
        ],
        [
            Input("interval-live", "n_intervals"),
            Input("overview-filter-project", "value"),
            Input("overview-filter-status", "value"),
            Input("overview-filter-query", "value"),
        ],
        State("store-lang", "data"),
    )
    def update_overview(n_intervals: int, project_id: str, statuses: list, query: str, lang: str):
        fleet = fleet_summaries()
        counts = count_by_level(d.status for d in fleet)

        n_alarming = counts[AlarmLevel.WARNING] + counts[AlarmLevel.DANGER] + counts[AlarmLevel.CRITICAL]
        worst = next(
            (lv for lv in (AlarmLevel.CRITICAL, AlarmLevel.DANGER, AlarmLevel.WARNING) if counts[lv]),
            AlarmLevel.NORMAL,
        )
        open_alarms = store.get_active_alarm_count()

        kpi_banner = dbc.Row(
            [
                dbc.Col(kpi_card(t("overview.total", lang), str(len(fleet)), ACCENT), xs=6, md=True),
                dbc.Col(kpi_card(t("overview.alarming", lang), str(n_alarming), LEVEL_COLORS[worst],
                                 border_color=LEVEL_COLORS[worst] if n_alarming else BORDER), xs=6, md=True),
                dbc.Col(kpi_card(t("overview.normal", lang), str(counts[AlarmLevel.NORMAL]),
                                 LEVEL_COLORS[AlarmLevel.NORMAL]), xs=6, md=True),
                dbc.Col(kpi_card(t("overview.offline", lang), str(counts[AlarmLevel.NO_DATA]),
                                 LEVEL_COLORS[AlarmLevel.NO_DATA]), xs=6, md=True),
                dbc.Col(kpi_card(t("overview.active_alarms", lang), str(open_alarms),
                                 "#e8a020" if open_alarms else LEVEL_COLORS[AlarmLevel.NORMAL]), xs=6, md=True),
            ],
            className="g-3",
        )

        visible = sort_by_severity(filter_devices(fleet, statuses, query or "", project_id))
        return kpi_banner, status_donut(counts, lang), _device_table(visible, lang)
