"""
src/callbacks/alarms.py
────────────────────────
Alarm management page callbacks.
"""
from __future__ import annotations

import logging

import dash_bootstrap_components as dbc
import pandas as pd
from dash import ALL, Input, Output, State, ctx, html

from config.alarms import LEVEL_COLORS, MAX_ALARMS_DISPLAY, SEVERITY_ORDER, AlarmLevel, level_label
from config.settings import settings
from src.data import store
from src.i18n.translator import t
from src.layout.components.level_badge import level_badge

logger = logging.getLogger("pd.alarms")

CARD_BG = "#161b22"
BORDER = "#30363d"
MUTED = "#8b949e"

_BADGE_LEVELS = [AlarmLevel.CRITICAL, AlarmLevel.DANGER, AlarmLevel.WARNING]


def _build_table(df: pd.DataFrame, acked_ids: list[str], device_names: dict[str, str], lang: str) -> html.Div:
    if df.empty:
        return html.Div(
            t("alarms.empty", lang),
            style={"color": MUTED, "padding": "20px", "textAlign": "center"},
        )

    rows = []
    for _, row in df.iterrows():
        is_acked = row["id"] in acked_ids or bool(row.get("acknowledged", False))
        rows.append(
            html.Tr(
                [
                    html.Td(
                        pd.to_datetime(row["timestamp"]).strftime("%m/%d %H:%M"),
                        style={"color": MUTED, "fontSize": ".78rem"},
                    ),
                    html.Td(
                        html.Span(device_names.get(row["device_id"], row["device_id"]),
                                  style={"color": "#58a6ff", "fontSize": ".82rem", "fontWeight": "600"}),
                    ),
                    html.Td(level_badge(row["level"], lang)),
                    html.Td(row["channel"], style={"fontSize": ".78rem", "color": "#c9d1d9"}),
                    html.Td(f"{row['amplitude']:.1f}", style={"fontSize": ".78rem"}),
                    html.Td(f"{row['frequency']:.0f}", style={"fontSize": ".78rem", "color": MUTED}),
                    html.Td(
                        row["message"],
                        style={"fontSize": ".72rem", "color": MUTED, "maxWidth": "300px", "overflow": "hidden", "textOverflow": "ellipsis"},
                    ),
                    html.Td(
                        html.Button(
                            "✓ " + t("common.acknowledged", lang) if is_acked else t("common.acknowledge", lang),
                            id={"type": "ack-btn", "index": row["id"]},
                            n_clicks=0,
                            disabled=is_acked,
                            style={
                                "fontSize": ".68rem",
                                "fontWeight": "600",
                                "color": "#2ea44f" if is_acked else "#58a6ff",
                                "background": "transparent",
                                "border": f"1px solid {'#2ea44f' if is_acked else '#58a6ff'}",
                                "borderRadius": "4px",
                                "padding": "2px 8px",
                                "cursor": "default" if is_acked else "pointer",
                                "opacity": "0.6" if is_acked else "1",
                            },
                        )
                    ),
                ],
                style={"borderBottom": f"1px solid {BORDER}"},
            )
        )

    headers = [
        t("common.time", lang), t("common.device", lang), t("common.level", lang), t("common.channel", lang),
        "dBmV", "次/秒", t("common.message", lang), t("common.status", lang),
    ]
    return html.Div(
        html.Table(
            [
                html.Thead(
                    html.Tr(
                        [html.Th(h) for h in headers],
                        style={"color": MUTED, "fontSize": ".68rem", "textTransform": "uppercase"},
                    )
                ),
                html.Tbody(rows),
            ],
            style={"width": "100%", "borderCollapse": "collapse", "fontSize": ".82rem"},
        ),
        style={"overflowX": "auto"},
    )


def register(app) -> None:

    @app.callback(
        [
            Output("alarms-table", "children"),
            Output("alarms-summary-badges", "children"),
        ],
        [
            Input("interval-live", "n_intervals"),
            Input("alarms-filter-level", "value"),
            Input("alarms-filter-device", "value"),
            Input("alarms-filter-status", "value"),
            Input("store-ack-alarms", "data"),
        ],
        State("store-lang", "data"),
    )
    def update_alarms_table(
        n_intervals: int,
        level_filter: str,
        device_filter: str,
        status_filter: str,
        acked_ids: list[str],
        lang: str,
    ):
        acked_ids = acked_ids or []
        full_df = store.get_alarms(days=settings.ALARM_RETENTION_DAYS, limit=5000)

        if full_df.empty:
            table = html.Div(t("alarms.empty", lang), style={"color": MUTED, "padding": "20px", "textAlign": "center"})
            return table, html.Div()

        # Apply filters
        df = full_df
        if level_filter != "all":
            df = df[df["level"] == level_filter]
        if device_filter != "all":
            df = df[df["device_id"] == device_filter]
        if status_filter == "unacked":
            df = df[~df["acknowledged"] & ~df["id"].isin(acked_ids)]
        elif status_filter == "acked":
            df = df[df["acknowledged"] | df["id"].isin(acked_ids)]

        # Sort by severity then timestamp
        df = df.assign(_sev_order=df["level"].map(SEVERITY_ORDER).fillna(0))
        df = df.sort_values(["_sev_order", "timestamp"], ascending=[False, False]).head(MAX_ALARMS_DISPLAY)

        # Summary badges
        counts = full_df.groupby("level").size()
        badges = dbc.Row(
            [
                dbc.Col(
                    html.Div(
                        [
                            html.Div(str(counts.get(lv.value, 0)), style={"fontSize": "1.4rem", "fontWeight": "700", "color": LEVEL_COLORS[lv]}),
                            html.Div(level_label(lv, lang), style={"fontSize": ".65rem", "color": MUTED, "textTransform": "uppercase"}),
                        ],
                        style={"backgroundColor": CARD_BG, "border": f"1px solid {BORDER}", "borderRadius": "8px", "padding": "10px 16px"},
                    ),
                    xs=6, md=3,
                )
                for lv in _BADGE_LEVELS
            ]
            + [
                dbc.Col(
                    html.Div(
                        [
                            html.Div(str(store.get_active_alarm_count()), style={"fontSize": "1.4rem", "fontWeight": "700", "color": "#e8a020"}),
                            html.Div(t("common.unacked", lang), style={"fontSize": ".65rem", "color": MUTED, "textTransform": "uppercase"}),
                        ],
                        style={"backgroundColor": CARD_BG, "border": f"1px solid {BORDER}", "borderRadius": "8px", "padding": "10px 16px"},
                    ),
                    xs=6, md=3,
                )
            ],
            className="g-2",
        )

        device_names = {d.id: d.name for d in store.list_devices()}
        return _build_table(df, acked_ids, device_names, lang), badges

    @app.callback(
        Output("store-ack-alarms", "data"),
        Input({"type": "ack-btn", "index": ALL}, "n_clicks"),
        State("store-ack-alarms", "data"),
        prevent_initial_call=True,
    )
    def acknowledge_alarm(n_clicks_list: list, acked_ids: list[str]) -> list[str]:
        # Re-rendered buttons fire with n_clicks=0; only real clicks count
        if not ctx.triggered_id or not ctx.triggered[0]["value"]:
            return acked_ids or []
        alarm_id = ctx.triggered_id["index"]
        acked = list(acked_ids or [])
        if alarm_id not in acked:
            try:
                store.acknowledge_alarm(alarm_id)
            except KeyError:
                logger.warning("Acknowledge requested for unknown alarm %s", alarm_id)
                return acked
            acked.append(alarm_id)
        return acked
