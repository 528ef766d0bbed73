"""
src/layout/components/status_donut.py
──────────────────────────────────────
Fleet status distribution donut using a Plotly pie chart.
"""
from __future__ import annotations

import plotly.graph_objects as go
from dash import dcc

from config.alarms import ALL_LEVELS, LEVEL_COLORS, level_label

CARD_BG = "#161b22"


def status_donut(
    counts: dict,
    lang: str = "zh",
    height: int = 240,
) -> dcc.Graph:
    """
    Donut of device counts per level, total in the centre.

    Args:
        counts: {AlarmLevel: n} as returned by count_by_level
        lang: Label language
        height: Figure height in px
    """
    levels = [lv for lv in ALL_LEVELS if counts.get(lv, 0) > 0]
    total = sum(counts.values())

    fig = go.Figure(go.Pie(
        labels=[level_label(lv, lang) for lv in levels],
        values=[counts[lv] for lv in levels],
        hole=0.62,
        sort=False,
        marker={"colors": [LEVEL_COLORS[lv] for lv in levels], "line": {"color": CARD_BG, "width": 2}},
        textinfo="value",
        hovertemplate="%{label}: %{value}<extra></extra>",
    ))

    fig.update_layout(
        paper_bgcolor=CARD_BG,
        plot_bgcolor=CARD_BG,
        margin=dict(l=10, r=10, t=10, b=10),
        height=height,
        font=dict(color="#c9d1d9"),
        showlegend=True,
        legend={"bgcolor": "rgba(0,0,0,0)", "font": {"size": 10}, "orientation": "h", "y": -0.05},
        annotations=[{
            "text": f"<b>{total}</b>",
            "showarrow": False,
            "font": {"size": 26, "color": "#c9d1d9"},
        }],
    )

    return dcc.Graph(
        figure=fig,
        config={"displayModeBar": False},
        style={"height": f"{height}px"},
    )
