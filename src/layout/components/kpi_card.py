"""
src/layout/components/kpi_card.py
──────────────────────────────────
KPI indicator cards for the overview banner and channel readings.
"""
from dash import html

from config.alarms import LEVEL_COLORS
from config.channels import AMP_UNIT, CHANNEL_CONFIG, FREQ_UNIT

CARD_BG = "#161b22"
MUTED = "#8b949e"


def kpi_card(
    label: str,
    value: str,
    color: str = "#c9d1d9",
    sub_label: str = "",
    border_color: str = "#30363d",
) -> html.Div:
    """
    Compact KPI metric card.

    Args:
        label: Metric name (shown above value)
        value: Formatted value string
        color: Value text color (reflects status)
        sub_label: Small secondary label below value
        border_color: Card border color (can reflect severity)
    """
    children = [
        html.Div(label, style={"fontSize": ".68rem", "color": MUTED, "textTransform": "uppercase", "letterSpacing": ".06em"}),
        html.Div(value, style={"fontSize": "1.4rem", "fontWeight": "700", "color": color, "lineHeight": "1.2", "marginTop": "2px"}),
    ]
    if sub_label:
        children.append(
            html.Div(sub_label, style={"fontSize": ".68rem", "color": MUTED, "marginTop": "2px"})
        )

    return html.Div(
        children,
        style={
            "backgroundColor": CARD_BG,
            "border": f"1px solid {border_color}",
            "borderRadius": "8px",
            "padding": "14px 16px",
            "minWidth": "120px",
        },
    )


def channel_card(channel_type: str, amplitude: float, frequency: float, level: str, location: str = "") -> html.Div:
    """Reading tile for one channel: amp / freq coloured by its level."""
    cfg = CHANNEL_CONFIG.get(channel_type, {"label": channel_type, "color": "#c9d1d9"})
    color = LEVEL_COLORS.get(level, MUTED)
    return html.Div(
        [
            html.Div(
                [
                    html.Span(cfg["label"], style={"fontWeight": "700", "color": cfg["color"], "fontSize": ".82rem"}),
                    html.Span(location, style={"fontSize": ".65rem", "color": MUTED, "marginLeft": "6px"}),
                ]
            ),
            html.Div(f"{amplitude:.0f} {AMP_UNIT}", style={"fontSize": "1.1rem", "fontWeight": "700", "color": color}),
            html.Div(f"{frequency:.0f} {FREQ_UNIT}", style={"fontSize": ".75rem", "color": MUTED}),
        ],
        style={
            "backgroundColor": CARD_BG,
            "border": f"1px solid {color}",
            "borderRadius": "6px",
            "padding": "8px 10px",
        },
    )
