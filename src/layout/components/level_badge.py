"""
src/layout/components/level_badge.py
──────────────────────────────────────
Alarm level badge component.
"""

from dash import html

from config.alarms import LEVEL_BG, LEVEL_COLORS, level_label


def level_badge(level: str, lang: str = "zh") -> html.Span:
    """Inline level badge with color-coded border."""
    color = LEVEL_COLORS.get(level, "#8b949e")

    return html.Span(
        level_label(level, lang),
        style={
            "fontSize": ".65rem",
            "fontWeight": "700",
            "color": color,
            "backgroundColor": LEVEL_BG.get(level, "transparent"),
            "border": f"1px solid {color}",
            "borderRadius": "4px",
            "padding": "1px 7px",
            "whiteSpace": "nowrap",
        },
    )


def level_dot(level: str, size: int = 10) -> html.Span:
    """Small filled circle in the level colour."""
    return html.Span(
        style={
            "display": "inline-block",
            "width": f"{size}px",
            "height": f"{size}px",
            "borderRadius": "50%",
            "backgroundColor": LEVEL_COLORS.get(level, "#8b949e"),
            "marginRight": "6px",
        },
    )
