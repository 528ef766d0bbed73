"""
config/alarms.py
────────────────
Alarm severity levels, labels, and display configuration.

Severity ordering (ascending): NORMAL < WARNING < DANGER < CRITICAL.
NO_DATA is a sentinel outside the ordering; it scores 0 when aggregating.
"""

from enum import Enum


class AlarmLevel(str, Enum):
    NORMAL = "NORMAL"
    WARNING = "WARNING"
    DANGER = "DANGER"
    CRITICAL = "CRITICAL"
    NO_DATA = "NO_DATA"


# Numeric value used by the weighted node aggregation
LEVEL_VALUE: dict[AlarmLevel, int] = {
    AlarmLevel.NORMAL: 0,
    AlarmLevel.NO_DATA: 0,
    AlarmLevel.WARNING: 1,
    AlarmLevel.DANGER: 2,
    AlarmLevel.CRITICAL: 3,
}

# Inverse of LEVEL_VALUE for the ordered levels
VALUE_LEVEL: dict[int, AlarmLevel] = {
    0: AlarmLevel.NORMAL,
    1: AlarmLevel.WARNING,
    2: AlarmLevel.DANGER,
    3: AlarmLevel.CRITICAL,
}

LEVEL_COLORS: dict[str, str] = {
    AlarmLevel.NORMAL: "#22c55e",
    AlarmLevel.WARNING: "#facc15",
    AlarmLevel.DANGER: "#f97316",
    AlarmLevel.CRITICAL: "#ef4444",
    AlarmLevel.NO_DATA: "#94a3b8",
}

LEVEL_BG: dict[str, str] = {
    AlarmLevel.NORMAL: "rgba(34,197,94,0.12)",
    AlarmLevel.WARNING: "rgba(250,204,21,0.12)",
    AlarmLevel.DANGER: "rgba(249,115,22,0.12)",
    AlarmLevel.CRITICAL: "rgba(239,68,68,0.12)",
    AlarmLevel.NO_DATA: "rgba(148,163,184,0.12)",
}

LEVEL_LABELS_ZH: dict[str, str] = {
    AlarmLevel.NORMAL: "正常",
    AlarmLevel.WARNING: "一级",
    AlarmLevel.DANGER: "二级",
    AlarmLevel.CRITICAL: "三级",
    AlarmLevel.NO_DATA: "无数据",
}

LEVEL_LABELS_EN: dict[str, str] = {
    AlarmLevel.NORMAL: "Normal",
    AlarmLevel.WARNING: "Warning",
    AlarmLevel.DANGER: "Danger",
    AlarmLevel.CRITICAL: "Critical",
    AlarmLevel.NO_DATA: "No data",
}

# Severity ordering for sorting (higher = more severe)
SEVERITY_ORDER: dict[str, int] = {
    AlarmLevel.CRITICAL: 4,
    AlarmLevel.DANGER: 3,
    AlarmLevel.WARNING: 2,
    AlarmLevel.NORMAL: 1,
    AlarmLevel.NO_DATA: 0,
}

ALL_LEVELS: list[AlarmLevel] = [
    AlarmLevel.NORMAL,
    AlarmLevel.WARNING,
    AlarmLevel.DANGER,
    AlarmLevel.CRITICAL,
    AlarmLevel.NO_DATA,
]


def level_label(level: str, lang: str = "zh") -> str:
    labels = LEVEL_LABELS_ZH if lang == "zh" else LEVEL_LABELS_EN
    return labels.get(level, str(level))


MAX_ALARMS_DISPLAY = 100
