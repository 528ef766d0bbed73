"""
src/analytics/classifier.py
────────────────────────────
Partial-discharge alarm classification.

Provides:
  - Per-channel classification against the (frequency, amplitude) cut-off tables
  - Weighted node-level aggregation across the channels of one sensor node
  - Trend-point level (worst channel) and threshold lines for Plotly overlays

Node aggregation rule:
  weighted_sum = Σ level_value × channel_weight   (offline channels add 0)
  weighted_sum < 0.5          → NORMAL
  2+ alarming channels        → worst channel level
  exactly 1 alarming channel  → worst channel level, one step down

Everything here is total: unknown channel types fall back to the HFCT table
and default weight, and nothing raises.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Protocol

from config.alarms import LEVEL_LABELS_EN, LEVEL_LABELS_ZH, LEVEL_VALUE, VALUE_LEVEL, AlarmLevel
from config.channels import (
    ALARM_RULES,
    CHANNEL_CONFIG,
    CHANNEL_WEIGHTS,
    DEFAULT_RULES_TYPE,
    DEFAULT_WEIGHT,
    NODE_ALARM_FLOOR,
    POINT_LEVEL_CHANNELS,
    RULE_ALIASES,
    ChannelRules,
)

logger = logging.getLogger("pd.classifier")

_warned_types: set[str] = set()


class Reading(Protocol):
    channel_type: str
    amplitude: float
    frequency: float
    is_online: bool


@dataclass(frozen=True)
class NodeStatus:
    label: str
    level: AlarmLevel
    weighted_sum: float = 0.0
    alarm_count: int = 0

    @property
    def label_en(self) -> str:
        return LEVEL_LABELS_EN[self.level]


def _warn_unknown_type(channel_type: str) -> None:
    if channel_type not in _warned_types:
        _warned_types.add(channel_type)
        logger.warning(
            "Unknown channel type %r, falling back to %s thresholds and weight %.2f",
            channel_type, DEFAULT_RULES_TYPE, DEFAULT_WEIGHT,
        )


# ── Tables ────────────────────────────────────────────────────────────────────

def get_channel_rules(channel_type: str) -> ChannelRules:
    """Return the cut-off table for a channel type (HFCT table when unknown)."""
    key = RULE_ALIASES.get(channel_type, channel_type)
    rules = ALARM_RULES.get(key)
    if rules is None:
        _warn_unknown_type(channel_type)
        return ALARM_RULES[DEFAULT_RULES_TYPE]
    return rules


def channel_weight(channel_type: str) -> float:
    """Aggregation weight of a channel type (0.3 when unknown)."""
    weight = CHANNEL_WEIGHTS.get(channel_type)
    if weight is None:
        _warn_unknown_type(channel_type)
        return DEFAULT_WEIGHT
    return weight


# ── Per-channel ───────────────────────────────────────────────────────────────

def classify_channel(channel_type: str, amplitude: float, frequency: float) -> AlarmLevel:
    """
    Classify one channel reading.

    Checks CRITICAL, then DANGER, then WARNING; a level triggers only when
    frequency AND amplitude are both strictly above its cut-offs.

    Returns: NORMAL | WARNING | DANGER | CRITICAL
    """
    rules = get_channel_rules(channel_type)
    for level, cutoff in (
        (AlarmLevel.CRITICAL, rules.critical),
        (AlarmLevel.DANGER, rules.danger),
        (AlarmLevel.WARNING, rules.warning),
    ):
        if frequency > cutoff.freq and amplitude > cutoff.amp:
            return level
    return AlarmLevel.NORMAL


def reading_level(reading: Reading) -> AlarmLevel:
    """Level of a reading, NO_DATA when the channel is offline."""
    if not reading.is_online:
        return AlarmLevel.NO_DATA
    return classify_channel(reading.channel_type, reading.amplitude, reading.frequency)


# ── Node aggregation ──────────────────────────────────────────────────────────

def compute_node_status(channels: Iterable[Reading]) -> NodeStatus:
    """
    Combine the channels of one sensor node into a single status.

    A single alarming channel is downgraded by one step; two or more keep
    the worst level as-is. A node whose channels are all offline (or which
    has no channels) reports NO_DATA.
    """
    channels = list(channels)
    levels = [reading_level(ch) for ch in channels]

    if all(lv == AlarmLevel.NO_DATA for lv in levels):
        return NodeStatus(label=LEVEL_LABELS_ZH[AlarmLevel.NO_DATA], level=AlarmLevel.NO_DATA)

    weighted_sum = 0.0
    alarm_count = 0
    max_value = 0

    for ch, lv in zip(channels, levels):
        value = LEVEL_VALUE[lv]
        weighted_sum += value * channel_weight(ch.channel_type)
        if value > 0:
            alarm_count += 1
            max_value = max(max_value, value)

    if weighted_sum < NODE_ALARM_FLOOR:
        final_value = 0
    elif alarm_count >= 2:
        final_value = max_value
    else:
        final_value = max(0, max_value - 1)

    level = VALUE_LEVEL[final_value]
    return NodeStatus(
        label=LEVEL_LABELS_ZH[level],
        level=level,
        weighted_sum=round(weighted_sum, 4),
        alarm_count=alarm_count,
    )


# ── Trend points ──────────────────────────────────────────────────────────────

def worst_level(levels: Iterable[AlarmLevel]) -> AlarmLevel:
    """Highest ordered level; NO_DATA counts as NORMAL."""
    return VALUE_LEVEL[max((LEVEL_VALUE[lv] for lv in levels), default=0)]


def point_level(point: Mapping, channels: Iterable[str] = POINT_LEVEL_CHANNELS) -> AlarmLevel:
    """
    Worst level of a trend point (dict / pandas row with *_amp / *_freq keys).

    HFCT is left out by default: its quiet band overlaps the HFCT warning pair.
    """
    levels = []
    for ch in channels:
        cfg = CHANNEL_CONFIG[ch]
        levels.append(classify_channel(ch, float(point[cfg["amp_key"]]), float(point[cfg["freq_key"]])))
    return worst_level(levels)


# ── Chart helpers ─────────────────────────────────────────────────────────────

def get_threshold_lines(channel_type: str) -> list[dict]:
    """Amplitude / frequency cut-offs per level, for chart overlays."""
    rules = get_channel_rules(channel_type)
    return [
        {"level": AlarmLevel.WARNING, "amp": rules.warning.amp, "freq": rules.warning.freq},
        {"level": AlarmLevel.DANGER, "amp": rules.danger.amp, "freq": rules.danger.freq},
        {"level": AlarmLevel.CRITICAL, "amp": rules.critical.amp, "freq": rules.critical.freq},
    ]
