"""
config/channels.py
──────────────────
Sensing channel definitions, alarm cut-offs and aggregation weights.

Each channel type has three (frequency, amplitude) cut-off pairs, one per
non-normal severity. A level triggers only when BOTH values are strictly
above its pair:

  UHF   WARNING 30 / 40.0   DANGER 90 / 55.0   CRITICAL 150 / 66.0
  TEV   WARNING 30 / 40.0   DANGER 90 / 54.0   CRITICAL 150 / 70.0
  AE    WARNING 30 / 30.0   DANGER 90 / 40.0   CRITICAL 150 / 50.0
  HFCT  WARNING 30 / 35.0   DANGER 90 / 50.0   CRITICAL 150 / 60.0

Amplitude in dBmV, frequency in pulses per second.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Cutoff:
    """A (frequency, amplitude) pair; both must be strictly exceeded."""
    freq: float
    amp: float


@dataclass(frozen=True)
class ChannelRules:
    warning: Cutoff
    danger: Cutoff
    critical: Cutoff


# ── Classification cut-offs ───────────────────────────────────────────────────
ALARM_RULES: dict[str, ChannelRules] = {
    "UHF": ChannelRules(
        warning=Cutoff(freq=30, amp=40.0),
        danger=Cutoff(freq=90, amp=55.0),
        critical=Cutoff(freq=150, amp=66.0),
    ),
    "TEV": ChannelRules(
        warning=Cutoff(freq=30, amp=40.0),
        danger=Cutoff(freq=90, amp=54.0),
        critical=Cutoff(freq=150, amp=70.0),
    ),
    "AE": ChannelRules(
        warning=Cutoff(freq=30, amp=30.0),
        danger=Cutoff(freq=90, amp=40.0),
        critical=Cutoff(freq=150, amp=50.0),
    ),
    "HFCT": ChannelRules(
        warning=Cutoff(freq=30, amp=35.0),
        danger=Cutoff(freq=90, amp=50.0),
        critical=Cutoff(freq=150, amp=60.0),
    ),
}

# Numbered HFCT channels share the HFCT table
RULE_ALIASES: dict[str, str] = {
    "HFCT1": "HFCT",
    "HFCT2": "HFCT",
}

DEFAULT_RULES_TYPE = "HFCT"


# ── Aggregation weights ───────────────────────────────────────────────────────
CHANNEL_WEIGHTS: dict[str, float] = {
    "UHF": 0.2,
    "TEV": 0.45,
    "AE": 0.35,
    "HFCT": 0.3,
    "HFCT1": 0.3,
    "HFCT2": 0.3,
}

DEFAULT_WEIGHT = 0.3

# Weighted sum below this floor keeps a node NORMAL
NODE_ALARM_FLOOR = 0.5


# ── Display metadata ──────────────────────────────────────────────────────────
CHANNEL_CONFIG: dict[str, dict] = {
    "UHF": {"label": "UHF", "color": "#38bdf8", "amp_key": "uhf_amp", "freq_key": "uhf_freq"},
    "TEV": {"label": "TEV", "color": "#c084fc", "amp_key": "tev_amp", "freq_key": "tev_freq"},
    "HFCT": {"label": "HFCT", "color": "#2563eb", "amp_key": "hfct_amp", "freq_key": "hfct_freq"},
    "AE": {"label": "AE", "color": "#ec4899", "amp_key": "ae_amp", "freq_key": "ae_freq"},
}

CHANNEL_TYPES = list(CHANNEL_CONFIG.keys())

# Channels that decide the level of a single trend point
POINT_LEVEL_CHANNELS = ("UHF", "TEV", "AE")

AMP_UNIT = "dBmV"
FREQ_UNIT = "次/秒"
