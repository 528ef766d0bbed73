"""
src/data/simulator.py
─────────────────────
Synthetic partial-discharge data generator for the GIS bays.

Generates:
  - A live snapshot of the four sensors on a bay, correlated with an
    optional internal PD source (closer sensors see stronger discharge)
  - Sensor nodes (2 channels each) for the weighted node status
  - 15-minute trend series from bounded random walks, with discharge spikes
  - Alarm events from level crossings in a trend series

Design:
  - Every bay is seeded from the character codes of its id, so a bay
    always shows the same fault zone and offline location
  - Statuses are never assigned here; they are derived from the values
    by src.analytics.classifier
"""
from __future__ import annotations

import math
import uuid
from datetime import UTC, datetime, timedelta

import numpy as np
import pandas as pd

from config.alarms import LEVEL_LABELS_ZH, LEVEL_VALUE, AlarmLevel
from config.channels import AMP_UNIT, CHANNEL_CONFIG, FREQ_UNIT, POINT_LEVEL_CHANNELS
from config.settings import settings
from config.sites import (
    DEVICES,
    MEDIUM_DISTANCE,
    NEAR_DISTANCE,
    NODE_CHUNK_SIZE,
    OFFLINE_LOCATIONS,
    PD_ZONES,
    SENSOR_TEMPLATE,
)
from src.analytics.classifier import classify_channel
from src.analytics.statistics import compute_device_status
from src.data.models import (
    AlarmEvent,
    DeviceSummary,
    PDSource,
    SensorNode,
    SensorReading,
    TrendPoint,
)

RANGE_HOURS: dict[str, int] = {
    "24h": 24,
    "7d": 7 * 24,
    "1m": 30 * 24,
}

# Random-walk bounds per trend column: (min, max, volatility)
WALK_BOUNDS: dict[str, tuple[float, float, float]] = {
    "uhf_amp": (15.0, 65.0, 5.0),
    "tev_amp": (20.0, 80.0, 10.0),
    "hfct_amp": (30.0, 60.0, 4.0),
    "ae_amp": (5.0, 20.0, 2.0),
    "uhf_freq": (20.0, 150.0, 20.0),
    "tev_freq": (50.0, 300.0, 40.0),
    "hfct_freq": (10.0, 50.0, 10.0),
    "ae_freq": (0.0, 20.0, 3.0),
}

# Spike probability per sample
SPIKE_CHANCE_DANGER = 0.15
SPIKE_CHANCE_NORMAL = 0.02

NODE_NAMES = ("GIS本体综合监测终端", "电缆终端监测节点")


def device_seed(device_id: str) -> int:
    """Sum of the character code points of an id."""
    return sum(ord(c) for c in device_id)


def realtime_rng(device_id: str) -> np.random.Generator:
    """Generator that changes once a minute, for live-looking snapshots."""
    minute = int(datetime.now(tz=UTC).timestamp()) // 60
    return np.random.default_rng(device_seed(device_id) + minute % 10_000)


def _distance(p1: tuple[float, float, float], p2: tuple[float, float, float]) -> float:
    return math.dist(p1, p2)


def _place_pd_source(seed: int) -> PDSource:
    zone = PD_ZONES[seed % len(PD_ZONES)]
    x = zone["min_x"] + (seed * 17) % (zone["max_x"] - zone["min_x"])
    y = zone["min_y"] + (seed * 13) % (zone["max_y"] - zone["min_y"])
    return PDSource(
        position3d=(float(x), float(y), float(zone["z"])),
        location_name=zone["name"],
        intensity=float(80 + seed % 20),
    )


# ── Live snapshot ─────────────────────────────────────────────────────────────

def simulate_device(
    device_id: str,
    faulty: bool = False,
    offline: bool = False,
    rng: np.random.Generator | None = None,
    now: datetime | None = None,
) -> tuple[list[SensorReading], PDSource | None]:
    """
    Simulate the current readings of the four sensors on a bay.

    Args:
        device_id: Bay id; seeds zone choice, offline location and base variance
        faulty: Place an internal PD source in the bay
        offline: Take every sensor offline
        rng: Generator for the discharge boost; seeded from the id if None
        now: Snapshot timestamp

    Returns:
        (sensors, pd_source) where pd_source is None for healthy bays
    """
    seed = device_seed(device_id)
    rng = rng if rng is not None else np.random.default_rng(seed)
    ts = now or datetime.now(tz=UTC).replace(second=0, microsecond=0)

    # ~20% of bays lose one sensor location
    offline_location = None
    if seed % 5 == 0:
        offline_location = OFFLINE_LOCATIONS[0] if seed % 2 == 0 else OFFLINE_LOCATIONS[1]

    pd_source = _place_pd_source(seed) if faulty else None

    sensors: list[SensorReading] = []
    for index, tpl in enumerate(SENSOR_TEMPLATE):
        is_online = not offline and tpl["location"] != offline_location
        amp = tpl["amplitude"] + seed % 10
        freq = tpl["frequency"] + seed % 20

        if is_online and pd_source is not None:
            dist = _distance(tpl["position3d"], pd_source.position3d)
            if dist < NEAR_DISTANCE:
                amp += 40 + rng.uniform(0, 20)
                freq += 200 + rng.uniform(0, 300)
            elif dist < MEDIUM_DISTANCE:
                amp += 15 + rng.uniform(0, 10)
                freq += 50 + rng.uniform(0, 50)
        elif is_online and (seed + index) % 10 == 0:
            # localized background noise
            amp += 10

        if not is_online:
            amp, freq = 0.0, 0.0

        sensors.append(SensorReading(
            id=f"{device_id}-{tpl['key']}",
            name=tpl["name"],
            sn=tpl["sn"],
            channel_type=tpl["channel_type"],
            location=tpl["location"],
            amplitude=float(math.floor(amp)),
            frequency=float(math.floor(freq)),
            is_online=is_online,
            unit=AMP_UNIT,
            freq_unit=FREQ_UNIT,
            position3d=tpl["position3d"],
            timestamp=ts,
        ))

    return sensors, pd_source


def group_into_nodes(sensors: list[SensorReading], chunk_size: int = NODE_CHUNK_SIZE) -> list[SensorNode]:
    """Split a bay's sensors into physical nodes of `chunk_size` channels."""
    nodes: list[SensorNode] = []
    for i in range(0, len(sensors), chunk_size):
        node_index = i // chunk_size + 1
        nodes.append(SensorNode(
            id=f"node-{i}",
            name=NODE_NAMES[0] if i == 0 else NODE_NAMES[1],
            sn=f"S-{node_index:02d}",
            channels=sensors[i:i + chunk_size],
        ))
    return nodes


def summarize_device(
    device: dict,
    sensors: list[SensorReading],
    nodes: list[SensorNode],
    trend: pd.DataFrame | None = None,
) -> DeviceSummary:
    """Build a dashboard card for a bay from its live snapshot and recent trend."""
    by_type = {s.channel_type: s for s in sensors}

    def _amp_freq(channel: str) -> tuple[float, float]:
        s = by_type.get(channel)
        return (s.amplitude, s.frequency) if s is not None else (0.0, 0.0)

    uhf = _amp_freq("UHF")
    tev = _amp_freq("TEV")
    hfct = _amp_freq("HFCT")
    ae = _amp_freq("AE")

    if trend is not None and not trend.empty:
        last = trend.iloc[-1]
        temp = round(float(last["temperature"]), 1)
        humidity = float(np.clip(round(float(last["humidity"]), 1), 0.0, 100.0))
        sparkline = [round(float(v), 2) for v in trend["tev_amp"].tail(30)]
    else:
        temp, humidity, sparkline = 0.0, 0.0, []

    last_updated = max((s.timestamp for s in sensors), default=datetime.now(tz=UTC))

    return DeviceSummary(
        id=device["id"],
        project_id=device["project_id"],
        name=device["name"],
        station=device.get("station", ""),
        status=compute_device_status([n.status.level for n in nodes]),
        last_updated=last_updated,
        uhf_amp=uhf[0], uhf_freq=uhf[1],
        tev_amp=tev[0], tev_freq=tev[1],
        hfct_amp=hfct[0], hfct_freq=hfct[1],
        ae_amp=ae[0], ae_freq=ae[1],
        temp=temp,
        humidity=humidity,
        trend=sparkline,
    )


def device_flags(device_id: str) -> tuple[bool, bool]:
    """(faulty, offline) for a catalogue bay; bays added later are healthy."""
    for d in DEVICES:
        if d["id"] == device_id:
            return d["faulty"], d["offline"]
    return False, False


def live_snapshot(
    device: dict,
    trend: pd.DataFrame | None = None,
) -> tuple[list[SensorReading], PDSource | None, list[SensorNode], DeviceSummary]:
    """Current sensors, PD source, nodes and dashboard card for one bay."""
    faulty, offline = device_flags(device["id"])
    sensors, source = simulate_device(
        device["id"], faulty=faulty, offline=offline, rng=realtime_rng(device["id"]),
    )
    nodes = group_into_nodes(sensors)
    return sensors, source, nodes, summarize_device(device, sensors, nodes, trend)


# ── Trend series ──────────────────────────────────────────────────────────────

def _walk(value: float, column: str, rng: np.random.Generator) -> float:
    lo, hi, vol = WALK_BOUNDS[column]
    return float(np.clip(value + (rng.random() - 0.5) * vol, lo, hi))


def _is_danger_sensor(sensor_id: str) -> bool:
    return "s-203" in sensor_id.lower() or "s3" in sensor_id


def generate_trend(
    sensor_id: str,
    time_range: str = "24h",
    start: datetime | None = None,
    end: datetime | None = None,
    rng: np.random.Generator | None = None,
    danger: bool | None = None,
    now: datetime | None = None,
) -> list[TrendPoint]:
    """
    Generate a 15-minute trend series for one sensor / bay.

    Args:
        sensor_id: Seeds the starting values of every walk
        time_range: "24h" | "7d" | "1m" | "custom"
        start, end: Bounds for "custom" (at least 4 points)
        rng: Generator for walks and spikes; seeded from the id if None
        danger: Force the frequent-spike profile; inferred from the id if None
        now: End of the non-custom ranges

    Returns:
        Chronological list of TrendPoint
    """
    seed = device_seed(sensor_id)
    rng = rng if rng is not None else np.random.default_rng(seed)
    interval = timedelta(minutes=settings.SAMPLE_INTERVAL_MIN)
    now = now or datetime.now(tz=UTC).replace(second=0, microsecond=0)

    if time_range == "custom" and start is not None and end is not None:
        start_ts = start
        n_points = max(4, int((end - start) / interval))
    else:
        hours = RANGE_HOURS.get(time_range, 24)
        start_ts = now - timedelta(hours=hours)
        n_points = hours * 60 // settings.SAMPLE_INTERVAL_MIN

    if danger is None:
        danger = _is_danger_sensor(sensor_id)
    spike_chance = SPIKE_CHANCE_DANGER if danger else SPIKE_CHANCE_NORMAL

    state = {
        "uhf_amp": 20.0 + seed % 15,
        "tev_amp": 25.0 + seed % 20,
        "hfct_amp": 30.0 + seed % 10,
        "ae_amp": 8.0 + seed % 5,
        "uhf_freq": 40.0 + seed % 30,
        "tev_freq": 80.0 + seed % 50,
        "hfct_freq": 15.0 + seed % 10,
        "ae_freq": 2.0 + seed % 3,
    }

    points: list[TrendPoint] = []
    for i in range(n_points):
        for column in state:
            state[column] = _walk(state[column], column, rng)

        is_spike = bool(rng.random() < spike_chance)
        out = dict(state)

        if is_spike and danger:
            # Sustained discharge: the walk continues from the spike
            severity = rng.random()
            if severity > 0.7:
                amp_base = {"uhf": 68.0, "tev": 72.0, "ae": 52.0}
                freq_base, freq_span = 160.0, 50.0
            elif severity > 0.4:
                amp_base = {"uhf": 58.0, "tev": 56.0, "ae": 42.0}
                freq_base, freq_span = 100.0, 40.0
            else:
                amp_base = {"uhf": 42.0, "tev": 42.0, "ae": 32.0}
                freq_base, freq_span = 40.0, 40.0
            for ch, base in amp_base.items():
                state[f"{ch}_amp"] = base + rng.random() * 5
                state[f"{ch}_freq"] = freq_base + rng.random() * freq_span
            out = dict(state)
        elif is_spike:
            # Transient: shows in the sample only
            out["uhf_amp"] += rng.random() * 15
            out["tev_amp"] += rng.random() * 25
            out["tev_freq"] += 150

        phase = i / n_points * math.pi * 2
        points.append(TrendPoint(
            timestamp=start_ts + i * interval,
            **{k: round(v, 3) for k, v in out.items()},
            temperature=round(20 + math.sin(phase) * 5 + rng.random(), 2),
            humidity=round(50 + math.cos(phase) * 10 + rng.random(), 2),
            is_spike=is_spike,
        ))

    return points


def generate_history(
    seed: int = settings.SIMULATION_SEED,
    days: int = settings.HISTORY_DAYS,
) -> dict[str, list[TrendPoint]]:
    """
    Generate `days` of 15-minute history for every bay.
    Offline bays get an empty series. Returns dict keyed by device id.
    """
    rng = np.random.default_rng(seed)
    end = datetime.now(tz=UTC).replace(minute=0, second=0, microsecond=0)
    start = end - timedelta(days=days)

    history: dict[str, list[TrendPoint]] = {}
    for device in DEVICES:
        if device["offline"]:
            history[device["id"]] = []
            continue
        history[device["id"]] = generate_trend(
            device["id"], "custom", start=start, end=end, rng=rng, danger=device["faulty"],
        )
    return history


# ── Alarms ────────────────────────────────────────────────────────────────────

def derive_alarms(points: list[TrendPoint], device_id: str) -> list[AlarmEvent]:
    """
    Scan a trend series and emit alarm events.

    One event when a channel leaves NORMAL, and another each time the
    episode escalates to a higher level. Returning to NORMAL closes it.
    """
    alarms: list[AlarmEvent] = []
    active: dict[str, int] = {}  # channel → highest level value in current episode

    for point in points:
        for channel in POINT_LEVEL_CHANNELS:
            cfg = CHANNEL_CONFIG[channel]
            amp = getattr(point, cfg["amp_key"])
            freq = getattr(point, cfg["freq_key"])
            level = classify_channel(channel, amp, freq)
            value = LEVEL_VALUE[level]

            if value == 0:
                active[channel] = 0
                continue
            if value <= active.get(channel, 0):
                continue

            active[channel] = value
            alarms.append(AlarmEvent(
                id=str(uuid.uuid4()),
                timestamp=point.timestamp,
                device_id=device_id,
                channel=channel,
                level=level,
                amplitude=round(amp, 2),
                frequency=round(freq, 2),
                message=(
                    f"{device_id} {channel}: {amp:.1f} {AMP_UNIT} / {freq:.0f} {FREQ_UNIT} "
                    f"({LEVEL_LABELS_ZH[level]})"
                ),
            ))

    return alarms


def to_dataframe(points: list[TrendPoint]) -> pd.DataFrame:
    """Convert a list of TrendPoints to a pandas DataFrame."""
    df = pd.DataFrame([p.model_dump() for p in points])
    if not df.empty:
        df["level"] = df["level"].map(lambda lv: AlarmLevel(lv).value)
    return df
