"""
src/data/store.py
─────────────────
SQLite data store abstraction.

Provides:
  - initialize_db()          : Create tables + seed catalogue and history on first run
  - projects / devices / IPCs / sensors CRUD, with cascading deletes
  - export_project_config()  : One project's devices, sensors and IPCs as a JSON bundle
  - import_project_config()  : Upsert such a bundle back in, all or nothing
  - insert_trend_points()    : Bulk insert TrendPoint rows for a device
  - get_trend()              : Fetch a device's stored trend for a time window
  - get_trend_window()       : Same, with the part before stored history simulated
  - insert_alarms()          : Bulk insert AlarmEvent rows
  - get_alarms()             : Fetch recent alarms with filters
  - acknowledge_alarm()      : Mark an alarm as acknowledged

Thread safety: uses check_same_thread=False + a module-level lock.
"""
from __future__ import annotations

import json
import logging
import sqlite3
import threading
import uuid
from datetime import UTC, datetime, timedelta

import numpy as np
import pandas as pd

from config.settings import settings
from config.sites import DEVICE_TYPES
from src.data.models import IPC, AlarmEvent, Device, Project, Sensor, SensorChannel, TrendPoint

logger = logging.getLogger("pd.store")

_lock = threading.RLock()
_DB: sqlite3.Connection | None = None

CONFIG_BUNDLE_VERSION = "1.0"


# ── Connection ────────────────────────────────────────────────────────────────

def _get_conn() -> sqlite3.Connection:
    global _DB
    if _DB is None:
        _DB = sqlite3.connect(settings.DATABASE_URL, check_same_thread=False)
        _DB.row_factory = sqlite3.Row
    return _DB


def close_db() -> None:
    """Close the shared connection; the next call reopens it (fresh for :memory:)."""
    global _DB
    with _lock:
        if _DB is not None:
            _DB.close()
            _DB = None


# ── Schema ────────────────────────────────────────────────────────────────────

_CREATE_PROJECTS = """
CREATE TABLE IF NOT EXISTS projects (
    id           TEXT PRIMARY KEY,
    name         TEXT NOT NULL,
    type         TEXT NOT NULL,
    description  TEXT NOT NULL DEFAULT '',
    created_at   TEXT NOT NULL
);
"""

_CREATE_DEVICES = """
CREATE TABLE IF NOT EXISTS devices (
    id           TEXT PRIMARY KEY,
    project_id   TEXT NOT NULL,
    name         TEXT NOT NULL,
    device_type  TEXT NOT NULL,
    station      TEXT NOT NULL DEFAULT '',
    description  TEXT NOT NULL DEFAULT ''
);
"""

_CREATE_IPCS = """
CREATE TABLE IF NOT EXISTS ipcs (
    id           TEXT PRIMARY KEY,
    sn           TEXT NOT NULL,
    name         TEXT NOT NULL,
    ip           TEXT NOT NULL,
    description  TEXT NOT NULL DEFAULT ''
);
"""

_CREATE_SENSORS = """
CREATE TABLE IF NOT EXISTS sensors (
    id           TEXT PRIMARY KEY,
    project_id   TEXT NOT NULL,
    device_id    TEXT NOT NULL,
    ipc_id       TEXT NOT NULL DEFAULT '',
    sn           TEXT NOT NULL,
    name         TEXT NOT NULL,
    model        TEXT NOT NULL DEFAULT '',
    channels     TEXT NOT NULL,
    description  TEXT NOT NULL DEFAULT ''
);
"""

_CREATE_TREND = """
CREATE TABLE IF NOT EXISTS trend_points (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    device_id    TEXT NOT NULL,
    timestamp    TEXT NOT NULL,
    uhf_amp      REAL NOT NULL,
    uhf_freq     REAL NOT NULL,
    tev_amp      REAL NOT NULL,
    tev_freq     REAL NOT NULL,
    hfct_amp     REAL NOT NULL,
    hfct_freq    REAL NOT NULL,
    ae_amp       REAL NOT NULL,
    ae_freq      REAL NOT NULL,
    temperature  REAL NOT NULL,
    humidity     REAL NOT NULL,
    is_spike     INTEGER NOT NULL DEFAULT 0,
    level        TEXT NOT NULL DEFAULT 'NORMAL'
);
"""

_CREATE_ALARMS = """
CREATE TABLE IF NOT EXISTS alarms (
    id             TEXT PRIMARY KEY,
    timestamp      TEXT NOT NULL,
    device_id      TEXT NOT NULL,
    channel        TEXT NOT NULL,
    level          TEXT NOT NULL,
    amplitude      REAL NOT NULL,
    frequency      REAL NOT NULL,
    message        TEXT NOT NULL,
    acknowledged   INTEGER NOT NULL DEFAULT 0
);
"""

_CREATE_IDX = """
CREATE INDEX IF NOT EXISTS idx_trend_dev_ts  ON trend_points (device_id, timestamp);
CREATE INDEX IF NOT EXISTS idx_alarms_dev_ts ON alarms       (device_id, timestamp);
CREATE INDEX IF NOT EXISTS idx_devices_proj  ON devices      (project_id);
CREATE INDEX IF NOT EXISTS idx_sensors_dev   ON sensors      (device_id);
CREATE INDEX IF NOT EXISTS idx_sensors_ipc   ON sensors      (ipc_id);
"""

_TREND_COLUMNS = (
    "uhf_amp", "uhf_freq", "tev_amp", "tev_freq", "hfct_amp", "hfct_freq",
    "ae_amp", "ae_freq", "temperature", "humidity",
)

_TABLES = ("projects", "devices", "ipcs", "sensors", "trend_points", "alarms")


def _create_tables(conn: sqlite3.Connection) -> None:
    with conn:
        conn.executescript(
            _CREATE_PROJECTS + _CREATE_DEVICES + _CREATE_IPCS + _CREATE_SENSORS
            + _CREATE_TREND + _CREATE_ALARMS + _CREATE_IDX
        )


# ── Row helpers ───────────────────────────────────────────────────────────────

def _project_row(p: Project) -> dict:
    return {**p.model_dump(), "created_at": p.created_at.isoformat()}


def _ipc_row(i: IPC) -> dict:
    return {**i.model_dump(), "ip": str(i.ip)}


def _sensor_row(s: Sensor) -> dict:
    data = s.model_dump()
    data["channels"] = json.dumps(data["channels"], ensure_ascii=False)
    return data


def _insert(conn: sqlite3.Connection, table: str, row: dict, upsert: bool = False) -> None:
    sql = f"INSERT INTO {table} ({', '.join(row)}) VALUES ({', '.join('?' * len(row))})"
    if upsert:
        # Keeps the rowid, so list order survives a re-import
        sql += " ON CONFLICT(id) DO UPDATE SET " + ", ".join(f"{c} = excluded.{c}" for c in row if c != "id")
    conn.execute(sql, tuple(row.values()))


def _update(conn: sqlite3.Connection, table: str, row: dict) -> None:
    columns = [c for c in row if c != "id"]
    conn.execute(
        f"UPDATE {table} SET {', '.join(f'{c} = ?' for c in columns)} WHERE id = ?",
        (*(row[c] for c in columns), row["id"]),
    )


def _save(table: str, row: dict, update: bool = False) -> None:
    conn = _get_conn()
    with _lock, conn:
        if update:
            _update(conn, table, row)
        else:
            _insert(conn, table, row)


# ── Seeding ───────────────────────────────────────────────────────────────────

def initialize_db(force_reseed: bool = False) -> None:
    """
    Create tables and populate with the site catalogue and simulated
    history if the DB is empty. Safe to call multiple times (idempotent).
    """
    # Import here to avoid circular deps
    from config.sites import DEVICES, NODE_CHUNK_SIZE, PROJECTS, SENSOR_TEMPLATE
    from src.data.simulator import NODE_NAMES, derive_alarms, generate_history

    conn = _get_conn()
    _create_tables(conn)

    with _lock:
        count = conn.execute("SELECT COUNT(*) FROM projects").fetchone()[0]
        if count > 0 and not force_reseed:
            return  # Already seeded

        with conn:
            for table in _TABLES:
                conn.execute(f"DELETE FROM {table}")

        created = datetime.now(tz=UTC)
        for p in PROJECTS:
            _save("projects", _project_row(Project(created_at=created, **p)))

        for index, d in enumerate(DEVICES):
            _save("devices", Device(
                id=d["id"], project_id=d["project_id"], name=d["name"],
                device_type=d["device_type"], station=d["station"], description=d["description"],
            ).model_dump())

            # One collector PC per bay
            ipc = IPC(
                id=f"ipc-{d['id']}",
                sn=f"IPC-{index + 1:03d}",
                name=f"{d['station']} 工控机 {index + 1:02d}",
                ip=f"192.168.1.{101 + index}",
            )
            _save("ipcs", _ipc_row(ipc))

            for i in range(0, len(SENSOR_TEMPLATE), NODE_CHUNK_SIZE):
                node_index = i // NODE_CHUNK_SIZE + 1
                chunk = SENSOR_TEMPLATE[i:i + NODE_CHUNK_SIZE]
                _save("sensors", _sensor_row(Sensor(
                    id=f"{d['id']}-S-{node_index:02d}",
                    project_id=d["project_id"],
                    device_id=d["id"],
                    ipc_id=ipc.id,
                    sn=f"S-{node_index:02d}",
                    name=NODE_NAMES[0] if i == 0 else NODE_NAMES[1],
                    model="PD-MON-4",
                    channels=[SensorChannel(type=t["channel_type"], location=t["location"]) for t in chunk],
                )))

        history = generate_history()
        n_alarms = 0
        for device_id, points in history.items():
            insert_trend_points(device_id, points)
            alarms = derive_alarms(points, device_id)
            insert_alarms(alarms)
            n_alarms += len(alarms)

        logger.info(
            "Seeded %d projects, %d devices, %d alarms (%d days of history)",
            len(PROJECTS), len(DEVICES), n_alarms, settings.HISTORY_DAYS,
        )


# ── Projects ──────────────────────────────────────────────────────────────────

def list_projects() -> list[Project]:
    conn = _get_conn()
    with _lock:
        rows = conn.execute("SELECT * FROM projects ORDER BY id").fetchall()
    return [Project(**dict(r)) for r in rows]


def get_project(project_id: str) -> Project | None:
    conn = _get_conn()
    with _lock:
        row = conn.execute("SELECT * FROM projects WHERE id = ?", (project_id,)).fetchone()
    return Project(**dict(row)) if row else None


def create_project(name: str, type: str = "变电站", description: str = "") -> Project:
    project = Project(
        id=f"proj-{uuid.uuid4().hex[:8]}",
        name=name,
        type=type,
        description=description,
        created_at=datetime.now(tz=UTC),
    )
    _save("projects", _project_row(project))
    logger.info("Created project %s (%s)", project.id, project.name)
    return project


def update_project(project_id: str, **fields) -> Project:
    current = get_project(project_id)
    if current is None:
        raise KeyError(project_id)
    project = Project(**{**current.model_dump(), **fields, "id": project_id})
    _save("projects", _project_row(project), update=True)
    logger.info("Updated project %s", project_id)
    return project


def delete_project(project_id: str) -> None:
    """Delete a project with its devices, their sensors, trends and alarms. IPCs are shared and stay."""
    if get_project(project_id) is None:
        raise KeyError(project_id)
    conn = _get_conn()
    with _lock, conn:
        device_ids = [
            r["id"] for r in conn.execute("SELECT id FROM devices WHERE project_id = ?", (project_id,))
        ]
        for device_id in device_ids:
            _purge_device(conn, device_id)
        conn.execute("DELETE FROM sensors WHERE project_id = ?", (project_id,))
        conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
    logger.info("Deleted project %s (%d devices)", project_id, len(device_ids))


# ── Devices ───────────────────────────────────────────────────────────────────

def _purge_device(conn: sqlite3.Connection, device_id: str) -> None:
    conn.execute("DELETE FROM sensors WHERE device_id = ?", (device_id,))
    conn.execute("DELETE FROM trend_points WHERE device_id = ?", (device_id,))
    conn.execute("DELETE FROM alarms WHERE device_id = ?", (device_id,))
    conn.execute("DELETE FROM devices WHERE id = ?", (device_id,))


def list_devices(project_id: str | None = None) -> list[Device]:
    conn = _get_conn()
    with _lock:
        if project_id and project_id != "all":
            rows = conn.execute(
                "SELECT * FROM devices WHERE project_id = ? ORDER BY rowid", (project_id,)
            ).fetchall()
        else:
            rows = conn.execute("SELECT * FROM devices ORDER BY rowid").fetchall()
    return [Device(**dict(r)) for r in rows]


def get_device(device_id: str) -> Device | None:
    conn = _get_conn()
    with _lock:
        row = conn.execute("SELECT * FROM devices WHERE id = ?", (device_id,)).fetchone()
    return Device(**dict(row)) if row else None


def create_device(
    project_id: str,
    name: str,
    device_type: str = DEVICE_TYPES[3],
    station: str = "",
    description: str = "",
) -> Device:
    if get_project(project_id) is None:
        raise ValueError(f"Unknown project: {project_id}")
    device = Device(
        id=f"dev-{uuid.uuid4().hex[:8]}",
        project_id=project_id,
        name=name,
        device_type=device_type,
        station=station,
        description=description,
    )
    _save("devices", device.model_dump())
    logger.info("Created device %s in %s", device.id, project_id)
    return device


def update_device(device_id: str, **fields) -> Device:
    current = get_device(device_id)
    if current is None:
        raise KeyError(device_id)
    if "project_id" in fields and get_project(fields["project_id"]) is None:
        raise ValueError(f"Unknown project: {fields['project_id']}")
    device = Device(**{**current.model_dump(), **fields, "id": device_id})
    conn = _get_conn()
    with _lock, conn:
        _update(conn, "devices", device.model_dump())
        conn.execute("UPDATE sensors SET project_id = ? WHERE device_id = ?", (device.project_id, device_id))
    logger.info("Updated device %s", device_id)
    return device


def delete_device(device_id: str) -> None:
    """Delete a device with its sensors, trend and alarms."""
    if get_device(device_id) is None:
        raise KeyError(device_id)
    conn = _get_conn()
    with _lock, conn:
        _purge_device(conn, device_id)
    logger.info("Deleted device %s", device_id)


# ── IPCs ──────────────────────────────────────────────────────────────────────

def list_ipcs(project_id: str | None = None) -> list[IPC]:
    """All IPCs, or only those serving a sensor of `project_id`."""
    conn = _get_conn()
    with _lock:
        if project_id and project_id != "all":
            rows = conn.execute(
                """SELECT * FROM ipcs WHERE id IN
                   (SELECT ipc_id FROM sensors WHERE project_id = ?) ORDER BY rowid""",
                (project_id,),
            ).fetchall()
        else:
            rows = conn.execute("SELECT * FROM ipcs ORDER BY rowid").fetchall()
    return [IPC(**dict(r)) for r in rows]


def get_ipc(ipc_id: str) -> IPC | None:
    conn = _get_conn()
    with _lock:
        row = conn.execute("SELECT * FROM ipcs WHERE id = ?", (ipc_id,)).fetchone()
    return IPC(**dict(row)) if row else None


def create_ipc(sn: str, name: str, ip: str, description: str = "") -> IPC:
    ipc = IPC(id=f"ipc-{uuid.uuid4().hex[:8]}", sn=sn, name=name, ip=ip, description=description)
    _save("ipcs", _ipc_row(ipc))
    logger.info("Created IPC %s (%s)", ipc.id, ipc.ip)
    return ipc


def update_ipc(ipc_id: str, **fields) -> IPC:
    current = get_ipc(ipc_id)
    if current is None:
        raise KeyError(ipc_id)
    ipc = IPC(**{**current.model_dump(), **fields, "id": ipc_id})
    _save("ipcs", _ipc_row(ipc), update=True)
    logger.info("Updated IPC %s", ipc_id)
    return ipc


def delete_ipc(ipc_id: str) -> None:
    """Delete an IPC; sensors it served keep running, unlinked."""
    if get_ipc(ipc_id) is None:
        raise KeyError(ipc_id)
    conn = _get_conn()
    with _lock, conn:
        unlinked = conn.execute("UPDATE sensors SET ipc_id = '' WHERE ipc_id = ?", (ipc_id,)).rowcount
        conn.execute("DELETE FROM ipcs WHERE id = ?", (ipc_id,))
    logger.info("Deleted IPC %s (%d sensors unlinked)", ipc_id, unlinked)


# ── Sensors ───────────────────────────────────────────────────────────────────

def _row_to_sensor(row: sqlite3.Row) -> Sensor:
    data = dict(row)
    data["channels"] = json.loads(data["channels"])
    return Sensor(**data)


def _check_ipc(ipc_id: str) -> None:
    if ipc_id and get_ipc(ipc_id) is None:
        raise ValueError(f"Unknown IPC: {ipc_id}")


def list_sensors(device_id: str | None = None) -> list[Sensor]:
    conn = _get_conn()
    with _lock:
        if device_id:
            rows = conn.execute(
                "SELECT * FROM sensors WHERE device_id = ? ORDER BY id", (device_id,)
            ).fetchall()
        else:
            rows = conn.execute("SELECT * FROM sensors ORDER BY id").fetchall()
    return [_row_to_sensor(r) for r in rows]


def get_sensor(sensor_id: str) -> Sensor | None:
    conn = _get_conn()
    with _lock:
        row = conn.execute("SELECT * FROM sensors WHERE id = ?", (sensor_id,)).fetchone()
    return _row_to_sensor(row) if row else None


def create_sensor(
    device_id: str,
    sn: str,
    name: str,
    channels: list[dict | SensorChannel],
    ipc_id: str = "",
    model: str = "",
    description: str = "",
) -> Sensor:
    """Register a sensor on a device; the project is taken from the device."""
    device = get_device(device_id)
    if device is None:
        raise ValueError(f"Unknown device: {device_id}")
    _check_ipc(ipc_id)
    sensor = Sensor(
        id=f"sen-{uuid.uuid4().hex[:8]}",
        project_id=device.project_id,
        device_id=device_id,
        ipc_id=ipc_id,
        sn=sn,
        name=name,
        model=model,
        channels=channels,
        description=description,
    )
    _save("sensors", _sensor_row(sensor))
    logger.info("Created sensor %s on %s", sensor.id, device_id)
    return sensor


def update_sensor(sensor_id: str, **fields) -> Sensor:
    current = get_sensor(sensor_id)
    if current is None:
        raise KeyError(sensor_id)
    if "device_id" in fields:
        device = get_device(fields["device_id"])
        if device is None:
            raise ValueError(f"Unknown device: {fields['device_id']}")
        fields["project_id"] = device.project_id
    if "ipc_id" in fields:
        _check_ipc(fields["ipc_id"])
    sensor = Sensor(**{**current.model_dump(), **fields, "id": sensor_id})
    _save("sensors", _sensor_row(sensor), update=True)
    logger.info("Updated sensor %s", sensor_id)
    return sensor


def delete_sensor(sensor_id: str) -> None:
    if get_sensor(sensor_id) is None:
        raise KeyError(sensor_id)
    conn = _get_conn()
    with _lock, conn:
        conn.execute("DELETE FROM sensors WHERE id = ?", (sensor_id,))
    logger.info("Deleted sensor %s", sensor_id)


# ── Project config bundles ────────────────────────────────────────────────────

def export_project_config(project_id: str) -> dict:
    """
    JSON-ready bundle of one project: the project, its devices and sensors,
    and the IPCs those sensors report to.
    """
    project = get_project(project_id)
    if project is None:
        raise KeyError(project_id)
    sensors = [s for s in list_sensors() if s.project_id == project_id]
    bundle = {
        "version": CONFIG_BUNDLE_VERSION,
        "exported_at": datetime.now(tz=UTC).isoformat(),
        "project": project.model_dump(mode="json"),
        "devices": [d.model_dump(mode="json") for d in list_devices(project_id)],
        "sensors": [s.model_dump(mode="json") for s in sensors],
        "ipcs": [i.model_dump(mode="json") for i in list_ipcs(project_id)],
    }
    logger.info(
        "Exported config of %s: %d devices, %d sensors, %d IPCs",
        project_id, len(bundle["devices"]), len(bundle["sensors"]), len(bundle["ipcs"]),
    )
    return bundle


def import_project_config(bundle: dict) -> dict[str, int]:
    """
    Upsert a bundle from export_project_config(), matching records by id.

    Every record is validated and every reference (device → project,
    sensor → device, sensor → IPC) resolved against the store plus the bundle
    before anything is written; on any error nothing is imported.

    Returns:
        Number of records written per kind.
    """
    if not isinstance(bundle, dict):
        raise ValueError("Config bundle must be a JSON object")

    project = Project(**bundle["project"]) if bundle.get("project") else None
    ipcs = [IPC(**i) for i in bundle.get("ipcs") or []]
    devices = [Device(**d) for d in bundle.get("devices") or []]

    known_projects = {p.id for p in list_projects()} | ({project.id} if project else set())
    for d in devices:
        if d.project_id not in known_projects:
            raise ValueError(f"Device {d.id} refers to unknown project {d.project_id}")

    device_projects = {d.id: d.project_id for d in list_devices()}
    device_projects.update({d.id: d.project_id for d in devices})
    known_ipcs = {i.id for i in list_ipcs()} | {i.id for i in ipcs}

    sensors: list[Sensor] = []
    for raw in bundle.get("sensors") or []:
        s = Sensor(**raw)
        if s.device_id not in device_projects:
            raise ValueError(f"Sensor {s.id} refers to unknown device {s.device_id}")
        if s.ipc_id and s.ipc_id not in known_ipcs:
            raise ValueError(f"Sensor {s.id} refers to unknown IPC {s.ipc_id}")
        sensors.append(s.model_copy(update={"project_id": device_projects[s.device_id]}))

    conn = _get_conn()
    with _lock, conn:
        if project is not None:
            _insert(conn, "projects", _project_row(project), upsert=True)
        for i in ipcs:
            _insert(conn, "ipcs", _ipc_row(i), upsert=True)
        for d in devices:
            _insert(conn, "devices", d.model_dump(), upsert=True)
        for s in sensors:
            _insert(conn, "sensors", _sensor_row(s), upsert=True)

    counts = {"projects": int(project is not None), "devices": len(devices),
              "sensors": len(sensors), "ipcs": len(ipcs)}
    logger.info("Imported config bundle: %s", counts)
    return counts


# ── Trend ─────────────────────────────────────────────────────────────────────

def insert_trend_points(device_id: str, points: list[TrendPoint]) -> None:
    if not points:
        return
    rows = [
        (
            device_id,
            p.timestamp.isoformat(),
            *(getattr(p, col) for col in _TREND_COLUMNS),
            int(p.is_spike),
            p.level.value,
        )
        for p in points
    ]
    conn = _get_conn()
    with _lock, conn:
        conn.executemany(
            f"""INSERT INTO trend_points
               (device_id, timestamp, {', '.join(_TREND_COLUMNS)}, is_spike, level)
               VALUES ({', '.join('?' * (len(_TREND_COLUMNS) + 4))})""",
            rows,
        )


def get_trend(
    device_id: str,
    hours: int = 24,
    limit: int = 10_000,
    start: datetime | None = None,
    end: datetime | None = None,
) -> pd.DataFrame:
    """
    Fetch a device's stored trend, oldest first.

    The window is [start, end) when `start` is given, else the last `hours` hours.
    """
    since = start if start is not None else datetime.now(tz=UTC) - timedelta(hours=hours)
    where = ["device_id = ?", "timestamp >= ?"]
    params: list = [device_id, since.astimezone(UTC).isoformat()]
    if end is not None:
        where.append("timestamp < ?")
        params.append(end.astimezone(UTC).isoformat())
    params.append(limit)

    conn = _get_conn()
    with _lock:
        df = pd.read_sql_query(
            f"""SELECT * FROM trend_points
               WHERE {' AND '.join(where)}
               ORDER BY timestamp ASC
               LIMIT ?""",
            conn,
            params=params,
        )
    if not df.empty:
        df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, format="ISO8601")
        df["is_spike"] = df["is_spike"].astype(bool)
    return df


def get_trend_window(device_id: str, start: datetime, end: datetime | None = None) -> pd.DataFrame:
    """
    Trend for [start, end), with the span before the stored history filled
    by a simulated series so long ranges are never silently cut short.

    Offline bays are never filled. The fill is seeded from the device id and
    the start day, so refreshes within a day redraw the same curve.
    """
    from src.data.simulator import device_flags, device_seed, generate_trend, to_dataframe

    start = start.astimezone(UTC)
    end = end.astimezone(UTC) if end is not None else datetime.now(tz=UTC)
    stored = get_trend(device_id, start=start, end=end)
    faulty, offline = device_flags(device_id)
    if offline:
        return stored

    interval = timedelta(minutes=settings.SAMPLE_INTERVAL_MIN)
    fill_end = stored["timestamp"].iloc[0].to_pydatetime() if not stored.empty else end
    fill_start = start.replace(second=0, microsecond=0)
    fill_start -= timedelta(minutes=fill_start.minute % settings.SAMPLE_INTERVAL_MIN)
    if fill_end - fill_start < interval:
        return stored

    rng = np.random.default_rng(device_seed(device_id) + fill_start.toordinal())
    points = generate_trend(device_id, "custom", start=fill_start, end=fill_end, rng=rng, danger=faulty)
    filled = to_dataframe([p for p in points if start <= p.timestamp < fill_end])
    if filled.empty:
        return stored
    filled.insert(0, "device_id", device_id)
    filled["timestamp"] = pd.to_datetime(filled["timestamp"], utc=True)

    frames = [filled] if stored.empty else [filled, stored]
    return pd.concat(frames, ignore_index=True).sort_values("timestamp", ignore_index=True)


# ── Alarms ────────────────────────────────────────────────────────────────────

def insert_alarms(alarms: list[AlarmEvent]) -> None:
    if not alarms:
        return
    rows = [
        (
            a.id,
            a.timestamp.isoformat(),
            a.device_id,
            a.channel,
            a.level.value,
            a.amplitude,
            a.frequency,
            a.message,
            int(a.acknowledged),
        )
        for a in alarms
    ]
    conn = _get_conn()
    with _lock, conn:
        conn.executemany(
            """INSERT OR IGNORE INTO alarms
               (id, timestamp, device_id, channel, level,
                amplitude, frequency, message, acknowledged)
               VALUES (?,?,?,?,?,?,?,?,?)""",
            rows,
        )


def get_alarms(
    device_id: str | None = None,
    level: str | None = None,
    days: int = settings.ALARM_RETENTION_DAYS,
    limit: int = 500,
) -> pd.DataFrame:
    """Fetch alarms with optional filters, newest first."""
    since = (datetime.now(tz=UTC) - timedelta(days=days)).isoformat()
    where = ["timestamp >= ?"]
    params: list = [since]

    if device_id:
        where.append("device_id = ?")
        params.append(device_id)
    if level:
        where.append("level = ?")
        params.append(str(getattr(level, "value", level)))

    sql = f"""SELECT * FROM alarms WHERE {' AND '.join(where)}
              ORDER BY timestamp DESC LIMIT ?"""
    params.append(limit)

    conn = _get_conn()
    with _lock:
        df = pd.read_sql_query(sql, conn, params=params)
    if not df.empty:
        df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, format="ISO8601")
        df["acknowledged"] = df["acknowledged"].astype(bool)
    return df


def acknowledge_alarm(alarm_id: str) -> None:
    conn = _get_conn()
    with _lock, conn:
        cur = conn.execute("UPDATE alarms SET acknowledged = 1 WHERE id = ?", (alarm_id,))
    if cur.rowcount == 0:
        raise KeyError(alarm_id)
    logger.info("Acknowledged alarm %s", alarm_id)


def get_active_alarm_count(device_id: str | None = None) -> int:
    """Count unacknowledged alarms."""
    conn = _get_conn()
    where = "acknowledged = 0"
    params: list = []
    if device_id:
        where += " AND device_id = ?"
        params.append(device_id)
    with _lock:
        return conn.execute(f"SELECT COUNT(*) FROM alarms WHERE {where}", params).fetchone()[0]
