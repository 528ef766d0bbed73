"""
src/data/models.py
──────────────────
Pydantic v2 data models for channel readings, sensor nodes, site
configuration, trend points and alarm events.

Statuses are computed fields: they are derived from the readings on every
access and are never stored on the model.
"""

from datetime import datetime
from ipaddress import IPv4Address

from pydantic import BaseModel, Field, computed_field

from config.alarms import AlarmLevel
from config.channels import AMP_UNIT, FREQ_UNIT
from config.sites import DEVICE_TYPES
from src.analytics.classifier import NodeStatus, compute_node_status, point_level, reading_level


class ChannelReading(BaseModel):
    channel_type: str
    amplitude: float
    # Pulse rate; negatives are rejected here, the classifier itself accepts any number
    frequency: float = Field(ge=0.0)
    is_online: bool = True

    @computed_field
    @property
    def status(self) -> AlarmLevel:
        return reading_level(self)


class SensorReading(ChannelReading):
    id: str
    name: str
    sn: str
    location: str
    unit: str = AMP_UNIT
    freq_unit: str = FREQ_UNIT
    position3d: tuple[float, float, float] = (0.0, 0.0, 0.0)
    timestamp: datetime


class SensorNode(BaseModel):
    id: str
    name: str
    sn: str
    channels: list[SensorReading]

    @property
    def status(self) -> NodeStatus:
        return compute_node_status(self.channels)


class PDSource(BaseModel):
    position3d: tuple[float, float, float]
    location_name: str
    intensity: float = Field(ge=0.0)


# ── Site configuration ────────────────────────────────────────────────────────

class Project(BaseModel):
    id: str
    name: str = Field(min_length=1)
    type: str = "变电站"
    description: str = ""
    created_at: datetime


class Device(BaseModel):
    id: str
    project_id: str
    name: str = Field(min_length=1)
    device_type: str = DEVICE_TYPES[3]
    station: str = ""
    description: str = ""


class IPC(BaseModel):
    """Industrial PC that collects a group of sensors; shared across projects."""
    id: str
    sn: str = Field(min_length=1)
    name: str = Field(min_length=1)
    ip: IPv4Address
    description: str = ""


class SensorChannel(BaseModel):
    type: str = Field(min_length=1)
    location: str = ""


class Sensor(BaseModel):
    id: str
    project_id: str
    device_id: str
    ipc_id: str = ""
    sn: str = Field(min_length=1)
    name: str = Field(min_length=1)
    model: str = ""
    channels: list[SensorChannel] = Field(min_length=1)
    description: str = ""


# ── Dashboard / history ───────────────────────────────────────────────────────

class DeviceSummary(BaseModel):
    id: str
    project_id: str
    name: str
    station: str
    status: AlarmLevel
    last_updated: datetime
    uhf_amp: float
    uhf_freq: float
    tev_amp: float
    tev_freq: float
    hfct_amp: float
    hfct_freq: float
    ae_amp: float
    ae_freq: float
    temp: float
    humidity: float = Field(ge=0.0, le=100.0)
    trend: list[float] = Field(default_factory=list)


class TrendPoint(BaseModel):
    timestamp: datetime
    uhf_amp: float
    uhf_freq: float
    tev_amp: float
    tev_freq: float
    hfct_amp: float
    hfct_freq: float
    ae_amp: float
    ae_freq: float
    temperature: float
    humidity: float
    is_spike: bool = False

    @computed_field
    @property
    def level(self) -> AlarmLevel:
        return point_level(self.__dict__)


class AlarmEvent(BaseModel):
    id: str
    timestamp: datetime
    device_id: str
    channel: str
    level: AlarmLevel
    amplitude: float
    frequency: float
    message: str
    acknowledged: bool = False
