"""
tests/test_models.py
─────────────────────
Tests for Pydantic v2 data models.
"""
import pytest
from pydantic import ValidationError

from config.alarms import AlarmLevel
from src.data.models import (
    ChannelReading,
    Device,
    DeviceSummary,
    IPC,
    Project,
    Sensor,
    SensorChannel,
    SensorNode,
    SensorReading,
    TrendPoint,
)


def _sensor_reading(now, channel_type, amplitude, frequency, is_online=True, suffix="1"):
    return SensorReading(
        id=f"dev-0-s{suffix}",
        name=f"{channel_type} sensor",
        sn=f"SN-{suffix}",
        channel_type=channel_type,
        location="CB 气室",
        amplitude=amplitude,
        frequency=frequency,
        is_online=is_online,
        timestamp=now,
    )


class TestChannelReading:
    def test_status_is_computed(self, make_reading):
        assert make_reading("TEV", 75, 200).status == AlarmLevel.CRITICAL
        assert make_reading("UHF", 20, 10).status == AlarmLevel.NORMAL

    def test_offline_is_no_data(self, make_reading):
        assert make_reading("TEV", 75, 200, is_online=False).status == AlarmLevel.NO_DATA

    def test_status_in_dump(self, make_reading):
        dumped = make_reading("AE", 45, 100).model_dump()
        assert dumped["status"] == AlarmLevel.DANGER

    def test_negative_frequency_rejected(self):
        with pytest.raises(ValidationError):
            ChannelReading(channel_type="UHF", amplitude=10.0, frequency=-1.0)

    def test_negative_amplitude_allowed(self, make_reading):
        # UHF reads in dBm and is routinely negative
        assert make_reading("UHF", -45.0, 120.0).status == AlarmLevel.NORMAL

    def test_sensor_reading_defaults(self, now):
        r = _sensor_reading(now, "UHF", 10.0, 10.0)
        assert r.unit == "dBmV"
        assert r.freq_unit == "次/秒"
        assert r.position3d == (0.0, 0.0, 0.0)


class TestSensorNode:
    def test_node_status(self, now):
        node = SensorNode(
            id="node-0",
            name="GIS本体综合监测终端",
            sn="S-01",
            channels=[
                _sensor_reading(now, "TEV", 75, 200, suffix="2"),
                _sensor_reading(now, "UHF", 20, 10, suffix="3"),
            ],
        )
        assert node.status.level == AlarmLevel.DANGER
        assert node.status.label == "二级"

    def test_offline_node(self, now):
        node = SensorNode(
            id="node-2",
            name="电缆终端监测节点",
            sn="S-02",
            channels=[
                _sensor_reading(now, "AE", 60, 200, is_online=False, suffix="4"),
                _sensor_reading(now, "HFCT", 70, 200, is_online=False, suffix="5"),
            ],
        )
        assert node.status.level == AlarmLevel.NO_DATA


class TestSiteModels:
    def test_project_requires_name(self, now):
        with pytest.raises(ValidationError):
            Project(id="proj-x", name="", created_at=now)

    def test_project_defaults(self, now):
        p = Project(id="proj-x", name="测试项目", created_at=now)
        assert p.type == "变电站"
        assert p.description == ""

    def test_device_default_type(self):
        d = Device(id="dev-x", project_id="proj-01", name="Bay X")
        assert d.device_type == "GIS组合开关"

    def test_sensor_needs_channels(self):
        with pytest.raises(ValidationError):
            Sensor(id="sen-x", project_id="proj-01", device_id="dev-0", sn="S-09", name="node", channels=[])

    def test_sensor_channel_from_dict(self):
        s = Sensor(
            id="sen-x", project_id="proj-01", device_id="dev-0", sn="S-09", name="node",
            channels=[{"type": "UHF"}, {"type": "TEV", "location": "母线"}],
        )
        assert s.channels[0] == SensorChannel(type="UHF", location="")
        assert s.channels[1].location == "母线"

    def test_ipc_ip_validated(self):
        ipc = IPC(id="ipc-x", sn="IPC-009", name="工控机", ip="10.0.0.7")
        assert str(ipc.ip) == "10.0.0.7"
        for bad in ("10.0.0.256", "10.0.0", "not-an-ip", "::1"):
            with pytest.raises(ValidationError):
                IPC(id="ipc-x", sn="IPC-009", name="工控机", ip=bad)

    def test_ipc_requires_sn(self):
        with pytest.raises(ValidationError):
            IPC(id="ipc-x", sn="", name="工控机", ip="10.0.0.7")

    def test_channel_type_required(self):
        with pytest.raises(ValidationError):
            SensorChannel(type="")


class TestDeviceSummary:
    def _summary(self, now, **overrides):
        data = dict(
            id="dev-0", project_id="proj-01", name="Bay", station="春晓变电站",
            status=AlarmLevel.NORMAL, last_updated=now,
            uhf_amp=0, uhf_freq=0, tev_amp=0, tev_freq=0,
            hfct_amp=0, hfct_freq=0, ae_amp=0, ae_freq=0,
            temp=22.0, humidity=55.0,
        )
        data.update(overrides)
        return DeviceSummary(**data)

    def test_valid(self, now):
        s = self._summary(now)
        assert s.trend == []

    def test_humidity_bounds(self, now):
        with pytest.raises(ValidationError):
            self._summary(now, humidity=101.0)

    def test_status_must_be_level(self, now):
        with pytest.raises(ValidationError):
            self._summary(now, status="BROKEN")


class TestTrendPoint:
    def test_level_is_worst_channel(self, now):
        p = TrendPoint(
            timestamp=now,
            uhf_amp=20, uhf_freq=20, tev_amp=60, tev_freq=100,
            hfct_amp=40, hfct_freq=40, ae_amp=8, ae_freq=2,
            temperature=21.0, humidity=50.0,
        )
        assert p.level == AlarmLevel.DANGER
        assert p.model_dump()["level"] == AlarmLevel.DANGER
        assert p.is_spike is False
