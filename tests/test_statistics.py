"""
tests/test_statistics.py
─────────────────────────
Tests for fleet status roll-ups and channel statistics.
"""
from types import SimpleNamespace

import pandas as pd
import pytest

from config.alarms import AlarmLevel
from src.analytics.statistics import (
    channel_alarm_stats,
    compute_device_status,
    count_by_level,
    filter_devices,
    sort_by_severity,
)


def _dev(name, status, station="春晓变电站", project_id="proj-01"):
    return SimpleNamespace(name=name, status=status, station=station, project_id=project_id)


@pytest.fixture
def fleet():
    return [
        _dev("Bay A", AlarmLevel.NORMAL),
        _dev("Bay B", AlarmLevel.CRITICAL, station="宁海变电站", project_id="proj-02"),
        _dev("Bay C", AlarmLevel.NO_DATA),
        _dev("Bay D", AlarmLevel.WARNING, station="北仑变电站", project_id="proj-03"),
        _dev("Bay E", AlarmLevel.DANGER, station="宁海变电站", project_id="proj-02"),
    ]


class TestDeviceStatus:
    def test_worst_node_wins(self):
        assert compute_device_status([AlarmLevel.NORMAL, AlarmLevel.DANGER]) == AlarmLevel.DANGER

    def test_no_data_nodes_ignored(self):
        assert compute_device_status([AlarmLevel.NO_DATA, AlarmLevel.WARNING]) == AlarmLevel.WARNING
        assert compute_device_status([AlarmLevel.NO_DATA, AlarmLevel.NORMAL]) == AlarmLevel.NORMAL

    def test_all_no_data(self):
        assert compute_device_status([AlarmLevel.NO_DATA, AlarmLevel.NO_DATA]) == AlarmLevel.NO_DATA
        assert compute_device_status([]) == AlarmLevel.NO_DATA


class TestCounts:
    def test_every_level_present(self):
        counts = count_by_level([AlarmLevel.NORMAL, AlarmLevel.NORMAL, "CRITICAL"])
        assert set(counts) == set(AlarmLevel)
        assert counts[AlarmLevel.NORMAL] == 2
        assert counts[AlarmLevel.CRITICAL] == 1
        assert counts[AlarmLevel.NO_DATA] == 0

    def test_empty(self):
        assert sum(count_by_level([]).values()) == 0


class TestSortAndFilter:
    def test_sort_by_severity(self, fleet):
        ordered = [d.name for d in sort_by_severity(fleet)]
        assert ordered == ["Bay B", "Bay E", "Bay D", "Bay A", "Bay C"]

    def test_ties_broken_by_name(self):
        devices = [_dev("Z", AlarmLevel.NORMAL), _dev("A", AlarmLevel.NORMAL)]
        assert [d.name for d in sort_by_severity(devices)] == ["A", "Z"]

    def test_no_filters_keeps_all(self, fleet):
        assert filter_devices(fleet) == fleet
        assert filter_devices(fleet, [], "", "all") == fleet

    def test_filter_statuses(self, fleet):
        kept = filter_devices(fleet, ["CRITICAL", "DANGER"])
        assert {d.name for d in kept} == {"Bay B", "Bay E"}

    def test_filter_query_matches_station(self, fleet):
        kept = filter_devices(fleet, query="宁海")
        assert {d.name for d in kept} == {"Bay B", "Bay E"}

    def test_filter_query_case_insensitive(self, fleet):
        assert [d.name for d in filter_devices(fleet, query="  bay d ")] == ["Bay D"]

    def test_filter_project(self, fleet):
        kept = filter_devices(fleet, project_id="proj-03")
        assert [d.name for d in kept] == ["Bay D"]


class TestChannelAlarmStats:
    def test_counts(self):
        df = pd.DataFrame({
            "tev_amp": [45.0, 25.0, 72.0, 60.0],
            "tev_freq": [40.0, 60.0, 160.0, 100.0],
        })
        stats = channel_alarm_stats(df, "TEV")
        assert stats["total"] == 4
        assert stats["counts"] == {
            AlarmLevel.NORMAL: 1,
            AlarmLevel.WARNING: 1,
            AlarmLevel.DANGER: 1,
            AlarmLevel.CRITICAL: 1,
        }
        assert stats["alarm_ratio"] == 75.0
        assert stats["peak_amp"] == 72.0
        assert stats["peak_freq"] == 160.0

    def test_empty_frame(self):
        stats = channel_alarm_stats(pd.DataFrame(), "UHF")
        assert stats["total"] == 0
        assert stats["alarm_ratio"] == 0.0
        assert stats["peak_amp"] is None
        assert AlarmLevel.NO_DATA not in stats["counts"]
