"""
tests/test_export.py
─────────────────────
Tests for trend export frames, payloads and size estimates.
"""
import json
from datetime import date, datetime, timedelta

import pytest

from config.alarms import AlarmLevel
from src.data.export import (
    BYTES_PER_SENSOR_DAY,
    build_export_frame,
    estimate_export_size,
    export_payload,
    format_size,
    to_csv_bytes,
    to_json_str,
)
from src.data.models import TrendPoint
from src.data.simulator import to_dataframe


@pytest.fixture
def trend_df(now):
    base = dict(
        uhf_amp=20.0, uhf_freq=20.0, tev_amp=25.0, tev_freq=60.0,
        hfct_amp=40.0, hfct_freq=40.0, ae_amp=8.0, ae_freq=2.0,
        temperature=21.5, humidity=48.0,
    )
    step = timedelta(minutes=15)
    points = [
        TrendPoint(timestamp=now, **base),
        TrendPoint(timestamp=now + step, **{**base, "tev_amp": 45.0, "tev_freq": 40.0}),
        TrendPoint(timestamp=now + 2 * step, **{**base, "tev_amp": 72.0, "tev_freq": 160.0}),
        TrendPoint(timestamp=now + 3 * step, **base),
    ]
    return to_dataframe(points)


class TestBuildExportFrame:
    def test_filters_rows_by_level(self, trend_df):
        out = build_export_frame(trend_df, ["TEV"], ["WARNING", "CRITICAL"])
        assert list(out["level"]) == ["WARNING", "CRITICAL"]
        assert list(out["tev_amp"]) == [45.0, 72.0]

    def test_selects_channel_columns(self, trend_df):
        out = build_export_frame(trend_df, ["UHF", "温度"], ["NORMAL"])
        assert list(out.columns) == ["timestamp", "level", "uhf_amp", "uhf_freq", "temperature"]
        assert len(out) == 2

    def test_device_column_first(self, trend_df):
        out = build_export_frame(trend_df, ["AE"], list(AlarmLevel), device_id="dev-0")
        assert out.columns[0] == "device_id"
        assert set(out["device_id"]) == {"dev-0"}

    def test_no_statuses_keeps_nothing(self, trend_df):
        assert build_export_frame(trend_df, ["TEV"], []).empty

    def test_empty_input(self, trend_df):
        out = build_export_frame(trend_df.iloc[0:0], ["HFCT", "湿度"], ["NORMAL"], device_id="dev-0")
        assert out.empty
        assert list(out.columns) == ["device_id", "timestamp", "level", "hfct_amp", "hfct_freq", "humidity"]


class TestPayloads:
    def test_csv_has_bom(self, trend_df):
        data = to_csv_bytes(build_export_frame(trend_df, ["TEV"], ["NORMAL"]))
        assert data.startswith(b"\xef\xbb\xbf")
        header = data.decode("utf-8-sig").splitlines()[0]
        assert header == "timestamp,level,tev_amp,tev_freq"

    def test_json_records(self, trend_df):
        text = to_json_str(build_export_frame(trend_df, ["TEV"], ["CRITICAL"], device_id="北仑-1"))
        records = json.loads(text)
        assert len(records) == 1
        assert records[0]["level"] == "CRITICAL"
        assert records[0]["tev_freq"] == 160.0
        assert "北仑-1" in text

    def test_payload_dispatch(self, trend_df):
        frame = build_export_frame(trend_df, ["TEV"], ["NORMAL"])
        assert isinstance(export_payload(frame, "csv"), bytes)
        assert isinstance(export_payload(frame, "json"), str)

    def test_unknown_format(self, trend_df):
        with pytest.raises(ValueError):
            export_payload(trend_df, "xml")


class TestEstimate:
    def test_single_day_normal_only(self):
        size = estimate_export_size(2, date(2024, 1, 1), date(2024, 1, 1), ["NORMAL"])
        assert size == int(2 * BYTES_PER_SENSOR_DAY * 0.9)

    def test_all_levels(self):
        size = estimate_export_size(1, date(2024, 1, 1), date(2024, 1, 10), list(AlarmLevel))
        assert size == pytest.approx(10 * BYTES_PER_SENSOR_DAY, abs=1)

    def test_alarm_levels_only(self):
        size = estimate_export_size(1, date(2024, 1, 1), date(2024, 1, 1), ["DANGER"])
        assert size == int(BYTES_PER_SENSOR_DAY * 0.1)

    def test_nothing_selected_uses_floor(self):
        size = estimate_export_size(1, date(2024, 1, 1), date(2024, 1, 1), [])
        assert size == int(BYTES_PER_SENSOR_DAY * 0.01)

    def test_datetimes_accepted(self):
        a = estimate_export_size(1, datetime(2024, 1, 1, 23, 0), datetime(2024, 1, 2, 1, 0), ["NORMAL"])
        b = estimate_export_size(1, date(2024, 1, 1), date(2024, 1, 2), ["NORMAL"])
        assert a == b

    @pytest.mark.parametrize("n,start,end", [
        (0, date(2024, 1, 1), date(2024, 1, 2)),
        (3, None, date(2024, 1, 2)),
        (3, date(2024, 1, 1), None),
        (3, date(2024, 1, 5), date(2024, 1, 1)),
    ])
    def test_zero_cases(self, n, start, end):
        assert estimate_export_size(n, start, end, ["NORMAL"]) == 0


class TestFormatSize:
    @pytest.mark.parametrize("n,expected", [
        (0, "0 B"),
        (512, "512 B"),
        (1024, "1.00 KB"),
        (1536, "1.50 KB"),
        (5 * 1024 ** 2, "5.00 MB"),
        (3 * 1024 ** 3, "3.00 GB"),
        (2048 * 1024 ** 3, "2048.00 GB"),
    ])
    def test_units(self, n, expected):
        assert format_size(n) == expected
