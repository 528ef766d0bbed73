"""
tests/test_callbacks.py
────────────────────────
Tests for the plain helpers behind the trends and configuration callbacks.
"""
import base64
import json
from datetime import date, timedelta

import pytest

from src.callbacks.configuration import _mutate, decode_upload, parse_channels
from src.callbacks.trends import MAX_CUSTOM_DAYS, trend_window


def _upload(payload) -> str:
    encoded = base64.b64encode(json.dumps(payload, ensure_ascii=False).encode("utf-8")).decode("ascii")
    return f"data:application/json;base64,{encoded}"


def _ipc_values(**overrides) -> dict:
    values = {"ipc_target": None, "ipc_name": "工控机 01", "ipc_sn": "IPC-001",
              "ipc_ip": " 192.168.1.101 ", "ipc_desc": None}
    return {**values, **overrides}


class TestTrendWindow:
    @pytest.mark.parametrize("time_range,hours", [("24h", 24), ("7d", 168), ("1m", 720)])
    def test_fixed_ranges(self, now, time_range, hours):
        start, end = trend_window(time_range, now=now)
        assert end == now
        assert end - start == timedelta(hours=hours)

    def test_month_is_thirty_days(self, now):
        start, end = trend_window("1m", now=now)
        assert (end - start).days == 30

    def test_custom_whole_days(self, now):
        start, end = trend_window("custom", "2024-05-01", "2024-05-03", now=now)
        assert start.isoformat() == "2024-05-01T00:00:00+00:00"
        assert end - start == timedelta(days=3)

    def test_custom_clipped_to_now(self, now):
        start, end = trend_window("custom", date(2024, 5, 30), now.date(), now=now)
        assert end == now

    def test_custom_capped(self, now):
        start, end = trend_window("custom", "2023-01-01", "2024-05-31", now=now)
        assert end - start == timedelta(days=MAX_CUSTOM_DAYS)

    @pytest.mark.parametrize("first,last", [(None, "2024-05-03"), ("2024-05-03", None), ("2024-05-05", "2024-05-01")])
    def test_custom_incomplete_falls_back(self, now, first, last):
        start, end = trend_window("custom", first, last, now=now)
        assert (start, end) == (now - timedelta(hours=24), now)

    def test_datepicker_datetime_strings(self, now):
        start, _ = trend_window("custom", "2024-05-01T00:00:00", "2024-05-02T00:00:00", now=now)
        assert start.date() == date(2024, 5, 1)


class TestDecodeUpload:
    def test_json_bundle(self):
        assert decode_upload(_upload({"version": "1.0", "project": {"name": "测试站"}}))["project"]["name"] == "测试站"

    @pytest.mark.parametrize("contents", [
        "",
        "data:application/json;base64,",
        "data:application/json;base64,!!!",
        "data:application/json;base64," + base64.b64encode(b"{not json").decode(),
    ])
    def test_garbage_rejected(self, contents):
        with pytest.raises(ValueError):
            decode_upload(contents)

    def test_non_object_rejected(self):
        with pytest.raises(ValueError):
            decode_upload(_upload([1, 2, 3]))


class TestMutate:
    def test_parse_channels(self):
        assert parse_channels(" uhf, TEV ,,hfct1") == [{"type": "UHF"}, {"type": "TEV"}, {"type": "HFCT1"}]
        assert parse_channels(None) == []

    def test_ipc_save_and_delete(self, empty_db):
        ipc_id = _mutate("config-ipc-save", _ipc_values())
        assert str(empty_db.get_ipc(ipc_id).ip) == "192.168.1.101"

        _mutate("config-ipc-save", _ipc_values(ipc_target=ipc_id, ipc_ip="192.168.1.102"))
        assert str(empty_db.get_ipc(ipc_id).ip) == "192.168.1.102"

        assert _mutate("config-ipc-delete", _ipc_values(ipc_target=ipc_id)) == ipc_id
        assert empty_db.list_ipcs() == []

    def test_ipc_bad_ip(self, empty_db):
        with pytest.raises(ValueError):
            _mutate("config-ipc-save", _ipc_values(ipc_ip="192.168.1"))

    def test_unknown_action(self, empty_db):
        with pytest.raises(ValueError):
            _mutate("config-nothing", {})
