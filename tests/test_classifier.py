"""
tests/test_classifier.py
─────────────────────────
Tests for per-channel classification and weighted node aggregation.
"""
import logging

import pytest

from config.alarms import AlarmLevel
from config.channels import ALARM_RULES, CHANNEL_WEIGHTS
from src.analytics.classifier import (
    NodeStatus,
    channel_weight,
    classify_channel,
    compute_node_status,
    get_channel_rules,
    get_threshold_lines,
    point_level,
    worst_level,
)

ALL_TYPES = ["UHF", "TEV", "AE", "HFCT", "HFCT1", "HFCT2"]


class TestClassifyChannel:
    @pytest.mark.parametrize("channel_type", ALL_TYPES)
    def test_below_warning_is_normal(self, channel_type):
        rules = get_channel_rules(channel_type)
        amp = rules.warning.amp - 0.1
        freq = rules.warning.freq - 1
        assert classify_channel(channel_type, amp, freq) == AlarmLevel.NORMAL
        assert classify_channel(channel_type, 0.0, 0.0) == AlarmLevel.NORMAL

    @pytest.mark.parametrize("channel_type", ["UHF", "TEV", "AE", "HFCT"])
    def test_cutoffs_are_strict(self, channel_type):
        rules = ALARM_RULES[channel_type]
        for level, cut in (
            (AlarmLevel.WARNING, rules.warning),
            (AlarmLevel.DANGER, rules.danger),
            (AlarmLevel.CRITICAL, rules.critical),
        ):
            # Equal on one axis never triggers this level
            assert classify_channel(channel_type, cut.amp + 1, cut.freq) != level
            assert classify_channel(channel_type, cut.amp, cut.freq + 1) != level
            assert classify_channel(channel_type, cut.amp + 0.01, cut.freq + 0.01) == level

    def test_negative_frequency_is_normal(self):
        # Only the model boundary rejects negative rates; classification stays total
        assert classify_channel("TEV", 80.0, -5.0) == AlarmLevel.NORMAL

    def test_uhf_freq_at_cutoff_is_normal(self):
        assert classify_channel("UHF", 41.0, 30.0) == AlarmLevel.NORMAL

    def test_uhf_levels(self):
        assert classify_channel("UHF", 41.0, 31.0) == AlarmLevel.WARNING
        assert classify_channel("UHF", 56.0, 91.0) == AlarmLevel.DANGER
        assert classify_channel("UHF", 67.0, 151.0) == AlarmLevel.CRITICAL

    def test_critical_checked_first(self):
        # Satisfies every level; must report the highest
        assert classify_channel("TEV", 100.0, 1000.0) == AlarmLevel.CRITICAL

    def test_high_amp_low_freq_falls_through(self):
        # Amplitude above CRITICAL but frequency only above WARNING
        assert classify_channel("TEV", 75.0, 50.0) == AlarmLevel.WARNING

    def test_hfct_aliases_share_table(self):
        for alias in ("HFCT1", "HFCT2"):
            assert get_channel_rules(alias) == ALARM_RULES["HFCT"]
            assert classify_channel(alias, 51.0, 91.0) == classify_channel("HFCT", 51.0, 91.0)

    def test_unknown_type_falls_back_to_hfct(self):
        assert get_channel_rules("XYZ") == ALARM_RULES["HFCT"]
        assert classify_channel("XYZ", 61.0, 151.0) == AlarmLevel.CRITICAL
        assert classify_channel("XYZ", 36.0, 31.0) == AlarmLevel.WARNING

    def test_unknown_type_warns_once(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pd.classifier"):
            classify_channel("UNSEEN-TYPE", 10.0, 10.0)
            classify_channel("UNSEEN-TYPE", 10.0, 10.0)
            channel_weight("UNSEEN-TYPE")
        messages = [r for r in caplog.records if "UNSEEN-TYPE" in r.getMessage()]
        assert len(messages) == 1


class TestChannelWeight:
    def test_known_weights(self):
        assert channel_weight("UHF") == 0.2
        assert channel_weight("TEV") == 0.45
        assert channel_weight("AE") == 0.35
        for t in ("HFCT", "HFCT1", "HFCT2"):
            assert channel_weight(t) == 0.3

    def test_unknown_defaults(self):
        assert channel_weight("FOO") == 0.3


class TestComputeNodeStatus:
    def test_single_critical_tev_downgraded_to_danger(self, make_reading):
        status = compute_node_status([
            make_reading("TEV", 75, 200),
            make_reading("UHF", 20, 10),
        ])
        assert status.level == AlarmLevel.DANGER
        assert status.label == "二级"
        assert status.weighted_sum == pytest.approx(1.35)
        assert status.alarm_count == 1

    def test_two_critical_channels_stay_critical(self, make_reading):
        status = compute_node_status([
            make_reading("TEV", 75, 200),
            make_reading("AE", 55, 200),
        ])
        assert status.level == AlarmLevel.CRITICAL
        assert status.label == "三级"
        assert status.weighted_sum == pytest.approx(2.4)
        assert status.alarm_count == 2

    @pytest.mark.parametrize("channel_type", ["UHF", "TEV", "AE", "HFCT"])
    def test_single_critical_any_type_is_danger(self, make_reading, channel_type):
        rules = ALARM_RULES[channel_type]
        status = compute_node_status([
            make_reading(channel_type, rules.critical.amp + 5, rules.critical.freq + 5),
            make_reading("UHF", 0, 0),
        ])
        assert status.level == AlarmLevel.DANGER

    def test_two_danger_channels_stay_danger(self, make_reading):
        status = compute_node_status([
            make_reading("TEV", 60, 100),
            make_reading("AE", 45, 100),
        ])
        assert status.level == AlarmLevel.DANGER
        assert status.alarm_count == 2

    def test_mixed_levels_take_max(self, make_reading):
        status = compute_node_status([
            make_reading("TEV", 45, 40),   # WARNING
            make_reading("AE", 55, 200),   # CRITICAL
        ])
        assert status.level == AlarmLevel.CRITICAL

    def test_two_warnings_not_downgraded(self, make_reading):
        # 0.45 + 0.35 = 0.8 >= 0.5
        status = compute_node_status([
            make_reading("TEV", 45, 40),
            make_reading("AE", 35, 40),
        ])
        assert status.level == AlarmLevel.WARNING
        assert status.weighted_sum == pytest.approx(0.8)

    def test_two_warnings_below_floor_are_normal(self, make_reading):
        # 0.2 + 0.2 = 0.4 < 0.5
        status = compute_node_status([
            make_reading("UHF", 45, 40),
            make_reading("UHF", 45, 40),
        ])
        assert status.level == AlarmLevel.NORMAL
        assert status.alarm_count == 2

    def test_single_warning_is_normal(self, make_reading):
        for t in ("UHF", "TEV", "AE", "HFCT"):
            rules = ALARM_RULES[t]
            status = compute_node_status([
                make_reading(t, rules.warning.amp + 1, rules.warning.freq + 1),
                make_reading("UHF", 0, 0),
            ])
            assert status.level == AlarmLevel.NORMAL

    def test_all_offline_is_no_data(self, make_reading):
        status = compute_node_status([
            make_reading("TEV", 99, 999, is_online=False),
            make_reading("AE", 99, 999, is_online=False),
        ])
        assert status.level == AlarmLevel.NO_DATA
        assert status.label == "无数据"

    def test_empty_node_is_no_data(self):
        assert compute_node_status([]).level == AlarmLevel.NO_DATA

    def test_offline_channel_contributes_nothing(self, make_reading):
        status = compute_node_status([
            make_reading("TEV", 75, 200),
            make_reading("AE", 55, 200, is_online=False),
        ])
        # Only one alarming online channel → downgraded
        assert status.level == AlarmLevel.DANGER
        assert status.alarm_count == 1
        assert status.weighted_sum == pytest.approx(1.35)

    def test_unknown_type_uses_default_weight(self, make_reading):
        status = compute_node_status([
            make_reading("MYSTERY", 61, 151),
            make_reading("UHF", 0, 0),
        ])
        assert status.weighted_sum == pytest.approx(0.9)
        assert status.level == AlarmLevel.DANGER

    def test_idempotent(self, make_reading):
        channels = [make_reading("TEV", 75, 200), make_reading("UHF", 45, 40)]
        assert compute_node_status(channels) == compute_node_status(channels)

    def test_accepts_generator(self, make_reading):
        channels = (make_reading(t, 75, 200) for t in ("TEV", "AE"))
        assert compute_node_status(channels).level == AlarmLevel.CRITICAL

    def test_returns_node_status(self, make_reading):
        status = compute_node_status([make_reading("UHF", 0, 0)])
        assert isinstance(status, NodeStatus)
        assert status.label_en == "Normal"

    def test_weights_table_complete(self):
        assert set(CHANNEL_WEIGHTS) == {"UHF", "TEV", "AE", "HFCT", "HFCT1", "HFCT2"}


class TestPointLevel:
    def _point(self, **overrides) -> dict:
        base = {
            "uhf_amp": 20.0, "uhf_freq": 20.0,
            "tev_amp": 25.0, "tev_freq": 60.0,
            "hfct_amp": 40.0, "hfct_freq": 40.0,
            "ae_amp": 8.0, "ae_freq": 2.0,
        }
        base.update(overrides)
        return base

    def test_quiet_point_is_normal(self):
        # HFCT sits above its warning pair but is not considered
        assert point_level(self._point()) == AlarmLevel.NORMAL

    def test_worst_channel_wins(self):
        p = self._point(uhf_amp=45, uhf_freq=40, tev_amp=72, tev_freq=160)
        assert point_level(p) == AlarmLevel.CRITICAL

    def test_hfct_included_on_request(self):
        p = self._point()
        assert point_level(p, channels=("UHF", "TEV", "AE", "HFCT")) == AlarmLevel.WARNING

    def test_worst_level_ignores_no_data(self):
        assert worst_level([AlarmLevel.NO_DATA, AlarmLevel.WARNING]) == AlarmLevel.WARNING
        assert worst_level([]) == AlarmLevel.NORMAL


class TestThresholdLines:
    def test_tev_lines(self):
        lines = get_threshold_lines("TEV")
        assert [ln["level"] for ln in lines] == [AlarmLevel.WARNING, AlarmLevel.DANGER, AlarmLevel.CRITICAL]
        assert [ln["amp"] for ln in lines] == [40.0, 54.0, 70.0]
        assert [ln["freq"] for ln in lines] == [30, 90, 150]
