"""
tests/test_diagnosis.py
────────────────────────
Tests for discharge-type diagnosis and maintenance advice.
"""
import pytest

from config.alarms import AlarmLevel
from src.analytics.diagnosis import LEVEL_SUMMARY, diagnose_discharge, level_advice


class TestDiagnoseDischarge:
    def test_background_noise(self):
        d = diagnose_discharge("UHF", 20.0, 500.0)
        assert d.type == "背景噪声"
        assert d.confidence == 0.98

    def test_high_energy(self):
        # seed = 60 * 100 = 6000
        d = diagnose_discharge("TEV", 60.0, 100.0)
        assert d.type == "尖端放电"
        assert d.confidence == 0.85

    def test_low_energy(self):
        assert diagnose_discharge("AE", 40.0, 10.0).type == "微弱尖端放电"
        assert diagnose_discharge("AE", 40.0, 11.0).type == "外部干扰"

    def test_boundaries(self):
        assert diagnose_discharge("UHF", 25.0, 0.0).type != "背景噪声"
        # 55 is not above the high-energy cut
        assert diagnose_discharge("UHF", 55.0, 0.0).type == "自由颗粒放电"

    @pytest.mark.parametrize("amp,freq", [(30.0, 17.0), (45.5, 123.0), (58.0, 301.0), (90.0, 999.0)])
    def test_confidence_range(self, amp, freq):
        d = diagnose_discharge("TEV", amp, freq)
        if amp > 55:
            assert 0.85 <= d.confidence <= 0.99
        else:
            assert 0.75 <= d.confidence <= 0.94
        assert d.color.startswith("#")

    def test_deterministic(self):
        assert diagnose_discharge("UHF", 47.3, 88.0) == diagnose_discharge("UHF", 47.3, 88.0)


class TestAdvice:
    @pytest.mark.parametrize("level", list(AlarmLevel))
    def test_every_level_has_text(self, level):
        assert level_advice(level)
        assert LEVEL_SUMMARY[level]

    def test_accepts_value_string(self):
        assert level_advice("CRITICAL") == level_advice(AlarmLevel.CRITICAL)
        assert "停电检修" in level_advice("CRITICAL")
