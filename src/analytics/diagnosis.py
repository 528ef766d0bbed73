"""
src/analytics/diagnosis.py
──────────────────────────
Rule-based discharge-type diagnosis and per-level maintenance advice.

The discharge type is picked deterministically from amplitude and
frequency so the same reading always gets the same diagnosis:
  amplitude < 25      → background noise
  amplitude > 55      → one of the high-energy discharge types
  otherwise           → one of the early-stage / interference types
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from config.alarms import AlarmLevel

NOISE_AMP = 25.0
HIGH_ENERGY_AMP = 55.0


@dataclass(frozen=True)
class Diagnosis:
    type: str
    confidence: float
    description: str
    color: str


_HIGH_ENERGY = [
    ("尖端放电", "#ef4444", "波形特征显示典型的相位固定脉冲序列"),
    ("悬浮放电", "#f97316", "放电脉冲幅值分散，相位分布较宽"),
    ("绝缘子沿面放电", "#dc2626", "高能放电脉冲，伴随爬电特征"),
]

_LOW_ENERGY = [
    ("自由颗粒放电", "#eab308", "随机性较强，相位相关性弱"),
    ("微弱尖端放电", "#ca8a04", "早期尖端缺陷特征"),
    ("外部干扰", "#3b82f6", "疑似通信信号或雷达干扰"),
]


def diagnose_discharge(channel_type: str, amplitude: float, frequency: float) -> Diagnosis:
    """Classify the likely discharge type behind a reading."""
    if amplitude < NOISE_AMP:
        return Diagnosis("背景噪声", 0.98, "信号特征符合环境白噪声分布", "#6b7280")

    seed = math.floor(amplitude * frequency)
    if amplitude > HIGH_ENERGY_AMP:
        name, color, desc = _HIGH_ENERGY[seed % len(_HIGH_ENERGY)]
        confidence = 0.85 + (seed % 15) / 100
    else:
        name, color, desc = _LOW_ENERGY[seed % len(_LOW_ENERGY)]
        confidence = 0.75 + (seed % 20) / 100
    return Diagnosis(name, round(confidence, 2), desc, color)


# ── Advice ────────────────────────────────────────────────────────────────────

LEVEL_SUMMARY: dict[str, str] = {
    AlarmLevel.NORMAL: "绝缘状态良好",
    AlarmLevel.WARNING: "检测到轻度局放信号，无需动作",
    AlarmLevel.DANGER: "局放信号持续增强，建议关注并计划消缺",
    AlarmLevel.CRITICAL: "局放信号增强加速，建议尽快检修",
    AlarmLevel.NO_DATA: "传感器离线或无数据",
}

LEVEL_ADVICE: dict[str, str] = {
    AlarmLevel.NORMAL: (
        "当前设备运行状态良好。各项监测指标（UHF, TEV, HFCT, AE）均在正常范围内。"
        "环境温湿度适宜。建议继续保持周期性巡检。"
    ),
    AlarmLevel.WARNING: (
        "监测到轻微局部放电信号特征。虽然尚未达到危险阈值，但趋势显示绝缘性能可能存在轻微劣化。"
        "建议缩短巡检周期，密切关注信号变化趋势。"
    ),
    AlarmLevel.DANGER: (
        "检测到显著的局部放电信号！TEV或UHF幅值已超过二级告警阈值。"
        "这通常指示设备内部存在绝缘缺陷或悬浮电位放电。建议立即安排带电检测复核，并制定检修计划。"
    ),
    AlarmLevel.CRITICAL: (
        "【严重警告】监测数据表明设备存在极高风险的绝缘故障！多种监测手段均显示异常，且信号强度极大。"
        "存在发生绝缘击穿的紧迫风险。建议立即停电检修！"
    ),
    AlarmLevel.NO_DATA: "传感器离线，无法评估绝缘状态。请检查采集终端与通信链路。",
}


def level_advice(level: AlarmLevel) -> str:
    return LEVEL_ADVICE[AlarmLevel(level)]
