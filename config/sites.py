"""
config/sites.py
───────────────
Seed catalogue for the simulated substations.

  - Three monitoring projects (one per 500kV substation)
  - Thirteen GIS bays spread across them
  - The four-sensor template mounted on every bay, with fixed 3-D positions
  - Internal zones where a partial-discharge source can appear
"""

PROJECTS: list[dict] = [
    {"id": "proj-01", "name": "春晓变电站监测项目", "type": "变电站", "description": "500kV GIS在线监测系统 - 区域A"},
    {"id": "proj-02", "name": "宁海变电站监测项目", "type": "变电站", "description": "500kV GIS在线监测系统 - 区域B"},
    {"id": "proj-03", "name": "北仑变电站监测项目", "type": "变电站", "description": "500kV GIS在线监测系统 - 区域C"},
]

STATIONS = ["春晓变电站", "宁海变电站", "北仑变电站"]

DEVICE_TYPES = ["开关柜", "箱变", "油变", "GIS组合开关", "配网电缆", "高架电缆"]

N_DEVICES = 13


def _device_entry(i: int) -> dict:
    phase = ["A", "B", "C"][i % 3]
    return {
        "id": f"dev-{i}",
        "project_id": PROJECTS[i % 3]["id"],
        "name": f"500kV GIS {phase}相间隔 {i // 3 + 1}0{i % 3 + 1}",
        "device_type": "GIS组合开关",
        "station": STATIONS[i % 3],
        "description": "",
        # First six bays carry an internal PD source; the last bay is offline
        "faulty": i < 6,
        "offline": i == N_DEVICES - 1,
    }


DEVICES: list[dict] = [_device_entry(i) for i in range(N_DEVICES)]

DEVICE_IDS = [d["id"] for d in DEVICES]


# ── Sensor template ───────────────────────────────────────────────────────────
# amplitude / frequency are the quiet baseline before seed variance
SENSOR_TEMPLATE: list[dict] = [
    {
        "key": "s2",
        "name": "A相局部放电-TEV",
        "sn": "SF-TEV-202",
        "channel_type": "TEV",
        "location": "母线间隔 B相",
        "amplitude": 35.0,
        "frequency": 320.0,
        "position3d": (-160.0, 10.0, 20.0),
    },
    {
        "key": "s3",
        "name": "气室在线监测-UHF",
        "sn": "SF-UHF-203",
        "channel_type": "UHF",
        "location": "CB 气室",
        "amplitude": -45.0,
        "frequency": 120.0,
        "position3d": (-40.0, -40.0, 20.0),
    },
    {
        "key": "s4",
        "name": "超声波诊断-AE",
        "sn": "SF-AE-204",
        "channel_type": "AE",
        "location": "CB 底部",
        "amplitude": 12.0,
        "frequency": 5.0,
        "position3d": (50.0, 70.0, 20.0),
    },
    {
        "key": "s5",
        "name": "电缆终端监测-HFCT",
        "sn": "SF-HFCT-205",
        "channel_type": "HFCT",
        "location": "T 终端",
        "amplitude": 15.0,
        "frequency": 50.0,
        "position3d": (180.0, 20.0, 20.0),
    },
]

# Locations that may drop offline together
OFFLINE_LOCATIONS = ("CB 气室", "T 终端")


# ── PD source zones ───────────────────────────────────────────────────────────
PD_ZONES: list[dict] = [
    {"name": "U1 隔离刀闸 (故障多发区)", "min_x": -220, "max_x": -140, "min_y": 0, "max_y": 80, "z": 10},
    {"name": "CB 断路器气室 (异常热点)", "min_x": -50, "max_x": 50, "min_y": 0, "max_y": 80, "z": 10},
    {"name": "T 终端出线套管 (绝缘缺陷)", "min_x": 140, "max_x": 220, "min_y": 0, "max_y": 80, "z": 10},
]

# Distances (same units as position3d) that decide how strongly a sensor sees the source
NEAR_DISTANCE = 120.0
MEDIUM_DISTANCE = 200.0

NODE_CHUNK_SIZE = 2
