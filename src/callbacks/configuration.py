"""
src/callbacks/configuration.py
───────────────────────────────
Configuration page callbacks: project / device / IPC / sensor CRUD and
project config export / import.

All mutations go through callbacks that bump store-config-rev; the tables
and dropdowns re-render from the store whenever the revision changes.
"""
from __future__ import annotations

import base64
import json
import logging

import dash_bootstrap_components as dbc
from dash import Input, Output, State, ctx, dcc, html, no_update

from src.data import store
from src.i18n.translator import t

logger = logging.getLogger("pd.config")

BORDER = "#30363d"
MUTED = "#8b949e"


def _table(headers: list[str], rows: list[list[str]], lang: str) -> html.Div:
    if not rows:
        return html.Div(t("common.no_data", lang), style={"color": MUTED, "padding": "12px"})
    return html.Div(
        html.Table(
            [
                html.Thead(html.Tr([html.Th(h) for h in headers],
                                   style={"color": MUTED, "fontSize": ".65rem", "textTransform": "uppercase"})),
                html.Tbody([
                    html.Tr([html.Td(c, style={"fontSize": ".78rem"}) for c in r],
                            style={"borderBottom": f"1px solid {BORDER}"})
                    for r in rows
                ]),
            ],
            style={"width": "100%", "borderCollapse": "collapse"},
        ),
        style={"overflowX": "auto", "maxHeight": "420px", "overflowY": "auto"},
    )


def parse_channels(text: str | None) -> list[dict]:
    """'UHF, TEV' → [{"type": "UHF"}, {"type": "TEV"}]"""
    return [{"type": part.strip().upper()} for part in (text or "").split(",") if part.strip()]


def decode_upload(contents: str) -> dict:
    """
    Decode a dcc.Upload data URL ("data:application/json;base64,....")
    into the JSON bundle it carries. Raises ValueError on anything else.
    """
    _, _, encoded = (contents or "").partition(",")
    if not encoded:
        raise ValueError("Empty upload")
    bundle = json.loads(base64.b64decode(encoded, validate=True).decode("utf-8"))
    if not isinstance(bundle, dict):
        raise ValueError("Config bundle must be a JSON object")
    return bundle


def _mutate(trigger: str, values: dict) -> str:
    """Apply one save/delete action and return the affected id."""
    if trigger == "config-project-save":
        fields = {"name": values["project_name"] or "", "type": values["project_type"] or "变电站",
                  "description": values["project_desc"] or ""}
        if values["project_target"]:
            return store.update_project(values["project_target"], **fields).id
        return store.create_project(**fields).id

    if trigger == "config-project-delete":
        store.delete_project(values["project_target"])
        return values["project_target"]

    if trigger == "config-device-save":
        fields = {"name": values["device_name"] or "", "device_type": values["device_type"],
                  "station": values["device_station"] or "", "description": values["device_desc"] or ""}
        if values["device_target"]:
            if values["device_project"]:
                fields["project_id"] = values["device_project"]
            return store.update_device(values["device_target"], **fields).id
        return store.create_device(values["device_project"], **fields).id

    if trigger == "config-device-delete":
        store.delete_device(values["device_target"])
        return values["device_target"]

    if trigger == "config-ipc-save":
        fields = {"name": values["ipc_name"] or "", "sn": values["ipc_sn"] or "",
                  "ip": (values["ipc_ip"] or "").strip(), "description": values["ipc_desc"] or ""}
        if values["ipc_target"]:
            return store.update_ipc(values["ipc_target"], **fields).id
        return store.create_ipc(**fields).id

    if trigger == "config-ipc-delete":
        store.delete_ipc(values["ipc_target"])
        return values["ipc_target"]

    if trigger == "config-sensor-save":
        fields = {"name": values["sensor_name"] or "", "sn": values["sensor_sn"] or "",
                  "model": values["sensor_model"] or "", "ipc_id": values["sensor_ipc"] or "",
                  "channels": parse_channels(values["sensor_channels"])}
        if values["sensor_target"]:
            if values["sensor_device"]:
                fields["device_id"] = values["sensor_device"]
            return store.update_sensor(values["sensor_target"], **fields).id
        return store.create_sensor(values["sensor_device"], **fields).id

    if trigger == "config-sensor-delete":
        store.delete_sensor(values["sensor_target"])
        return values["sensor_target"]

    raise ValueError(f"Unknown action: {trigger}")


def register(app) -> None:

    # ── Tables + dropdown options ─────────────────────────────────────────────
    @app.callback(
        [
            Output("config-projects-table", "children"),
            Output("config-devices-table", "children"),
            Output("config-ipcs-table", "children"),
            Output("config-sensors-table", "children"),
            Output("config-project-target", "options"),
            Output("config-device-target", "options"),
            Output("config-ipc-target", "options"),
            Output("config-sensor-target", "options"),
            Output("config-device-project", "options"),
            Output("config-sensor-device", "options"),
            Output("config-sensor-ipc", "options"),
        ],
        Input("store-config-rev", "data"),
        State("store-lang", "data"),
    )
    def refresh_tables(rev: int, lang: str):
        projects = store.list_projects()
        devices = store.list_devices()
        ipcs = store.list_ipcs()
        sensors = store.list_sensors()
        project_names = {p.id: p.name for p in projects}
        device_names = {d.id: d.name for d in devices}
        ipc_names = {i.id: i.name for i in ipcs}
        ipc_load = {i.id: sum(s.ipc_id == i.id for s in sensors) for i in ipcs}

        projects_table = _table(
            ["ID", t("common.name", lang), t("common.type", lang), t("common.description", lang)],
            [[p.id, p.name, p.type, p.description] for p in projects],
            lang,
        )
        devices_table = _table(
            ["ID", t("common.name", lang), t("common.project", lang), t("common.type", lang), t("common.station", lang)],
            [[d.id, d.name, project_names.get(d.project_id, d.project_id), d.device_type, d.station] for d in devices],
            lang,
        )
        ipcs_table = _table(
            ["ID", t("common.name", lang), t("config.sn", lang), t("config.ip", lang), t("config.sensors", lang)],
            [[i.id, i.name, i.sn, str(i.ip), str(ipc_load[i.id])] for i in ipcs],
            lang,
        )
        sensors_table = _table(
            ["ID", t("common.name", lang), t("config.sn", lang), t("common.device", lang),
             t("config.ipc", lang), t("common.channel", lang)],
            [[s.id, s.name, s.sn, device_names.get(s.device_id, s.device_id), ipc_names.get(s.ipc_id, s.ipc_id),
              ", ".join(c.type for c in s.channels)] for s in sensors],
            lang,
        )

        project_opts = [{"label": p.name, "value": p.id} for p in projects]
        device_opts = [{"label": d.name, "value": d.id} for d in devices]
        ipc_opts = [{"label": f"{i.name} ({i.ip})", "value": i.id} for i in ipcs]
        sensor_opts = [{"label": f"{s.name} ({s.id})", "value": s.id} for s in sensors]
        return (projects_table, devices_table, ipcs_table, sensors_table,
                project_opts, device_opts, ipc_opts, sensor_opts, project_opts, device_opts, ipc_opts)

    # ── Form prefill from the selected target ─────────────────────────────────
    @app.callback(
        [
            Output("config-project-name", "value"),
            Output("config-project-type", "value"),
            Output("config-project-desc", "value"),
        ],
        Input("config-project-target", "value"),
        prevent_initial_call=True,
    )
    def prefill_project(project_id: str | None):
        p = store.get_project(project_id) if project_id else None
        if p is None:
            return "", "变电站", ""
        return p.name, p.type, p.description

    @app.callback(
        [
            Output("config-device-project", "value"),
            Output("config-device-name", "value"),
            Output("config-device-type", "value"),
            Output("config-device-station", "value"),
            Output("config-device-desc", "value"),
        ],
        Input("config-device-target", "value"),
        prevent_initial_call=True,
    )
    def prefill_device(device_id: str | None):
        d = store.get_device(device_id) if device_id else None
        if d is None:
            return no_update, "", no_update, "", ""
        return d.project_id, d.name, d.device_type, d.station, d.description

    @app.callback(
        [
            Output("config-ipc-name", "value"),
            Output("config-ipc-sn", "value"),
            Output("config-ipc-ip", "value"),
            Output("config-ipc-desc", "value"),
        ],
        Input("config-ipc-target", "value"),
        prevent_initial_call=True,
    )
    def prefill_ipc(ipc_id: str | None):
        i = store.get_ipc(ipc_id) if ipc_id else None
        if i is None:
            return "", "", "", ""
        return i.name, i.sn, str(i.ip), i.description

    @app.callback(
        [
            Output("config-sensor-device", "value"),
            Output("config-sensor-name", "value"),
            Output("config-sensor-sn", "value"),
            Output("config-sensor-model", "value"),
            Output("config-sensor-ipc", "value"),
            Output("config-sensor-channels", "value"),
        ],
        Input("config-sensor-target", "value"),
        prevent_initial_call=True,
    )
    def prefill_sensor(sensor_id: str | None):
        s = store.get_sensor(sensor_id) if sensor_id else None
        if s is None:
            return no_update, "", "", "", None, ""
        return s.device_id, s.name, s.sn, s.model, s.ipc_id or None, ", ".join(c.type for c in s.channels)

    # ── Save / delete ─────────────────────────────────────────────────────────
    @app.callback(
        [
            Output("config-message", "children"),
            Output("store-config-rev", "data"),
        ],
        [
            Input("config-project-save", "n_clicks"),
            Input("config-project-delete", "n_clicks"),
            Input("config-device-save", "n_clicks"),
            Input("config-device-delete", "n_clicks"),
            Input("config-ipc-save", "n_clicks"),
            Input("config-ipc-delete", "n_clicks"),
            Input("config-sensor-save", "n_clicks"),
            Input("config-sensor-delete", "n_clicks"),
        ],
        [
            State("config-project-target", "value"),
            State("config-project-name", "value"),
            State("config-project-type", "value"),
            State("config-project-desc", "value"),
            State("config-device-target", "value"),
            State("config-device-project", "value"),
            State("config-device-name", "value"),
            State("config-device-type", "value"),
            State("config-device-station", "value"),
            State("config-device-desc", "value"),
            State("config-ipc-target", "value"),
            State("config-ipc-name", "value"),
            State("config-ipc-sn", "value"),
            State("config-ipc-ip", "value"),
            State("config-ipc-desc", "value"),
            State("config-sensor-target", "value"),
            State("config-sensor-device", "value"),
            State("config-sensor-name", "value"),
            State("config-sensor-sn", "value"),
            State("config-sensor-model", "value"),
            State("config-sensor-ipc", "value"),
            State("config-sensor-channels", "value"),
            State("store-config-rev", "data"),
            State("store-lang", "data"),
        ],
        prevent_initial_call=True,
    )
    def apply_change(
        n_ps, n_pd, n_ds, n_dd, n_is, n_id, n_ss, n_sd,
        project_target, project_name, project_type, project_desc,
        device_target, device_project, device_name, device_type, device_station, device_desc,
        ipc_target, ipc_name, ipc_sn, ipc_ip, ipc_desc,
        sensor_target, sensor_device, sensor_name, sensor_sn, sensor_model, sensor_ipc, sensor_channels,
        rev, lang,
    ):
        trigger = ctx.triggered_id
        if not trigger or not ctx.triggered[0]["value"]:
            return no_update, no_update

        try:
            affected = _mutate(trigger, {
                "project_target": project_target, "project_name": project_name,
                "project_type": project_type, "project_desc": project_desc,
                "device_target": device_target, "device_project": device_project,
                "device_name": device_name, "device_type": device_type,
                "device_station": device_station, "device_desc": device_desc,
                "ipc_target": ipc_target, "ipc_name": ipc_name, "ipc_sn": ipc_sn,
                "ipc_ip": ipc_ip, "ipc_desc": ipc_desc,
                "sensor_target": sensor_target, "sensor_device": sensor_device,
                "sensor_name": sensor_name, "sensor_sn": sensor_sn, "sensor_model": sensor_model,
                "sensor_ipc": sensor_ipc, "sensor_channels": sensor_channels,
            })
        except (ValueError, KeyError) as exc:
            logger.warning("Config change %s rejected: %s", trigger, exc)
            return dbc.Alert(f"{t('common.error', lang)}: {exc}", color="danger", dismissable=True), no_update

        done = t("common.deleted", lang) if trigger.endswith("delete") else t("common.saved", lang)
        return dbc.Alert(f"{done}: {affected}", color="success", dismissable=True, duration=4000), (rev or 0) + 1

    # ── Project config export / import ────────────────────────────────────────
    @app.callback(
        [
            Output("config-export-download", "data"),
            Output("config-message", "children", allow_duplicate=True),
        ],
        Input("config-export-btn", "n_clicks"),
        [
            State("config-project-target", "value"),
            State("store-lang", "data"),
        ],
        prevent_initial_call=True,
    )
    def export_config(n_clicks: int, project_id: str | None, lang: str):
        if not n_clicks:
            return no_update, no_update
        if not project_id:
            return no_update, dbc.Alert(t("config.no_project", lang), color="warning", dismissable=True)
        try:
            bundle = store.export_project_config(project_id)
        except KeyError as exc:
            logger.warning("Config export of %s failed: %s", project_id, exc)
            return no_update, dbc.Alert(f"{t('common.error', lang)}: {exc}", color="danger", dismissable=True)
        filename = f"{bundle['project']['name']}_config.json"
        return dcc.send_string(json.dumps(bundle, ensure_ascii=False, indent=2), filename), no_update

    @app.callback(
        [
            Output("config-message", "children", allow_duplicate=True),
            Output("store-config-rev", "data", allow_duplicate=True),
        ],
        Input("config-import-upload", "contents"),
        [
            State("config-import-upload", "filename"),
            State("store-config-rev", "data"),
            State("store-lang", "data"),
        ],
        prevent_initial_call=True,
    )
    def import_config(contents: str | None, filename: str | None, rev: int, lang: str):
        if not contents:
            return no_update, no_update
        try:
            counts = store.import_project_config(decode_upload(contents))
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Config import of %s rejected: %s", filename, exc)
            return dbc.Alert(f"{t('common.error', lang)}: {exc}", color="danger", dismissable=True), no_update
        message = t("config.imported", lang, **counts)
        return dbc.Alert(message, color="success", dismissable=True, duration=6000), (rev or 0) + 1
