"""Camera system configuration and persisted device settings."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from aicds.logger import get_logger

PASSWORD = "password"

_VIDEO_SLOTS = 2


class ConfigError(Exception):
    """Raised when configuration cannot be read, parsed or written."""


def _require_object(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, dict):
        raise ConfigError(f"{what} must be a JSON object")
    return data


def _int(data: Mapping[str, Any], key: str, default: int) -> int:
    if key not in data:
        return default
    value = data[key]
    if isinstance(value, (bool, int)):
        return int(value)
    if isinstance(value, float):
        try:
            return int(value)
        except (OverflowError, ValueError) as exc:
            raise ConfigError(f"'{key}' is not a usable number") from exc
    raise ConfigError(f"'{key}' must be a number")


def _flag(data: Mapping[str, Any], key: str, default: int) -> bool:
    return bool(_int(data, key, default))


def _str(data: Mapping[str, Any], key: str, default: str) -> str:
    if key not in data:
        return default
    value = data[key]
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string")
    return value


def _str_list(data: Mapping[str, Any], key: str) -> list[str] | None:
    value = data.get(key)
    if not isinstance(value, list):
        return None
    if not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{key}' must hold only strings")
    return list(value)


def _read_json(path: Path, what: str) -> Any:
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError as exc:
        raise ConfigError(f"Failed to open {what}: {path}") from exc
    try:
        return json.loads(text)
    except ValueError as exc:
        raise ConfigError(f"Failed to parse {what} {path}: {exc}") from exc


@dataclass
class VideoConfig:
    """Pipeline fragments for one camera."""

    src: str = ""
    record: str = ""
    infer: str = ""
    enc: str = ""
    enc2: str = ""
    snapshot: str = ""


def _video_from_dict(data: Any, key: str) -> VideoConfig:
    entry = _require_object(data, key)
    return VideoConfig(
        src=_str(entry, "src", ""),
        record=_str(entry, "record", ""),
        infer=_str(entry, "infer", ""),
        enc=_str(entry, "enc", ""),
        enc2=_str(entry, "enc2", ""),
        snapshot=_str(entry, "snapshot", ""),
    )


@dataclass
class WebRTCConfig:
    """Connection, path, recording and device settings of the camera."""

    camera_id: str = ""
    server_ip: str = ""
    comm_socket_port: int = 6000
    max_stream_count: int = 10
    stream_base_port: int = 5000
    device_cnt: int = 2

    snapshot_path: str = "/home/nvidia/webrtc"
    record_path: str = "/home/nvidia/data"
    device_setting_path: str = "/home/nvidia/webrtc/device_setting.json"

    record_duration: int = 5
    record_enc_index: int = 1
    event_record_enc_index: int = 0
    event_buf_time: int = 15

    event_user_id: str = "user"
    event_user_pw: str = PASSWORD
    event_server_ip: str = "203.0.113.10"

    status_timer_interval: int = 1000
    http_service_port: str = "9617"

    tty_name: str = "/dev/ttyTHS0"
    tty_baudrate: int = 38400

    video: list[VideoConfig] = field(
        default_factory=lambda: [VideoConfig() for _ in range(_VIDEO_SLOTS)]
    )

    @classmethod
    def from_dict(cls, data: Any) -> WebRTCConfig:
        """Build from a parsed configuration document; absent keys take load defaults."""
        doc = _require_object(data, "configuration")
        config = cls(
            camera_id=_str(doc, "camera_id", ""),
            server_ip=_str(doc, "server_ip", "ws://localhost"),
            comm_socket_port=_int(doc, "comm_socket_port", 6000),
            max_stream_count=_int(doc, "max_stream_cnt", 10),
            stream_base_port=_int(doc, "stream_base_port", 5000),
            device_cnt=_int(doc, "device_cnt", 2),
            snapshot_path=_str(doc, "snapshot_path", "/home/nvidia/webrtc"),
            record_path=_str(doc, "record_path", "/home/nvidia/data"),
            device_setting_path=_str(
                doc, "device_setting_path", "/home/nvidia/webrtc/device_setting.json"
            ),
            record_duration=_int(doc, "record_duration", 5),
            record_enc_index=_int(doc, "record_enc_index", 1),
            event_record_enc_index=_int(doc, "event_record_enc_index", 0),
            event_buf_time=_int(doc, "event_buf_time", 15),
            event_user_id=_str(doc, "event_user_id", "user"),
            event_user_pw=_str(doc, "event_user_pw", PASSWORD),
            event_server_ip=_str(doc, "event_server_ip", "203.0.113.10"),
            status_timer_interval=_int(doc, "status_timer_interval", 5000),
            http_service_port=_str(doc, "http_service_port", "9617"),
        )
        if "tty" in doc:
            tty = _require_object(doc["tty"], "tty")
            config.tty_name = _str(tty, "name", "/dev/ttyTHS0")
            config.tty_baudrate = _int(tty, "baudrate", 38400)
        for index in range(min(config.device_cnt, _VIDEO_SLOTS)):
            key = f"video{index}"
            if key in doc:
                config.video[index] = _video_from_dict(doc[key], key)
        return config


@dataclass
class DeviceSettings:
    """Operator-adjustable settings persisted on the device."""

    color_palette: int = 6
    record_status: bool = True
    analysis_status: bool = True

    auto_ptz_seq: str = "0,1,2,3,4,5,6,7,8,9,FF,15"
    ptz_preset: list[str] = field(default_factory=list)
    auto_ptz_preset: list[str] = field(default_factory=list)
    auto_ptz_move_speed: int = 48
    ptz_move_speed: int = 48

    enable_event_notify: bool = True
    camera_dn_mode: int = 1
    nv_interval: int = 2

    opt_flow_threshold: int = 11
    opt_flow_apply: bool = True

    resnet50_threshold: int = 6
    resnet50_apply: bool = False

    normal_threshold: int = 30
    heat_threshold: int = 101
    flip_threshold: int = 80
    labor_sign_threshold: int = 101
    normal_sitting_threshold: int = 25

    heat_time: int = 15
    flip_time: int = 15
    labor_sign_time: int = 15
    over_temp_time: int = 15

    temp_apply: bool = True
    display_temp: bool = True
    temp_diff_threshold: int = 12
    temp_correction: int = 8
    threshold_upper_temp: int = 35
    threshold_under_temp: int = 15

    camera_index: int = 0
    show_normal_text: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> DeviceSettings:
        """Build from a parsed settings document; flags are stored as 0/1 numbers."""
        doc = _require_object(data, "device settings")
        return cls(
            color_palette=_int(doc, "color_platte", 6),
            record_status=_flag(doc, "record_status", 1),
            analysis_status=_flag(doc, "analysis_status", 1),
            auto_ptz_seq=_str(doc, "auto_ptz_seq", "0,1,2,3,4,5,6,7,8,9,FF,15"),
            ptz_preset=_str_list(doc, "ptz_preset") or [],
            auto_ptz_preset=_str_list(doc, "auto_ptz_preset") or [],
            auto_ptz_move_speed=_int(doc, "auto_ptz_move_speed", 48),
            ptz_move_speed=_int(doc, "ptz_move_speed", 48),
            enable_event_notify=_flag(doc, "enable_event_notify", 1),
            camera_dn_mode=_int(doc, "camera_dn_mode", 1),
            nv_interval=_int(doc, "nv_interval", 2),
            opt_flow_threshold=_int(doc, "opt_flow_threshold", 11),
            opt_flow_apply=_flag(doc, "opt_flow_apply", 1),
            resnet50_threshold=_int(doc, "resnet50_threshold", 6),
            resnet50_apply=_flag(doc, "resnet50_apply", 0),
            normal_threshold=_int(doc, "normal_threshold", 30),
            heat_threshold=_int(doc, "heat_threshold", 101),
            flip_threshold=_int(doc, "flip_threshold", 80),
            labor_sign_threshold=_int(doc, "labor_sign_threshold", 101),
            normal_sitting_threshold=_int(doc, "normal_sitting_threshold", 25),
            heat_time=_int(doc, "heat_time", 15),
            flip_time=_int(doc, "flip_time", 15),
            labor_sign_time=_int(doc, "labor_sign_time", 15),
            over_temp_time=_int(doc, "over_temp_time", 15),
            temp_apply=_flag(doc, "temp_apply", 1),
            display_temp=_flag(doc, "display_temp", 1),
            temp_diff_threshold=_int(doc, "temp_diff_threshold", 12),
            temp_correction=_int(doc, "temp_correction", 8),
            threshold_upper_temp=_int(doc, "threshold_upper_temp", 35),
            threshold_under_temp=_int(doc, "threshold_under_temp", 15),
            camera_index=_int(doc, "camera_index", 0),
            show_normal_text=_flag(doc, "show_normal_text", 0),
        )

    def to_dict(self) -> dict[str, Any]:
        """Render in the on-disk layout, with flags as 0/1."""
        return {
            "color_platte": self.color_palette,
            "record_status": int(self.record_status),
            "analysis_status": int(self.analysis_status),
            "auto_ptz_seq": self.auto_ptz_seq,
            "auto_ptz_move_speed": self.auto_ptz_move_speed,
            "ptz_move_speed": self.ptz_move_speed,
            "ptz_preset": list(self.ptz_preset),
            "auto_ptz_preset": list(self.auto_ptz_preset),
            "enable_event_notify": int(self.enable_event_notify),
            "camera_dn_mode": self.camera_dn_mode,
            "nv_interval": self.nv_interval,
            "opt_flow_threshold": self.opt_flow_threshold,
            "opt_flow_apply": int(self.opt_flow_apply),
            "resnet50_threshold": self.resnet50_threshold,
            "resnet50_apply": int(self.resnet50_apply),
            "normal_threshold": self.normal_threshold,
            "heat_threshold": self.heat_threshold,
            "flip_threshold": self.flip_threshold,
            "labor_sign_threshold": self.labor_sign_threshold,
            "normal_sitting_threshold": self.normal_sitting_threshold,
            "heat_time": self.heat_time,
            "flip_time": self.flip_time,
            "labor_sign_time": self.labor_sign_time,
            "over_temp_time": self.over_temp_time,
            "temp_apply": int(self.temp_apply),
            "display_temp": int(self.display_temp),
            "temp_diff_threshold": self.temp_diff_threshold,
            "temp_correction": self.temp_correction,
            "threshold_upper_temp": self.threshold_upper_temp,
            "threshold_under_temp": self.threshold_under_temp,
            "camera_index": self.camera_index,
            "show_normal_text": int(self.show_normal_text),
        }


class Config:
    """Holds the camera configuration and the device settings file it was loaded from."""

    def __init__(self) -> None:
        self.webrtc = WebRTCConfig()
        self.device_settings = DeviceSettings()
        self._device_settings_path: Path | None = None

    def load_config(self, config_path: str | Path) -> None:
        """Load the main configuration file; raises ConfigError on failure."""
        path = Path(config_path)
        self.webrtc = WebRTCConfig.from_dict(_read_json(path, "config file"))
        get_logger().info("Config loaded successfully from: {}", path)

    def load_device_settings(self, settings_path: str | Path) -> None:
        """Load device settings; a missing file keeps the current values."""
        path = Path(settings_path)
        self._device_settings_path = path
        if not path.exists():
            get_logger().warning("Device settings file not found: {}", path)
            return
        data = _read_json(path, "device settings")
        settings = DeviceSettings.from_dict(data)
        if _str_list(data, "ptz_preset") is None:
            settings.ptz_preset = self.device_settings.ptz_preset
        if _str_list(data, "auto_ptz_preset") is None:
            settings.auto_ptz_preset = self.device_settings.auto_ptz_preset
        self.device_settings = settings
        get_logger().info("Device settings loaded from: {}", path)

    def save_device_settings(self) -> None:
        """Write device settings back to the file they were loaded from."""
        path = self._device_settings_path
        if path is None:
            raise ConfigError("Device settings path not set")
        text = json.dumps(
            self.device_settings.to_dict(), indent=4, sort_keys=True, ensure_ascii=False
        )
        try:
            with open(path, "w", encoding="utf-8") as handle:
                handle.write(text)
        except OSError as exc:
            raise ConfigError(f"Failed to open device settings for writing: {path}") from exc
        get_logger().info("Device settings saved to: {}", path)