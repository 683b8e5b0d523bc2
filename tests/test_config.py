import json

import pytest

from aicds.config import (
    Config,
    ConfigError,
    DeviceSettings,
    VideoConfig,
    WebRTCConfig,
)


def _write(path, document):
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_webrtc_defaults_before_loading():
    config = Config()
    assert config.webrtc.status_timer_interval == 1000
    assert config.webrtc.comm_socket_port == 6000
    assert config.webrtc.tty_baudrate == 38400
    assert len(config.webrtc.video) == 2


def test_load_config_applies_load_defaults(tmp_path):
    path = _write(tmp_path / "config.json", {"camera_id": "cam-test"})
    config = Config()
    config.load_config(path)
    assert config.webrtc.camera_id == "cam-test"
    assert config.webrtc.server_ip == "ws://localhost"
    assert config.webrtc.status_timer_interval == 5000
    assert config.webrtc.http_service_port == "9617"


def test_load_config_reads_values_tty_and_video(tmp_path):
    document = {
        "max_stream_cnt": 4,
        "record_duration": 7,
        "tty": {"name": "/dev/ttyS9", "baudrate": 9600},
        "video0": {"src": "src0", "enc": "enc0"},
        "video1": {"src": "src1"},
    }
    config = Config()
    config.load_config(_write(tmp_path / "c.json", document))
    assert config.webrtc.max_stream_count == 4
    assert config.webrtc.record_duration == 7
    assert config.webrtc.tty_name == "/dev/ttyS9"
    assert config.webrtc.tty_baudrate == 9600
    assert config.webrtc.video[0] == VideoConfig(src="src0", enc="enc0")
    assert config.webrtc.video[1].src == "src1"


def test_video_entries_limited_by_device_count(tmp_path):
    document = {"device_cnt": 1, "video0": {"src": "a"}, "video1": {"src": "b"}}
    config = Config()
    config.load_config(_write(tmp_path / "c.json", document))
    assert config.webrtc.video[0].src == "a"
    assert config.webrtc.video[1] == VideoConfig()


def test_float_numbers_are_truncated():
    config = WebRTCConfig.from_dict({"record_duration": 3.9})
    assert config.record_duration == 3


def test_load_config_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        Config().load_config(tmp_path / "missing.json")


def test_load_config_bad_json_raises(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        Config().load_config(path)


def test_wrong_type_raises():
    with pytest.raises(ConfigError):
        WebRTCConfig.from_dict({"comm_socket_port": "6000"})
    with pytest.raises(ConfigError):
        WebRTCConfig.from_dict({"camera_id": 5})
    with pytest.raises(ConfigError):
        WebRTCConfig.from_dict([1, 2])


def test_missing_device_settings_keeps_defaults_and_allows_save(tmp_path):
    path = tmp_path / "device.json"
    config = Config()
    config.load_device_settings(path)
    assert config.device_settings == DeviceSettings()
    config.save_device_settings()
    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["color_platte"] == 6
    assert saved["record_status"] == 1
    assert saved["resnet50_apply"] == 0


def test_device_settings_round_trip(tmp_path):
    path = tmp_path / "device.json"
    config = Config()
    config.load_device_settings(path)
    config.device_settings.heat_threshold = 77
    config.device_settings.record_status = False
    config.device_settings.ptz_preset = ["1,2", "3,4"]
    config.save_device_settings()

    other = Config()
    other.load_device_settings(path)
    assert other.device_settings == config.device_settings


def test_device_settings_flags_read_from_numbers():
    settings = DeviceSettings.from_dict({"temp_apply": 0, "show_normal_text": 1})
    assert settings.temp_apply is False
    assert settings.show_normal_text is True


def test_to_dict_from_dict_round_trip():
    settings = DeviceSettings(camera_index=1, auto_ptz_preset=["x"], display_temp=False)
    assert DeviceSettings.from_dict(settings.to_dict()) == settings


def test_presets_kept_when_absent_from_file(tmp_path):
    config = Config()
    config.device_settings.ptz_preset = ["kept"]
    config.load_device_settings(_write(tmp_path / "d.json", {"heat_time": 3}))
    assert config.device_settings.ptz_preset == ["kept"]
    assert config.device_settings.heat_time == 3


def test_preset_with_non_string_raises():
    with pytest.raises(ConfigError):
        DeviceSettings.from_dict({"ptz_preset": ["ok", 3]})


def test_save_without_path_raises():
    with pytest.raises(ConfigError):
        Config().save_device_settings()