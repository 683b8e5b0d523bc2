import queue

import pytest

from aicds.serial_port import (
    SerialConfig,
    SerialPort,
    SerialPortError,
    calculate_checksum,
    parse_hex_list,
)


def _collect(received, expected_length, timeout=2.0):
    data = b""
    while len(data) < expected_length:
        data += received.get(timeout=timeout)
    return data


def test_parse_hex_list_basic():
    assert parse_hex_list("01,ff,0A") == bytes([0x01, 0xFF, 0x0A])


def test_parse_hex_list_prefix_and_whitespace():
    assert parse_hex_list(" 0x1f,A0") == bytes([0x1F, 0xA0])


def test_parse_hex_list_stops_at_non_digit():
    assert parse_hex_list("2g") == bytes([0x2])


def test_parse_hex_list_empty():
    assert parse_hex_list("") == b""


@pytest.mark.parametrize("text", ["zz", "01,,02", "ffffffffff"])
def test_parse_hex_list_invalid(text):
    with pytest.raises(ValueError):
        parse_hex_list(text)


def test_checksum_of_empty_is_zero():
    assert calculate_checksum(b"") == 0


def test_checksum_appended_makes_zero():
    data = bytes([0xA0, 0x01, 0x07, 0x55])
    assert calculate_checksum(data + bytes([calculate_checksum(data)])) == 0


def test_checksum_of_single_byte_is_that_byte():
    assert calculate_checksum([0x3C]) == 0x3C


def test_send_when_closed_raises():
    port = SerialPort()
    assert port.is_open() is False
    with pytest.raises(SerialPortError):
        port.send(b"\x01")


def test_unsupported_baud_rate_raises():
    with pytest.raises(SerialPortError):
        SerialPort().open(SerialConfig(port_name="loop://", baud_rate=12345))


def test_open_missing_device_raises(tmp_path):
    with pytest.raises(SerialPortError):
        SerialPort().open(SerialConfig(port_name=str(tmp_path / "no-such-tty")))


def test_loopback_delivers_sent_bytes():
    received = queue.Queue()
    with SerialPort() as port:
        port.data_callback = received.put
        port.open(SerialConfig(port_name="loop://"))
        assert port.is_open() is True
        payload = bytes([0x10, 0x20, 0x30])
        port.send(payload)
        assert _collect(received, len(payload)) == payload
    assert port.is_open() is False


def test_loopback_send_hex():
    received = queue.Queue()
    port = SerialPort()
    port.data_callback = received.put
    port.open(SerialConfig(port_name="loop://"))
    try:
        port.send_hex("a0,05")
        assert _collect(received, 2) == parse_hex_list("a0,05")
    finally:
        port.close()


def test_open_twice_keeps_port_open():
    port = SerialPort()
    config = SerialConfig(port_name="loop://")
    port.open(config)
    try:
        port.open(config)
        assert port.is_open() is True
        assert port.config is config
    finally:
        port.close()
    assert port.is_open() is False


def test_send_hex_invalid_raises_before_writing():
    port = SerialPort()
    port.open(SerialConfig(port_name="loop://"))
    try:
        with pytest.raises(ValueError):
            port.send_hex("xy")
    finally:
        port.close()