"""Serial line to the pan/tilt/zoom controller, with a background reader."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable

import serial

from aicds.logger import get_logger
from aicds.string_utils import to_hex

SUPPORTED_BAUD_RATES = (9600, 19200, 38400, 57600, 115200)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_READ_CHUNK = 256
_POLL_INTERVAL = 0.01


class SerialPortError(OSError):
    """Raised when the serial port cannot be opened or written."""


@dataclass
class SerialConfig:
    """Serial line parameters; ``read_timeout`` is in milliseconds."""

    port_name: str = "/dev/ttyUSB0"
    baud_rate: int = 38400
    data_bits: int = 8
    parity: str = "N"
    stop_bits: int = 1
    read_timeout: int = 100


def _parse_hex_token(token: str) -> int:
    rest = token.lstrip(" \t\n\v\f\r")
    negative = False
    if rest[:1] in ("+", "-"):
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest[:2] in ("0x", "0X") and rest[2:3] in _HEX_DIGITS and rest[2:3] != "":
        rest = rest[2:]
    digits = ""
    for char in rest:
        if char not in _HEX_DIGITS:
            break
        digits += char
    if not digits:
        raise ValueError(f"invalid hex value: {token!r}")
    value = -int(digits, 16) if negative else int(digits, 16)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"hex value out of range: {token!r}")
    return value & 0xFF


def parse_hex_list(text: str) -> bytes:
    """Parse comma-separated hex values such as ``"a0,01,ff"`` into bytes."""
    if not text:
        return b""
    pieces = text.split(",")
    if pieces[-1] == "":
        pieces.pop()
    return bytes(_parse_hex_token(piece) for piece in pieces)


def calculate_checksum(data: Iterable[int]) -> int:
    """XOR of all bytes."""
    checksum = 0
    for byte in data:
        checksum ^= byte
    return checksum


class SerialPort:
    """Serial port that delivers incoming bytes to ``data_callback`` from a reader thread.

    The line is always configured 8N1; ``port_name`` may also be a pyserial URL.
    """

    def __init__(self) -> None:
        self.config = SerialConfig()
        self.data_callback: Callable[[bytes], None] | None = None
        self._serial: serial.SerialBase | None = None
        self._running = threading.Event()
        self._reader: threading.Thread | None = None
        self._send_lock = threading.Lock()

    def open(self, config: SerialConfig) -> None:
        """Open the port and start reading; raises SerialPortError on failure."""
        log = get_logger()
        if self.is_open():
            log.warning("Serial port already open")
            return
        if config.baud_rate not in SUPPORTED_BAUD_RATES:
            raise SerialPortError(f"Unsupported baud rate: {config.baud_rate}")
        self.config = config
        try:
            self._serial = serial.serial_for_url(
                config.port_name,
                baudrate=config.baud_rate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=(config.read_timeout // 100) / 10,
            )
        except (serial.SerialException, ValueError) as exc:
            self._serial = None
            raise SerialPortError(
                f"Failed to open serial port {config.port_name}: {exc}"
            ) from exc
        self._serial.reset_input_buffer()
        self._running.set()
        self._reader = threading.Thread(target=self._read_loop, daemon=True)
        self._reader.start()
        log.info("Serial port {} opened successfully", config.port_name)

    def is_open(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def close(self) -> None:
        """Stop the reader and close the port; does nothing when closed."""
        if not self.is_open():
            return
        self._running.clear()
        reader, self._reader = self._reader, None
        if reader is not None and reader is not threading.current_thread():
            reader.join()
        port, self._serial = self._serial, None
        if port is not None:
            port.close()
        get_logger().info("Serial port closed")

    def send(self, data: bytes | bytearray | Iterable[int]) -> None:
        """Write all of ``data``; raises SerialPortError if closed or the write is short."""
        payload = bytes(data)
        if not self.is_open():
            raise SerialPortError("Serial port not open")
        with self._send_lock:
            try:
                written = self._serial.write(payload)
            except serial.SerialException as exc:
                raise SerialPortError(f"Failed to write data: {exc}") from exc
            if written is not None and written != len(payload):
                raise SerialPortError(
                    f"Failed to write all data: {written} of {len(payload)} bytes"
                )
        get_logger().debug("TX: {}", to_hex(payload))

    def send_hex(self, hex_string: str) -> None:
        """Send comma-separated hex values; raises ValueError if they do not parse."""
        self.send(parse_hex_list(hex_string))

    def _read_loop(self) -> None:
        log = get_logger()
        while self._running.is_set():
            port = self._serial
            if port is None:
                break
            try:
                available = port.in_waiting
                data = port.read(min(available, _READ_CHUNK)) if available > 0 else b""
            except (serial.SerialException, OSError) as exc:
                log.error("Serial read failed: {}", exc)
                time.sleep(_POLL_INTERVAL)
                continue
            if data:
                log.debug("RX: {}", to_hex(data))
                callback = self.data_callback
                if callback is not None:
                    callback(bytes(data))
            time.sleep(_POLL_INTERVAL)

    def __enter__(self) -> SerialPort:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()