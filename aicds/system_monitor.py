"""Periodic sampling of host temperatures, memory and CPU load, with threshold alerts."""

from __future__ import annotations

import dataclasses
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from aicds.logger import get_logger

CPU_ZONE_PATH = "/sys/class/thermal/thermal_zone0/temp"
GPU_ZONE_PATH = "/sys/class/thermal/thermal_zone1/temp"
MEMINFO_PATH = "/proc/meminfo"
STAT_PATH = "/proc/stat"

_CPU_FIELDS = 8


@dataclass
class SystemStatus:
    """Snapshot of host health; temperatures in °C, memory in bytes."""

    cpu_temp: int = 0
    gpu_temp: int = 0
    cpu_usage: float = 0.0
    gpu_usage: float = 0.0

    total_memory: int = 0
    used_memory: int = 0
    available_memory: int = 0

    total_storage: int = 0
    used_storage: int = 0
    storage_usage_percent: int = 0

    network_tx_bytes: int = 0
    network_rx_bytes: int = 0
    network_tx_rate: float = 0.0
    network_rx_rate: float = 0.0

    process_memory: int = 0
    process_cpu_percent: int = 0
    thread_count: int = 0


@dataclass
class AlertThresholds:
    """Limits above which an alert is raised."""

    max_cpu_temp: int = 85
    max_gpu_temp: int = 85
    max_memory_percent: int = 90
    max_storage_percent: int = 95
    min_available_storage: int = 1024 * 1024 * 1024


def _read_text(path: str | Path) -> str | None:
    try:
        with open(path, encoding="utf-8") as handle:
            return handle.read()
    except OSError:
        return None


def read_temperature(path: str | Path) -> int:
    """Read a millidegree thermal-zone value as whole degrees; 0 if unreadable."""
    text = _read_text(path)
    if text is None:
        return 0
    tokens = text.split()
    if not tokens:
        return 0
    try:
        millidegrees = int(tokens[0])
    except ValueError:
        return 0
    degrees = abs(millidegrees) // 1000
    return degrees if millidegrees >= 0 else -degrees


def read_memory_info(path: str | Path = MEMINFO_PATH) -> tuple[int | None, int | None] | None:
    """Return (total, available) memory in bytes from a meminfo file.

    An entry absent from the file is None; an unreadable file gives None.
    """
    text = _read_text(path)
    if text is None:
        return None
    total: int | None = None
    available: int | None = None
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        try:
            value = int(parts[1])
        except ValueError:
            continue
        if parts[0] == "MemTotal:":
            total = value * 1024
        elif parts[0] == "MemAvailable:":
            available = value * 1024
    return total, available


class CpuUsageSampler:
    """Computes CPU load between successive reads of a kernel stat file."""

    def __init__(self, stat_path: str | Path = STAT_PATH) -> None:
        self.stat_path = stat_path
        self._last_total = 0
        self._last_idle = 0

    def sample(self) -> float:
        """Return busy percentage since the previous sample; 0.0 if nothing elapsed."""
        text = _read_text(self.stat_path)
        if text is None:
            return 0.0
        tokens = text.split()
        try:
            values = [int(token) for token in tokens[1 : 1 + _CPU_FIELDS]]
        except ValueError:
            return 0.0
        if len(values) < _CPU_FIELDS:
            return 0.0
        idle = values[3]
        total = sum(values)
        delta_total = total - self._last_total
        delta_idle = idle - self._last_idle
        self._last_total = total
        self._last_idle = idle
        if delta_total == 0:
            return 0.0
        return 100.0 * (1.0 - delta_idle / delta_total)


class SystemMonitor:
    """Samples host status on a background thread and reports threshold breaches."""

    def __init__(
        self,
        cpu_zone_path: str | Path = CPU_ZONE_PATH,
        gpu_zone_path: str | Path = GPU_ZONE_PATH,
        meminfo_path: str | Path = MEMINFO_PATH,
        stat_path: str | Path = STAT_PATH,
    ) -> None:
        self.cpu_zone_path = cpu_zone_path
        self.gpu_zone_path = gpu_zone_path
        self.meminfo_path = meminfo_path
        self.alert_callback: Callable[[str], None] | None = None
        self.interval = 5.0
        self._cpu = CpuUsageSampler(stat_path)
        self._status = SystemStatus()
        self._thresholds = AlertThresholds()
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self, interval: float = 5.0) -> None:
        """Begin sampling every ``interval`` seconds; does nothing if already running."""
        if self._thread is not None:
            return
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop sampling and wait for the worker thread."""
        self._stop_event.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _run(self) -> None:
        stop_event = self._stop_event
        while not stop_event.is_set():
            try:
                self.update_status()
                self.check_alerts()
            except Exception as exc:  # keep the monitor alive across callback faults
                get_logger().error("System monitor sample failed: {}", exc)
            stop_event.wait(self.interval)

    def current_status(self) -> SystemStatus:
        """Return a copy of the latest status."""
        with self._lock:
            return dataclasses.replace(self._status)

    def set_alert_thresholds(self, thresholds: AlertThresholds) -> None:
        with self._lock:
            self._thresholds = dataclasses.replace(thresholds)

    def update_status(self) -> SystemStatus:
        """Take a fresh sample and return a copy of it."""
        with self._lock:
            status = self._status
            status.cpu_temp = read_temperature(self.cpu_zone_path)
            status.gpu_temp = read_temperature(self.gpu_zone_path)
            memory = read_memory_info(self.meminfo_path)
            if memory is not None:
                total, available = memory
                if total is not None:
                    status.total_memory = total
                if available is not None:
                    status.available_memory = available
                status.used_memory = status.total_memory - status.available_memory
            status.cpu_usage = self._cpu.sample()
            return dataclasses.replace(status)

    def check_alerts(self) -> list[str]:
        """Compare the latest status with the thresholds; report and return any alerts."""
        with self._lock:
            status = dataclasses.replace(self._status)
            thresholds = dataclasses.replace(self._thresholds)
        alerts: list[str] = []
        if status.cpu_temp > thresholds.max_cpu_temp:
            alerts.append(f"CPU temperature critical: {status.cpu_temp}°C")
        if status.gpu_temp > thresholds.max_gpu_temp:
            alerts.append(f"GPU temperature critical: {status.gpu_temp}°C")
        callback = self.alert_callback
        if callback is not None:
            for alert in alerts:
                callback(alert)
        return alerts

    def __enter__(self) -> SystemMonitor:
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()