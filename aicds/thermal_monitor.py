"""Per-object temperature tracking from thermal camera frames."""

from __future__ import annotations

import dataclasses
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

import numpy as np

from aicds.logger import get_logger

_STALE_AFTER = 30


@dataclass
class ThermalConfig:
    """Temperature mapping and alerting parameters, in °C and seconds."""

    lower_threshold: int = 15
    upper_threshold: int = 50
    temp_diff_threshold: int = 7
    over_temp_duration: int = 15
    temp_correction: int = 0
    enable_temp_display: bool = True
    enable_temp_notification: bool = True


@dataclass
class ObjectTemperature:
    """Temperature history of one tracked object."""

    object_id: int
    current_temp: float = 0.0
    average_temp: float = 0.0
    max_temp: float = 0.0
    min_temp: float = 0.0
    last_update: float = 0.0
    is_over_temp: bool = False
    over_temp_duration: int = 0


def _intersect(
    box: Sequence[int], width: int, height: int
) -> tuple[int, int, int, int] | None:
    x, y, w, h = (int(v) for v in box)
    left = max(x, 0)
    top = max(y, 0)
    right = min(x + w, width)
    bottom = min(y + h, height)
    if right <= left or bottom <= top:
        return None
    return left, top, right, bottom


class ThermalMonitor:
    """Measures tracked objects in thermal frames and reports sustained over-temperature."""

    def __init__(
        self,
        config: ThermalConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config if config is not None else ThermalConfig()
        self.over_temp_callback: Callable[[int, float], None] | None = None
        self._clock = clock
        self._objects: dict[int, ObjectTemperature] = {}
        self._lock = threading.Lock()

    def pixel_to_temperature(self, pixel: Sequence[int] | int) -> float:
        """Map the first channel of a pixel (0-255) linearly onto the threshold range."""
        value = pixel if isinstance(pixel, (int, np.integer)) else pixel[0]
        normalized = int(value) / 255.0
        cfg = self.config
        return cfg.lower_threshold + (cfg.upper_threshold - cfg.lower_threshold) * normalized

    def process_frame(
        self,
        frame: np.ndarray,
        bounding_boxes: Iterable[Sequence[int]],
        object_ids: Iterable[int],
    ) -> None:
        """Update each object's temperature from its ``(x, y, w, h)`` box in ``frame``."""
        pixels = np.asarray(frame)
        if pixels.size == 0:
            return
        channel = pixels[..., 0] if pixels.ndim == 3 else pixels
        height, width = channel.shape[:2]
        cfg = self.config
        for box, object_id in zip(bounding_boxes, object_ids):
            region = _intersect(box, width, height)
            if region is None:
                continue
            left, top, right, bottom = region
            roi = channel[top:bottom, left:right].astype(np.float64)
            temps = cfg.lower_threshold + (cfg.upper_threshold - cfg.lower_threshold) * (
                roi / 255.0
            )
            average = float(temps.mean()) + cfg.temp_correction
            self._update_object(int(object_id), average)
        self._check_over_temp()

    def _update_object(self, object_id: int, temp: float) -> None:
        log = get_logger()
        with self._lock:
            entry = self._objects.setdefault(object_id, ObjectTemperature(object_id))
            entry.current_temp = temp
            entry.last_update = self._clock()
            if entry.max_temp == 0 or temp > entry.max_temp:
                entry.max_temp = temp
            if entry.min_temp == 0 or temp < entry.min_temp:
                entry.min_temp = temp
            if entry.average_temp == 0:
                entry.average_temp = temp
            else:
                entry.average_temp = entry.average_temp * 0.9 + temp * 0.1
            was_over = entry.is_over_temp
            entry.is_over_temp = temp > self.config.upper_threshold
            if entry.is_over_temp and not was_over:
                entry.over_temp_duration = 0
                log.warning(
                    "Object {} temperature exceeded threshold: {:.1f}°C", object_id, temp
                )
            elif was_over and not entry.is_over_temp:
                entry.over_temp_duration = 0
                log.info("Object {} temperature returned to normal: {:.1f}°C", object_id, temp)

    def _check_over_temp(self) -> None:
        log = get_logger()
        alerts: list[tuple[int, float]] = []
        with self._lock:
            now = self._clock()
            for object_id in [
                oid
                for oid, entry in self._objects.items()
                if int(now - entry.last_update) > _STALE_AFTER
            ]:
                log.debug("Removing stale object temperature: {}", object_id)
                del self._objects[object_id]
            limit = self.config.over_temp_duration
            for object_id, entry in self._objects.items():
                if not entry.is_over_temp:
                    continue
                entry.over_temp_duration += 1
                if entry.over_temp_duration == limit:
                    log.error(
                        "Object {} has been over temperature for {} seconds at {:.1f}°C",
                        object_id,
                        limit,
                        entry.current_temp,
                    )
                    alerts.append((object_id, entry.current_temp))
        callback = self.over_temp_callback
        if callback is not None:
            for object_id, temp in alerts:
                callback(object_id, temp)

    def object_temperature(self, object_id: int) -> ObjectTemperature | None:
        """Return a copy of an object's record, or None if it is not tracked."""
        with self._lock:
            entry = self._objects.get(object_id)
            return dataclasses.replace(entry) if entry is not None else None

    def average_scene_temperature(self) -> float:
        """Mean current temperature of tracked objects; 0.0 when none are tracked."""
        with self._lock:
            if not self._objects:
                return 0.0
            return sum(e.current_temp for e in self._objects.values()) / len(self._objects)

    def over_temp_objects(self) -> list[int]:
        """Ids of objects currently above the upper threshold."""
        with self._lock:
            return [oid for oid, entry in self._objects.items() if entry.is_over_temp]