# aicds

Core building blocks for a networked camera system that handles RGB and
thermal video. The package holds the parts that do not depend on a media
framework:

- `aicds.logger`: a levelled, thread-safe logger. It writes coloured lines
  to the console and can also append plain lines to a log file.
- `aicds.config`: loads the main JSON configuration and the device settings
  file, and saves the device settings back.
- `aicds.serial_port`: a serial link for PTZ control, with hex-string
  sending and XOR checksums.
- `aicds.system_monitor`: CPU/GPU temperature, memory and CPU usage read
  from `/sys` and `/proc`, with temperature alerts.
- `aicds.thermal_monitor`: per-object temperature tracking from thermal
  frames, with over-temperature detection.
- Small utilities: `string_utils`, `codec` (Base64), `pipeline_builder`,
  `circular_buffer`, `rate_limiter`, `safe_queue` and `timer`.

Python 3.10 or later is required. The package depends on `numpy` and
`pyserial`.

## Logging

```python
from aicds.logger import LogLevel, get_logger

log = get_logger()
log.set_log_file("camera.log")
log.info("Camera {} started", "front")
log.log(LogLevel.WARNING, "Disk almost full")
```

A line looks like this: `[2024-01-01 12:00:00.123] [INFO ] Camera front started`.
It carries a local timestamp with milliseconds and a level tag. Messages
below the logger's `level` are dropped. If the log file cannot be opened,
a note goes to stderr and logging carries on to the console only.

## Configuration

```python
from aicds.config import Config, ConfigError

config = Config()
config.load_config("config.json")                  # fills config.webrtc
config.load_device_settings("device_setting.json") # fills config.device_settings
config.device_settings.ptz_move_speed = 32
config.save_device_settings()
```

Keys that are absent take their defaults. A device settings file that does
not exist leaves the current settings in place. `ConfigError` is raised in
these cases:

- a file cannot be read or is not valid JSON;
- a value has the wrong type;
- `save_device_settings` is called before a settings path was given.

In the settings file, flags are stored as `0`/`1`.
`DeviceSettings.from_dict` and `to_dict` convert to and from that layout.

## Pipeline descriptions

```python
from aicds.pipeline_builder import PipelineBuilder

builder = PipelineBuilder()
builder.add_element("udpsrc port={}", 5000).add_element("rtph264depay")
builder.build()   # 'udpsrc port=5000 ! rtph264depay'
```

## Serial PTZ control

```python
from aicds.serial_port import SerialConfig, SerialPort, calculate_checksum, parse_hex_list

frame = parse_hex_list("FF,01,00,04")
checksum = calculate_checksum(frame)   # XOR of all bytes

with SerialPort() as port:
    port.data_callback = lambda data: print(data.hex())
    port.open(SerialConfig(port_name="/dev/ttyUSB0", baud_rate=38400))
    port.send_hex("FF,01,00,04")
```

About `SerialPort`:

- The line is always set up as 8N1.
- `port_name` may also be a pyserial URL.
- Incoming bytes go to `data_callback` from a background reader thread.
- Supported baud rates are 9600, 19200, 38400, 57600 and 115200.
- `SerialPortError` is raised for these failures: an unsupported rate, a
  port that cannot be opened, a write to a closed port, or a short write.
- `send_hex` raises `ValueError` for a value that is not hex.

## Monitoring

`SystemMonitor` samples CPU and GPU temperatures, memory and CPU usage.
Call `update_status` for a single sample, or use `start(interval)` and
`stop` to sample on a background thread. `check_alerts` compares the CPU
and GPU temperatures with `AlertThresholds`. It passes each alert text to
`alert_callback` and also returns the alerts.

`ThermalMonitor` works from thermal frames given as numpy arrays, with
`(x, y, w, h)` boxes and object ids:

- Each object's temperature is the mean of its box, using the first channel
  mapped linearly onto the configured range, plus the configured correction.
- It keeps current, moving-average, minimum and maximum values per object.
- Objects not updated for more than 30 seconds are dropped.
- `over_temp_callback` is called once an object has stayed above the upper
  threshold for `over_temp_duration` processed frames.

## Utilities

```python
from aicds.string_utils import split, to_hex
from aicds.circular_buffer import CircularBuffer

split("a,,b", ",")        # ['a', 'b']
to_hex(b"\x01\xab")       # '01 ab '

buffer = CircularBuffer(3)
for value in range(5):
    buffer.push(value)
buffer.items()            # [2, 3, 4]
```

The other utilities:

- `RateLimiter`: a sliding-window request limiter.
- `SafeQueue`: a thread-safe FIFO with a blocking `pop_wait`.
- `Timer`: runs a callback once (`set_timeout`) or repeatedly
  (`set_interval`) on a background thread.

## What the package does not do

This is a library only. It does not provide:

- a command to start a camera;
- video capture, encoding or streaming;
- peer connections or a signalling client;
- recording.

`PipelineBuilder` only builds description strings and never runs them.
`SystemMonitor` does not fill the storage, network, process or GPU-usage
fields of `SystemStatus`. It does not check the memory or storage
thresholds either.

## Running the tests

Install the `test` extra and run `pytest` from the project root.