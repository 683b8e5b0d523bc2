import io
import re
from datetime import datetime

import pytest

from aicds.logger import LogLevel, Logger, format_timestamp, get_logger

LINE_RE = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3}\] \[(.{5})\] (.*)$")


def test_info_is_coloured_green_and_formatted():
    out = io.StringIO()
    Logger(stream=out).info("value {} of {}", 5, "x")
    text = out.getvalue()
    assert text.startswith("\033[32m")
    assert text.endswith("\033[0m")
    line = text[len("\033[32m"):-len("\033[0m")].rstrip("\n")
    match = LINE_RE.match(line)
    assert match is not None
    assert match.group(1) == "INFO "
    assert match.group(2) == "value 5 of x"


@pytest.mark.parametrize(
    "method,tag",
    [("trace", "TRACE"), ("debug", "DEBUG"), ("warning", "WARN "), ("error", "ERROR"), ("critical", "CRIT ")],
)
def test_level_tags(method, tag):
    out = io.StringIO()
    logger = Logger(stream=out)
    getattr(logger, method)("msg")
    assert f"[{tag}] msg" in out.getvalue()


def test_messages_below_level_are_dropped():
    out = io.StringIO()
    logger = Logger(level=LogLevel.WARNING, stream=out)
    logger.info("hidden")
    logger.debug("hidden")
    assert out.getvalue() == ""
    logger.error("shown")
    assert "shown" in out.getvalue()


def test_braces_kept_without_arguments():
    out = io.StringIO()
    Logger(stream=out).info("literal {}")
    assert "literal {}" in out.getvalue()


def test_file_receives_plain_lines_and_appends(tmp_path):
    path = tmp_path / "app.log"
    for word in ("first", "second"):
        logger = Logger(stream=io.StringIO())
        logger.set_log_file(str(path))
        logger.error(word)
        logger.close()
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert [LINE_RE.match(line).group(2) for line in lines] == ["first", "second"]
    assert "\033[" not in path.read_text(encoding="utf-8")


def test_close_stops_file_output(tmp_path):
    path = tmp_path / "app.log"
    logger = Logger(stream=io.StringIO())
    logger.set_log_file(str(path))
    logger.info("one")
    logger.close()
    logger.info("two")
    assert len(path.read_text(encoding="utf-8").splitlines()) == 1


def test_unopenable_file_reports_and_keeps_console(tmp_path, capsys):
    out = io.StringIO()
    logger = Logger(stream=out)
    bad = tmp_path / "missing" / "dir" / "x.log"
    logger.set_log_file(str(bad))
    assert "Failed to open log file" in capsys.readouterr().err
    logger.info("still here")
    assert "still here" in out.getvalue()


def test_format_timestamp():
    assert format_timestamp(datetime(2024, 1, 2, 3, 4, 5, 6000)) == "2024-01-02 03:04:05.006"


@pytest.mark.parametrize(
    "level,shown",
    [
        (LogLevel.TRACE, ["trace", "debug", "info", "warning", "error", "critical"]),
        (LogLevel.DEBUG, ["debug", "info", "warning", "error", "critical"]),
        (LogLevel.INFO, ["info", "warning", "error", "critical"]),
        (LogLevel.WARNING, ["warning", "error", "critical"]),
        (LogLevel.ERROR, ["error", "critical"]),
        (LogLevel.CRITICAL, ["critical"]),
    ],
)
def test_level_ordering(level, shown):
    out = io.StringIO()
    logger = Logger(level=level, stream=out)
    for method in ("trace", "debug", "info", "warning", "error", "critical"):
        getattr(logger, method)(f"from-{method}")
    written = [word for word in re.findall(r"from-(\w+)", out.getvalue())]
    assert written == shown


def test_get_logger_is_shared():
    first = get_logger()
    second = get_logger()
    assert isinstance(first, Logger)
    assert second is first