import json
import logging

import pytest

from app.floorplan import DoorCountUnmetError, generate_floor_plan
from app.logging_utils import get_logger


def test_key_value_format(monkeypatch, capsys):
    monkeypatch.setenv("FLOORPLAN_LOG_LEVEL", "info")
    get_logger("test").info(event="hello world", seed=3, skipped=None)
    err = capsys.readouterr().err.strip()
    assert "level=info" in err
    assert "event=hello_world" in err
    assert "seed=3" in err
    assert "logger=test" in err
    assert "skipped" not in err


def test_json_mode(monkeypatch, capsys):
    monkeypatch.setenv("FLOORPLAN_LOG_LEVEL", "debug")
    monkeypatch.setenv("FLOORPLAN_LOG_JSON", "1")
    get_logger("test").debug(event="x", n=1)
    rec = json.loads(capsys.readouterr().err.strip())
    assert rec["event"] == "x" and rec["n"] == 1 and rec["level"] == "debug"


def test_level_filtering(monkeypatch, capsys):
    monkeypatch.setenv("FLOORPLAN_LOG_LEVEL", "warn")
    log = get_logger("test")
    log.info(event="hidden")
    log.warn(event="shown")
    err = capsys.readouterr().err
    assert "hidden" not in err and "shown" in err


def test_generation_logs_to_stderr_only(monkeypatch, capsys):
    monkeypatch.setenv("FLOORPLAN_LOG_LEVEL", "debug")
    generate_floor_plan(seed=2, strict_door_count=False, require_exterior_exits=False)
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "event=floorplan_attempt" in captured.err
    assert "event=floorplan_generated" in captured.err


def test_strict_failure_logs_warning(monkeypatch, capsys):
    monkeypatch.setenv("FLOORPLAN_LOG_LEVEL", "warn")
    with pytest.raises(DoorCountUnmetError):
        generate_floor_plan(seed=3, width=12, height=12, door_count=40, require_exterior_exits=False)
    assert "event=floorplan_door_count_unmet" in capsys.readouterr().err


def test_configure_logging_writes_rotating_file(tmp_path):
    from logging.handlers import RotatingFileHandler

    from app.server import _configure_logging

    root = logging.getLogger()
    saved = list(root.handlers)
    try:
        path = _configure_logging(str(tmp_path))
        assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)
        logging.getLogger("floorplan.test").info("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in (tmp_path / "app.log").read_text()
        assert path.endswith("app.log")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved:
            root.addHandler(h)
