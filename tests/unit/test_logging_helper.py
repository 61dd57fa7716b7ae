"""Unit tests for the per-module file logger."""

from src.tools import logging_helper


def test_writes_to_file_once(tmp_path, monkeypatch):
    monkeypatch.setattr(logging_helper, "LOGS_DIR", str(tmp_path / "logs"))
    name = "test_logging_helper.writes_once"

    logger = logging_helper.get_file_logger(name, "unit.log")
    again = logging_helper.get_file_logger(name, "unit.log")
    logger.info("hello %s", "tutor")
    for h in logger.handlers:
        h.flush()

    assert again is logger
    assert len(logger.handlers) == 1
    assert logger.propagate is False
    assert "INFO hello tutor" in (tmp_path / "logs" / "unit.log").read_text(encoding="utf-8")

    for h in list(logger.handlers):
        h.close()
        logger.removeHandler(h)
