from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from adapters.log_setup import build_handlers


def test_disabled_logging_builds_no_handlers(tmp_path) -> None:
    assert build_handlers({}, str(tmp_path)) == []
    assert build_handlers({"enabled": False, "console": True}, str(tmp_path)) == []


def test_file_handler_is_relative_to_project_root(tmp_path) -> None:
    config = {
        "enabled": True,
        "level": "debug",
        "console": False,
        "file": {"enabled": True, "path": "logs/chirp.log", "max_bytes": 1024, "backup_count": 2},
    }

    handlers = build_handlers(config, str(tmp_path))

    try:
        assert len(handlers) == 1
        handler = handlers[0]
        assert isinstance(handler, RotatingFileHandler)
        assert handler.baseFilename == str(tmp_path / "logs" / "chirp.log")
        assert handler.maxBytes == 1024
        assert handler.backupCount == 2
        assert handler.level == logging.DEBUG
        assert (tmp_path / "logs").is_dir()
    finally:
        for handler in handlers:
            handler.close()


def test_unknown_level_falls_back_to_info(tmp_path) -> None:
    handlers = build_handlers({"enabled": True, "level": "chatty"}, str(tmp_path))

    assert [type(handler) for handler in handlers] == [logging.StreamHandler]
    assert handlers[0].level == logging.INFO
