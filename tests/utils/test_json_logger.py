import io
import json
import logging
import os

import pytest
from utils.loggers.json_logger import (
    JsonLogger,
    determine_log_path,
    get_logger,
    get_project_root,
    log_json,
    setup_log_file,
)


@pytest.fixture
def stream():
    return io.StringIO()


def test_json_formatter_fields(stream):
    logger = get_logger("test_json_formatter_fields", console_stream=stream)
    logger.info("Chain build completed")

    record = json.loads(stream.getvalue().strip())
    assert record["level"] == "INFO"
    assert record["logger"] == "test_json_formatter_fields"
    assert record["message"] == "Chain build completed"
    assert record["function"] == "test_json_formatter_fields"
    assert "timestamp" in record
    assert "metrics" not in record


def test_json_formatter_includes_metrics(stream):
    logger = get_logger("test_json_formatter_metrics", console_stream=stream)
    log_json(logger, "Chain statistics", {"forward_states": 7})

    record = json.loads(stream.getvalue().strip())
    assert record["metrics"] == {"forward_states": 7}


def test_json_formatter_includes_exception(stream):
    logger = get_logger("test_json_formatter_exception", console_stream=stream)
    try:
        raise ValueError("bad prefix")
    except ValueError:
        logger.exception("Build failed")

    record = json.loads(stream.getvalue().strip())
    assert record["exception"]["type"] == "ValueError"
    assert record["exception"]["message"] == "bad prefix"


def test_console_handler_skips_debug(stream):
    logger = get_logger("test_console_skips_debug", console_stream=stream)
    logger.debug("not shown")

    assert stream.getvalue() == ""


def test_plain_console_format(stream):
    logger = get_logger("test_plain_console", console_json=False, console_stream=stream)
    logger.info("plain message")

    assert "[INFO] test_plain_console: plain message" in stream.getvalue()


def test_clear_existing_handlers(stream):
    get_logger("test_clear_existing", console_stream=stream)
    logger = get_logger("test_clear_existing", console_stream=stream)

    assert len(logger.handlers) == 1


def test_keep_existing_handlers(stream):
    first = get_logger("test_keep_existing", console_stream=stream)
    second = get_logger("test_keep_existing", clear_existing=False)

    assert first is second
    assert len(second.handlers) == 1


def test_file_handler_writes_debug(tmp_path, stream):
    log_file = tmp_path / "logs" / "bimarkov.log"
    logger = get_logger("test_file_handler", log_file=str(log_file), console_stream=stream)
    logger.debug("Chain sealed")

    for handler in logger.handlers:
        handler.flush()

    lines = log_file.read_text().strip().splitlines()
    assert json.loads(lines[-1])["message"] == "Chain sealed"


def test_setup_log_file_creates_directory(tmp_path):
    log_file = tmp_path / "nested" / "dir" / "run.log"
    result = setup_log_file(str(log_file))

    assert result == str(log_file)
    assert os.path.isdir(tmp_path / "nested" / "dir")


def test_determine_log_path_default():
    path = determine_log_path()

    assert path.startswith(os.path.join(get_project_root(), "logs"))
    assert os.path.basename(path).startswith("bimarkov_")


def test_json_logger_is_formatter():
    assert isinstance(JsonLogger(), logging.Formatter)
