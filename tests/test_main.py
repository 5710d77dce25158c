import json
import logging

import pytest

from bucketflow.logging_config import parse_log_level, setup_logging
from bucketflow.main import main


@pytest.fixture(autouse=True)
def _restore_package_logger():
    yield
    logger = logging.getLogger("bucketflow")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_cli_runs_headless(qapp, tmp_path, capsys):
    params = tmp_path / "params.json"
    params.write_text(json.dumps({"bucket": {"h0": 0.4}, "inflow": {"qBase": 0.005}}), encoding="utf-8")

    assert main(["--params", str(params), "--duration", "0.3"]) == 0

    out = capsys.readouterr().out
    assert "Stopped after" in out
    assert "spilling=True" in out


def test_cli_reports_bad_params(qapp, tmp_path, capsys):
    broken = tmp_path / "broken.json"
    broken.write_text(json.dumps({"outflow": {"law": "cubic"}}), encoding="utf-8")

    assert main(["--params", str(broken), "--duration", "0.1"]) == 1
    assert "Could not load parameters" in capsys.readouterr().out


def test_cli_rejects_unknown_log_level():
    assert main(["--log-level", "chatty"]) == 2


def test_parse_log_level():
    assert parse_log_level("debug") == logging.DEBUG
    with pytest.raises(ValueError):
        parse_log_level("chatty")


def test_setup_logging_does_not_stack_handlers(tmp_path):
    log_file = tmp_path / "run.log"
    setup_logging(logging.INFO)
    logger = setup_logging(logging.DEBUG, log_file=str(log_file))

    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG
    assert "Logging initialized" in log_file.read_text(encoding="utf-8")
