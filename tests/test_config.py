"""Unit tests for engine configuration and logging setup."""

import logging

import pytest

from stochcalc.config import DEFAULT_CONFIG, EngineConfig
from stochcalc.logging_config import LOGGER_NAME, level_from_name, setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_default_config_values():
    assert DEFAULT_CONFIG.max_iterations == 1000
    assert DEFAULT_CONFIG.convergence_tol == 1e-10
    assert DEFAULT_CONFIG.default_steps == 10
    assert DEFAULT_CONFIG.steady_decimals == 10


@pytest.mark.parametrize(
    "kwargs",
    [
        {"convergence_tol": 0.0},
        {"row_sum_tol": -1e-3},
        {"max_iterations": 0},
        {"default_steps": -1},
    ],
)
def test_config_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        EngineConfig(**kwargs)


def test_level_from_name():
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name("WARNING") == logging.WARNING
    with pytest.raises(ValueError, match="Unknown log level"):
        level_from_name("chatty")


def test_setup_logging_does_not_duplicate_handlers(tmp_path):
    log_file = tmp_path / "run.log"
    setup_logging(logging.INFO)
    logger = setup_logging("info", log_file=str(log_file))

    assert logger is logging.getLogger(LOGGER_NAME)
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2

    logging.getLogger(f"{LOGGER_NAME}.markov").info("steady state reached")
    for handler in logger.handlers:
        handler.flush()
    assert "steady state reached" in log_file.read_text(encoding="utf-8")


def test_diagnostics_go_to_stderr(capsys):
    setup_logging("warning")
    logging.getLogger(f"{LOGGER_NAME}.api").warning("row 2 of P sums to 0.9")
    logging.getLogger(f"{LOGGER_NAME}.api").info("hidden below the level")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "WARNING - stochcalc.api - row 2 of P sums to 0.9" in captured.err
    assert "hidden" not in captured.err
