import logging

import pytest

from simdup import InvalidConfiguration
from simdup.cli import main
from simdup.core.log import get_logger, resolve_level


@pytest.fixture
def simdup_logger():
    logger = logging.getLogger("simdup")
    previous = logger.level
    yield logger
    logger.setLevel(previous)


def test_resolve_level_accepts_names_and_numbers(clean_env):
    assert resolve_level() == logging.INFO
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" Warning ") == logging.WARNING
    assert resolve_level("10") == logging.DEBUG
    assert resolve_level(logging.ERROR) == logging.ERROR


def test_resolve_level_reads_environment(clean_env):
    clean_env.setenv("SIMDUP_LOG_LEVEL", "error")
    assert resolve_level() == logging.ERROR


def test_unknown_level_is_rejected(clean_env):
    with pytest.raises(InvalidConfiguration):
        resolve_level("chatty")


def test_get_logger_sets_package_level(simdup_logger, clean_env):
    logger = get_logger("simdup.grouping", "debug")
    assert logger.name == "simdup.grouping"
    assert simdup_logger.level == logging.DEBUG
    assert logger.isEnabledFor(logging.DEBUG)


def test_cli_log_level(simdup_logger, capsys, clean_env):
    assert main(["--log-level", "warning", "version"]) == 0
    assert simdup_logger.level == logging.WARNING
    assert main(["--log-level", "chatty", "version"]) == 2
    assert "Unknown log level" in capsys.readouterr().err
