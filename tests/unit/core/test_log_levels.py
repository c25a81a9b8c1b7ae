"""Tests for log level filtering and file formatting."""

import pytest

from nightlysync.core.log import (
    ConsoleSink,
    FileSink,
    Logger,
    OTLPSink,
    level_name,
    setup_logger,
)


@pytest.fixture
def file_logger(tmp_path):
    """Build a file-only logger at a given level."""
    loggers = []

    def make(level, template="{level} {message}"):
        log_file = tmp_path / f"{level}.log"
        logger = setup_logger(
            log_root=tmp_path,
            run_name="test",
            console=ConsoleSink(enabled=False),
            otlp=OTLPSink(enabled=False),
            file=FileSink(
                enabled=True,
                level=level,
                path=str(log_file),
                format_template=template,
            ),
        )
        loggers.append(logger)
        return logger, log_file

    yield make


def test_spew_level_includes_everything(file_logger):
    logger, log_file = file_logger("spew")

    logger.spew("SPEW message")
    logger.trace("TRACE message")
    logger.debug("DEBUG message")
    logger.info("INFO message")
    logger.close()

    content = log_file.read_text()
    for level in ("SPEW", "TRACE", "DEBUG", "INFO"):
        assert f"{level} message" in content


def test_info_level_filters_detail(file_logger):
    logger, log_file = file_logger("info")

    logger.debug("DEBUG message")
    logger.info("INFO message")
    logger.warn("WARN message")
    logger.close()

    content = log_file.read_text()
    assert "DEBUG message" not in content
    assert "INFO message" in content
    assert "WARN message" in content


def test_template_appends_keyword_arguments(file_logger):
    logger, log_file = file_logger("info")

    logger.info("Merged", branch="lean-pr-testing-1")
    logger.close()

    content = log_file.read_text()
    assert "info Merged" in content
    assert "branch='lean-pr-testing-1'" in content


def test_file_path_template(tmp_path):
    logger = Logger(
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True),
    )
    logger.setup(log_root=tmp_path, run_name="nightly-testing")
    logger.info("hello")
    logger.close()

    assert (tmp_path / "nightly-testing" / "nightlysync.log").exists()


def test_level_cascades_to_sinks():
    logger = Logger(level="debug", file=FileSink(level="warn"))

    assert logger.console.level == "debug"
    assert logger.file.level == "warn"


@pytest.mark.parametrize(
    ("name",), [("trace",), ("debug",), ("info",), ("warn",), ("error",)]
)
def test_level_name_round_trip(name):
    from nightlysync.core.log import LEVELS
    assert level_name(LEVELS[name]) == name
