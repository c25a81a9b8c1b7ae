"""Tests for the logger cleanup cascade."""

import pytest

from nightlysync.core.log import ConsoleSink, FileSink, Logger, OTLPSink


@pytest.fixture
def file_logger(tmp_path):
    logger = Logger(
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, path=str(tmp_path / "test.log")),
        otlp=OTLPSink(enabled=False),
    )
    logger.setup(log_root=tmp_path, run_name="test")
    return logger


def test_logger_closes_file_via_context_manager(file_logger):
    assert not file_logger.file._file.closed

    with file_logger:
        file_logger.info("test message")

    assert file_logger.file._file.closed


def test_logger_closes_on_exception(file_logger):
    with pytest.raises(ValueError), file_logger:
        file_logger.info("before exception")
        raise ValueError("test exception")

    assert file_logger.file._file.closed


def test_config_close_cascades_to_sinks(test_config, tmp_path):
    config = test_config.model_copy(deep=True)
    config.logger = Logger(
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, path=str(tmp_path / "cascade.log")),
    )
    config.logger.setup(log_root=tmp_path, run_name="cascade")
    assert not config.logger.file._file.closed

    config.close()

    assert config.logger.file._file.closed
