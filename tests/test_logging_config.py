import io
import logging

import pytest

from fegeometry import ConfigurationError, RefEl, RefinementPattern, RefPat
from fegeometry.logging_config import setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("fegeometry")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def test_setup_logging_configures_package_logger(tmp_path, package_logger):
    log_file = tmp_path / "fegeometry.log"
    logger = setup_logging(level=logging.DEBUG, log_file=str(log_file))

    assert logger is package_logger
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    # Repeated setup replaces the handlers instead of duplicating them
    setup_logging(level=logging.WARNING)
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_setup_logging_emits_no_banner(tmp_path, package_logger):
    log_file = tmp_path / "fegeometry.log"
    setup_logging(level=logging.DEBUG, log_file=str(log_file), stream=io.StringIO())

    assert log_file.read_text(encoding="utf-8") == ""


def test_package_records_reach_configured_stream(package_logger):
    stream = io.StringIO()
    setup_logging(level=logging.DEBUG, stream=stream)

    RefinementPattern(RefEl.TRIA, RefPat.REGULAR)
    with pytest.raises(ConfigurationError):
        RefinementPattern(RefEl.SEGMENT, RefPat.REGULAR)

    output = stream.getvalue()
    assert "DEBUG" in output
    assert "fegeometry.refinement.refinement_pattern" in output
    assert "ERROR" in output
    assert "illegal for reference element 'segment'" in output
