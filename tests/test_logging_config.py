"""Tests for logging setup."""

import logging

import pytest

from docdelta.logging_config import get_logger, setup_logging


class TestSetupLogging:
    @pytest.mark.parametrize(
        "verbosity,level",
        [("quiet", logging.ERROR), ("normal", logging.WARNING), ("verbose", logging.DEBUG)],
    )
    def test_levels(self, verbosity, level):
        assert setup_logging(verbosity).level == level

    def test_unknown_verbosity(self):
        with pytest.raises(ValueError):
            setup_logging("loud")

    def test_file_handler(self, tmp_path):
        log = tmp_path / "docdelta.log"
        setup_logging("normal", str(log))
        get_logger("detectors.links").warning("broken thing")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "docdelta.detectors.links - WARNING - broken thing" in log.read_text()


class TestGetLogger:
    def test_namespacing(self):
        assert get_logger().name == "docdelta"
        assert get_logger("cache").name == "docdelta.cache"
        assert get_logger("docdelta.health").name == "docdelta.health"
