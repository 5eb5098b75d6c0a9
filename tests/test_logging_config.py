"""Tests for the loguru sink installed by configure_logging."""

import pytest
from loguru import logger

from school_transcript.logging_config import configure_logging, get_logger


@pytest.fixture
def configured(capsys):
    def _configure(level):
        configure_logging(level)
        return capsys

    yield _configure
    logger.remove()


def test_records_show_bound_module_name(configured):
    capsys = configured("DEBUG")

    get_logger(name="school_transcript.schema.setup").debug("Created table {}", "Students")

    err = capsys.readouterr().err
    assert "school_transcript.schema.setup" in err
    assert "Created table Students" in err


def test_unbound_records_show_package_name(configured):
    capsys = configured("INFO")

    get_logger().info("Transcript schema ready")

    assert "school_transcript:" in capsys.readouterr().err


def test_level_filters_lower_records(configured):
    capsys = configured("warning")

    get_logger(name="school_transcript.errors").info("hidden")
    get_logger(name="school_transcript.errors").warning("DomainViolation rejected statement")

    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "DomainViolation rejected statement" in err
