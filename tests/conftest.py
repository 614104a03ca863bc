"""
Pytest configuration and shared fixtures for dialogentities testing.

Provides a frozen clock, entity payloads, settings and temporary
configuration directories for unit and integration tests.
"""

import copy
import os
from typing import List, Optional

import pytest
import yaml

from dialogentities.core.clock import FixedClock
from dialogentities.core.config_manager import LoggingConfig, RecognizerSettings
from dialogentities.core.logging_manager import LoggingManager
from dialogentities.recognizers.entities import Entity
from dialogentities.recognizers.temporal_extractor import ParsedTemporal, TemporalParser

from .fixtures.sample_data import (
    REFERENCE_NOW,
    SAMPLE_CONFIGURATION,
    SAMPLE_DATE_ENTITY,
    SAMPLE_SECOND_DATE_ENTITY,
    SAMPLE_HOUR_ENTITY,
    SAMPLE_MINUTE_ENTITY,
    SAMPLE_NUMBER_ENTITY,
    SAMPLE_UNKNOWN_RESOLUTION_ENTITY
)


class StubTemporalParser(TemporalParser):
    """Parser returning canned matches and recording its calls"""

    def __init__(self, matches: Optional[List[ParsedTemporal]] = None,
                 error: Optional[Exception] = None):
        self.matches = matches or []
        self.error = error
        self.calls = []

    def parse(self, text, ref_date=None):
        self.calls.append((text, ref_date))
        if self.error:
            raise self.error
        return list(self.matches)


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2026-10-19 14:30 UTC-07:00"""
    return FixedClock(REFERENCE_NOW)


@pytest.fixture
def stub_parser_factory():
    """Build stub temporal parsers"""
    return StubTemporalParser


@pytest.fixture
def date_entity():
    return Entity.from_dict(SAMPLE_DATE_ENTITY)


@pytest.fixture
def second_date_entity():
    return Entity.from_dict(SAMPLE_SECOND_DATE_ENTITY)


@pytest.fixture
def hour_entity():
    return Entity.from_dict(SAMPLE_HOUR_ENTITY)


@pytest.fixture
def minute_entity():
    return Entity.from_dict(SAMPLE_MINUTE_ENTITY)


@pytest.fixture
def number_entity():
    return Entity.from_dict(SAMPLE_NUMBER_ENTITY)


@pytest.fixture
def unknown_entity():
    return Entity.from_dict(SAMPLE_UNKNOWN_RESOLUTION_ENTITY)


@pytest.fixture
def test_settings():
    """Validated settings built from the sample configuration"""
    return RecognizerSettings(**copy.deepcopy(SAMPLE_CONFIGURATION))


# Configuration Fixtures
@pytest.fixture
def temp_config_dir(tmp_path):
    """Temporary directory holding a default_config.yaml"""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    with open(config_dir / "default_config.yaml", "w") as f:
        yaml.dump(copy.deepcopy(SAMPLE_CONFIGURATION), f)

    return config_dir


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host DIALOGENTITIES_* variables out of configuration tests"""
    for key in list(os.environ):
        if key.startswith("DIALOGENTITIES_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def reset_logging():
    """Restore default library logging after a test configures it"""
    yield LoggingManager()
    LoggingManager().configure(LoggingConfig())


# Custom pytest markers
def pytest_configure(config):
    """Configure custom pytest markers"""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )


# Test Collection Hooks
def pytest_collection_modifyitems(config, items):
    """Add markers based on file location"""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
