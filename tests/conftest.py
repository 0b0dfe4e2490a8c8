"""
Pytest configuration and shared fixtures for ClockVoice testing.

Provides a fixed reference moment for date resolution, interpreters wired
to it, stub collaborators and temporary configuration directories.
"""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from clockvoice.processors.core.temporal_extractor import PatternDateResolver
from clockvoice.timeclock.command_interpreter import CommandInterpreter
from clockvoice.timeclock.models import InterpreterConfig

from tests.fixtures.sample_data import REFERENCE_TIME, SAMPLE_CONFIGURATIONS, SAMPLE_ROSTER
from tests.fixtures.stubs import FakeSpeechEngine, StubTagger


@pytest.fixture
def reference_time():
    """Fixed 'now' for relative dates"""
    return REFERENCE_TIME


@pytest.fixture
def resolver(reference_time):
    """Pattern resolver pinned to the reference time"""
    return PatternDateResolver(reference=reference_time)


@pytest.fixture
def interpreter(resolver):
    """Interpreter with the pinned resolver and no tagger"""
    return CommandInterpreter(resolver=resolver)


@pytest.fixture
def no_roster_config():
    return InterpreterConfig()


@pytest.fixture
def roster_config():
    """All verbs allowed, sample roster"""
    return InterpreterConfig(available_employees=SAMPLE_ROSTER)


@pytest.fixture
def stub_tagger():
    return StubTagger(
        pos={"add": "VERB", "change": "VERB", "delete": "VERB", "fix": "VERB"},
        persons=["Maria", "Lopez"]
    )


@pytest.fixture
def speech_engine():
    return FakeSpeechEngine()


# Configuration Fixtures
@pytest.fixture
def temp_config_dir():
    """Temporary directory holding default and testing config files"""
    with tempfile.TemporaryDirectory() as temp_dir:
        config_dir = Path(temp_dir) / "config"
        config_dir.mkdir()
        
        with open(config_dir / "default_config.yaml", "w") as f:
            yaml.dump(SAMPLE_CONFIGURATIONS["default"], f)
        with open(config_dir / "testing.yaml", "w") as f:
            yaml.dump(SAMPLE_CONFIGURATIONS["testing"], f)
            
        yield config_dir


@pytest.fixture
def clean_environment():
    """Environment without CLOCKVOICE_* overrides"""
    with patch.dict("os.environ", {}, clear=True):
        yield
