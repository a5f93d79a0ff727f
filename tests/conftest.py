"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from feedtrans.core.models import IndustryProfile
from tests.fixtures.fake_backend import ScriptedBackend, SleepRecorder
from tests.fixtures.feeds import SAMPLE_FEED


@pytest.fixture
def sample_feed():
    """Two-product feed in Bulgarian."""
    return SAMPLE_FEED


@pytest.fixture
def jewellery_profile():
    """Small profile with one glossary term."""
    return IndustryProfile(
        id="test-jewellery",
        name="Test Jewellery",
        context="You are a jewellery translator.",
        glossary={"Розово злато": "Rose Gold"},
    )


@pytest.fixture
def empty_profile():
    """Profile without glossary, so every text goes to the provider."""
    return IndustryProfile(id="plain", name="Plain", context="You are a translator.")


@pytest.fixture
def scripted_backend():
    """Factory for ScriptedBackend instances."""
    return ScriptedBackend


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()
