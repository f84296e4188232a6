"""
Test configuration and fixtures for hshmm.

This file contains pytest configuration and shared fixtures
for testing the hshmm package.
"""

import pytest
import tempfile
from pathlib import Path

from hshmm.config import reset_config
from hshmm.logger import configure_logging
from hshmm.hmm import MarginalHMM


@pytest.fixture(autouse=True)
def fresh_config():
    """Start every test from the default configuration and logging setup."""
    reset_config()
    yield
    reset_config()
    configure_logging()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def uniform_model():
    """2-state, 1-dim, horizon-3 model after uniform initialization."""
    model = MarginalHMM(n_states=2, n_dims=1, horizon=3, random_state=0)
    model.randomly_initialize()
    return model


@pytest.fixture
def biased_model():
    """3-state, 2-dim, horizon-5 model after biased initialization."""
    model = MarginalHMM(n_states=3, n_dims=2, horizon=5, random_state=0)
    model.custom_initialize()
    return model


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
