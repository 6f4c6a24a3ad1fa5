"""
Pytest configuration for the nonempty test suite.

Every test starts from a configuration read from a clean environment, so a
developer's NONEMPTY_* variables cannot change results.
"""

import os
import sys
from pathlib import Path
from unittest.mock import patch

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from nonempty.config import NonEmptyConfig, reset_config, set_config


@pytest.fixture(autouse=True)
def clean_config():
    """Reset the active configuration around each test."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("NONEMPTY_")}
    with patch.dict(os.environ, env, clear=True):
        reset_config()
        yield
        reset_config()


@pytest.fixture
def debug_checks():
    """Enable precondition checking for unchecked operations."""
    set_config(NonEmptyConfig(debug_checks=True))
    yield
    reset_config()
