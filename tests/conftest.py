"""
Pytest configuration and shared fixtures for claimtree tests.

This conftest.py:
1. Adds project root and tests root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_claims = importlib.import_module("fixtures.claim_fixtures")

make_claim = _claims.make_claim
make_claims = _claims.make_claims
make_claim_dicts = _claims.make_claim_dicts
make_distribution = _claims.make_distribution


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def claims():
    """Seven claims: odd leaf count, exercises node promotion."""
    return make_claims(7)


@pytest.fixture
def claim_dicts():
    """Five claims in input-file form."""
    return make_claim_dicts(5)


@pytest.fixture
def distribution():
    """A valid distribution over six claims."""
    return make_distribution(6)


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run in an empty directory with no CLAIMTREE_* variables or home config."""
    import os

    for key in list(os.environ):
        if key.startswith("CLAIMTREE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
