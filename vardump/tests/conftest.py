"""Pytest fixtures for vardump tests."""

import pytest

from vardump import Dumper


@pytest.fixture(autouse=True)
def clean_color_env(monkeypatch):
    """Remove color overrides from the environment.

    NO_COLOR / FORCE_COLOR set in the developer's shell or the CI runner
    would otherwise change every rendered string.
    """
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)


@pytest.fixture
def plain_dumper():
    """Dumper producing uncolored output without a header line."""
    return Dumper(disable_color=True, disable_header=True)
