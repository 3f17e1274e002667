"""Shared fixtures for unit tests."""

import pytest

from mirrordeploy import api
from mirrordeploy.config import DeployerConfig


@pytest.fixture(autouse=True)
def _isolated_configuration():
    """Give every test a fresh in-memory configuration.

    The configure/deploy API keeps one configuration per process; without
    this, values set by one test would leak into the next.
    """
    api.reset_configuration(DeployerConfig())
    yield
    api.reset_configuration(DeployerConfig())
