"""Shared fixtures."""

import pytest

from peppermint.config import Config
from peppermint.renderers import MemoryRenderer


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def registry_config():
    config = Config()
    config.coordination.strategy = "registry"
    return config


@pytest.fixture
def renderer():
    return MemoryRenderer()
