"""Pytest configuration for SoloWindow tests.

Every engine test runs against the in-memory VirtualHost, so the suite
needs no desktop and runs on any platform.
"""

import pytest

from solowindow.config.settings import Settings
from solowindow.core.virtual import VirtualHost
from solowindow.engine.controller import SoloWindow


@pytest.fixture
def host():
    """A synchronous VirtualHost on desktop 1."""
    return VirtualHost()


@pytest.fixture
def make_engine():
    """Factory: make_engine(host, **settings_changes) -> attached SoloWindow."""
    engines = []

    def _make(host, **changes):
        engine = SoloWindow(host, Settings().replace(**changes))
        engine.attach()
        engines.append(engine)
        return engine

    yield _make

    for engine in engines:
        engine.detach()


@pytest.fixture
def engine(host, make_engine):
    """SoloWindow with default settings attached to ``host``."""
    return make_engine(host)
