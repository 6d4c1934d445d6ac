import asyncio
import os
import sys

import pytest
from loguru import logger

# Ensure project root is on sys.path so syswatch.* imports work without install
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from syswatch.core.models import ComponentState, WifiReading, UNKNOWN_WIFI  # noqa: E402
from syswatch.core.settings import Settings  # noqa: E402
from syswatch.core.wireless import WirelessProbe  # noqa: E402


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "network: mark test as opening real (loopback) sockets"
    )


class FakeWirelessProbe(WirelessProbe):
    def __init__(self, reading: WifiReading = UNKNOWN_WIFI):
        self.reading = reading
        self.calls = 0

    async def read(self) -> WifiReading:
        self.calls += 1
        return self.reading


class RecordingProbe:
    """Stands in for probe_tcp; hosts listed in `reachable` answer."""

    def __init__(self, reachable=(), delay: float = 0.0):
        self.reachable = set(reachable)
        self.delay = delay
        self.calls = []

    async def __call__(self, host, port, timeout):
        self.calls.append((host, port, timeout))
        if self.delay:
            await asyncio.sleep(self.delay)
        return host in self.reachable

    @property
    def hosts(self):
        return [host for host, _, _ in self.calls]


@pytest.fixture
def settings(tmp_path):
    return Settings(tmp_path / "settings.json")


@pytest.fixture
def wifi_up():
    return FakeWirelessProbe(WifiReading(ComponentState.UP, "HomeNet", -60))


@pytest.fixture
def wifi_unknown():
    return FakeWirelessProbe()


@pytest.fixture(autouse=True)
def _reset_logger():
    # cli.main() installs sinks bound to capsys streams; drop them after each test
    yield
    logger.remove()
