"""
PyTest Configuration for NanoBench Tests

Provides fixtures, markers, and test setup.
"""
import sys
from pathlib import Path

import pytest
import torch

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Add tests directory to path for shared helpers
tests_path = Path(__file__).parent
sys.path.insert(0, str(tests_path))

from nanobench.sinks import ListSink  # noqa: E402


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")


class FakeHost:
    """Host primitives with a scripted clock and memory readings.

    Every call to now() advances the clock by tick_ns. used_memory()
    returns the values in memory_readings in turn, repeating the last.
    """

    def __init__(self, tick_ns: int = 1_000_000, memory_readings=None) -> None:
        self.tick_ns = tick_ns
        self.clock = 0
        self.memory_readings = list(memory_readings or [0])
        self.memory_calls = 0
        self.reclaims = 0
        self.events: list[str] = []

    def now(self) -> int:
        self.clock += self.tick_ns
        return self.clock

    def force_reclaim(self) -> None:
        self.reclaims += 1
        self.events.append("reclaim")

    def used_memory(self) -> int:
        idx = min(self.memory_calls, len(self.memory_readings) - 1)
        self.memory_calls += 1
        self.events.append("memory")
        return self.memory_readings[idx]


@pytest.fixture(scope="session")
def cuda_device():
    """Get CUDA device if available, otherwise skip."""
    if torch.cuda.is_available():
        return torch.device("cuda:0")
    pytest.skip("CUDA not available")


@pytest.fixture
def fake_host() -> FakeHost:
    """Host whose clock advances 1ms per reading."""
    return FakeHost()


@pytest.fixture
def sink() -> ListSink:
    """Sink capturing report lines."""
    return ListSink()
