"""
Measured task capabilities.

A task is any zero-argument callable. A task may additionally report a
byte count for the work it just did by implementing ByteMetricProducer;
the executor checks for that capability once per iteration.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Protocol, runtime_checkable

Task = Callable[[], Any]


@runtime_checkable
class ByteMetricProducer(Protocol):
    """Capability of a task that reports a byte count per run."""

    def byte_metric(self) -> int:
        """Return the byte count produced by the most recent call."""
        ...


class BytesTask(ABC):
    """Base class for tasks that measure the bytes they produce.

    Subclasses implement run_measure(), returning the number of bytes
    produced. Calling the task stores that value for byte_metric().

    Example:
        class Encode(BytesTask):
            def run_measure(self) -> int:
                return len(json.dumps(payload).encode())

        bench.bytes_only().measure("encode", Encode())
    """

    def __init__(self) -> None:
        self.measure = 0

    def __call__(self) -> None:
        self.measure = self.run_measure()

    @abstractmethod
    def run_measure(self) -> int:
        """Do the work and return the number of bytes produced."""

    def byte_metric(self) -> int:
        return self.measure


class _FunctionBytesTask(BytesTask):
    """BytesTask wrapping a plain function."""

    def __init__(self, fn: Callable[[], int]) -> None:
        super().__init__()
        self._fn = fn

    def run_measure(self) -> int:
        return int(self._fn())

    def __repr__(self) -> str:
        return f"bytes_task({getattr(self._fn, '__name__', self._fn)!r})"


def bytes_task(fn: Callable[[], int]) -> BytesTask:
    """Adapt a function returning a byte count into a BytesTask.

    Args:
        fn: Zero-argument function returning the bytes it produced.

    Returns:
        BytesTask that records fn's return value after each call.
    """
    return _FunctionBytesTask(fn)
