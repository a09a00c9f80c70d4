"""
Measurement aggregators.

This module provides:
- Aggregator: Accumulate one metric over a labeled run and report it
- CpuAggregator: Average and total elapsed time, throughput
- MemoryAggregator: Average memory occupancy sampled after a reclaim pass
- BytesAggregator: Average byte count reported by the task
- CpuStats, MemoryStats, BytesStats: Final statistics of a run

An aggregator sees every measured record of a run in order. When the
count of observed records reaches the run's total, it computes final
statistics, sends one report line to its sink and resets for the next
run. The instance itself lives as long as the harness that owns it.
"""
from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, ClassVar, Generic, TypeVar

from nanobench.exceptions import RunBoundaryError
from nanobench.formatting import BYTES_PER_MB, format_bytes, format_cpu, format_memory
from nanobench.host import HostPrimitives
from nanobench.record import RunRecord
from nanobench.sinks import ReportSink

logger = logging.getLogger(__name__)

NS_PER_MS = 1_000_000.0
NS_PER_SECOND = 1_000_000_000.0


@dataclass(frozen=True)
class CpuStats:
    """Final timing statistics of a run.

    Attributes:
        label: Benchmark label.
        count: Number of measurements.
        avg_ms: Average elapsed time per measurement in milliseconds.
        total_s: Total elapsed time in seconds.
        tps: Measurements per second over the whole run.
    """

    label: str
    count: int
    avg_ms: float
    total_s: float
    tps: float


@dataclass(frozen=True)
class MemoryStats:
    """Final memory statistics of a run."""

    label: str
    count: int
    avg_bytes: int

    @property
    def avg_mb(self) -> float:
        return self.avg_bytes / BYTES_PER_MB


@dataclass(frozen=True)
class BytesStats:
    """Final byte-metric statistics of a run."""

    label: str
    count: int
    avg_bytes: int

    @property
    def avg_mb(self) -> float:
        return self.avg_bytes / BYTES_PER_MB


StatsT = TypeVar("StatsT", CpuStats, MemoryStats, BytesStats)


class Aggregator(ABC, Generic[StatsT]):
    """Accumulates one metric across the measurements of a run.

    Subclasses implement _accumulate(), _finalize() and _clear().

    Runs are label-scoped: once the first record of a run has been
    seen, every following record must carry the same label and total
    until the run completes, otherwise RunBoundaryError is raised.
    """

    name: ClassVar[str]

    def __init__(
        self,
        sink: ReportSink,
        formatter: Callable[[StatsT], str],
    ) -> None:
        """Initialize aggregator.

        Args:
            sink: Destination for report lines.
            formatter: Turns final statistics into a report line.
        """
        self._sink = sink
        self._formatter = formatter
        self.count = 0
        self._run_label: str | None = None
        self._run_total = 0
        self.last_stats: StatsT | None = None

    @property
    def run_label(self) -> str | None:
        """Label of the run in progress, or None between runs."""
        return self._run_label

    def on_measure(self, record: RunRecord) -> None:
        """Observe one completed measurement.

        Args:
            record: Stamped record of the measurement.

        Raises:
            RunBoundaryError: If the record belongs to another run than
                the one in progress.
        """
        self._enter_run(record)
        self.count += 1
        self._accumulate(record)

        if self.count == record.total_measurements:
            stats = self._finalize(record.label)
            if not record.is_warmup:
                self.last_stats = stats
                self._sink.record(self._formatter(stats))
            self._reset_state()

    def reset(self) -> None:
        """Discard the run in progress."""
        if self.count:
            logger.debug(
                "%s discarding %d samples of '%s'",
                self.name, self.count, self._run_label,
            )
        self._reset_state()

    def _reset_state(self) -> None:
        self.count = 0
        self._run_label = None
        self._run_total = 0
        self._clear()

    def _enter_run(self, record: RunRecord) -> None:
        if self.count == 0:
            self._run_label = record.label
            self._run_total = record.total_measurements
            return
        if (
            record.label != self._run_label
            or record.total_measurements != self._run_total
        ):
            raise RunBoundaryError(self._run_label or "", record.label)

    @abstractmethod
    def _accumulate(self, record: RunRecord) -> None:
        ...

    @abstractmethod
    def _finalize(self, label: str) -> StatsT:
        ...

    @abstractmethod
    def _clear(self) -> None:
        ...


class CpuAggregator(Aggregator[CpuStats]):
    """Elapsed time aggregator.

    Reports the average time per measurement, the total time of the run
    and the throughput in measurements per second.
    """

    name = "cpu"

    def __init__(
        self,
        sink: ReportSink,
        formatter: Callable[[CpuStats], str] = format_cpu,
    ) -> None:
        super().__init__(sink, formatter)
        self.time_used_ns = 0

    def _accumulate(self, record: RunRecord) -> None:
        self.time_used_ns += record.elapsed_ns

    def _finalize(self, label: str) -> CpuStats:
        total = self.time_used_ns
        if total == 0:
            # Below timer resolution: every measurement took "no time".
            tps = math.inf
        else:
            tps = self.count / (total / NS_PER_SECOND)
        return CpuStats(
            label=label,
            count=self.count,
            avg_ms=total / self.count / NS_PER_MS,
            total_s=total / NS_PER_SECOND,
            tps=tps,
        )

    def _clear(self) -> None:
        self.time_used_ns = 0


class MemoryAggregator(Aggregator[MemoryStats]):
    """Memory occupancy aggregator.

    Every observation forces a reclaim pass before sampling memory, so
    the average reflects live data rather than uncollected garbage.
    The reclaim pass is slow and runs between the timed sections of
    consecutive measurements.
    """

    name = "memory"

    def __init__(
        self,
        host: HostPrimitives,
        sink: ReportSink,
        formatter: Callable[[MemoryStats], str] = format_memory,
    ) -> None:
        super().__init__(sink, formatter)
        self._host = host
        self.memory_used = 0

    def _accumulate(self, record: RunRecord) -> None:
        self._host.force_reclaim()
        self.memory_used += self._host.used_memory()

    def _finalize(self, label: str) -> MemoryStats:
        return MemoryStats(
            label=label,
            count=self.count,
            avg_bytes=self.memory_used // self.count,
        )

    def _clear(self) -> None:
        self.memory_used = 0


class BytesAggregator(Aggregator[BytesStats]):
    """Aggregator for the byte count reported by the task itself.

    Records from tasks without the byte-metric capability count as 0.
    """

    name = "bytes"

    def __init__(
        self,
        sink: ReportSink,
        formatter: Callable[[BytesStats], str] = format_bytes,
    ) -> None:
        super().__init__(sink, formatter)
        self.bytes_used = 0

    def _accumulate(self, record: RunRecord) -> None:
        self.bytes_used += record.byte_metric or 0

    def _finalize(self, label: str) -> BytesStats:
        return BytesStats(
            label=label,
            count=self.count,
            avg_bytes=self.bytes_used // self.count,
        )

    def _clear(self) -> None:
        self.bytes_used = 0
