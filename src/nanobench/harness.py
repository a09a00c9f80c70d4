"""
Benchmark Harness

Lightweight CPU and memory micro-benchmarking: runs a task through
warm-up iterations, then measured iterations, and reports averaged
statistics per labeled run.
"""
from __future__ import annotations

import logging
import time
from typing import Optional

from nanobench.aggregators import (
    Aggregator,
    BytesAggregator,
    CpuAggregator,
    MemoryAggregator,
)
from nanobench.config import (
    BenchConfig,
    MetricPreset,
    validate_measurement_count,
    validate_warmup_count,
)
from nanobench.exceptions import MetricNotFoundError
from nanobench.executor import RunExecutor
from nanobench.host import HostPrimitives, default_host
from nanobench.record import WARMUP_LABEL, RunRecord
from nanobench.sinks import LoggingSink, ReportSink
from nanobench.task import Task

logger = logging.getLogger(__name__)


class NanoBench:
    """Harness for running labeled micro-benchmarks.

    Every call to measure() runs a reclaim pass, the warm-up
    iterations, another reclaim pass, the measured iterations, a final
    reclaim pass and a short settle delay. Each active aggregator
    reports once per call.

    Runs are strictly sequential; a harness must not be shared between
    threads.

    Example:
        ```python
        bench = NanoBench.create().measurements(100).warm_ups(10).cpu_only()
        bench.measure("sort", lambda: sorted(data))
        print(f"Average: {bench.get_avg_time():.4f} ms")
        ```
    """

    def __init__(
        self,
        config: Optional[BenchConfig] = None,
        host: Optional[HostPrimitives] = None,
        sink: Optional[ReportSink] = None,
    ) -> None:
        """Initialize benchmark harness.

        Args:
            config: Harness configuration. Defaults to BenchConfig().
            host: Host primitives. Defaults to default_host() for the
                configured device.
            sink: Destination for report lines. Defaults to LoggingSink().
        """
        config = config if config is not None else BenchConfig()
        self._host = (
            host if host is not None else default_host(config.device, config.sync_cuda)
        )
        self._sink = sink if sink is not None else LoggingSink()
        self._measurement_count = config.measurement_count
        self._warmup_count = config.warmup_count
        self.settle_seconds = config.settle_seconds

        self._cpu: CpuAggregator | None = None
        self._memory: MemoryAggregator | None = None
        self._bytes: BytesAggregator | None = None
        self._aggregators: list[Aggregator] = []
        self.use_preset(config.preset)

    @classmethod
    def create(cls) -> "NanoBench":
        """Create a harness with default settings."""
        return cls()

    @classmethod
    def from_config(
        cls,
        config: BenchConfig,
        host: Optional[HostPrimitives] = None,
        sink: Optional[ReportSink] = None,
    ) -> "NanoBench":
        return cls(config=config, host=host, sink=sink)

    # Configuration

    def measurements(self, count: int) -> "NanoBench":
        """Set the number of measured iterations per run.

        Raises:
            ConfigurationError: If count is less than 1.
        """
        self._measurement_count = validate_measurement_count(count)
        return self

    def warm_ups(self, count: int) -> "NanoBench":
        """Set the number of warm-up iterations per run.

        Raises:
            ConfigurationError: If count is negative.
        """
        self._warmup_count = validate_warmup_count(count)
        return self

    def cpu_and_memory(self) -> "NanoBench":
        return self.use_preset(MetricPreset.CPU_AND_MEMORY)

    def cpu_only(self) -> "NanoBench":
        return self.use_preset(MetricPreset.CPU_ONLY)

    def memory_only(self) -> "NanoBench":
        return self.use_preset(MetricPreset.MEMORY_ONLY)

    def bytes_only(self) -> "NanoBench":
        return self.use_preset(MetricPreset.BYTES_ONLY)

    def use_preset(self, preset: MetricPreset | str) -> "NanoBench":
        """Replace the active aggregators with a fresh preset.

        Statistics of previously active aggregators are discarded.

        Args:
            preset: Preset to activate.

        Returns:
            This harness, for chaining.
        """
        preset = MetricPreset.parse(preset)
        self._cpu = None
        self._memory = None
        self._bytes = None

        if preset in (MetricPreset.CPU_AND_MEMORY, MetricPreset.CPU_ONLY):
            self._cpu = CpuAggregator(self._sink)
        if preset in (MetricPreset.CPU_AND_MEMORY, MetricPreset.MEMORY_ONLY):
            self._memory = MemoryAggregator(self._host, self._sink)
        if preset is MetricPreset.BYTES_ONLY:
            self._bytes = BytesAggregator(self._sink)

        self._aggregators = [
            a for a in (self._cpu, self._memory, self._bytes) if a is not None
        ]
        self._preset = preset
        logger.debug("Active metrics: %s", ", ".join(self.active_metrics))
        return self

    @property
    def preset(self) -> MetricPreset:
        return self._preset

    @property
    def measurement_count(self) -> int:
        return self._measurement_count

    @property
    def warmup_count(self) -> int:
        return self._warmup_count

    @property
    def active_metrics(self) -> list[str]:
        """Names of the active aggregators, in notification order."""
        return [a.name for a in self._aggregators]

    @property
    def cpu(self) -> CpuAggregator | None:
        return self._cpu

    @property
    def memory(self) -> MemoryAggregator | None:
        return self._memory

    @property
    def bytes_metric(self) -> BytesAggregator | None:
        return self._bytes

    @property
    def host(self) -> HostPrimitives:
        return self._host

    @property
    def sink(self) -> ReportSink:
        """Destination of report lines."""
        return self._sink

    # Execution

    def measure(self, label: str, task: Task) -> None:
        """Benchmark a task under a label.

        Args:
            label: Label shown in the reports of this run.
            task: Zero-argument callable to benchmark. Tasks implementing
                ByteMetricProducer also feed the bytes aggregator.

        Raises:
            ValueError: If label is the reserved warm-up label.
            Exception: Anything raised by the task, unchanged. No report
                is emitted for the interrupted run.
        """
        if label == WARMUP_LABEL:
            raise ValueError(f"Label {WARMUP_LABEL!r} is reserved for warm-up runs")

        # Partial samples of an aborted run must not leak into this one.
        for aggregator in self._aggregators:
            aggregator.reset()

        logger.debug(
            "Measuring '%s': %d warm-ups, %d measurements",
            label, self._warmup_count, self._measurement_count,
        )
        self._host.force_reclaim()
        self.run_iterations(task, self._warmup_count, WARMUP_LABEL, notify=False)
        self._host.force_reclaim()
        self.run_iterations(task, self._measurement_count, label, notify=True)
        self._host.force_reclaim()
        self._settle()

    def run_iterations(
        self,
        task: Task,
        count: int,
        label: str,
        notify: bool,
    ) -> None:
        """Run a task count times with fresh records.

        Args:
            task: Task to run.
            count: Number of iterations.
            label: Label of every record.
            notify: Whether the active aggregators observe the records.
        """
        aggregators = self._aggregators if notify else ()
        for i in range(count):
            record = RunRecord(label=label, index=i, total_measurements=count)
            RunExecutor(record, task, aggregators, self._host).execute()

    def _settle(self) -> None:
        if self.settle_seconds <= 0:
            return
        try:
            time.sleep(self.settle_seconds)
        except InterruptedError:
            # sleep() retries on EINTR itself; this is only reached when a
            # signal handler raises InterruptedError. Reports are complete.
            logger.exception("Settle delay interrupted")

    # Results

    def get_avg_time(self) -> float:
        """Average time per measurement of the last run, in milliseconds."""
        stats = self._require_cpu().last_stats
        return stats.avg_ms if stats else 0.0

    def get_total_time(self) -> float:
        """Total time of the last run, in seconds."""
        stats = self._require_cpu().last_stats
        return stats.total_s if stats else 0.0

    def get_tps(self) -> float:
        """Measurements per second of the last run."""
        stats = self._require_cpu().last_stats
        return stats.tps if stats else 0.0

    def get_memory_bytes(self) -> int:
        """Average memory usage of the last run, in bytes."""
        if self._memory is None:
            raise MetricNotFoundError("memory", active=self.active_metrics)
        stats = self._memory.last_stats
        return stats.avg_bytes if stats else 0

    def get_bytes(self) -> int:
        """Average task byte metric of the last run."""
        if self._bytes is None:
            raise MetricNotFoundError("bytes", active=self.active_metrics)
        stats = self._bytes.last_stats
        return stats.avg_bytes if stats else 0

    def _require_cpu(self) -> CpuAggregator:
        if self._cpu is None:
            raise MetricNotFoundError("CPU", active=self.active_metrics)
        return self._cpu
