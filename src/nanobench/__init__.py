"""
NanoBench - Lightweight CPU and memory micro-benchmarking

Runs a task repeatedly, discards warm-up runs and reports average time,
total time, throughput and average memory or byte usage per label.

Main APIs:
- NanoBench: Benchmark harness with builder-style configuration
- BytesTask / bytes_task(): Tasks that report the bytes they produce
- BenchConfig / load_config(): Harness configuration
"""

__version__ = "0.1.0"

from nanobench.aggregators import (
    Aggregator,
    BytesAggregator,
    BytesStats,
    CpuAggregator,
    CpuStats,
    MemoryAggregator,
    MemoryStats,
)
from nanobench.config import BenchConfig, MetricPreset, load_config
from nanobench.exceptions import (
    ConfigurationError,
    MetricNotFoundError,
    NanoBenchError,
    RunBoundaryError,
)
from nanobench.executor import RunExecutor
from nanobench.harness import NanoBench
from nanobench.host import CudaHost, HostPrimitives, ProcessHost, default_host
from nanobench.record import WARMUP_LABEL, RunRecord
from nanobench.sinks import ListSink, LoggingSink, ReportSink
from nanobench.task import ByteMetricProducer, BytesTask, bytes_task

__all__ = [
    "__version__",
    # Harness
    "NanoBench",
    "RunExecutor",
    "RunRecord",
    "WARMUP_LABEL",
    # Aggregators
    "Aggregator",
    "CpuAggregator",
    "MemoryAggregator",
    "BytesAggregator",
    "CpuStats",
    "MemoryStats",
    "BytesStats",
    # Tasks
    "ByteMetricProducer",
    "BytesTask",
    "bytes_task",
    # Host and output
    "HostPrimitives",
    "ProcessHost",
    "CudaHost",
    "default_host",
    "ReportSink",
    "LoggingSink",
    "ListSink",
    # Configuration
    "BenchConfig",
    "MetricPreset",
    "load_config",
    # Errors
    "NanoBenchError",
    "ConfigurationError",
    "MetricNotFoundError",
    "RunBoundaryError",
]
