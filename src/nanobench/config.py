"""
Harness configuration.

This module provides:
- MetricPreset: Sets of metrics a harness can collect
- BenchConfig: Measurement counts, preset and host settings
- load_config: Read a BenchConfig from a YAML file
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

import yaml

from nanobench.exceptions import ConfigurationError


class MetricPreset(Enum):
    """Mutually exclusive sets of active aggregators.

    Attributes:
        CPU_AND_MEMORY: Elapsed time and memory occupancy.
        CPU_ONLY: Elapsed time only.
        MEMORY_ONLY: Memory occupancy only.
        BYTES_ONLY: Byte count reported by the task.
    """

    CPU_AND_MEMORY = "cpu_and_memory"
    CPU_ONLY = "cpu_only"
    MEMORY_ONLY = "memory_only"
    BYTES_ONLY = "bytes_only"

    @classmethod
    def parse(cls, value: "str | MetricPreset") -> "MetricPreset":
        """Parse a preset from its value, e.g. "cpu-only" or "CPU_ONLY"."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ConfigurationError(
                f"Unknown metric preset {value!r}; expected one of: {choices}",
                field="preset",
            ) from None


def _parse_bool(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off")


@dataclass(frozen=True)
class BenchConfig:
    """Configuration for a NanoBench harness.

    Attributes:
        measurement_count: Measured iterations per run.
        warmup_count: Unmeasured iterations before each run.
        preset: Metrics to collect.
        settle_seconds: Pause after each run before returning.
        device: Device the benchmarked work runs on.
        sync_cuda: Whether to synchronize CUDA around timing.

    Example:
        config = BenchConfig(measurement_count=100, warmup_count=10)
        bench = NanoBench.from_config(config)
    """

    DEFAULT_MEASUREMENTS: ClassVar[int] = 50
    DEFAULT_WARMUPS: ClassVar[int] = 20
    ENV_PREFIX: ClassVar[str] = "NANOBENCH_"

    measurement_count: int = 50
    warmup_count: int = 20
    preset: MetricPreset = MetricPreset.CPU_AND_MEMORY
    settle_seconds: float = 1.0
    device: str = "cpu"
    sync_cuda: bool = True

    def __post_init__(self) -> None:
        """Validate configuration values."""
        validate_measurement_count(self.measurement_count)
        validate_warmup_count(self.warmup_count)
        if isinstance(self.settle_seconds, bool) or not isinstance(
            self.settle_seconds, (int, float)
        ):
            raise ConfigurationError(
                f"settle_seconds must be a number, got {self.settle_seconds!r}",
                field="settle_seconds",
            )
        if self.settle_seconds < 0:
            raise ConfigurationError(
                "settle_seconds must be non-negative", field="settle_seconds"
            )
        if not isinstance(self.preset, MetricPreset):
            object.__setattr__(self, "preset", MetricPreset.parse(self.preset))

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "BenchConfig":
        """Create config from a mapping of field names to values.

        Unknown keys are rejected so typos do not go unnoticed.
        """
        known = {
            "measurement_count", "warmup_count", "preset",
            "settle_seconds", "device", "sync_cuda",
        }
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown)}"
            )
        kwargs = dict(data)
        if "preset" in kwargs:
            kwargs["preset"] = MetricPreset.parse(kwargs["preset"])
        return cls(**kwargs)

    @classmethod
    def from_env(cls) -> "BenchConfig":
        """Create config from environment variables.

        Environment variables:
            NANOBENCH_MEASUREMENTS: Measured iterations per run
            NANOBENCH_WARMUPS: Warm-up iterations per run
            NANOBENCH_PRESET: cpu_and_memory, cpu_only, memory_only or bytes_only
            NANOBENCH_SETTLE_SECONDS: Pause after each run
            NANOBENCH_DEVICE: Device name, e.g. "cpu" or "cuda:0"
            NANOBENCH_SYNC_CUDA: "0" or "false" to disable CUDA sync

        Returns:
            BenchConfig with values from environment.
        """
        env = os.environ
        p = cls.ENV_PREFIX

        try:
            measurements = int(env.get(f"{p}MEASUREMENTS", cls.DEFAULT_MEASUREMENTS))
            warmups = int(env.get(f"{p}WARMUPS", cls.DEFAULT_WARMUPS))
            settle = float(env.get(f"{p}SETTLE_SECONDS", 1.0))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric environment value: {e}") from e

        return cls(
            measurement_count=measurements,
            warmup_count=warmups,
            preset=MetricPreset.parse(env.get(f"{p}PRESET", MetricPreset.CPU_AND_MEMORY.value)),
            settle_seconds=settle,
            device=env.get(f"{p}DEVICE", "cpu"),
            sync_cuda=_parse_bool(env.get(f"{p}SYNC_CUDA", "1")),
        )


def _require_int(value: Any, field: str) -> None:
    # bool is an int subclass but never a meaningful count.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(
            f"{field} must be an integer, got {value!r}",
            field=field,
        )


def validate_measurement_count(count: int) -> int:
    """Check a measured-iteration count.

    A run needs at least one measurement to produce a report.

    Raises:
        ConfigurationError: If count is not an integer or is less than 1.
    """
    _require_int(count, "measurement_count")
    if count < 1:
        raise ConfigurationError(
            f"measurement count must be at least 1, got {count}",
            field="measurement_count",
        )
    return count


def validate_warmup_count(count: int) -> int:
    """Check a warm-up count.

    Raises:
        ConfigurationError: If count is not an integer or is negative.
    """
    _require_int(count, "warmup_count")
    if count < 0:
        raise ConfigurationError(
            f"warm-up count must be non-negative, got {count}",
            field="warmup_count",
        )
    return count


def load_config(path: str | Path) -> BenchConfig:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file.

    Returns:
        Parsed BenchConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigurationError: If config file is invalid.

    YAML format::

        measurement_count: 100
        warmup_count: 10
        preset: cpu_only
        settle_seconds: 0.5
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid config file format: {path}")

    return BenchConfig.from_mapping(data)
