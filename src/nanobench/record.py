"""
Per-iteration run record.

This module provides:
- RunRecord: Timing and byte-metric state of one benchmark iteration
- WARMUP_LABEL: Reserved label for warm-up iterations
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

WARMUP_LABEL = "_warmup_"


@dataclass
class RunRecord:
    """State of a single benchmark iteration.

    A fresh record is created for every iteration and is only mutated
    by the executor that owns it. Aggregators read it after it has
    been stamped.

    Attributes:
        label: Benchmark label, or WARMUP_LABEL for warm-up iterations.
        index: Zero-based iteration index within the run.
        total_measurements: Number of iterations in the run.
        start_time: Monotonic start timestamp in nanoseconds.
        end_time: Monotonic end timestamp in nanoseconds.
        byte_metric: Byte count reported by the task, if it reports one.
    """

    label: str
    index: int
    total_measurements: int
    start_time: int = 0
    end_time: int = 0
    byte_metric: int | None = None

    def __post_init__(self) -> None:
        """Validate record identity."""
        if self.total_measurements <= 0:
            raise ValueError("total_measurements must be positive")
        if not 0 <= self.index < self.total_measurements:
            raise ValueError(
                f"index {self.index} out of range for "
                f"{self.total_measurements} measurements"
            )

    @property
    def is_warmup(self) -> bool:
        """Whether this record belongs to a warm-up iteration."""
        return self.label == WARMUP_LABEL

    @property
    def elapsed_ns(self) -> int:
        """Elapsed time between start and end stamps in nanoseconds."""
        return self.end_time - self.start_time

    def start_now(self, clock: Callable[[], int]) -> None:
        self.start_time = clock()

    def end_now(self, clock: Callable[[], int]) -> None:
        end = clock()
        # A non-monotonic clock must never yield negative elapsed time.
        self.end_time = max(end, self.start_time)
