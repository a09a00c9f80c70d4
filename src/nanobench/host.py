"""
Host runtime primitives.

This module provides:
- HostPrimitives: Clock, reclaim and memory-query protocol
- ProcessHost: Primitives for the current Python process
- CudaHost: Primitives for a CUDA device via torch
- default_host: Pick primitives for a device
"""
from __future__ import annotations

import gc
import logging
import time
import tracemalloc
from typing import Protocol, runtime_checkable

import psutil
import torch

logger = logging.getLogger(__name__)


@runtime_checkable
class HostPrimitives(Protocol):
    """Services the harness needs from the host runtime."""

    def now(self) -> int:
        """Return a monotonic timestamp in nanoseconds."""
        ...

    def force_reclaim(self) -> None:
        """Run a best-effort garbage collection pass."""
        ...

    def used_memory(self) -> int:
        """Return current memory occupancy in bytes."""
        ...


class ProcessHost:
    """Host primitives for the current Python process.

    Memory is the resident set size of the process. With traced=True
    it is instead the size of blocks currently traced by tracemalloc,
    which excludes interpreter and allocator overhead but slows down
    every allocation while tracing is active.

    Example:
        host = ProcessHost(traced=True)
        bench = NanoBench(host=host).memory_only()
    """

    def __init__(self, traced: bool = False) -> None:
        """Initialize process host.

        Args:
            traced: Report tracemalloc traced memory instead of RSS.
        """
        self._traced = traced
        self._process = psutil.Process()
        if traced and not tracemalloc.is_tracing():
            tracemalloc.start()
            logger.debug("Started tracemalloc for memory sampling")

    @property
    def traced(self) -> bool:
        """Whether memory is sampled from tracemalloc."""
        return self._traced

    def now(self) -> int:
        return time.perf_counter_ns()

    def force_reclaim(self) -> None:
        gc.collect()

    def used_memory(self) -> int:
        if self._traced:
            current, _ = tracemalloc.get_traced_memory()
            return current
        return self._process.memory_info().rss


class CudaHost:
    """Host primitives for a CUDA device.

    The clock synchronizes the device before reading the timer so that
    asynchronously launched kernels are included in the measured time.
    Memory is the tensor memory currently allocated on the device.
    """

    def __init__(self, device: int | str | torch.device = 0) -> None:
        """Initialize CUDA host.

        Args:
            device: CUDA device index or name.
        """
        if isinstance(device, int):
            device = torch.device("cuda", device)
        self._device = torch.device(device)

    @property
    def device(self) -> torch.device:
        """Get the tracked device."""
        return self._device

    def now(self) -> int:
        torch.cuda.synchronize(self._device)
        return time.perf_counter_ns()

    def force_reclaim(self) -> None:
        gc.collect()
        torch.cuda.empty_cache()

    def used_memory(self) -> int:
        return torch.cuda.memory_allocated(self._device)


def default_host(device: str = "cpu", sync_cuda: bool = True) -> HostPrimitives:
    """Select host primitives for a device.

    Args:
        device: Device the benchmarked work runs on ("cpu", "cuda", "cuda:1").
        sync_cuda: Whether to synchronize CUDA around timing.

    Returns:
        CudaHost for an available CUDA device with sync_cuda set,
        otherwise ProcessHost.
    """
    if device.startswith("cuda") and sync_cuda:
        if torch.cuda.is_available():
            return CudaHost(device)
        logger.warning("CUDA requested but not available, using process host")
    return ProcessHost()
