"""
Report line formatting.

Pure functions turning final statistics into report lines. Numbers use
thousands grouping, e.g. 1,234.5678.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nanobench.aggregators import BytesStats, CpuStats, MemoryStats

BYTES_PER_MB = 1024.0 * 1024.0


def format_cpu(stats: "CpuStats") -> str:
    """Format CPU timing statistics.

    Example:
        new_string	avg: 1.2345 ms	total: 0.1 s	   tps: 810.0	running: 50 times
    """
    return (
        f"{stats.label}\t"
        f"avg: {stats.avg_ms:,.4f} ms\t"
        f"total: {stats.total_s:,.1f} s\t"
        f"   tps: {stats.tps:,.1f}\t"
        f"running: {stats.count} times"
    )


def format_memory(stats: "MemoryStats") -> str:
    """Format average memory usage in megabytes."""
    return f"memory-usage: {stats.label}\t{stats.avg_bytes / BYTES_PER_MB:,.3f} Mb\n"


def format_bytes(stats: "BytesStats") -> str:
    """Format average task byte metric in bytes and megabytes."""
    return (
        f"bytes-usage: {stats.label}\t"
        f"{float(stats.avg_bytes):,.1f} Bytes\t"
        f"{stats.avg_bytes / BYTES_PER_MB:,.1f} Mb\n"
    )
