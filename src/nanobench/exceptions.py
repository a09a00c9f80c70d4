"""
NanoBench Exception Hierarchy

Custom exceptions raised by the benchmarking harness.
"""
from __future__ import annotations

from typing import Any, Optional, Sequence


class NanoBenchError(Exception):
    """Base exception for all NanoBench errors.

    Attributes:
        message: Human-readable error description.
        context: Optional dict of additional context for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        """Initialize NanoBenchError.

        Args:
            message: Error message.
            context: Optional context dict.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        ctx_str = f", context={self.context}" if self.context else ""
        return f"{self.__class__.__name__}({self.message!r}{ctx_str})"


class MetricNotFoundError(NanoBenchError):
    """Raised when a statistic is requested for an inactive metric.

    For example, asking for memory usage after selecting the
    CPU-only preset.

    Attributes:
        metric: The requested metric ("cpu", "memory" or "bytes").
        active: Metrics active on the harness at the time of the call.
    """

    def __init__(
        self,
        metric: str,
        *,
        active: Optional[Sequence[str]] = None,
        message: Optional[str] = None,
    ) -> None:
        self.metric = metric
        self.active = list(active) if active else []

        if message is None:
            message = (
                f"Can't find {metric} measures; active metrics: "
                f"{', '.join(self.active) or 'none'}"
            )

        super().__init__(
            message,
            context={"metric": metric, "active": self.active},
        )


class ConfigurationError(NanoBenchError):
    """Raised for invalid harness configuration.

    Attributes:
        field: Name of the offending configuration field, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
    ) -> None:
        self.field = field
        super().__init__(message, context={"field": field} if field else None)


class RunBoundaryError(NanoBenchError):
    """Raised when records of two different runs reach one aggregator.

    Runs are strictly sequential: every measurement of a label must
    arrive before the first measurement of the next label.

    Attributes:
        expected_label: Label of the run in progress.
        got_label: Label of the offending record.
    """

    def __init__(self, expected_label: str, got_label: str) -> None:
        self.expected_label = expected_label
        self.got_label = got_label
        super().__init__(
            f"Measurement for '{got_label}' arrived while run "
            f"'{expected_label}' is still in progress",
            context={"expected_label": expected_label, "got_label": got_label},
        )
