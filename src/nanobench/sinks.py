"""
Report sinks.

Aggregators hand each formatted report line to a sink instead of a
shared global logger.
"""
from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

REPORT_LOGGER_NAME = "nanobench.report"


@runtime_checkable
class ReportSink(Protocol):
    """Destination for formatted report lines."""

    def record(self, line: str) -> None:
        """Record one report line."""
        ...


class LoggingSink:
    """Sink that emits report lines through stdlib logging."""

    def __init__(
        self,
        logger: logging.Logger | None = None,
        level: int = logging.INFO,
    ) -> None:
        """Initialize logging sink.

        Args:
            logger: Logger to emit to. Defaults to "nanobench.report".
            level: Log level of report lines.
        """
        self.logger = logger or logging.getLogger(REPORT_LOGGER_NAME)
        self.level = level

    def record(self, line: str) -> None:
        self.logger.log(self.level, line)


class ListSink:
    """Sink that keeps report lines in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def record(self, line: str) -> None:
        self.lines.append(line)

    def clear(self) -> None:
        self.lines.clear()

    def __len__(self) -> int:
        return len(self.lines)
