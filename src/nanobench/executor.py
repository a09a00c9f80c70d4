"""
Run executor.

Wraps one task invocation: stamps the record around the call, captures
the task's byte metric and notifies aggregators of measured runs.
"""
from __future__ import annotations

from typing import Sequence

from nanobench.aggregators import Aggregator
from nanobench.host import HostPrimitives
from nanobench.record import RunRecord
from nanobench.task import ByteMetricProducer, Task


class RunExecutor:
    """Execute a task once and publish the measurement.

    Errors raised by the task propagate to the caller unchanged; the
    record then keeps its start stamp, end_time stays unset and no
    aggregator is notified.
    """

    __slots__ = ("record", "task", "aggregators", "_host")

    def __init__(
        self,
        record: RunRecord,
        task: Task,
        aggregators: Sequence[Aggregator],
        host: HostPrimitives,
    ) -> None:
        self.record = record
        self.task = task
        self.aggregators = aggregators
        self._host = host

    def execute(self) -> RunRecord:
        """Run the task once.

        Returns:
            The stamped record.
        """
        record = self.record
        record.start_now(self._host.now)
        self.task()
        record.end_now(self._host.now)

        if isinstance(self.task, ByteMetricProducer):
            record.byte_metric = self.task.byte_metric()

        if not record.is_warmup:
            for aggregator in self.aggregators:
                aggregator.on_measure(record)
        return record
