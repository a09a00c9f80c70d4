"""Tests for the run executor."""
from __future__ import annotations

import pytest

from conftest import FakeHost
from nanobench.executor import RunExecutor
from nanobench.record import WARMUP_LABEL, RunRecord
from nanobench.task import bytes_task


class RecordingAggregator:
    """Aggregator stand-in capturing observed records."""

    name = "recording"

    def __init__(self) -> None:
        self.records: list[RunRecord] = []

    def on_measure(self, record: RunRecord) -> None:
        self.records.append(record)


class TestRunExecutor:
    """Test single-iteration execution."""

    def test_stamps_around_task(self, fake_host: FakeHost) -> None:
        """Timing brackets exactly the task call."""
        seen_clock = []
        record = RunRecord("x", 0, 1)

        RunExecutor(record, lambda: seen_clock.append(fake_host.clock), [], fake_host).execute()

        assert record.start_time == 1_000_000
        assert seen_clock == [1_000_000]
        assert record.end_time == 2_000_000
        assert record.elapsed_ns == 1_000_000

    def test_notifies_aggregators_in_order(self, fake_host: FakeHost) -> None:
        order = []

        class Named(RecordingAggregator):
            def __init__(self, tag: str) -> None:
                super().__init__()
                self.tag = tag

            def on_measure(self, record: RunRecord) -> None:
                order.append(self.tag)

        aggregators = [Named("first"), Named("second")]
        RunExecutor(RunRecord("x", 0, 1), lambda: None, aggregators, fake_host).execute()

        assert order == ["first", "second"]

    def test_warmup_not_notified(self, fake_host: FakeHost) -> None:
        agg = RecordingAggregator()

        RunExecutor(RunRecord(WARMUP_LABEL, 0, 1), lambda: None, [agg], fake_host).execute()

        assert agg.records == []

    def test_captures_byte_metric(self, fake_host: FakeHost) -> None:
        """Byte-producing tasks fill the record before notification."""
        agg = RecordingAggregator()
        task = bytes_task(lambda: 512)

        RunExecutor(RunRecord("x", 0, 1), task, [agg], fake_host).execute()

        assert agg.records[0].byte_metric == 512

    def test_plain_task_leaves_byte_metric_empty(self, fake_host: FakeHost) -> None:
        record = RunExecutor(RunRecord("x", 0, 1), lambda: 512, [], fake_host).execute()

        assert record.byte_metric is None

    def test_task_fault_propagates(self, fake_host: FakeHost) -> None:
        """Errors abort the iteration without notifying."""
        agg = RecordingAggregator()

        def broken() -> None:
            raise RuntimeError("boom")

        record = RunRecord("x", 0, 1)
        with pytest.raises(RuntimeError, match="boom"):
            RunExecutor(record, broken, [agg], fake_host).execute()

        assert agg.records == []
        assert record.end_time == 0
