"""Tests for the demo command line runner."""
from __future__ import annotations

import logging

import pytest

from nanobench.__main__ import DEMO_SIZE, build_config, main, new_string, new_string_bytes, parse_args
from nanobench.config import MetricPreset


class TestDemoTasks:
    def test_new_string(self) -> None:
        items = new_string()

        assert len(items) == DEMO_SIZE
        assert items[:3] == ["0", "1", "2"]

    def test_new_string_bytes(self) -> None:
        # 10 one-digit, 90 two-digit, 900 three-digit, 9000 four-digit numbers
        assert new_string_bytes() == 10 + 180 + 2700 + 36000


class TestBuildConfig:
    """Test command line overrides."""

    def test_overrides(self) -> None:
        args = parse_args(["--measurements", "3", "--warmups", "1", "--preset", "cpu_only"])
        config = build_config(args)

        assert config.measurement_count == 3
        assert config.warmup_count == 1
        assert config.preset is MetricPreset.CPU_ONLY

    def test_config_file_with_override(self, tmp_path) -> None:
        path = tmp_path / "bench.yaml"
        path.write_text("measurement_count: 9\nwarmup_count: 4\n")

        config = build_config(parse_args(["--config", str(path), "--warmups", "0"]))

        assert config.measurement_count == 9
        assert config.warmup_count == 0


class TestMain:
    """Test the demo entry point."""

    def test_runs_cpu_benchmark(self, caplog: pytest.LogCaptureFixture) -> None:
        argv = ["--preset", "cpu_only", "--measurements", "2", "--warmups", "0", "--settle-seconds", "0"]

        with caplog.at_level(logging.INFO):
            assert main(argv) == 0

        assert "new_string\tavg: " in caplog.text
        assert "running: 2 times" in caplog.text

    def test_runs_bytes_benchmark(self, caplog: pytest.LogCaptureFixture) -> None:
        argv = ["--preset", "bytes_only", "--measurements", "2", "--warmups", "0", "--settle-seconds", "0"]

        with caplog.at_level(logging.INFO):
            assert main(argv) == 0

        assert "bytes-usage: new_string\t38,890.0 Bytes" in caplog.text

    def test_wrongly_typed_config_file(self, tmp_path, caplog: pytest.LogCaptureFixture) -> None:
        path = tmp_path / "bench.yaml"
        path.write_text('measurement_count: "10"\n')

        with caplog.at_level(logging.ERROR):
            assert main(["--config", str(path)]) == 2

        assert "measurement_count must be an integer" in caplog.text

    def test_invalid_configuration(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR):
            assert main(["--measurements", "0"]) == 2

        assert "Invalid configuration" in caplog.text
