#!/usr/bin/env python3
"""
NanoBench demo runner

Benchmarks building a list of 10,000 stringified integers.

Usage:
    # Run with defaults (50 measurements, 20 warm-ups, CPU and memory)
    python -m nanobench

    # CPU only, fewer iterations
    python -m nanobench --preset cpu_only --measurements 10 --warmups 2

    # Settings from a YAML file
    python -m nanobench --config nanobench.yaml
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace

from nanobench.config import BenchConfig, MetricPreset, load_config
from nanobench.exceptions import NanoBenchError
from nanobench.harness import NanoBench
from nanobench.task import bytes_task

logger = logging.getLogger("nanobench")

DEMO_SIZE = 10_000


def new_string() -> list[str]:
    return [str(i) for i in range(DEMO_SIZE)]


def new_string_bytes() -> int:
    return sum(len(s.encode()) for s in new_string())


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="nanobench",
        description="Run the NanoBench demo benchmark",
    )
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--measurements", type=int, help="Measured iterations")
    parser.add_argument("--warmups", type=int, help="Warm-up iterations")
    parser.add_argument(
        "--preset",
        choices=[p.value for p in MetricPreset],
        help="Metrics to collect",
    )
    parser.add_argument("--settle-seconds", type=float, help="Pause after the run")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BenchConfig:
    """Merge the config file, if any, with command line overrides."""
    config = load_config(args.config) if args.config else BenchConfig()
    overrides = {}
    if args.measurements is not None:
        overrides["measurement_count"] = args.measurements
    if args.warmups is not None:
        overrides["warmup_count"] = args.warmups
    if args.preset is not None:
        overrides["preset"] = MetricPreset.parse(args.preset)
    if args.settle_seconds is not None:
        overrides["settle_seconds"] = args.settle_seconds
    return replace(config, **overrides)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = build_config(args)
    except (NanoBenchError, FileNotFoundError) as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    bench = NanoBench.from_config(config)
    if config.preset is MetricPreset.BYTES_ONLY:
        bench.measure("new_string", bytes_task(new_string_bytes))
    else:
        bench.measure("new_string", new_string)
    return 0


if __name__ == "__main__":
    sys.exit(main())
