"""
Profiling utilities for the Mongo lookup benchmark.

`profile_block` wraps one strategy execution and records:
- Wall-clock time (perf_counter, sub-second resolution)
- Peak RSS of this process, sampled on a background thread (psutil)
- Peak Python allocations (tracemalloc), mostly the materialized result set
- CPU percent over the block (psutil)

Usage:
    from lookup_bench.utils.profiler import profile_block

    with profile_block("lookup") as stats:
        documents = list(cursor)

    print(stats.duration_seconds, stats.peak_rss_bytes)
"""

from __future__ import annotations

import contextlib
import threading
import time
import tracemalloc
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

import psutil


@dataclass
class ProfileStats:
    """
    Container for profiling measurements.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    peak_rss_bytes: Optional[int] = field(default=None)
    peak_traced_bytes: Optional[int] = field(default=None)
    cpu_percent: Optional[float] = field(default=None)
    extra: dict[str, Any] = field(default_factory=dict)


class _RssSampler(threading.Thread):
    """Daemon thread tracking the highest RSS seen until stopped."""

    def __init__(self, process: psutil.Process, interval_ms: int) -> None:
        super().__init__(daemon=True)
        self._process = process
        self._interval = interval_ms / 1000.0
        self._stop_event = threading.Event()
        self.peak = process.memory_info().rss

    def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.peak = max(self.peak, self._process.memory_info().rss)
            except psutil.Error:
                break
            self._stop_event.wait(timeout=self._interval)

    def stop(self) -> None:
        self._stop_event.set()
        self.join(timeout=1.0)


@contextlib.contextmanager
def profile_block(
    label: str, sample_interval_ms: int = 50, enable_tracemalloc: bool = True
) -> Generator[ProfileStats, None, None]:
    """
    Context manager to profile a block of code.

    Parameters
    ----------
    label : str
        Human-friendly label for the profiled block (the strategy name).
    sample_interval_ms : int
        Interval in milliseconds for RSS sampling.
    enable_tracemalloc : bool
        Whether to track Python-level allocations. Adds overhead to the
        measured block, so disable it when comparing raw latency.

    Notes
    -----
    The timer stops in a `finally` block, so `duration_seconds` is populated
    even when the block raises.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process()

    started_tracemalloc = False
    if enable_tracemalloc and not tracemalloc.is_tracing():
        tracemalloc.start()
        started_tracemalloc = True

    # cpu_percent needs a priming call; the next call reports usage since then.
    process.cpu_percent(interval=None)
    sampler = _RssSampler(process, sample_interval_ms)
    sampler.start()

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts

        sampler.stop()
        stats.peak_rss_bytes = sampler.peak or None
        stats.cpu_percent = process.cpu_percent(interval=None)

        if enable_tracemalloc and tracemalloc.is_tracing():
            _, peak_traced = tracemalloc.get_traced_memory()
            stats.peak_traced_bytes = peak_traced
            if started_tracemalloc:
                tracemalloc.stop()


__all__ = ["ProfileStats", "profile_block"]
