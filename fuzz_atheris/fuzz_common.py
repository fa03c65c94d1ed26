"""Shared infrastructure for the Atheris token-stream fuzzers.

Observability, routing and reporting shared by every target in this
directory. Targets compose TokenStreamMetrics-style domain state alongside
BaseFuzzerState.

Not a fuzz target itself.
"""

from __future__ import annotations

import hashlib
import heapq
import json
import os
import pathlib
import statistics
import sys
import time
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

try:
    import psutil
except ImportError:
    psutil = None  # type: ignore[assignment]


# --- PEP 695 Type Aliases ---

type FuzzStats = dict[str, int | str | float | list[Any]]
type InterestingInput = tuple[float, str, str]  # (neg_duration_ms, target, input_hash)

# --- Constants ---

GC_INTERVAL = 256
"""Periodic gc.collect() interval to reclaim Atheris instrumentation cycles."""

PERFORMANCE_HISTORY_SIZE = 10_000
"""Bound of the per-iteration latency history."""

MEMORY_HISTORY_SIZE = 1_000
"""Bound of the RSS sample history."""


# --- Process Handle (lazy singleton) ---

_process: psutil.Process | None = None


def get_process() -> psutil.Process:
    """Lazy-initialize psutil process handle."""
    global _process  # noqa: PLW0603  # pylint: disable=global-statement
    if _process is None:
        _process = psutil.Process(os.getpid())
    return _process


# --- Dependency Checks ---


def check_dependencies(dep_names: Sequence[str], dep_modules: Sequence[Any]) -> None:
    """Exit with install instructions when a fuzzing dependency is missing.

    Args:
        dep_names: Human-readable names (e.g., ["psutil", "atheris"])
        dep_modules: Corresponding module objects (None if import failed)
    """
    missing = [name for name, mod in zip(dep_names, dep_modules, strict=True) if mod is None]
    if missing:
        print("-" * 80, file=sys.stderr)
        print("ERROR: Missing required dependencies for fuzzing:", file=sys.stderr)
        for dep in missing:
            print(f"  - {dep}", file=sys.stderr)
        print("", file=sys.stderr)
        print("Install with: pip install 'structfuzz[atheris]'", file=sys.stderr)
        print("-" * 80, file=sys.stderr)
        sys.exit(1)


# --- Base Fuzzer State ---


@dataclass
class BaseFuzzerState:
    """Observability state shared by all token-stream fuzzers."""

    iterations: int = 0
    findings: int = 0
    status: str = "incomplete"

    # Harness return codes seen, by STAT result name (ok, err, invalid, panic)
    outcome_counts: dict[str, int] = field(default_factory=dict)

    performance_history: deque[float] = field(
        default_factory=lambda: deque(maxlen=PERFORMANCE_HISTORY_SIZE),
    )
    memory_history: deque[float] = field(
        default_factory=lambda: deque(maxlen=MEMORY_HISTORY_SIZE),
    )
    initial_memory_mb: float = 0.0

    # Per-target iteration counts and wall time (ms)
    target_coverage: dict[str, int] = field(default_factory=dict)
    target_wall_time: dict[str, float] = field(default_factory=dict)

    error_counts: dict[str, int] = field(default_factory=dict)

    # Slowest inputs (min-heap on negated duration)
    slowest_operations: list[InterestingInput] = field(default_factory=list)

    checkpoint_interval: int = 500


# --- Routing ---


def build_weighted_schedule(
    items: Sequence[str],
    weights: Sequence[int],
) -> tuple[str, ...]:
    """Expand (item, weight) pairs into a flat round-robin schedule."""
    schedule: list[str] = []
    for item, weight in zip(items, weights, strict=True):
        schedule.extend([item] * weight)
    return tuple(schedule)


def select_target_round_robin(
    state: BaseFuzzerState,
    schedule: tuple[str, ...],
) -> str:
    """Pick the target for this iteration from the iteration counter.

    Deterministic routing keeps libFuzzer's coverage feedback from skewing
    the mix toward whichever target finds edges fastest. Callers increment
    state.iterations first, so iteration 1 maps to schedule index 0.
    """
    return schedule[(state.iterations - 1) % len(schedule)]


# --- Per-Iteration Metrics ---


def hash_input(data: bytes) -> str:
    """Truncated SHA-256 hex digest identifying an input in reports."""
    return hashlib.sha256(data).hexdigest()[:16]


def record_memory(state: BaseFuzzerState) -> None:
    """Sample current RSS (call every ~100 iterations)."""
    current_mb = get_process().memory_info().rss / (1024 * 1024)
    state.memory_history.append(current_mb)


def record_outcome(state: BaseFuzzerState, result: str) -> None:
    state.outcome_counts[result] = state.outcome_counts.get(result, 0) + 1


def record_iteration_metrics(
    state: BaseFuzzerState,
    target: str,
    start_time: float,
    input_data: bytes,
) -> None:
    """Record latency, per-target wall time and the slowest inputs.

    Call in the finally block of test_one_input.

    Args:
        state: Fuzzer state to update
        target: Target that ran this iteration
        start_time: time.perf_counter() value from iteration start
        input_data: Raw input bytes
    """
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    state.performance_history.append(elapsed_ms)
    state.target_wall_time[target] = state.target_wall_time.get(target, 0.0) + elapsed_ms

    entry: InterestingInput = (-elapsed_ms, target, hash_input(input_data))
    if len(state.slowest_operations) < 10:
        heapq.heappush(state.slowest_operations, entry)
    elif -elapsed_ms < state.slowest_operations[0][0]:
        heapq.heapreplace(state.slowest_operations, entry)


# --- Stats Building ---


def _add_performance_stats(state: BaseFuzzerState, stats: FuzzStats) -> None:
    if not state.performance_history:
        return

    perf_data = list(state.performance_history)
    stats["perf_mean_ms"] = round(statistics.mean(perf_data), 3)
    stats["perf_median_ms"] = round(statistics.median(perf_data), 3)
    stats["perf_max_ms"] = round(max(perf_data), 3)
    if len(perf_data) >= 100:
        stats["perf_p99_ms"] = round(statistics.quantiles(perf_data, n=100)[98], 3)


def _add_memory_stats(state: BaseFuzzerState, stats: FuzzStats) -> None:
    if not state.memory_history:
        return

    mem_data = list(state.memory_history)
    stats["memory_peak_mb"] = round(max(mem_data), 2)
    stats["memory_delta_mb"] = round(max(mem_data) - state.initial_memory_mb, 2)

    if len(mem_data) >= 40:
        first_quarter = mem_data[: len(mem_data) // 4]
        last_quarter = mem_data[-(len(mem_data) // 4) :]
        growth_mb = statistics.mean(last_quarter) - statistics.mean(first_quarter)
        stats["memory_leak_detected"] = 1 if growth_mb > 10.0 else 0
        stats["memory_growth_mb"] = round(growth_mb, 2)


def build_base_stats_dict(state: BaseFuzzerState) -> FuzzStats:
    """Build the common part of the JSON report."""
    stats: FuzzStats = {
        "status": state.status,
        "iterations": state.iterations,
        "findings": state.findings,
    }

    _add_performance_stats(state, stats)
    _add_memory_stats(state, stats)

    for result, count in sorted(state.outcome_counts.items()):
        stats[f"outcome_{result}"] = count

    stats["targets_tested"] = len(state.target_coverage)
    for target, count in sorted(state.target_coverage.items()):
        stats[f"target_{target}"] = count
    for target, total_ms in sorted(state.target_wall_time.items()):
        stats[f"wall_time_ms_{target}"] = round(total_ms, 1)

    stats["error_types"] = len(state.error_counts)
    for error_type, count in sorted(state.error_counts.items()):
        stats[f"error_{error_type[:50]}"] = count

    stats["slowest_operations"] = [
        {"ms": round(-neg_ms, 2), "target": target, "hash": digest}
        for neg_ms, target, digest in sorted(state.slowest_operations)
    ]
    return stats


# --- Reporting ---


def emit_final_report(
    state: BaseFuzzerState,
    stats: FuzzStats,
    report_dir: pathlib.Path,
    report_filename: str,
) -> None:
    """Print the JSON report to stderr between markers and write it to disk."""
    state.status = "complete"
    report = json.dumps(stats, sort_keys=True)

    print(
        f"\n[SUMMARY-JSON-BEGIN]{report}[SUMMARY-JSON-END]",
        file=sys.stderr,
        flush=True,
    )

    try:
        report_dir.mkdir(parents=True, exist_ok=True)
        (report_dir / report_filename).write_text(report, encoding="utf-8")
    except OSError:
        pass
