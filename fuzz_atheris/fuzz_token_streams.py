#!/usr/bin/env python3
# FUZZ_PLUGIN_HEADER_START
# FUZZ_PLUGIN: token_streams - Token-stream fuzzing of the reference front-end
# Intentional: This header is intentionally placed for dynamic plugin discovery.
# CRITICAL: DO NOT REMOVE THIS HEADER - REQUIRED FOR FUZZ_ATHERIS.SH
# FUZZ_PLUGIN_HEADER_END
"""Token-Stream Fuzzer (Atheris).

Routes each libFuzzer input to one of the four structfuzz targets:

- random_bytes: input decoded as source text
- random_strings: unicode text drawn from the input
- structured: StructuredTokenStream over byte fuzzbits
- table: TableTokenStream over byte fuzzbits

Pattern Routing:
Targets are picked by a deterministic round-robin schedule over the
iteration counter, so coverage feedback cannot starve a target.

Harness Protocol:
With FUZZSTATS=1 every sample prints STAT lines; a stage that raises
prints its reproducer and the exception propagates to libFuzzer as the
finding. Per-stage timeouts (FUZZTIMEOUT, FUZZTIMEOUT_<stage>) end the
process with exit code 123 after dumping the crash message.

Metrics:
- Outcome distribution (ok / err / invalid / panic)
- Per-target iteration counts and wall time
- Performance profile (mean/median/p99/max)
- Real memory usage (RSS via psutil)

Requires Python 3.13+ (uses PEP 695 type aliases).
"""

from __future__ import annotations

import argparse
import atexit
import gc
import logging
import pathlib
import sys
import time
from dataclasses import dataclass
from typing import Any

# --- Dependency Checks ---
_psutil_mod: Any = None
_atheris_mod: Any = None

try:  # noqa: SIM105 - need module ref for check_dependencies
    import psutil as _psutil_mod  # type: ignore[no-redef]
except ImportError:
    pass

try:  # noqa: SIM105 - need module ref for check_dependencies
    import atheris as _atheris_mod  # type: ignore[no-redef]
except ImportError:
    pass

from fuzz_common import (  # noqa: E402 - after dependency capture  # pylint: disable=C0413
    GC_INTERVAL,
    BaseFuzzerState,
    build_base_stats_dict,
    build_weighted_schedule,
    check_dependencies,
    emit_final_report,
    get_process,
    record_iteration_metrics,
    record_memory,
    record_outcome,
    select_target_round_robin,
)

check_dependencies(["psutil", "atheris"], [_psutil_mod, _atheris_mod])

import atheris  # noqa: E402  # pylint: disable=C0412,C0413

# --- Domain Metrics ---


@dataclass
class TokenStreamMetrics:
    """Domain-specific metrics for the token-stream fuzzer."""

    empty_inputs: int = 0
    generator_invariant_violations: int = 0


# --- Global State ---

_state = BaseFuzzerState()
_domain = TokenStreamMetrics()

_TARGET_WEIGHTS: tuple[tuple[str, int], ...] = (
    ("random_bytes", 2),
    ("random_strings", 2),
    ("structured", 5),
    ("table", 3),
)

_TARGET_SCHEDULE: tuple[str, ...] = build_weighted_schedule(
    [name for name, _ in _TARGET_WEIGHTS],
    [weight for _, weight in _TARGET_WEIGHTS],
)

# --- Reporting ---

_REPORT_DIR = pathlib.Path(".fuzz_atheris_corpus") / "token_streams"


def _build_stats_dict() -> dict[str, Any]:
    stats = build_base_stats_dict(_state)
    stats["empty_inputs"] = _domain.empty_inputs
    stats["generator_invariant_violations"] = _domain.generator_invariant_violations
    return stats


def _emit_report() -> None:
    """Emit final report (crash-proof)."""
    emit_final_report(_state, _build_stats_dict(), _REPORT_DIR, "fuzz_token_streams_report.json")


atexit.register(_emit_report)

# --- Suppress logging and instrument imports ---
logging.getLogger("structfuzz").setLevel(logging.CRITICAL)

atheris.enabled_hooks.add("str")

with atheris.instrument_imports(include=["structfuzz"]):
    from structfuzz.constants import STAT_RESULTS
    from structfuzz.diagnostics import GeneratorInvariantError
    from structfuzz.harness import (
        fuzz_random_bytes,
        fuzz_random_strings,
        fuzz_structured_token_stream,
        fuzz_table_token_stream,
    )


def _run_target(target: str, data: bytes) -> int:
    match target:
        case "random_bytes":
            return fuzz_random_bytes(data)
        case "random_strings":
            fdp = atheris.FuzzedDataProvider(data)
            return fuzz_random_strings(fdp.ConsumeUnicodeNoSurrogates(len(data)))
        case "structured":
            return fuzz_structured_token_stream(data)
        case _:
            return fuzz_table_token_stream(data)


def test_one_input(data: bytes) -> None:
    """Atheris entry point: one input through one harness target."""
    if _state.iterations == 0:
        _state.initial_memory_mb = get_process().memory_info().rss / (1024 * 1024)

    _state.iterations += 1
    _state.status = "running"

    if _state.iterations % _state.checkpoint_interval == 0:
        _emit_report()

    start_time = time.perf_counter()
    target = select_target_round_robin(_state, _TARGET_SCHEDULE)
    _state.target_coverage[target] = _state.target_coverage.get(target, 0) + 1

    if not data:
        _domain.empty_inputs += 1

    try:
        rc = _run_target(target, data)
        record_outcome(_state, STAT_RESULTS[rc])

    except GeneratorInvariantError:
        _domain.generator_invariant_violations += 1
        _state.findings += 1
        _state.status = "finding"
        raise

    except Exception as e:
        error_key = f"{type(e).__name__}_{str(e)[:30]}"
        _state.error_counts[error_key] = _state.error_counts.get(error_key, 0) + 1
        record_outcome(_state, "panic")
        _state.findings += 1
        _state.status = "finding"
        raise

    finally:
        record_iteration_metrics(_state, target, start_time, data)

        if _state.iterations % GC_INTERVAL == 0:
            gc.collect()

        if _state.iterations % 100 == 0:
            record_memory(_state)


def main() -> None:
    """Run the token-stream fuzzer with CLI support."""
    parser = argparse.ArgumentParser(
        description="Token-stream fuzzer for the structfuzz reference front-end",
        epilog="All unrecognized arguments are passed to libFuzzer.",
    )
    parser.add_argument(
        "--checkpoint-interval",
        type=int,
        default=500,
        help="Emit report every N iterations (default: 500)",
    )

    args, remaining = parser.parse_known_args()
    _state.checkpoint_interval = args.checkpoint_interval

    if not any(arg.startswith("-rss_limit_mb") for arg in remaining):
        remaining.append("-rss_limit_mb=4096")

    sys.argv = [sys.argv[0], *remaining]

    print()
    print("=" * 80)
    print("Token-Stream Fuzzer (Atheris)")
    print("=" * 80)
    print("Targets:    random_bytes, random_strings, structured, table")
    print(f"Checkpoint: Every {_state.checkpoint_interval} iterations")
    print(f"GC Cycle:   Every {GC_INTERVAL} iterations")
    print(f"Routing:    Round-robin weighted schedule (length: {len(_TARGET_SCHEDULE)})")
    print("Stopping:   Press Ctrl+C")
    print("=" * 80)
    print()

    atheris.Setup(sys.argv, test_one_input)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
