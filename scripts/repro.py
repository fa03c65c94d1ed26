#!/usr/bin/env python3
"""Replay a fuzzer finding through a structfuzz harness target.

1. Load the crash file (raw fuzz bytes), or take a printed reproducer
2. Print the reproducer expression for the chosen target
3. Run the sample through the reference front-end with full traceback

Usage:
    python scripts/repro.py crash-0123abcd
    python scripts/repro.py --target bytes crash-0123abcd
    python scripts/repro.py --target table --chunk-size 0 crash-0123abcd
    python scripts/repro.py --reproducer "run_string_sample('let x')"

Environment:
    FUZZSTATS=1 prints STAT lines, FUZZTIMEOUT=<ms> arms the stage watchdog.

Exit Codes:
    0   Sample ran to a return code (no crash)
    1   A stage raised (finding confirmed)
    2   File read error

Python 3.13+.
"""

from __future__ import annotations

import argparse
import os
import sys
import traceback
from collections.abc import Callable
from pathlib import Path

_TARGETS = ("bytes", "string", "structured", "table")


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Replay a fuzzer finding through a harness target.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Replay a structured token-stream crash (the default target):
  python scripts/repro.py crash-0123abcd

  # Replay the same bytes with the bignum strategy:
  python scripts/repro.py --chunk-size 0 crash-0123abcd
""",
    )
    parser.add_argument("file", type=Path, nargs="?", help="Crash file to replay")
    parser.add_argument(
        "--reproducer",
        metavar="EXPR",
        help="Replay a reproducer line printed by the harness instead of a file",
    )
    parser.add_argument(
        "--target",
        choices=_TARGETS,
        default="structured",
        help="Harness entry point (default: structured)",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=8,
        help="Fuzzbits chunk size for generator targets (default: 8)",
    )
    args = parser.parse_args()

    if args.reproducer is not None:
        return _replay_expression(args.reproducer)
    if args.file is None:
        parser.error("a crash file or --reproducer is required")

    file_path: Path = args.file
    if not file_path.exists():
        print(f"[ERROR] File not found: {file_path}", file=sys.stderr)
        return 2

    try:
        data = file_path.read_bytes()
    except OSError as e:
        print(f"[ERROR] Cannot read file: {e}", file=sys.stderr)
        return 2

    try:
        from structfuzz.harness import (
            FuzzContext,
            Harness,
            byte_reproducer,
            stream_reproducer,
            string_reproducer,
        )
    except ImportError as e:
        print(f"[ERROR] Cannot import structfuzz: {e}", file=sys.stderr)
        return 2

    harness = Harness(FuzzContext.from_environ(os.environ))
    text = data.decode("utf-8", errors="replace")

    match args.target:
        case "bytes":
            reproducer = byte_reproducer(data)
            run = lambda: harness.run_byte_sample(data)  # noqa: E731
        case "string":
            reproducer = string_reproducer(text)
            run = lambda: harness.run_string_sample(text)  # noqa: E731
        case "structured":
            reproducer = stream_reproducer("run_structured_sample", args.chunk_size, data)
            run = lambda: harness.run_structured_sample(args.chunk_size, data)  # noqa: E731
        case _:
            reproducer = stream_reproducer("run_table_sample", args.chunk_size, data)
            run = lambda: harness.run_table_sample(args.chunk_size, data)  # noqa: E731

    print(f"[INFO] Reproducing: {file_path}")
    print(f"[INFO] Input length: {len(data)} bytes")
    print(f"[INFO] Reproducer: {reproducer}")
    print()

    return _run_reporting(run)


def _replay_expression(expression: str) -> int:
    """Evaluate a printed reproducer against the structfuzz.harness targets."""
    try:
        from structfuzz.harness import targets
    except ImportError as e:
        print(f"[ERROR] Cannot import structfuzz: {e}", file=sys.stderr)
        return 2

    namespace = {name: getattr(targets, name) for name in targets.__all__}
    print(f"[INFO] Reproducer: {expression}")
    print()
    try:
        code = compile(expression.strip(), "<reproducer>", "eval")
    except SyntaxError as e:
        print(f"[ERROR] Not a reproducer expression: {e}", file=sys.stderr)
        return 2
    return _run_reporting(lambda: eval(code, namespace))  # noqa: S307


def _run_reporting(run: Callable[[], int]) -> int:
    try:
        rc = run()
    except Exception as e:
        print(f"[FINDING] Stage raised {type(e).__name__}: {e}")
        print()
        print("Full traceback:")
        print("-" * 60)
        traceback.print_exc()
        print("-" * 60)
        return 1

    outcome = {1: "ok", 0: "err", -1: "invalid"}.get(rc, str(rc))
    print(f"[OK] Sample ran: rc={rc} ({outcome})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
