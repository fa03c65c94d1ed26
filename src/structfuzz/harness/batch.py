"""Batch runners: enumerative sweeps and generator surveys.

run_enumeratively() walks consecutive 64-bit integers as fuzz inputs
instead of random ones, which gives a quick, dependency-free smoke run of a
harness entry point. survey_token_streams() compares generators: how many
of their programs parse, how many are empty, how many repeat.
"""

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass

from structfuzz.constants import ENUMERATION_CHECK_MASK, ENUMERATION_NEWLINE_MASK
from structfuzz.syntax import AutoSpacingTokenStream, CodeGatheringTokenStream, TokenStream

from .context import FuzzContext
from .dedup import BigSetOfHashes
from .driver import FrontEnd, reference_front_end

__all__ = ["SurveyResult", "run_enumeratively", "survey_token_streams"]

logger = logging.getLogger(__name__)

type SampleRunner = Callable[[int, bytes], int]

_MASK_64 = (1 << 64) - 1


def run_enumeratively(
    runner: SampleRunner,
    *,
    context: FuzzContext,
    start: int | None = None,
    seconds: int | None = None,
    progress: bool = True,
    limit: int | None = None,
) -> int:
    """Feed consecutive integers to runner until time runs out.

    Sample i is start + i as 8 little-endian bytes, truncated to
    3 + start % 5 bytes, run as runner(0, sample): chunk size 0 selects the
    bignum strategy, which never repeats an output for distinct inputs.

    Args:
        runner: Harness entry point such as Harness.run_structured_sample
        context: Supplies the output stream and the stats flag
        start: First integer (default: random 63-bit)
        seconds: Time budget (default: context.fuzz_time_s)
        progress: Print a dot per clock check when stats are off
        limit: Stop after this many samples regardless of time

    Returns:
        Number of samples run
    """
    if start is None:
        start = random.getrandbits(63)
    budget = context.fuzz_time_s if seconds is None else seconds
    deadline = time.monotonic() + budget
    length = 3 + start % 5
    out = context.out
    out.write(f"run_enumeratively: start = {start}\n")
    logger.debug("Enumerating from %d, %d-byte samples, %d s", start, length, budget)

    i = 0
    while limit is None or i < limit:
        data = ((start + i) & _MASK_64).to_bytes(8, "little")[:length]
        runner(0, data)
        i += 1
        if i & ENUMERATION_CHECK_MASK == 0:
            if time.monotonic() > deadline:
                break
            if progress and not context.stats:
                out.write(".")
                if i & ENUMERATION_NEWLINE_MASK == 0:
                    out.write("\n")
                out.flush()
    out.write("\n")
    return i


@dataclass(frozen=True, slots=True)
class SurveyResult:
    """Tally of one generator survey.

    Attributes:
        total: Samples run
        fail: Stream parse rejected the program
        empty: Program without declarations
        ok: Distinct parsed programs
        dupe: Parsed programs whose text was seen before
    """

    total: int
    fail: int
    empty: int
    ok: int
    dupe: int

    def pct(self, count: int) -> float:
        return 100.0 * count / self.total if self.total else 0.0

    @property
    def dupe_rate(self) -> float:
        """Percentage of parsed programs that were duplicates."""
        parsed = self.ok + self.dupe
        return 100.0 * self.dupe / parsed if parsed else 0.0

    def format_row(self, name: str) -> str:
        return (
            f"{self.pct(self.fail):6.2f}%,{self.pct(self.empty):6.2f}%,"
            f"{self.pct(self.ok):6.2f}%,{self.dupe_rate:6.2f}% ... "
            f"{self.total:7d},{self.fail:7d},{self.empty:7d},{self.ok:7d},{self.dupe:7d} ... {name}"
        )


def survey_token_streams(
    total: int,
    make_stream: Callable[[bytes], TokenStream],
    *,
    rng: random.Random,
    front_end: FrontEnd | None = None,
) -> SurveyResult:
    """Parse total random samples of 3 to 7 bytes and tally the results.

    Args:
        total: Number of samples
        make_stream: Builds a generator stream from sample bytes
        rng: Source of sample bytes
        front_end: Supplies parse_stream (default: reference front-end)
    """
    parse_stream = (front_end or reference_front_end()).parse_stream
    seen = BigSetOfHashes()
    fail = empty = ok = dupe = 0
    for _ in range(total):
        data = rng.randbytes(3 + rng.randrange(5))
        stream = CodeGatheringTokenStream(AutoSpacingTokenStream(make_stream(data)))
        program, _error = parse_stream(stream)
        if program is None:
            fail += 1
        elif not program.declarations:
            empty += 1
        elif not seen.add(stream.input()):
            dupe += 1
        else:
            ok += 1
    return SurveyResult(total=total, fail=fail, empty=empty, ok=ok, dupe=dupe)
