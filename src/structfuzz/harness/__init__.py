"""Fuzz harness: configuration, stage driver, crash reporting, targets."""

from .batch import SurveyResult, run_enumeratively, survey_token_streams
from .context import FuzzContext
from .crash import CrashReporter
from .dedup import BigSetOfHashes, Bitset, fnv1a_64
from .driver import BatchStatistics, FrontEnd, Harness, reference_front_end
from .reproducer import (
    byte_reproducer,
    chain_reproducer,
    output_id,
    sample_id,
    stream_reproducer,
    string_reproducer,
)
from .targets import (
    default_harness,
    fuzz_random_bytes,
    fuzz_random_strings,
    fuzz_structured_token_stream,
    fuzz_table_token_stream,
    run_byte_sample,
    run_string_sample,
    run_structured_sample,
    run_table_sample,
)
from .timeout import TIMED_OUT, Timeout

__all__ = [
    "TIMED_OUT",
    "BatchStatistics",
    "BigSetOfHashes",
    "Bitset",
    "CrashReporter",
    "FrontEnd",
    "FuzzContext",
    "Harness",
    "SurveyResult",
    "Timeout",
    "byte_reproducer",
    "chain_reproducer",
    "default_harness",
    "fnv1a_64",
    "fuzz_random_bytes",
    "fuzz_random_strings",
    "fuzz_structured_token_stream",
    "fuzz_table_token_stream",
    "output_id",
    "reference_front_end",
    "run_byte_sample",
    "run_enumeratively",
    "run_string_sample",
    "run_structured_sample",
    "run_table_sample",
    "sample_id",
    "stream_reproducer",
    "string_reproducer",
    "survey_token_streams",
]
