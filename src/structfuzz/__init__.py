"""structfuzz - structural fuzzing for language front-ends.

Turns arbitrary fuzz bytes into syntactically plausible token streams,
feeds them straight into a parser, and reports crashes and timeouts with a
replayable reproducer.

Public API:
    new_fuzzbits - Entropy source for a fuzz buffer
    StructuredTokenStream, TableTokenStream - Token generators
    build_pipeline - Generator -> AutoSpacer -> CodeGatherer
    Harness, FuzzContext - Sample driver and its configuration
    run_byte_sample, run_string_sample, run_structured_sample,
    run_table_sample - Replay a printed reproducer

Submodules:
    structfuzz.entropy - Fuzzbits strategies
    structfuzz.syntax - Tokens, stream pipeline, lexer, parser
    structfuzz.sema - Declaration checker
    structfuzz.generators - Token generators
    structfuzz.harness - Driver, timeouts, crash reporting, fuzz targets
    structfuzz.diagnostics - Error types
"""

from .diagnostics import (
    GeneratorInvariantError,
    RejectedInputError,
    StructFuzzError,
)
from .entropy import Fuzzbits, new_fuzzbits
from .generators import StructuredTokenStream, TableTokenStream, build_pipeline
from .harness import (
    FuzzContext,
    Harness,
    run_byte_sample,
    run_string_sample,
    run_structured_sample,
    run_table_sample,
)

try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _get_version
except ImportError as e:
    raise RuntimeError("importlib.metadata unavailable - Python version too old? " + str(e)) from e

try:
    __version__ = _get_version("structfuzz")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "Fuzzbits",
    "FuzzContext",
    "GeneratorInvariantError",
    "Harness",
    "RejectedInputError",
    "StructFuzzError",
    "StructuredTokenStream",
    "TableTokenStream",
    "__version__",
    "build_pipeline",
    "new_fuzzbits",
    "run_byte_sample",
    "run_string_sample",
    "run_structured_sample",
    "run_table_sample",
]
