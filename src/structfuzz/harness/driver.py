"""Sample driver: one fuzz input through every front-end stage.

A sample moves through generating -> parsing -> checking -> interpreting.
Generating parses straight from the token stream, which drives the
generator; the text the stream reconstructs is then parsed again from
scratch, so every finding comes with a plain source reproducer.

Each stage runs under its own watchdog (FUZZTIMEOUT / FUZZTIMEOUT_<stage>).
A stage that raises leaves the return code at RC_RUNNING; the driver then
prints the reproducer, reports a panic, and lets the exception propagate
to the fuzzing engine.

Output protocol (context.out):
    STAT <sample_id> <run_id:08x> <output_id> <stage> <result>
    PANIC|CRASH|TIMEOUT <sample_id> <reproducer>
    FUZZDUMP <reproducer> # <sample_id>
"""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field

from structfuzz.constants import (
    RC_ERROR,
    RC_INVALID,
    RC_OK,
    RC_RUNNING,
    STAT_RESULTS,
)
from structfuzz.enums import Outcome, Stage
from structfuzz.generators import (
    GeneratorFactory,
    StructuredTokenStream,
    TableTokenStream,
    build_pipeline,
)
from structfuzz.sema import check_program
from structfuzz.syntax import Program, TokenStream, lex, parse_program, parse_token_stream

from .context import FuzzContext
from .dedup import BigSetOfHashes
from .reproducer import (
    byte_reproducer,
    chain_reproducer,
    output_id,
    sample_id,
    stream_reproducer,
    string_reproducer,
)
from .timeout import Timeout

__all__ = ["BatchStatistics", "FrontEnd", "Harness", "reference_front_end"]

logger = logging.getLogger(__name__)

type ParseResult = tuple[Program | None, Exception | None]
type StageCheck = Callable[[Program, str], Exception | None]


@dataclass(frozen=True, slots=True)
class FrontEnd:
    """The stages under test.

    Attributes:
        parse_stream: Parse from a token stream
        parse_source: Parse from source text
        check: Semantic check, None to skip the stage
        interpret: Interpreter, None to skip the stage
    """

    parse_stream: Callable[[TokenStream], ParseResult]
    parse_source: Callable[[str], ParseResult]
    check: StageCheck | None = None
    interpret: StageCheck | None = None


def reference_front_end() -> FrontEnd:
    """Front-end built from the shipped lexer, parser and checker."""
    return FrontEnd(
        parse_stream=parse_token_stream,
        parse_source=parse_program,
        check=check_program,
    )


@dataclass(slots=True)
class BatchStatistics:
    """Outcome tallies of every sample a harness ran.

    Attributes:
        ok: Samples that passed every stage
        error: Samples rejected by a stage
        invalid: Samples with no program or no declarations
        crashed: Samples whose stage raised
        duplicates: ok samples whose reconstructed code was seen before
    """

    ok: int = 0
    error: int = 0
    invalid: int = 0
    crashed: int = 0
    duplicates: int = 0
    _seen: BigSetOfHashes = field(default_factory=BigSetOfHashes, repr=False)

    def record(self, rc: int, code: str) -> None:
        if rc == RC_OK:
            if self._seen.add(code):
                self.ok += 1
            else:
                self.duplicates += 1
        elif rc == RC_ERROR:
            self.error += 1
        elif rc == RC_INVALID:
            self.invalid += 1
        else:
            self.crashed += 1

    @property
    def total(self) -> int:
        return self.ok + self.error + self.invalid + self.crashed + self.duplicates

    @property
    def duplicate_rate(self) -> float:
        """Percentage of successful samples that repeated earlier code."""
        passed = self.ok + self.duplicates
        return 100.0 * self.duplicates / passed if passed else 0.0

    def percentage(self, count: int) -> float:
        return 100.0 * count / self.total if self.total else 0.0


class _SampleRun:
    """Mutable state of one run_stream_sample() call."""

    __slots__ = ("code", "context", "reproducer", "run_id", "sample_id", "stage", "timeout")

    def __init__(self, context: FuzzContext, sample_id: str, reproducer: str) -> None:
        self.context = context
        self.sample_id = sample_id
        self.reproducer = reproducer
        self.run_id = random.getrandbits(31)
        self.code = ""
        self.stage: Stage | None = None
        self.timeout = Timeout(on_expire=context.crash_reporter.exit_hard)

    def stat_line(self, result: str) -> str:
        stage = self.stage or ""
        return (
            f"\nSTAT {self.sample_id} {self.run_id:08x} {output_id(self.code)} {stage} {result}\n"
        )

    def enter(self, stage: Stage) -> None:
        """Switch stage: stop the old watchdog, arm the crash buffer, start a new one."""
        self.timeout.cancel()
        self.stage = stage
        logger.debug("Sample %s entering %s", self.sample_id, stage)
        if self.context.stats:
            msg = self.stat_line(Outcome.CRASHED)
            msg += f"CRASH {self.sample_id} {self.reproducer}\n"
            self.context.crash_reporter.set_message(msg)
        self.timeout.start(self.context.timeout_ms(stage), self._on_timeout)

    def _on_timeout(self) -> None:
        if not self.context.stats:
            return
        msg = self.stat_line(Outcome.TIMEOUT)
        msg += f"TIMEOUT {self.sample_id} {self.reproducer}\n"
        self.context.out.write(msg + "\n")
        self.context.out.flush()

    def finish(self, rc: int) -> None:
        out = self.context.out
        if rc == RC_RUNNING:
            out.write(f"\n\n\t{self.reproducer}\n\n")
        if self.context.stats:
            result = STAT_RESULTS[rc]
            out.write(self.stat_line(result))
            if rc == RC_RUNNING:
                out.write(f"PANIC {self.sample_id} {self.reproducer}\n")
        out.flush()


class Harness:
    """Runs fuzz samples through a front-end and classifies the outcome.

    Every run_* method returns one of RC_OK, RC_ERROR, RC_INVALID, or
    raises when a stage raised.

    Attributes:
        context: Process configuration
        front_end: Stages under test
        location: Program location handed to checker and interpreter
        stats: Outcome tallies over all runs
    """

    __slots__ = ("context", "front_end", "location", "stats")

    def __init__(
        self,
        context: FuzzContext,
        front_end: FrontEnd | None = None,
        *,
        location: str = "fuzz",
    ) -> None:
        self.context = context
        self.front_end = front_end if front_end is not None else reference_front_end()
        self.location = location
        self.stats = BatchStatistics()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def run_byte_sample(self, data: bytes) -> int:
        code = data.decode("utf-8", "replace").strip()
        return self.run_stream_sample(sample_id(data), byte_reproducer(data), lex(code))

    def run_string_sample(self, code: str) -> int:
        data = code.encode("utf-8", "surrogatepass")
        return self.run_stream_sample(sample_id(data), string_reproducer(code), lex(code))

    def run_structured_sample(self, chunk_size: int, data: bytes) -> int:
        return self._run_generator_sample(
            "run_structured_sample", StructuredTokenStream, chunk_size, data
        )

    def run_table_sample(self, chunk_size: int, data: bytes) -> int:
        return self._run_generator_sample("run_table_sample", TableTokenStream, chunk_size, data)

    def _run_generator_sample(
        self, entry: str, generator_cls: GeneratorFactory, chunk_size: int, data: bytes
    ) -> int:
        reproducer = stream_reproducer(entry, chunk_size, data)
        stream = build_pipeline(generator_cls, chunk_size, data)
        return self.run_stream_sample(sample_id(data), reproducer, stream)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def run_stream_sample(self, sample_id: str, reproducer: str, stream: TokenStream) -> int:
        """Run one token stream through every stage.

        Args:
            sample_id: Identity of the fuzz input (SHA-1 hex)
            reproducer: Call expression replaying the input
            stream: Token stream that can reconstruct its source text

        Returns:
            RC_OK, RC_ERROR or RC_INVALID

        Raises:
            Exception: Whatever a stage raised, after the reproducer and
                PANIC lines were written
        """
        crash_reporter = self.context.crash_reporter
        crash_reporter.set_message(reproducer)
        run = _SampleRun(self.context, sample_id, reproducer)
        rc = RC_RUNNING
        try:
            rc = self._run_stages(run, stream)
        finally:
            run.timeout.dispose()
            run.finish(rc)
            crash_reporter.set_message("")
            self.stats.record(rc, run.code)
        return rc

    def _run_stages(self, run: _SampleRun, stream: TokenStream) -> int:
        run.enter(Stage.GENERATING)
        code, generation_error = self.generate(stream)
        run.code = code
        run.reproducer = chain_reproducer(code, run.reproducer)

        run.enter(Stage.PARSING)
        program, error = self.front_end.parse_source(code)

        if generation_error is not None:
            # The text parses without raising, so the generator is at fault.
            run.enter(Stage.GENERATING)
            logger.error("Sample %s: generator failed with %r", run.sample_id, generation_error)
            raise generation_error

        if error is not None:
            return RC_ERROR
        if program is None or not program.declarations:
            return RC_INVALID

        if self.context.dump:
            self.context.out.write(f"FUZZDUMP {run.reproducer} # {run.sample_id}\n")

        if self.front_end.check is not None:
            run.enter(Stage.CHECKING)
            if self.front_end.check(program, self.location) is not None:
                return RC_ERROR

        if self.front_end.interpret is not None:
            run.enter(Stage.INTERPRETING)
            if self.front_end.interpret(program, self.location) is not None:
                return RC_ERROR

        return RC_OK

    def generate(self, stream: TokenStream) -> tuple[str, Exception | None]:
        """Drive a token stream through the stream parser.

        Returns:
            (reconstructed code, exception raised while parsing or None).
            The exception keeps its traceback for re-raising.
        """
        error: Exception | None = None
        try:
            self.front_end.parse_stream(stream)
        except Exception as exc:  # noqa: BLE001 - re-raised by the caller
            logger.debug("Generation raised %s", type(exc).__name__)
            error = exc
        return stream.input(), error

    def __repr__(self) -> str:
        return f"Harness(location={self.location!r}, stats={self.stats!r})"
