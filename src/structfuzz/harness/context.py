"""Process-wide harness configuration.

Read once from the environment into a frozen FuzzContext, instead of module
globals that every stage consults:

    FUZZSTATS=1                 emit STAT lines
    FUZZDUMP=1                  emit FUZZDUMP lines for parsed programs
    FUZZTIMEOUT=<ms>            default per-stage timeout, 0 = none
    FUZZTIMEOUT_<stage>=<ms>    override for one stage (see Stage)
    FUZZTIME=<s>                duration of an enumerative run

Bad values are logged and ignored.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TextIO

from structfuzz.constants import DEFAULT_FUZZ_TIME_S
from structfuzz.enums import Stage

from .crash import CrashReporter

__all__ = ["FuzzContext"]

logger = logging.getLogger(__name__)


def _flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name) == "1"


def _non_negative_int(environ: Mapping[str, str], name: str) -> int | None:
    """Parse environ[name]; None when unset or unusable."""
    raw = environ.get(name)
    if raw is None or raw == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return None
    if value < 0:
        logger.warning("Ignoring %s=%r: negative", name, raw)
        return None
    return value


@dataclass(frozen=True, slots=True)
class FuzzContext:
    """Harness configuration for one process.

    Attributes:
        stats: Emit STAT lines
        dump: Emit FUZZDUMP lines
        default_timeout_ms: Timeout for stages without an override, 0 = none
        stage_timeouts_ms: Per-stage overrides
        fuzz_time_s: Duration of an enumerative run
        out: Stream for STAT, FUZZDUMP and reproducer lines
        crash_reporter: Buffer dumped on unexpected exit
    """

    stats: bool = False
    dump: bool = False
    default_timeout_ms: int = 0
    stage_timeouts_ms: Mapping[Stage, int] = field(
        default_factory=lambda: MappingProxyType({})
    )
    fuzz_time_s: int = DEFAULT_FUZZ_TIME_S
    out: TextIO = field(default_factory=lambda: sys.stdout)
    crash_reporter: CrashReporter = field(default_factory=CrashReporter)

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str],
        *,
        out: TextIO | None = None,
        crash_reporter: CrashReporter | None = None,
    ) -> FuzzContext:
        """Build a context from environment variables.

        Args:
            environ: Usually os.environ
            out: Output stream (default: sys.stdout)
            crash_reporter: Shared reporter (default: a fresh one)
        """
        overrides: dict[Stage, int] = {}
        for stage in Stage:
            value = _non_negative_int(environ, f"FUZZTIMEOUT_{stage}")
            if value is not None:
                overrides[stage] = value

        fuzz_time = _non_negative_int(environ, "FUZZTIME")
        return cls(
            stats=_flag(environ, "FUZZSTATS"),
            dump=_flag(environ, "FUZZDUMP"),
            default_timeout_ms=_non_negative_int(environ, "FUZZTIMEOUT") or 0,
            stage_timeouts_ms=MappingProxyType(overrides),
            fuzz_time_s=fuzz_time or DEFAULT_FUZZ_TIME_S,
            out=out if out is not None else sys.stdout,
            crash_reporter=crash_reporter if crash_reporter is not None else CrashReporter(),
        )

    def timeout_ms(self, stage: Stage) -> int:
        """Timeout for stage in milliseconds, 0 for none."""
        return self.stage_timeouts_ms.get(stage, self.default_timeout_ms)
