"""Depth limiting for recursive descent.

Random token streams are very good at producing "((((((((" and "[[[[[[".
Without a limit the reference parser would hit RecursionError, which the
harness could not tell apart from a genuine crash. DepthGuard turns deep
nesting into an ordinary syntax rejection instead.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from structfuzz.constants import MAX_DEPTH
from structfuzz.diagnostics import ErrorTemplate, NestingDepthError

__all__ = ["DepthGuard", "depth_clamp"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DepthGuard:
    """Context manager tracking and limiting recursion depth.

    Usage:
        guard = DepthGuard()
        with guard:
            node = self._parse_expression()

    Mutable on purpose: current_depth goes up in __enter__ and down in
    __exit__. One guard per parse, so it is reentrant within that parse.

    Attributes:
        max_depth: Maximum allowed depth (default: MAX_DEPTH)
        current_depth: Current recursion depth
    """

    max_depth: int = MAX_DEPTH
    current_depth: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        """Clamp max_depth against the Python recursion limit."""
        self.max_depth = depth_clamp(self.max_depth)

    def __enter__(self) -> DepthGuard:
        """Enter a nested section.

        Checks BEFORE incrementing: __exit__ does not run when __enter__
        raises, so incrementing first would leave the depth elevated.
        """
        if self.current_depth >= self.max_depth:
            raise NestingDepthError(ErrorTemplate.nesting_depth_exceeded(self.max_depth))
        self.current_depth += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Leave a nested section."""
        self.current_depth -= 1

    @property
    def depth(self) -> int:
        """Current depth (alias for current_depth)."""
        return self.current_depth

    def reset(self) -> None:
        """Reset depth to zero."""
        self.current_depth = 0


def depth_clamp(requested_depth: int, reserve_frames: int = 50) -> int:
    """Clamp a requested depth against the Python recursion limit.

    Every guarded level of the parser costs several stack frames, so the
    clamp keeps a reserve for the frames between guarded levels.

    Args:
        requested_depth: Desired maximum depth
        reserve_frames: Stack frames to reserve for call overhead (default: 50)

    Returns:
        Safe depth value, clamped if necessary
    """
    max_safe_depth = (sys.getrecursionlimit() - reserve_frames) // _FRAMES_PER_LEVEL
    if requested_depth > max_safe_depth:
        logger.warning(
            "Requested depth %d exceeds what the recursion limit (%d) allows. "
            "Clamping to %d to prevent RecursionError.",
            requested_depth,
            sys.getrecursionlimit(),
            max_safe_depth,
        )
        return max_safe_depth
    return requested_depth


# Upper bound of parser frames between two guarded levels (expression ->
# conditional -> binary -> unary -> postfix -> primary -> expression, plus
# the statement and block rules around nested blocks).
_FRAMES_PER_LEVEL = 8
