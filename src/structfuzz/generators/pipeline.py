"""Generator pipeline assembly."""

import logging
from collections.abc import Callable

from structfuzz.entropy import Fuzzbits, new_fuzzbits
from structfuzz.syntax.autospacer import AutoSpacingTokenStream
from structfuzz.syntax.gatherer import CodeGatheringTokenStream
from structfuzz.syntax.stream import TokenStream

__all__ = ["GeneratorFactory", "build_pipeline"]

logger = logging.getLogger(__name__)

type GeneratorFactory = Callable[[Fuzzbits], TokenStream]


def build_pipeline(
    generator_cls: GeneratorFactory,
    chunk_size: int,
    data: bytes,
    *,
    expected: str | None = None,
) -> CodeGatheringTokenStream:
    """Wire fuzz bytes through a generator, the auto-spacer and a gatherer.

    Args:
        generator_cls: Generator class (or factory) taking a Fuzzbits
        chunk_size: Fuzzbits strategy selector, see new_fuzzbits()
        data: Fuzz bytes
        expected: Golden source text for the gatherer, if known

    Returns:
        Gatherer at the end of the pipeline; its input() is the program text
    """
    generator = generator_cls(new_fuzzbits(chunk_size, data))
    logger.debug("Pipeline: %r over %d bytes", generator, len(data))
    return CodeGatheringTokenStream(AutoSpacingTokenStream(generator), expected=expected)
