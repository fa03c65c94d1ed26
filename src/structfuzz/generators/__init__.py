"""Token generators driven by fuzzbits."""

from .examples import EXAMPLE_TOKEN_VALUES, TOKEN_TABLE
from .pipeline import GeneratorFactory, build_pipeline
from .structured import StructuredTokenStream
from .table import TableTokenStream

__all__ = [
    "EXAMPLE_TOKEN_VALUES",
    "TOKEN_TABLE",
    "GeneratorFactory",
    "StructuredTokenStream",
    "TableTokenStream",
    "build_pipeline",
]
