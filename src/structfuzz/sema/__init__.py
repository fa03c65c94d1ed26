"""Semantic analysis for the reference front-end."""

from .checker import BUILTIN_NAMES, check_program
from .visitor import ASTVisitor

__all__ = ["BUILTIN_NAMES", "ASTVisitor", "check_program"]
