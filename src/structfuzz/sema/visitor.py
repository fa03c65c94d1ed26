"""Visitor pattern for AST traversal.

NOTE: Method names follow the stdlib ast.NodeVisitor convention:
visit_NodeName (PascalCase), not visit_node_name.

Type Parameters:
- ASTVisitor[T] is generic over return type T
- ASTVisitor (no type param) defaults to T=ASTNode

Python 3.13+.
"""

from collections.abc import Callable
from dataclasses import Field, fields
from typing import ClassVar

from structfuzz.constants import MAX_DEPTH
from structfuzz.core import DepthGuard
from structfuzz.syntax.ast import ASTNode

__all__ = ["ASTVisitor"]


class ASTVisitor[T = ASTNode]:
    """Base visitor for traversing the reference AST.

    generic_visit() traverses all child nodes; override visit_NodeType
    methods to add behavior before or after visiting children.

    Dispatch:
    - Method names collected once per class via __init_subclass__
    - Bound methods cached per instance on first use

    Example:
        >>> class CountCalls(ASTVisitor):
        ...     def __init__(self):
        ...         super().__init__()
        ...         self.count = 0
        ...
        ...     def visit_InvocationExpression(self, node):
        ...         self.count += 1
        ...         return self.generic_visit(node)
    """

    __slots__ = ("_depth_guard", "_instance_dispatch_cache")

    _class_visit_methods: ClassVar[dict[str, str]] = {}

    _fields_cache: ClassVar[dict[type, tuple[Field[object], ...]]] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Build class-level dispatch table when subclass is defined."""
        super().__init_subclass__(**kwargs)
        cls._class_visit_methods = {}
        for name in dir(cls):
            if name.startswith("visit_") and name != "visit":
                cls._class_visit_methods[name[6:]] = name

    def __init__(self, *, max_depth: int | None = None) -> None:
        """Initialize visitor with depth guard and dispatch cache.

        Subclasses MUST call super().__init__().

        Args:
            max_depth: Maximum traversal depth (default: MAX_DEPTH).
                Left-associative operator chains are parsed iteratively,
                so ASTs can be much deeper than the parser's own limit.
        """
        effective_max_depth = max_depth if max_depth is not None else MAX_DEPTH
        self._depth_guard = DepthGuard(max_depth=effective_max_depth)
        self._instance_dispatch_cache: dict[type, Callable[[ASTNode], T]] = {}

    def visit(self, node: ASTNode) -> T:
        """Visit a node through the cached dispatch table."""
        node_type = type(node)

        if node_type in self._instance_dispatch_cache:
            return self._instance_dispatch_cache[node_type](node)

        node_type_name = node_type.__name__
        if node_type_name in self._class_visit_methods:
            method = getattr(self, self._class_visit_methods[node_type_name])
        else:
            method = self.generic_visit

        self._instance_dispatch_cache[node_type] = method
        return method(node)  # type: ignore[no-any-return]  # getattr returns Any

    def _get_node_fields(self, node_type: type) -> tuple[Field[object], ...]:
        if node_type not in ASTVisitor._fields_cache:
            ASTVisitor._fields_cache[node_type] = fields(node_type)
        return ASTVisitor._fields_cache[node_type]

    def generic_visit(self, node: ASTNode) -> T:
        """Default visitor (traverses children with depth protection).

        Returns:
            The node itself (identity)

        Raises:
            NestingDepthError: If traversal depth exceeds max_depth
        """
        with self._depth_guard:
            for field in self._get_node_fields(type(node)):
                value = getattr(node, field.name)

                if value is None or isinstance(value, (str, int, bool)):
                    continue

                if isinstance(value, tuple):
                    for item in value:
                        if hasattr(item, "__dataclass_fields__"):
                            self.visit(item)
                elif hasattr(value, "__dataclass_fields__"):
                    self.visit(value)

        return node  # type: ignore[return-value]  # T defaults to ASTNode

    @property
    def max_depth(self) -> int:
        """Effective traversal limit after clamping."""
        return self._depth_guard.max_depth
