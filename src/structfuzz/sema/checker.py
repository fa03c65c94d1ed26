"""Declaration checker for the reference front-end.

A deliberately small semantic pass: it resolves names through lexical
scopes and enforces where declarations and control flow may appear. No
type checking.

Rules:
- A name may be declared once per scope (parameters, fields and enum cases
  included); inner scopes may shadow.
- Functions, composites and events are hoisted within their scope;
  variables are visible from their declaration onwards.
- return needs an enclosing function, break/continue an enclosing loop
  (a function body resets the loop context).
- let bindings cannot be assigned or swapped.
- Enums hold only cases; cases appear only in enums.
- Every referenced name must resolve, unless allow_undeclared is set.

The first violation is reported; checking stops there.

Python 3.13+.
"""

import logging

from structfuzz.diagnostics import CheckerError, ErrorTemplate, NestingDepthError
from structfuzz.syntax.ast import (
    AssignmentStatement,
    Block,
    BreakStatement,
    CompositeDeclaration,
    ContinueStatement,
    EnumCaseDeclaration,
    EventDeclaration,
    Expression,
    FieldDeclaration,
    ForStatement,
    FunctionDeclaration,
    IdentifierExpression,
    IfStatement,
    ImportDeclaration,
    Parameter,
    Program,
    ReturnStatement,
    SpecialFunctionDeclaration,
    SwapStatement,
    TopLevel,
    VariableDeclaration,
    WhileStatement,
)

from .visitor import ASTVisitor

__all__ = ["BUILTIN_NAMES", "check_program"]

logger = logging.getLogger(__name__)

# Names every program can reference without declaring them.
BUILTIN_NAMES: frozenset[str] = frozenset({
    "assert",
    "panic",
    "log",
    "getAccount",
    "getCurrentBlock",
    "unsafeRandom",
    "String",
    "Character",
    "Bool",
    "Address",
    "Int",
    "UInt",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Fix64",
    "UFix64",
    "Type",
    "AuthAccount",
    "PublicAccount",
})

# Implicit bindings inside composite members.
_MEMBER_NAMES: frozenset[str] = frozenset({"self"})
_TRANSACTION_NAMES: frozenset[str] = frozenset({"signer"})


class _Scope:
    """One lexical scope: name -> is_constant."""

    __slots__ = ("names",)

    def __init__(self) -> None:
        self.names: dict[str, bool] = {}


class _DeclarationChecker(ASTVisitor[None]):
    """Walks a Program, raising CheckerError at the first violation."""

    __slots__ = (
        "_allow_undeclared",
        "_composites",
        "_functions",
        "_loops",
        "_scopes",
    )

    def __init__(self, *, allow_undeclared: bool) -> None:
        super().__init__()
        self._allow_undeclared = allow_undeclared
        self._scopes: list[_Scope] = []
        self._composites: list[str] = []
        self._functions = 0
        self._loops = 0

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def _push(self, *implicit: str) -> None:
        scope = _Scope()
        for name in implicit:
            scope.names[name] = True
        self._scopes.append(scope)

    def _pop(self) -> None:
        self._scopes.pop()

    def _declare(self, name: str, *, is_constant: bool = True) -> None:
        scope = self._scopes[-1]
        if name in scope.names:
            raise CheckerError(ErrorTemplate.duplicate_declaration(name))
        scope.names[name] = is_constant

    def _lookup(self, name: str) -> bool | None:
        """is_constant of the innermost binding, None if unresolved."""
        for scope in reversed(self._scopes):
            if name in scope.names:
                return scope.names[name]
        if name in BUILTIN_NAMES:
            return True
        return None

    def _hoist(self, declarations: tuple[TopLevel, ...]) -> None:
        for declaration in declarations:
            if isinstance(declaration, (FunctionDeclaration, CompositeDeclaration, EventDeclaration)):
                self._declare(declaration.name)

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def visit_Program(self, node: Program) -> None:
        self._push()
        self._hoist(node.declarations)
        for declaration in node.declarations:
            self.visit(declaration)
        self._pop()

    def visit_Block(self, node: Block) -> None:
        self._push()
        self._hoist(node.statements)
        with self._depth_guard:
            for statement in node.statements:
                self.visit(statement)
        self._pop()

    def visit_CompositeDeclaration(self, node: CompositeDeclaration) -> None:
        for member in node.members:
            if node.kind == "enum" and not isinstance(member, EnumCaseDeclaration):
                kind = type(member).__name__
                raise CheckerError(ErrorTemplate.invalid_declaration_placement(kind, "enum"))
        self._composites.append(node.kind)
        self._push(*_MEMBER_NAMES)
        try:
            self._hoist(node.members)
            with self._depth_guard:
                for member in node.members:
                    self.visit(member)
        finally:
            self._pop()
            self._composites.pop()

    def _visit_function(
        self, parameters: tuple[Parameter, ...], body: Block | None, *implicit: str
    ) -> None:
        if body is None:
            return
        saved_loops, self._loops = self._loops, 0
        self._functions += 1
        self._push(*implicit)
        try:
            for parameter in parameters:
                self._declare(parameter.name)
            self.visit(body)
        finally:
            self._pop()
            self._functions -= 1
            self._loops = saved_loops

    def visit_FunctionDeclaration(self, node: FunctionDeclaration) -> None:
        # The name itself was hoisted by the enclosing scope.
        implicit = _MEMBER_NAMES if self._composites else ()
        self._visit_function(node.parameters, node.body, *implicit)

    def visit_SpecialFunctionDeclaration(self, node: SpecialFunctionDeclaration) -> None:
        implicit = _MEMBER_NAMES | _TRANSACTION_NAMES if node.kind == "prepare" else _MEMBER_NAMES
        self._visit_function(node.parameters, node.body, *implicit)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def visit_VariableDeclaration(self, node: VariableDeclaration) -> None:
        self.visit(node.value)
        self._declare(node.name, is_constant=node.is_constant)

    def visit_FieldDeclaration(self, node: FieldDeclaration) -> None:
        self._declare(node.name, is_constant=node.is_constant)

    def visit_EnumCaseDeclaration(self, node: EnumCaseDeclaration) -> None:
        if not self._composites or self._composites[-1] != "enum":
            raise CheckerError(
                ErrorTemplate.invalid_declaration_placement("EnumCaseDeclaration", "enum")
            )
        self._declare(node.name)

    def visit_EventDeclaration(self, node: EventDeclaration) -> None:
        seen: set[str] = set()
        for parameter in node.parameters:
            if parameter.name in seen:
                raise CheckerError(ErrorTemplate.duplicate_declaration(parameter.name))
            seen.add(parameter.name)

    def visit_ImportDeclaration(self, node: ImportDeclaration) -> None:
        if not node.names:
            # Whole-location imports bind the location name when it is one.
            if node.location.isidentifier():
                self._declare(node.location)
            return
        for name in node.names:
            self._declare(name)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def visit_ReturnStatement(self, node: ReturnStatement) -> None:
        if self._functions == 0:
            raise CheckerError(ErrorTemplate.return_outside_function())
        if node.value is not None:
            self.visit(node.value)

    def visit_BreakStatement(self, node: BreakStatement) -> None:
        if self._loops == 0:
            raise CheckerError(ErrorTemplate.control_flow_outside_loop("break"))

    def visit_ContinueStatement(self, node: ContinueStatement) -> None:
        if self._loops == 0:
            raise CheckerError(ErrorTemplate.control_flow_outside_loop("continue"))

    def visit_IfStatement(self, node: IfStatement) -> None:
        # if let x = y { ... } binds x for the then-branch only.
        self._push()
        try:
            self.visit(node.test)
            self.visit(node.then)
        finally:
            self._pop()
        if node.otherwise is not None:
            with self._depth_guard:
                self.visit(node.otherwise)

    def visit_WhileStatement(self, node: WhileStatement) -> None:
        self.visit(node.test)
        self._loops += 1
        try:
            self.visit(node.body)
        finally:
            self._loops -= 1

    def visit_ForStatement(self, node: ForStatement) -> None:
        self.visit(node.iterable)
        self._loops += 1
        self._push()
        try:
            self._declare(node.name)
            self.visit(node.body)
        finally:
            self._pop()
            self._loops -= 1

    def visit_AssignmentStatement(self, node: AssignmentStatement) -> None:
        self.visit(node.value)
        self._check_assignable(node.target)
        self.visit(node.target)

    def visit_SwapStatement(self, node: SwapStatement) -> None:
        self._check_assignable(node.left)
        self._check_assignable(node.right)
        self.visit(node.left)
        self.visit(node.right)

    def _check_assignable(self, target: Expression) -> None:
        if IdentifierExpression.guard(target) and self._lookup(target.name) is True:
            raise CheckerError(ErrorTemplate.constant_assignment(target.name))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def visit_IdentifierExpression(self, node: IdentifierExpression) -> None:
        if self._lookup(node.name) is None and not self._allow_undeclared:
            raise CheckerError(ErrorTemplate.undeclared_name(node.name))


def check_program(
    program: Program, location: str, *, allow_undeclared: bool = False
) -> CheckerError | None:
    """Check a parsed program.

    Args:
        program: Parser output
        location: Name of the program's origin, for logging
        allow_undeclared: Skip the undeclared-name rule

    Returns:
        None if the program passes, otherwise the first CheckerError
    """
    checker = _DeclarationChecker(allow_undeclared=allow_undeclared)
    try:
        checker.visit(program)
    except CheckerError as error:
        logger.debug("Checker rejected %s: %s", location, error)
        return error
    except NestingDepthError as error:
        logger.debug("Checker rejected %s: %s", location, error)
        return CheckerError(ErrorTemplate.nesting_depth_exceeded(checker.max_depth))
    return None
