"""AST node definitions for the reference front-end.

The language is a compact resource-oriented one: composites (structs,
resources, contracts, enums, events), typed variables, functions, and an
expression grammar with optional chaining, force unwrap, casts and moves.

All nodes are frozen, slotted dataclasses. Top-level programs may mix
declarations and statements (script style); the checker decides what is
allowed where.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from typing import TypeIs

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Root
    "Program",
    # Types
    "NominalType",
    "OptionalType",
    "ResourceType",
    "ReferenceType",
    "VariableSizedType",
    "DictionaryType",
    # Expressions
    "IntegerLiteral",
    "FixedPointLiteral",
    "StringLiteral",
    "BoolLiteral",
    "NilLiteral",
    "IdentifierExpression",
    "ArrayLiteral",
    "DictionaryEntry",
    "DictionaryLiteral",
    "UnaryExpression",
    "BinaryExpression",
    "ConditionalExpression",
    "CastingExpression",
    "ForceExpression",
    "Argument",
    "InvocationExpression",
    "MemberExpression",
    "IndexExpression",
    "CreateExpression",
    "DestroyExpression",
    # Statements
    "Block",
    "ReturnStatement",
    "BreakStatement",
    "ContinueStatement",
    "IfStatement",
    "WhileStatement",
    "ForStatement",
    "EmitStatement",
    "AssignmentStatement",
    "SwapStatement",
    "ExpressionStatement",
    # Declarations
    "PragmaDeclaration",
    "ImportDeclaration",
    "VariableDeclaration",
    "Parameter",
    "FunctionDeclaration",
    "SpecialFunctionDeclaration",
    "FieldDeclaration",
    "EnumCaseDeclaration",
    "CompositeDeclaration",
    "EventDeclaration",
    # Type aliases
    "TypeAnnotation",
    "Expression",
    "Statement",
    "Declaration",
    "TopLevel",
    "ASTNode",
]

# ============================================================================
# TYPES
# ============================================================================


@dataclass(frozen=True, slots=True)
class NominalType:
    """Named type, optionally qualified and instantiated: Foo, A.B, Capability<T>"""

    name: str
    type_arguments: tuple["TypeAnnotation", ...] = ()


@dataclass(frozen=True, slots=True)
class OptionalType:
    """T?"""

    inner: "TypeAnnotation"


@dataclass(frozen=True, slots=True)
class ResourceType:
    """@T"""

    inner: "TypeAnnotation"


@dataclass(frozen=True, slots=True)
class ReferenceType:
    """&T, or auth &T when authorized"""

    inner: "TypeAnnotation"
    authorized: bool = False


@dataclass(frozen=True, slots=True)
class VariableSizedType:
    """[T]"""

    element: "TypeAnnotation"


@dataclass(frozen=True, slots=True)
class DictionaryType:
    """{K: V}"""

    key: "TypeAnnotation"
    value: "TypeAnnotation"


# ============================================================================
# EXPRESSIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class IntegerLiteral:
    """Integer in base 2, 8, 10 or 16; text keeps the source spelling."""

    value: int
    base: int
    text: str


@dataclass(frozen=True, slots=True)
class FixedPointLiteral:
    """Decimal with a fractional part: 1.5"""

    text: str


@dataclass(frozen=True, slots=True)
class StringLiteral:
    """Double-quoted string; value is the raw text between the quotes."""

    value: str


@dataclass(frozen=True, slots=True)
class BoolLiteral:
    value: bool


@dataclass(frozen=True, slots=True)
class NilLiteral:
    pass


@dataclass(frozen=True, slots=True)
class IdentifierExpression:
    """Reference to a name in scope."""

    name: str

    @staticmethod
    def guard(node: object) -> TypeIs["IdentifierExpression"]:
        """Type guard for IdentifierExpression (used for assignment targets)."""
        return isinstance(node, IdentifierExpression)


@dataclass(frozen=True, slots=True)
class ArrayLiteral:
    elements: tuple["Expression", ...]


@dataclass(frozen=True, slots=True)
class DictionaryEntry:
    key: "Expression"
    value: "Expression"


@dataclass(frozen=True, slots=True)
class DictionaryLiteral:
    entries: tuple[DictionaryEntry, ...]


@dataclass(frozen=True, slots=True)
class UnaryExpression:
    """Prefix operator: -x, !x, <-x (move), &x (reference)"""

    operator: str
    operand: "Expression"


@dataclass(frozen=True, slots=True)
class BinaryExpression:
    operator: str
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True, slots=True)
class ConditionalExpression:
    """test ? then : otherwise"""

    test: "Expression"
    then: "Expression"
    otherwise: "Expression"


@dataclass(frozen=True, slots=True)
class CastingExpression:
    """x as T, x as? T, x as! T"""

    expression: "Expression"
    operator: str
    type: "TypeAnnotation"


@dataclass(frozen=True, slots=True)
class ForceExpression:
    """x!"""

    expression: "Expression"


@dataclass(frozen=True, slots=True)
class Argument:
    """Call argument, optionally labelled: f(amount: 1)"""

    label: str | None
    value: "Expression"


@dataclass(frozen=True, slots=True)
class InvocationExpression:
    """callee<T, U>(arguments)"""

    callee: "Expression"
    type_arguments: tuple["TypeAnnotation", ...]
    arguments: tuple[Argument, ...]


@dataclass(frozen=True, slots=True)
class MemberExpression:
    """x.name, or x?.name when optional"""

    expression: "Expression"
    name: str
    optional: bool = False


@dataclass(frozen=True, slots=True)
class IndexExpression:
    """x[index]"""

    expression: "Expression"
    index: "Expression"


@dataclass(frozen=True, slots=True)
class CreateExpression:
    """create R()"""

    invocation: InvocationExpression


@dataclass(frozen=True, slots=True)
class DestroyExpression:
    """destroy r"""

    expression: "Expression"


# ============================================================================
# STATEMENTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Block:
    statements: tuple["Statement", ...]


@dataclass(frozen=True, slots=True)
class ReturnStatement:
    value: "Expression | None" = None


@dataclass(frozen=True, slots=True)
class BreakStatement:
    pass


@dataclass(frozen=True, slots=True)
class ContinueStatement:
    pass


@dataclass(frozen=True, slots=True)
class IfStatement:
    """if test { } else { }; test may be an optional binding (if let x = y)."""

    test: "Expression | VariableDeclaration"
    then: Block
    otherwise: "Block | IfStatement | None" = None


@dataclass(frozen=True, slots=True)
class WhileStatement:
    test: "Expression"
    body: Block


@dataclass(frozen=True, slots=True)
class ForStatement:
    """for name in iterable { }"""

    name: str
    iterable: "Expression"
    body: Block


@dataclass(frozen=True, slots=True)
class EmitStatement:
    invocation: "Expression"


@dataclass(frozen=True, slots=True)
class AssignmentStatement:
    """target = value, target <- value, target <-! value"""

    target: "Expression"
    transfer: str
    value: "Expression"


@dataclass(frozen=True, slots=True)
class SwapStatement:
    """left <-> right"""

    left: "Expression"
    right: "Expression"


@dataclass(frozen=True, slots=True)
class ExpressionStatement:
    expression: "Expression"


# ============================================================================
# DECLARATIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class PragmaDeclaration:
    """#expression"""

    expression: "Expression"


@dataclass(frozen=True, slots=True)
class ImportDeclaration:
    """import "path", import 0x1, import A, B from 0x1"""

    names: tuple[str, ...]
    location: str


@dataclass(frozen=True, slots=True)
class VariableDeclaration:
    """let x: T = value, var r <- value"""

    access: str | None
    is_constant: bool
    name: str
    type: "TypeAnnotation | None"
    transfer: str
    value: "Expression"


@dataclass(frozen=True, slots=True)
class Parameter:
    """[label] name: T"""

    label: str | None
    name: str
    type: "TypeAnnotation"


@dataclass(frozen=True, slots=True)
class FunctionDeclaration:
    access: str | None
    name: str
    parameters: tuple[Parameter, ...]
    return_type: "TypeAnnotation | None"
    body: Block | None


@dataclass(frozen=True, slots=True)
class SpecialFunctionDeclaration:
    """init, destroy, prepare or execute inside a composite."""

    kind: str
    parameters: tuple[Parameter, ...]
    body: Block | None


@dataclass(frozen=True, slots=True)
class FieldDeclaration:
    """let name: T or var name: T inside a composite."""

    access: str | None
    is_constant: bool
    name: str
    type: "TypeAnnotation"


@dataclass(frozen=True, slots=True)
class EnumCaseDeclaration:
    """case name"""

    name: str


@dataclass(frozen=True, slots=True)
class CompositeDeclaration:
    """struct/resource/contract/enum, optionally an interface."""

    access: str | None
    kind: str
    is_interface: bool
    name: str
    conformances: tuple["TypeAnnotation", ...]
    members: tuple["Declaration", ...]


@dataclass(frozen=True, slots=True)
class EventDeclaration:
    """event Name(parameters)"""

    access: str | None
    name: str
    parameters: tuple[Parameter, ...]


@dataclass(frozen=True, slots=True)
class Program:
    """Root AST node.

    Attributes:
        declarations: Top-level declarations and statements, in source order
    """

    declarations: tuple["TopLevel", ...]


# ============================================================================
# TYPE ALIASES
# ============================================================================

type TypeAnnotation = (
    NominalType | OptionalType | ResourceType | ReferenceType | VariableSizedType | DictionaryType
)

type Expression = (
    IntegerLiteral
    | FixedPointLiteral
    | StringLiteral
    | BoolLiteral
    | NilLiteral
    | IdentifierExpression
    | ArrayLiteral
    | DictionaryLiteral
    | UnaryExpression
    | BinaryExpression
    | ConditionalExpression
    | CastingExpression
    | ForceExpression
    | InvocationExpression
    | MemberExpression
    | IndexExpression
    | CreateExpression
    | DestroyExpression
)

type Declaration = (
    PragmaDeclaration
    | ImportDeclaration
    | VariableDeclaration
    | FunctionDeclaration
    | SpecialFunctionDeclaration
    | FieldDeclaration
    | EnumCaseDeclaration
    | CompositeDeclaration
    | EventDeclaration
)

type Statement = (
    ReturnStatement
    | BreakStatement
    | ContinueStatement
    | IfStatement
    | WhileStatement
    | ForStatement
    | EmitStatement
    | AssignmentStatement
    | SwapStatement
    | ExpressionStatement
    | VariableDeclaration
    | FunctionDeclaration
)

type TopLevel = Declaration | Statement

type ASTNode = (
    Program
    | TypeAnnotation
    | Expression
    | Statement
    | Declaration
    | Block
    | Argument
    | DictionaryEntry
    | Parameter
)
