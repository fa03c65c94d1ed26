"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, ErrorTier


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    Keeps every message the harness can print in one reviewable place.
    """

    # ------------------------------------------------------------------
    # Syntax rejections
    # ------------------------------------------------------------------

    @staticmethod
    def unexpected_token(found: str, expected: str, position: int) -> Diagnostic:
        """Parser met a token it cannot use here.

        Args:
            found: Description of the token found
            expected: Description of what the grammar allows here
            position: Token index in the stream

        Returns:
            Diagnostic for UNEXPECTED_TOKEN
        """
        msg = f"Unexpected token {found}, expected {expected}"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_TOKEN,
            message=msg,
            position=position,
        )

    @staticmethod
    def unexpected_eof(position: int) -> Diagnostic:
        """Token stream ended in the middle of a construct.

        Args:
            position: Token index of the EOF token

        Returns:
            Diagnostic for UNEXPECTED_EOF
        """
        msg = f"Unexpected end of program at token {position}"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_EOF,
            message=msg,
            position=position,
        )

    @staticmethod
    def invalid_literal(text: str, kind: str, position: int) -> Diagnostic:
        """Literal token whose text does not denote a value.

        Args:
            text: Literal text
            kind: Literal kind (e.g. "binary integer")
            position: Token index in the stream

        Returns:
            Diagnostic for INVALID_LITERAL
        """
        msg = f"Invalid {kind} literal {text!r}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_LITERAL,
            message=msg,
            position=position,
        )

    @staticmethod
    def lexer_error(detail: str, position: int) -> Diagnostic:
        """Lexer emitted an error token.

        Args:
            detail: Lexer's description of the problem
            position: Token index of the error token

        Returns:
            Diagnostic for LEXER_ERROR
        """
        msg = f"Lexer error: {detail}"
        return Diagnostic(
            code=DiagnosticCode.LEXER_ERROR,
            message=msg,
            position=position,
        )

    @staticmethod
    def nesting_depth_exceeded(max_depth: int, position: int | None = None) -> Diagnostic:
        """Program nests deeper than the parser allows.

        Args:
            max_depth: Configured depth limit
            position: Token index where the limit was hit, if known

        Returns:
            Diagnostic for NESTING_DEPTH_EXCEEDED
        """
        msg = f"Maximum nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.NESTING_DEPTH_EXCEEDED,
            message=msg,
            position=position,
            hint="Deeply nested expressions are rejected before they exhaust the stack",
        )

    # ------------------------------------------------------------------
    # Semantic rejections
    # ------------------------------------------------------------------

    @staticmethod
    def duplicate_declaration(name: str) -> Diagnostic:
        """Name declared twice in one scope.

        Args:
            name: The redeclared name

        Returns:
            Diagnostic for DUPLICATE_DECLARATION
        """
        msg = f"Cannot redeclare '{name}': it is already declared in this scope"
        return Diagnostic(code=DiagnosticCode.DUPLICATE_DECLARATION, message=msg)

    @staticmethod
    def undeclared_name(name: str) -> Diagnostic:
        """Reference to a name that is not in scope.

        Args:
            name: The unknown name

        Returns:
            Diagnostic for UNDECLARED_NAME
        """
        msg = f"Cannot find '{name}' in this scope"
        return Diagnostic(
            code=DiagnosticCode.UNDECLARED_NAME,
            message=msg,
            hint="Declare it with let, var or fun before use",
        )

    @staticmethod
    def constant_assignment(name: str) -> Diagnostic:
        """Assignment to a let-bound name.

        Args:
            name: The constant's name

        Returns:
            Diagnostic for CONSTANT_ASSIGNMENT
        """
        msg = f"Cannot assign to constant '{name}'"
        return Diagnostic(
            code=DiagnosticCode.CONSTANT_ASSIGNMENT,
            message=msg,
            hint="Declare it with var to allow assignment",
        )

    @staticmethod
    def control_flow_outside_loop(keyword: str) -> Diagnostic:
        """break/continue outside a loop body.

        Args:
            keyword: "break" or "continue"

        Returns:
            Diagnostic for CONTROL_FLOW_OUTSIDE_LOOP
        """
        msg = f"'{keyword}' can only be used inside a loop"
        return Diagnostic(code=DiagnosticCode.CONTROL_FLOW_OUTSIDE_LOOP, message=msg)

    @staticmethod
    def return_outside_function() -> Diagnostic:
        """return outside a function body.

        Returns:
            Diagnostic for RETURN_OUTSIDE_FUNCTION
        """
        msg = "'return' can only be used inside a function"
        return Diagnostic(code=DiagnosticCode.RETURN_OUTSIDE_FUNCTION, message=msg)

    @staticmethod
    def invalid_declaration_placement(kind: str, context: str) -> Diagnostic:
        """Declaration kind not allowed where it appears.

        Args:
            kind: Declaration kind (e.g. "enum case")
            context: Where it appeared (e.g. "struct")

        Returns:
            Diagnostic for INVALID_DECLARATION_PLACEMENT
        """
        msg = f"{kind} declarations are not allowed in {context}"
        return Diagnostic(code=DiagnosticCode.INVALID_DECLARATION_PLACEMENT, message=msg)

    # ------------------------------------------------------------------
    # Runtime rejections
    # ------------------------------------------------------------------

    @staticmethod
    def interpreter_failed(detail: str) -> Diagnostic:
        """Interpreter reported a runtime error.

        Args:
            detail: Interpreter's error message

        Returns:
            Diagnostic for INTERPRETER_FAILED
        """
        msg = f"Interpreter failed: {detail}"
        return Diagnostic(code=DiagnosticCode.INTERPRETER_FAILED, message=msg)

    # ------------------------------------------------------------------
    # Generator invariant violations
    # ------------------------------------------------------------------

    @staticmethod
    def impossible_token_pair(prev_name: str, next_name: str) -> Diagnostic:
        """Adjacent token types that lexing can never produce.

        Args:
            prev_name: Name of the previous token type
            next_name: Name of the offending token type

        Returns:
            Diagnostic for IMPOSSIBLE_TOKEN_PAIR
        """
        msg = f"AutoSpacingTokenStream noticed impossible token pair: {prev_name}, {next_name}"
        return Diagnostic(
            code=DiagnosticCode.IMPOSSIBLE_TOKEN_PAIR,
            message=msg,
            tier=ErrorTier.INVARIANT,
            hint="The upstream generator emitted a sequence no lexer can produce",
        )

    @staticmethod
    def illegal_revert(target: int, cursor: int) -> Diagnostic:
        """Revert target ahead of the current cursor.

        Args:
            target: Requested cursor
            cursor: Current cursor

        Returns:
            Diagnostic for ILLEGAL_REVERT
        """
        msg = f"Illegal forward revert to {target} from cursor {cursor}"
        return Diagnostic(
            code=DiagnosticCode.ILLEGAL_REVERT,
            message=msg,
            tier=ErrorTier.INVARIANT,
            position=target,
            hint="Only positions previously returned by cursor() may be restored",
        )

    @staticmethod
    def invalid_range(n: int, bits_left: int) -> Diagnostic:
        """Choice requested from an empty or negative range.

        Args:
            n: Requested range size
            bits_left: Remaining entropy at the time of the call

        Returns:
            Diagnostic for INVALID_RANGE
        """
        msg = f"Cannot choose from range n={n} (bits left: {bits_left})"
        return Diagnostic(
            code=DiagnosticCode.INVALID_RANGE,
            message=msg,
            tier=ErrorTier.INVARIANT,
            hint="intn(n) requires n >= 1",
        )

    @staticmethod
    def point_outside_interval(point: int, size: int) -> Diagnostic:
        """Bignum point does not lie inside its interval.

        Args:
            point: Requested position
            size: Interval size

        Returns:
            Diagnostic for INVALID_RANGE
        """
        msg = f"Point {point} is outside [0, {size})"
        return Diagnostic(
            code=DiagnosticCode.INVALID_RANGE,
            message=msg,
            tier=ErrorTier.INVARIANT,
        )

    @staticmethod
    def reconstruction_mismatch(expected: str, actual: str) -> Diagnostic:
        """Reconstructed text differs from golden text.

        Args:
            expected: Golden text
            actual: Reconstructed text

        Returns:
            Diagnostic for RECONSTRUCTION_MISMATCH
        """
        offset = next(
            (i for i, (a, b) in enumerate(zip(expected, actual, strict=False)) if a != b),
            min(len(expected), len(actual)),
        )
        msg = f"Reconstructed source differs from expected: expected {expected!r}, got {actual!r}"
        return Diagnostic(
            code=DiagnosticCode.RECONSTRUCTION_MISMATCH,
            message=msg,
            tier=ErrorTier.INVARIANT,
            position=offset,
        )

    # ------------------------------------------------------------------
    # Capability
    # ------------------------------------------------------------------

    @staticmethod
    def input_unsupported(stream_name: str) -> Diagnostic:
        """Stream cannot reconstruct its source.

        Args:
            stream_name: Class name of the stream

        Returns:
            Diagnostic for INPUT_UNSUPPORTED
        """
        msg = f"{stream_name} cannot reconstruct its input"
        return Diagnostic(
            code=DiagnosticCode.INPUT_UNSUPPORTED,
            message=msg,
            tier=ErrorTier.CAPABILITY,
            hint="Wrap the stream in CodeGatheringTokenStream to recover source text",
        )
