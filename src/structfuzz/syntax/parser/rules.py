"""Grammar rules of the reference parser.

Recursive descent with precedence climbing for binary operators. Every
rule that can nest enters the shared DepthGuard, so adversarial nesting
ends in NestingDepthError instead of RecursionError.

Precedence, loosest first:
    ?:            conditional (right-associative)
    ||  &&        logical
    == !=         equality
    < <= > >=     relational
    ??            nil-coalescing (right-associative)
    |  ^  &       bitwise
    <<            shift
    + -           additive
    * / %         multiplicative
    as as? as!    casting
    - ! <- &      prefix
    . ?. [] () !  postfix

Generic invocations ("f<T>(x)") are parsed speculatively: the rule marks
the stream, tries a type argument list followed by "(", and rewinds to
treat "<" as less-than if that fails.
"""

from structfuzz.diagnostics import NestingDepthError, ParserError
from structfuzz.syntax.ast import (
    Argument,
    ArrayLiteral,
    AssignmentStatement,
    BinaryExpression,
    Block,
    BoolLiteral,
    BreakStatement,
    CastingExpression,
    CompositeDeclaration,
    ConditionalExpression,
    ContinueStatement,
    CreateExpression,
    Declaration,
    DestroyExpression,
    DictionaryEntry,
    DictionaryLiteral,
    DictionaryType,
    EmitStatement,
    EnumCaseDeclaration,
    EventDeclaration,
    Expression,
    ExpressionStatement,
    FieldDeclaration,
    ForceExpression,
    ForStatement,
    FunctionDeclaration,
    IdentifierExpression,
    IfStatement,
    ImportDeclaration,
    IndexExpression,
    InvocationExpression,
    MemberExpression,
    NilLiteral,
    NominalType,
    OptionalType,
    Parameter,
    PragmaDeclaration,
    Program,
    ReferenceType,
    ResourceType,
    ReturnStatement,
    SpecialFunctionDeclaration,
    Statement,
    StringLiteral,
    SwapStatement,
    TopLevel,
    TypeAnnotation,
    UnaryExpression,
    VariableDeclaration,
    VariableSizedType,
    WhileStatement,
)
from structfuzz.syntax.token_type import TokenType

from .primitives import (
    ACCESS_LEVELS,
    COMPOSITE_KINDS,
    INTEGER_LITERALS,
    SPECIAL_FUNCTIONS,
    TRANSFER_OPERATORS,
    parse_fixed_point_literal,
    parse_integer_literal,
)
from .state import ParserState

__all__ = ["Parser"]

T = TokenType

# token type: (operator text, precedence, right-associative)
_BINARY_OPERATORS: dict[TokenType, tuple[str, int, bool]] = {
    T.VERTICAL_BAR_VERTICAL_BAR: ("||", 1, False),
    T.AMPERSAND_AMPERSAND: ("&&", 2, False),
    T.EQUAL_EQUAL: ("==", 3, False),
    T.NOT_EQUAL: ("!=", 3, False),
    T.LESS: ("<", 4, False),
    T.LESS_EQUAL: ("<=", 4, False),
    T.GREATER: (">", 4, False),
    T.GREATER_EQUAL: (">=", 4, False),
    T.DOUBLE_QUESTION_MARK: ("??", 5, True),
    T.VERTICAL_BAR: ("|", 6, False),
    T.CARET: ("^", 7, False),
    T.AMPERSAND: ("&", 8, False),
    T.LESS_LESS: ("<<", 9, False),
    T.PLUS: ("+", 10, False),
    T.MINUS: ("-", 10, False),
    T.STAR: ("*", 11, False),
    T.SLASH: ("/", 11, False),
    T.PERCENT: ("%", 11, False),
}

_PREFIX_OPERATORS: dict[TokenType, str] = {
    T.MINUS: "-",
    T.EXCLAMATION_MARK: "!",
    T.LEFT_ARROW: "<-",
    T.AMPERSAND: "&",
}

# Tokens after "return" that mean "no value".
_RETURN_TERMINATORS: frozenset[TokenType] = frozenset({T.BRACE_CLOSE, T.SEMICOLON, T.EOF})


class Parser(ParserState):
    """Recursive-descent parser for the reference language."""

    # ------------------------------------------------------------------
    # Program and declarations
    # ------------------------------------------------------------------

    def parse_program(self) -> Program:
        declarations: list[TopLevel] = []
        while not self.at(T.EOF):
            if self.accept(T.SEMICOLON):
                continue
            declarations.append(self._parse_top_level())
        return Program(tuple(declarations))

    def _parse_top_level(self) -> TopLevel:
        access = self._parse_access()
        match self.keyword():
            case "let" | "var":
                return self._parse_variable(access)
            case "fun":
                return self._parse_function(access)
            case "event":
                return self._parse_event(access)
            case kind if kind in COMPOSITE_KINDS:
                return self._parse_composite(access)
        if access is not None:
            raise self.error("declaration")
        if self.at(T.PRAGMA):
            self.advance()
            return PragmaDeclaration(self.parse_expression())
        if self.at_keyword("import"):
            return self._parse_import()
        return self._parse_statement()

    def _parse_access(self) -> str | None:
        match self.keyword():
            case "priv":
                self.advance()
                return "priv"
            case "pub":
                self.advance()
                if self.accept(T.PAREN_OPEN):
                    self.expect_keyword("set")
                    self.expect(T.PAREN_CLOSE)
                    return "pub(set)"
                return "pub"
            case "access":
                self.advance()
                self.expect(T.PAREN_OPEN)
                level = self.keyword()
                if level not in ACCESS_LEVELS:
                    raise self.error("access level")
                self.advance()
                self.expect(T.PAREN_CLOSE)
                return f"access({level})"
        return None

    def _parse_import(self) -> ImportDeclaration:
        self.expect_keyword("import")
        if self.at(T.STRING) or self.at(T.HEXADECIMAL_INTEGER_LITERAL):
            return ImportDeclaration(names=(), location=str(self.advance().value))
        names = [self.expect_name()]
        while self.accept(T.COMMA):
            names.append(self.expect_name())
        if not self.accept_keyword("from"):
            if len(names) > 1:
                raise self.error("'from'")
            return ImportDeclaration(names=(), location=names[0])
        if self.at(T.STRING) or self.at(T.HEXADECIMAL_INTEGER_LITERAL):
            location = str(self.advance().value)
        else:
            location = self.expect_name()
        return ImportDeclaration(names=tuple(names), location=location)

    def _parse_variable(self, access: str | None) -> VariableDeclaration:
        is_constant = self.advance().value == "let"
        name = self.expect_name()
        type_annotation = self.parse_type() if self.accept(T.COLON) else None
        transfer = TRANSFER_OPERATORS.get(self.current.type)
        if transfer is None:
            raise self.error("transfer operator")
        self.advance()
        return VariableDeclaration(
            access=access,
            is_constant=is_constant,
            name=name,
            type=type_annotation,
            transfer=transfer,
            value=self.parse_expression(),
        )

    def _parse_function(self, access: str | None) -> FunctionDeclaration:
        self.expect_keyword("fun")
        name = self.expect_name()
        parameters = self._parse_parameters()
        return_type = self.parse_type() if self.accept(T.COLON) else None
        body = self._parse_block() if self.at(T.BRACE_OPEN) else None
        return FunctionDeclaration(access, name, parameters, return_type, body)

    def _parse_parameters(self) -> tuple[Parameter, ...]:
        self.expect(T.PAREN_OPEN)
        parameters: list[Parameter] = []
        while not self.accept(T.PAREN_CLOSE):
            first = self.expect_name()
            label, name = (first, self.expect_name()) if self.at(T.IDENTIFIER) else (None, first)
            self.expect(T.COLON)
            parameters.append(Parameter(label, name, self.parse_type()))
            if not self.accept(T.COMMA):
                self.expect(T.PAREN_CLOSE)
                break
        return tuple(parameters)

    def _parse_event(self, access: str | None) -> EventDeclaration:
        self.expect_keyword("event")
        name = self.expect_name()
        return EventDeclaration(access, name, self._parse_parameters())

    def _parse_composite(self, access: str | None) -> CompositeDeclaration:
        kind = str(self.advance().value)
        is_interface = self.accept_keyword("interface")
        name = self.expect_name()
        conformances: list[TypeAnnotation] = []
        if self.accept(T.COLON):
            conformances.append(self.parse_type())
            while self.accept(T.COMMA):
                conformances.append(self.parse_type())
        self.expect(T.BRACE_OPEN)
        members: list[Declaration] = []
        with self.depth:
            while not self.accept(T.BRACE_CLOSE):
                if self.accept(T.SEMICOLON):
                    continue
                members.append(self._parse_member())
        return CompositeDeclaration(
            access, kind, is_interface, name, tuple(conformances), tuple(members)
        )

    def _parse_member(self) -> Declaration:
        access = self._parse_access()
        match self.keyword():
            case "let" | "var":
                is_constant = self.advance().value == "let"
                name = self.expect_name()
                self.expect(T.COLON)
                return FieldDeclaration(access, is_constant, name, self.parse_type())
            case "fun":
                return self._parse_function(access)
            case "event":
                return self._parse_event(access)
            case "case":
                self.advance()
                return EnumCaseDeclaration(self.expect_name())
            case kind if kind in COMPOSITE_KINDS:
                return self._parse_composite(access)
            case kind if kind in SPECIAL_FUNCTIONS:
                self.advance()
                parameters = self._parse_parameters()
                body = self._parse_block() if self.at(T.BRACE_OPEN) else None
                return SpecialFunctionDeclaration(str(kind), parameters, body)
        raise self.error("member declaration")

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_block(self) -> Block:
        self.expect(T.BRACE_OPEN)
        statements: list[Statement] = []
        with self.depth:
            while not self.accept(T.BRACE_CLOSE):
                if self.accept(T.SEMICOLON):
                    continue
                statements.append(self._parse_statement())
        return Block(tuple(statements))

    def _parse_statement(self) -> Statement:
        match self.keyword():
            case "return":
                self.advance()
                if self.current.type in _RETURN_TERMINATORS:
                    return ReturnStatement()
                return ReturnStatement(self.parse_expression())
            case "break":
                self.advance()
                return BreakStatement()
            case "continue":
                self.advance()
                return ContinueStatement()
            case "if":
                return self._parse_if()
            case "while":
                self.advance()
                test = self.parse_expression()
                return WhileStatement(test, self._parse_block())
            case "for":
                self.advance()
                name = self.expect_name()
                self.expect_keyword("in")
                iterable = self.parse_expression()
                return ForStatement(name, iterable, self._parse_block())
            case "emit":
                self.advance()
                return EmitStatement(self.parse_expression())
            case "let" | "var":
                return self._parse_variable(None)
            case "fun":
                return self._parse_function(None)

        target = self.parse_expression()
        transfer = TRANSFER_OPERATORS.get(self.current.type)
        if transfer is not None:
            self.advance()
            return AssignmentStatement(target, transfer, self.parse_expression())
        if self.accept(T.SWAP):
            return SwapStatement(target, self.parse_expression())
        return ExpressionStatement(target)

    def _parse_if(self) -> IfStatement:
        self.expect_keyword("if")
        test: Expression | VariableDeclaration
        if self.at_keyword("let") or self.at_keyword("var"):
            test = self._parse_variable(None)
        else:
            test = self.parse_expression()
        then = self._parse_block()
        if not self.accept_keyword("else"):
            return IfStatement(test, then)
        if self.at_keyword("if"):
            with self.depth:
                return IfStatement(test, then, self._parse_if())
        return IfStatement(test, then, self._parse_block())

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self) -> Expression:
        with self.depth:
            return self._parse_conditional()

    def _parse_conditional(self) -> Expression:
        test = self._parse_binary(1)
        if not self.accept(T.QUESTION_MARK):
            return test
        then = self.parse_expression()
        self.expect(T.COLON)
        return ConditionalExpression(test, then, self.parse_expression())

    def _parse_binary(self, min_precedence: int) -> Expression:
        left = self._parse_cast()
        while (operator := _BINARY_OPERATORS.get(self.current.type)) is not None:
            text, precedence, right_associative = operator
            if precedence < min_precedence:
                break
            self.advance()
            with self.depth:
                right = self._parse_binary(precedence if right_associative else precedence + 1)
            left = BinaryExpression(text, left, right)
        return left

    def _parse_cast(self) -> Expression:
        expression = self._parse_unary()
        while True:
            if self.at_keyword("as"):
                operator = "as"
            elif self.at(T.AS_QUESTION_MARK):
                operator = "as?"
            elif self.at(T.AS_EXCLAMATION_MARK):
                operator = "as!"
            else:
                return expression
            self.advance()
            expression = CastingExpression(expression, operator, self.parse_type())

    def _parse_unary(self) -> Expression:
        operators: list[str] = []
        while (operator := _PREFIX_OPERATORS.get(self.current.type)) is not None:
            operators.append(operator)
            self.advance()
        expression = self._parse_postfix()
        for operator in reversed(operators):
            expression = UnaryExpression(operator, expression)
        return expression

    def _parse_postfix(self) -> Expression:
        expression = self._parse_primary()
        while True:
            match self.current.type:
                case T.DOT | T.QUESTION_MARK_DOT:
                    optional = self.advance().type is T.QUESTION_MARK_DOT
                    name = str(self.expect(T.IDENTIFIER).value)
                    expression = MemberExpression(expression, name, optional)
                case T.BRACKET_OPEN:
                    self.advance()
                    index = self.parse_expression()
                    self.expect(T.BRACKET_CLOSE)
                    expression = IndexExpression(expression, index)
                case T.PAREN_OPEN:
                    expression = InvocationExpression(expression, (), self._parse_arguments())
                case T.EXCLAMATION_MARK:
                    self.advance()
                    expression = ForceExpression(expression)
                case T.LESS:
                    invocation = self._try_generic_invocation(expression)
                    if invocation is None:
                        return expression
                    expression = invocation
                case _:
                    return expression

    def _try_generic_invocation(self, callee: Expression) -> InvocationExpression | None:
        mark = self.mark()
        try:
            type_arguments = self._parse_type_arguments()
            if not self.at(T.PAREN_OPEN):
                raise self.error("'('")
            arguments = self._parse_arguments()
        except NestingDepthError:
            raise
        except ParserError:
            self.restore(mark)
            return None
        return InvocationExpression(callee, type_arguments, arguments)

    def _parse_arguments(self) -> tuple[Argument, ...]:
        self.expect(T.PAREN_OPEN)
        arguments: list[Argument] = []
        while not self.accept(T.PAREN_CLOSE):
            label = None
            if self.at(T.IDENTIFIER):
                mark = self.mark()
                name = str(self.advance().value)
                if self.accept(T.COLON):
                    label = name
                else:
                    self.restore(mark)
            arguments.append(Argument(label, self.parse_expression()))
            if not self.accept(T.COMMA):
                self.expect(T.PAREN_CLOSE)
                break
        return tuple(arguments)

    def _parse_primary(self) -> Expression:
        token = self.current
        match token.type:
            case token_type if token_type in INTEGER_LITERALS:
                position = self.position
                self.advance()
                return parse_integer_literal(token, position)
            case T.FIXED_POINT_NUMBER_LITERAL:
                position = self.position
                self.advance()
                return parse_fixed_point_literal(token, position)
            case T.STRING:
                self.advance()
                return StringLiteral(str(token.value)[1:-1])
            case T.IDENTIFIER:
                return self._parse_word()
            case T.PAREN_OPEN:
                self.advance()
                expression = self.parse_expression()
                self.expect(T.PAREN_CLOSE)
                return expression
            case T.BRACKET_OPEN:
                return ArrayLiteral(self._parse_sequence(T.BRACKET_OPEN, T.BRACKET_CLOSE))
            case T.BRACE_OPEN:
                return self._parse_dictionary()
        raise self.error("expression")

    def _parse_word(self) -> Expression:
        match self.keyword():
            case "true" | "false" as word:
                self.advance()
                return BoolLiteral(word == "true")
            case "nil":
                self.advance()
                return NilLiteral()
            case "create":
                self.advance()
                with self.depth:
                    invocation = self._parse_postfix()
                if not isinstance(invocation, InvocationExpression):
                    raise self.error("invocation after 'create'")
                return CreateExpression(invocation)
            case "destroy":
                self.advance()
                with self.depth:
                    return DestroyExpression(self._parse_unary())
        return IdentifierExpression(self.expect_name())

    def _parse_sequence(self, opener: TokenType, closer: TokenType) -> tuple[Expression, ...]:
        self.expect(opener)
        elements: list[Expression] = []
        while not self.accept(closer):
            elements.append(self.parse_expression())
            if not self.accept(T.COMMA):
                self.expect(closer)
                break
        return tuple(elements)

    def _parse_dictionary(self) -> DictionaryLiteral:
        self.expect(T.BRACE_OPEN)
        entries: list[DictionaryEntry] = []
        while not self.accept(T.BRACE_CLOSE):
            key = self.parse_expression()
            self.expect(T.COLON)
            entries.append(DictionaryEntry(key, self.parse_expression()))
            if not self.accept(T.COMMA):
                self.expect(T.BRACE_CLOSE)
                break
        return DictionaryLiteral(tuple(entries))

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def parse_type(self) -> TypeAnnotation:
        with self.depth:
            if self.accept(T.AT):
                return ResourceType(self.parse_type())
            authorized = self.accept_keyword("auth")
            if authorized or self.at(T.AMPERSAND):
                self.expect(T.AMPERSAND)
                return ReferenceType(self.parse_type(), authorized)
            annotation = self._parse_base_type()
            while True:
                if self.accept(T.QUESTION_MARK):
                    annotation = OptionalType(annotation)
                elif self.accept(T.DOUBLE_QUESTION_MARK):
                    annotation = OptionalType(OptionalType(annotation))
                else:
                    return annotation

    def _parse_base_type(self) -> TypeAnnotation:
        match self.current.type:
            case T.BRACKET_OPEN:
                self.advance()
                element = self.parse_type()
                self.expect(T.BRACKET_CLOSE)
                return VariableSizedType(element)
            case T.BRACE_OPEN:
                self.advance()
                key = self.parse_type()
                self.expect(T.COLON)
                value = self.parse_type()
                self.expect(T.BRACE_CLOSE)
                return DictionaryType(key, value)
            case T.PAREN_OPEN:
                self.advance()
                inner = self.parse_type()
                self.expect(T.PAREN_CLOSE)
                return inner
        name = self.expect_name()
        while self.accept(T.DOT):
            name += "." + self.expect_name()
        type_arguments = self._parse_type_arguments() if self.at(T.LESS) else ()
        return NominalType(name, type_arguments)

    def _parse_type_arguments(self) -> tuple[TypeAnnotation, ...]:
        self.expect(T.LESS)
        arguments: list[TypeAnnotation] = []
        while not self.accept(T.GREATER):
            arguments.append(self.parse_type())
            if not self.accept(T.COMMA):
                self.expect(T.GREATER)
                break
        return tuple(arguments)
