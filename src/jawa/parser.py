## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .lexer import Token, tokenize
from .values import StringValue, NumberValue
from .errors import JawaSyntaxError, JawaIncompleteParse
from .syntax import (
    ACCESS_MODIFIERS, TypeDefinition, Parameter, Statement, Expression,
    ImportStatement, ClassDeclarationStatement, MethodDeclaration, ExpressionStatement, VariableDeclarationStatement,
    IdentifierExpression, AssignmentExpression, BinaryExpression, DotAccessExpression, CallExpression, LiteralExpression,
)


class Parser:
    """Recursive-descent parser over a token list.  Precedence from low to high is additive,
    multiplicative, then endpoints (identifier chains, literals, `new`).  Backtracking only
    happens in `_try_variable_declaration`, where `Foo x;` and `foo.bar();` share a prefix.
    """

    def __init__(self, tokens: list[Token], filename: str | None = None):
        self.tokens = list(tokens)
        self.position = 0
        self.filename = filename

    def parse_root_level(self) -> list[Statement]:
        statements = []
        while self.position < len(self.tokens):
            statements.append(self.parse_statement())
        return statements

    # Statements ──────────────────────────────────────────────────────────────────────────────
    def parse_statement(self) -> Statement:
        current = self._peek()
        if current.is_keyword('import'): return self.parse_import_statement()
        if current.is_keyword('class'): return self.parse_class_declaration()

        if (declaration := self._try_variable_declaration()) is not None:
            return declaration
        return self.parse_expression_statement()

    def _try_variable_declaration(self) -> VariableDeclarationStatement | None:
        mark = self._checkpoint()
        try:
            return self.parse_variable_declaration()
        except JawaSyntaxError:
            self._restore(mark)
            return None

    def parse_variable_declaration(self) -> VariableDeclarationStatement:
        type_ = self.parse_type()
        name = self._expect('IDENTIFIER')

        if self._is_next('SEMICOLON'):
            self._advance()
            return VariableDeclarationStatement(type_, name, None)
        if self._is_next('ASSIGN'):
            self._advance()
            value = self.parse_expression()
            self._expect('SEMICOLON')
            return VariableDeclarationStatement(type_, name, value)
        raise self._unexpected('SEMICOLON', 'ASSIGN')

    def parse_import_statement(self) -> ImportStatement:
        keyword = self._advance()
        path = []
        while True:
            part = self._expect('IDENTIFIER', 'STAR')
            path.append(part.text)
            # A wildcard always terminates the path.
            if part.kind == 'STAR' or not self._is_next('DOT'): break
            self._advance()

        self._expect('SEMICOLON')
        return ImportStatement(tuple(path), keyword)

    def parse_class_declaration(self) -> ClassDeclarationStatement:
        self._advance()
        name = self._expect('IDENTIFIER')
        self._expect('LBRACE')

        methods = []
        while not self._is_next('RBRACE'):
            methods.append(self.parse_method_declaration())

        self._expect('RBRACE')
        return ClassDeclarationStatement(name, tuple(methods))

    def parse_method_declaration(self) -> MethodDeclaration:
        access, is_static = 'package-private', False
        if self._is_next('IDENTIFIER') and self._peek().text in ACCESS_MODIFIERS:
            access = self._advance().text
        if self._is_next('IDENTIFIER') and self._peek().text == 'static':
            self._advance()
            is_static = True

        return_type = self.parse_type()
        name = self._expect('IDENTIFIER')
        parameters = self.parse_parameter_list()

        self._expect('LBRACE')
        body = []
        while not self._is_next('RBRACE'):
            body.append(self.parse_statement())
        self._expect('RBRACE')

        return MethodDeclaration(access, is_static, return_type, name, parameters, tuple(body))

    def parse_parameter_list(self) -> tuple[Parameter, ...]:
        self._expect('LPAREN')
        if self._is_next('RPAREN'):
            self._advance()
            return ()

        parameters = []
        while True:
            type_ = self.parse_type()
            name = self._expect('IDENTIFIER')
            if any(p.name.text == name.text for p in parameters):
                raise self._error(f"Duplicate parameter `{name.text}`.", name)
            parameters.append(Parameter(type_, name))

            if not self._is_next('COMMA'): break
            self._advance()

        self._expect('RPAREN')
        return tuple(parameters)

    def parse_type(self) -> TypeDefinition:
        base = self._expect('IDENTIFIER')
        dim = 0
        while self._is_next('LBRACKET'):
            self._advance()
            self._expect('RBRACKET')
            dim += 1
        return TypeDefinition(base, dim)

    def parse_expression_statement(self) -> ExpressionStatement:
        expression = self.parse_expression()
        self._expect('SEMICOLON')
        return ExpressionStatement(expression)

    # Expressions ─────────────────────────────────────────────────────────────────────────────
    def parse_expression(self) -> Expression:
        return self.parse_term()

    def parse_term(self) -> Expression:
        expression = self.parse_factor()
        while self._is_next('PLUS', 'MINUS'):
            operator = self._advance()
            expression = BinaryExpression(expression, self.parse_factor(), operator.kind, operator)
        return expression

    def parse_factor(self) -> Expression:
        expression = self.parse_endpoint()
        while self._is_next('STAR', 'SLASH', 'PERCENT'):
            operator = self._advance()
            expression = BinaryExpression(expression, self.parse_endpoint(), operator.kind, operator)
        return expression

    def parse_endpoint(self) -> Expression:
        current = self._peek()
        if current.kind == 'IDENTIFIER': return self.parse_assignment_expression()
        if current.kind in ('STRING', 'NUMBER'): return self.parse_literal_expression()
        if current.is_keyword('new'):
            # `new Foo(args)` is the same call chain as `Foo(args)`.
            self._advance()
            return self.parse_identifier_chain()
        raise self._unexpected('IDENTIFIER', 'STRING', 'NUMBER', 'new')

    def parse_assignment_expression(self) -> Expression:
        left = self.parse_identifier_chain()
        if self._is_next('ASSIGN'):
            self._advance()
            return AssignmentExpression(left, self.parse_expression())
        return left

    def parse_identifier_chain(self) -> Expression:
        expression = IdentifierExpression(self._expect('IDENTIFIER'))
        if self._is_next('DOT'):
            expression = self.parse_dot_access(expression)

        while self._is_next('LPAREN'):
            self._advance()
            args = [] if self._is_next('RPAREN') else self.parse_argument_list()
            self._expect('RPAREN')
            expression = CallExpression(expression, tuple(args))
        return expression

    def parse_dot_access(self, parent: Expression) -> Expression:
        # Left-associative: `a.b.c` is `((a.b).c)`.
        while self._is_next('DOT'):
            self._advance()
            parent = DotAccessExpression(self._expect('IDENTIFIER'), parent)
        return parent

    def parse_argument_list(self) -> list[Expression]:
        args = [self.parse_expression()]
        while self._is_next('COMMA'):
            self._advance()
            args.append(self.parse_expression())
        return args

    def parse_literal_expression(self) -> LiteralExpression:
        token = self._expect('STRING', 'NUMBER')
        if token.kind == 'STRING':
            return LiteralExpression(StringValue(token.text), token)
        return LiteralExpression(NumberValue(float(token.text)), token)

    # Cursor ──────────────────────────────────────────────────────────────────────────────────
    def _checkpoint(self) -> int:
        return self.position

    def _restore(self, mark: int) -> None:
        self.position = mark

    def _peek(self) -> Token:
        if self.position >= len(self.tokens):
            raise self._incomplete()
        return self.tokens[self.position]

    def _is_next(self, *kinds: str) -> bool:
        return self._peek().kind in kinds

    def _advance(self) -> Token:
        token = self._peek()
        self.position += 1
        return token

    def _expect(self, *kinds: str) -> Token:
        if self._is_next(*kinds):
            return self._advance()
        raise self._unexpected(*kinds)

    # Errors ──────────────────────────────────────────────────────────────────────────────────
    def _error(self, message: str, token: Token | None, *, expected=(), cls=JawaSyntaxError) -> JawaSyntaxError:
        meta = token.meta if token is not None else {}
        return cls(message, filename=meta.get('filename', self.filename), line=meta.get('line'), column=meta.get('column'),
                   token=token.text if token is not None else '', expected=expected, found=token)

    def _unexpected(self, *expected: str) -> JawaSyntaxError:
        current = self._peek()
        return self._error(f"Expected {' or '.join(expected)}, got {current.kind} `{current.text}`.", current, expected=expected)

    def _incomplete(self) -> JawaIncompleteParse:
        last = self.tokens[-1] if self.tokens else None
        return self._error("Unexpected end of file.", last, cls=JawaIncompleteParse)


def parse(source: str, filename: str | None = None) -> list[Statement]:
    return Parser(tokenize(source, filename=filename), filename=filename).parse_root_level()


def parse_expression(source: str, filename: str | None = None) -> Expression:
    """Parse one standalone expression, requiring that it consumes every token."""
    tokens = tokenize(source, filename=filename)
    # Operator loops peek past the expression, so close it with a synthetic terminator.
    end = Token('SEMICOLON', ';', None, {'filename': filename})
    parser = Parser(tokens + [end], filename=filename)
    expression = parser.parse_expression()
    if parser.position != len(tokens):
        raise parser._unexpected('end of input')
    return expression
