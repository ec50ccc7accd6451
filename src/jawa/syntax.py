## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Syntax tree produced by the parser.  Pure data, evaluated by `interpreter.py`.
#

from typing import Literal, ClassVar
from dataclasses import dataclass

from .lexer import Token
from .values import Value


AccessModifier = Literal["public", "private", "protected", "package-private"]
ACCESS_MODIFIERS: tuple[str, ...] = ("public", "private", "protected")

BinaryOperator = Literal["PLUS", "MINUS", "STAR", "SLASH", "PERCENT"]
OPERATOR_SYMBOLS: dict[str, str] = {'PLUS': '+', 'MINUS': '-', 'STAR': '*', 'SLASH': '/', 'PERCENT': '%'}


@dataclass(frozen=True)
class TypeDefinition:
    base: Token
    dim: int = 0                  # array dimension, recorded but not enforced

    def __str__(self):
        return self.base.text + '[]' * self.dim


@dataclass(frozen=True)
class Parameter:
    type: TypeDefinition
    name: Token


## EXPRESSIONS
class Expression:
    assignable: ClassVar[bool] = False

@dataclass(frozen=True)
class IdentifierExpression(Expression):
    identifier: Token
    assignable: ClassVar[bool] = True

@dataclass(frozen=True)
class AssignmentExpression(Expression):
    left: Expression
    right: Expression

@dataclass(frozen=True)
class BinaryExpression(Expression):
    left: Expression
    right: Expression
    operator: BinaryOperator
    token: Token | None = None

@dataclass(frozen=True)
class DotAccessExpression(Expression):
    identifier: Token
    parent: Expression

@dataclass(frozen=True)
class CallExpression(Expression):
    callee: Expression
    args: tuple[Expression, ...]

@dataclass(frozen=True)
class LiteralExpression(Expression):
    value: Value
    token: Token | None = None


## STATEMENTS
class Statement:
    pass

@dataclass(frozen=True)
class ImportStatement(Statement):
    path: tuple[str, ...]         # a '*' segment, if any, is always last
    token: Token | None = None

    @property
    def is_wildcard(self) -> bool:
        return bool(self.path) and self.path[-1] == '*'

@dataclass(frozen=True)
class MethodDeclaration:
    access: AccessModifier
    is_static: bool
    return_type: TypeDefinition
    name: Token
    parameters: tuple[Parameter, ...]
    body: tuple[Statement, ...]

@dataclass(frozen=True)
class ClassDeclarationStatement(Statement):
    name: Token
    methods: tuple[MethodDeclaration, ...]

@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression

@dataclass(frozen=True)
class VariableDeclarationStatement(Statement):
    type: TypeDefinition
    name: Token
    value: Expression | None = None

@dataclass(frozen=True)
class ExecuteMainStatement(Statement):
    """Synthetic statement appended after parsing; runs the program's entry point."""
    argument: str = "Hello World"


def node_token(node) -> Token | None:
    """Best token to report for a node in error messages."""
    match node:
        case IdentifierExpression(identifier=tok) | DotAccessExpression(identifier=tok):
            return tok
        case AssignmentExpression(left=left):
            return node_token(left)
        case CallExpression(callee=callee):
            return node_token(callee)
        case BinaryExpression(token=tok) | LiteralExpression(token=tok) | ImportStatement(token=tok):
            return tok
        case ClassDeclarationStatement(name=tok) | VariableDeclarationStatement(name=tok):
            return tok
        case ExpressionStatement(expression=expr):
            return node_token(expr)
    return None
