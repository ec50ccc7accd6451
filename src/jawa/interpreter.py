## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import math
import operator

from .environment import Environment
from .errors import JawaError, JawaNameError, JawaCapabilityError, JawaTypeError, JawaImportError, JawaEntryPointError
from .formatting import show_statement
from .values import Value, StringValue, NumberValue, PackageValue, ClassValue, UserClassValue, null
from .syntax import (
    OPERATOR_SYMBOLS, Statement, Expression, node_token,
    ImportStatement, ClassDeclarationStatement, ExpressionStatement, VariableDeclarationStatement, ExecuteMainStatement,
    IdentifierExpression, AssignmentExpression, BinaryExpression, DotAccessExpression, CallExpression, LiteralExpression,
)


def _divide(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a): return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b

def _remainder(a: float, b: float) -> float:
    # Truncated remainder, sign follows the dividend; undefined cases give NaN instead of raising.
    if b == 0.0 or math.isinf(a) or math.isnan(a) or math.isnan(b): return math.nan
    return math.fmod(a, b)

ARITHMETIC = {
    'PLUS': operator.add,
    'MINUS': operator.sub,
    'STAR': operator.mul,
    'SLASH': _divide,
    'PERCENT': _remainder,
}


def binary_operation(op: str, left: Value, right: Value) -> Value:
    """Dispatch on the runtime pair of values, not on any declared type."""
    match left, right:
        case NumberValue(value=a), NumberValue(value=b):
            return NumberValue(ARITHMETIC[op](a, b))
        case (StringValue(), _) | (_, StringValue()):
            return StringValue(left.to_text() + right.to_text())
    raise JawaTypeError(f"Unsupported operand types for `{OPERATOR_SYMBOLS[op]}`: {left.kind} and {right.kind}.",
                        jawa_token=OPERATOR_SYMBOLS[op])


class Interpreter:
    """Walks statements and expressions against an `Environment`."""

    def __init__(self, verbosity: int = 0, stats: dict | None = None, file=None):
        self.verbosity = verbosity
        self.stats = stats
        self.file = file
        self.depth = 0
        self.step = 0

    def run(self, statements: list[Statement], environment: Environment) -> Environment:
        first_step = self.step
        try:
            for statement in statements:
                self.execute(statement, environment)
        finally:
            if self.stats is not None:
                self.stats['steps'] = self.stats.get('steps', 0) + self.step - first_step
        return environment

    def execute_body(self, body, environment: Environment) -> None:
        self.depth += 1
        try:
            for statement in body:
                self.execute(statement, environment)
        finally:
            self.depth -= 1

    # Statements ──────────────────────────────────────────────────────────────────────────────
    def execute(self, statement: Statement, env: Environment) -> None:
        if self.verbosity >= 2 or (self.verbosity == 1 and self.depth == 0):
            show_statement(self.step, self.depth, statement, file=self.file)
        self.step += 1

        try:
            match statement:
                case ExpressionStatement(expression=expression):
                    self.evaluate(expression, env)
                case VariableDeclarationStatement(name=name, value=value):
                    env.set(name.text, null if value is None else self.evaluate(value, env))
                case ClassDeclarationStatement(name=name):
                    env.set(name.text, UserClassValue(statement, env, self))
                case ImportStatement(path=path):
                    self._import(path, env)
                case ExecuteMainStatement(argument=argument):
                    self._execute_main(argument, env)
                case _:
                    raise NotImplementedError(f"Unknown statement type {type(statement).__name__}.")
        except JawaError as exc:
            _annotate(exc, statement)
            raise

    def _import(self, path: tuple[str, ...], env: Environment) -> None:
        scope, current = env.root, env
        for i, segment in enumerate(path):
            if segment == '*':
                # Flatten everything visible from here into the global scope; terminates the path.
                for name in current.keys():
                    scope.set(name, current.get(name))
                return

            try:
                value = current.get(segment)
            except JawaNameError as exc:
                if i == len(path) - 1: raise
                raise JawaImportError(f"Cannot import `{'.'.join(path)}`: package `{segment}` does not exist.",
                                      path=path, jawa_token=segment) from exc

            if i == len(path) - 1:
                scope.set(segment, value)
            elif isinstance(value, PackageValue):
                current = value
            else:
                raise JawaImportError(f"Cannot import `{'.'.join(path)}`: `{segment}` is a {value.kind}, not a package.",
                                      path=path, jawa_token=segment)

    def _execute_main(self, argument: str, env: Environment) -> None:
        for name in env.keys():
            value = env.get(name)
            if isinstance(value, ClassValue) and value.has_entry_point:
                value.statics['main'].invoke([StringValue(argument)])
                return
        raise JawaEntryPointError("No class with a `static main` method was found.", jawa_token='main')

    # Expressions ─────────────────────────────────────────────────────────────────────────────
    def evaluate(self, expression: Expression, env: Environment) -> Value:
        try:
            match expression:
                case LiteralExpression(value=value):
                    return value
                case IdentifierExpression(identifier=tok):
                    return env.get(tok.text)
                case BinaryExpression(left=left, right=right, operator=op):
                    lhs = self.evaluate(left, env)
                    rhs = self.evaluate(right, env)
                    return binary_operation(op, lhs, rhs)
                case DotAccessExpression(identifier=tok, parent=parent):
                    return self.evaluate(parent, env).get_member(tok.text)
                case CallExpression(callee=callee, args=args):
                    method = self.evaluate(callee, env)
                    return method.invoke([self.evaluate(a, env) for a in args])
                case AssignmentExpression(left=left, right=right):
                    if not left.assignable:
                        raise JawaCapabilityError("Left side of assignment must be assignable.")
                    value = self.evaluate(right, env)
                    self.assign(left, value, env)
                    return value
            raise NotImplementedError(f"Unknown expression type {type(expression).__name__}.")
        except JawaError as exc:
            _annotate(exc, expression)
            raise

    def assign(self, target: Expression, value: Value, env: Environment) -> None:
        match target:
            case IdentifierExpression(identifier=tok):
                env.set(tok.text, value)
            case _:
                raise JawaCapabilityError(f"Cannot assign to {type(target).__name__}.")


def _annotate(exc: JawaError, node) -> None:
    """Attach the innermost source position to an error; outer nodes leave it untouched."""
    if exc.jawa_meta is not None: return
    if (tok := node_token(node)) is not None and tok.meta:
        exc.jawa_meta = tok.meta
        if exc.jawa_token is None:
            exc.jawa_token = tok.text
