## jawa — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import inspect
from typing import Any, Callable

from .lexer import Token, tokenize
from .parser import Parser, parse_expression
from .syntax import Statement, ExecuteMainStatement
from .environment import Environment
from .interpreter import Interpreter
from .builtins import load_standard_library, bind_path
from .formatting import format_tokens
from .values import Value, StringValue, NumberValue, HostClassValue, HostMethodValue, PackageValue, null


class Runtime:
    """Minimal runtime facade focused on embedding and extension."""

    def __init__(self, environment: Environment | None = None, *, stdout=None, stdin=None):
        self.environment = environment or load_standard_library(stdout=stdout, stdin=stdin)
        # Shared by every run; user methods keep a reference to the interpreter that declared them.
        self.interpreter = Interpreter()

    # Front end ───────────────────────────────────────────────────────────────────────────────
    def tokenize(self, source: str, filename: str | None = None) -> list[Token]:
        return tokenize(source, filename=filename)

    def parse(self, source: str, filename: str | None = None, verbosity: int = 0) -> list[Statement]:
        tokens = self.tokenize(source, filename=filename)
        if verbosity >= 2:
            print(format_tokens(tokens))
        return Parser(tokens, filename=filename).parse_root_level()

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self, program: str, filename: str | None = None, verbosity: int = 0, stats: dict | None = None) -> Environment:
        """Execute a whole program in its own scope below the root, finishing with the `main` method
        of the first class that has one.  Classes from earlier programs are not visible."""
        statements = self.parse(program, filename=filename, verbosity=verbosity)
        return self._execute([*statements, ExecuteMainStatement()], self.environment.child(), verbosity, stats)

    def load(self, source: str, filename: str | None = None, verbosity: int = 0) -> Environment:
        """Execute declarations and statements directly in the root, without running any entry point."""
        return self._execute(self.parse(source, filename=filename, verbosity=verbosity), self.environment, verbosity, None)

    def evaluate(self, source: str) -> Value:
        return self.interpreter.evaluate(parse_expression(source), self.environment)

    def call(self, path: str, *args: Any) -> Any:
        method = self.get(path)
        return self.from_value(method.invoke([self.to_value(a) for a in args]))

    def _execute(self, statements: list[Statement], environment: Environment, verbosity: int, stats: dict | None) -> Environment:
        self.interpreter.verbosity, self.interpreter.stats = verbosity, stats
        try:
            return self.interpreter.run(statements, environment)
        finally:
            self.interpreter.verbosity, self.interpreter.stats = 0, None

    # Registration ────────────────────────────────────────────────────────────────────────────
    def register_method(self, path: str, func: Callable, *, convert: bool = True) -> HostMethodValue:
        """Bind a Python function at a dotted path.  Parameters and `*args` come from its signature;
        with `convert`, arguments arrive as Python values and the result is converted back."""
        params = inspect.signature(func).parameters.values()
        names = tuple(p.name for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD))
        variadic = any(p.kind == p.VAR_POSITIONAL for p in params)

        implementation = func
        if convert:
            def implementation(*args: Value) -> Value:
                return self.to_value(func(*[self.from_value(a) for a in args]))

        method = HostMethodValue(self.environment, path.rsplit('.', 1)[-1], names, implementation, variadic=variadic)
        bind_path(self.environment, path, method)
        return method

    def register_class(self, path: str, statics: dict[str, Value] | None = None,
                       members: dict[str, Value] | None = None) -> HostClassValue:
        cls = HostClassValue(path.rsplit('.', 1)[-1], statics=statics, members=members)
        bind_path(self.environment, path, cls)
        return cls

    # Introspection ───────────────────────────────────────────────────────────────────────────
    def get(self, path: str) -> Value:
        head, *rest = path.split('.')
        value = self.environment.get(head)
        for name in rest:
            value = value.get_member(name)
        return value

    def list_names(self) -> list[str]:
        return self.environment.keys()

    def list_packages(self) -> dict[str, list[str]]:
        """Every package reachable from the root scope, with the names it contains."""
        found = {}
        def _walk(pkg: PackageValue):
            found[pkg.name] = pkg.keys()
            for child in pkg.members.values():
                if isinstance(child, PackageValue): _walk(child)
        for name in self.environment.keys():
            if isinstance(value := self.environment.get(name), PackageValue): _walk(value)
        return found

    # Conversion ──────────────────────────────────────────────────────────────────────────────
    def to_value(self, x: Any) -> Value:
        match x:
            case Value(): return x
            case None: return null
            case bool(): raise TypeError("Booleans have no runtime representation.")
            case str(): return StringValue(x)
            case int() | float(): return NumberValue(x)
        raise TypeError(f"Cannot convert {type(x).__name__} to a runtime value.")

    def from_value(self, value: Value) -> Any:
        match value:
            case StringValue(value=text): return text
            case NumberValue(value=x): return x
        return None if value is null else value
