## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import sys
import math

from .environment import Environment
from .errors import JawaImportError
from .values import (
    Value, StringValue, NumberValue, PackageValue, HostClassValue, InstanceValue, HostMethodValue,
    format_number, null,
)


_PLACEHOLDER = re.compile(r'%[sdifjo%]')
_INT_PREFIX = re.compile(r'\s*([+-]?\d+)')
_FLOAT_PREFIX = re.compile(r'\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')


def newlineify(text: str) -> str:
    """String literals carry no escapes; printing turns the two characters `\\n` into a newline."""
    return text.replace('\\n', '\n')


def parse_int_prefix(text: str) -> float:
    return float(int(m.group(1))) if (m := _INT_PREFIX.match(text)) else 0.0

def parse_float_prefix(text: str) -> float:
    return float(m.group(1)) if (m := _FLOAT_PREFIX.match(text)) else 0.0


def _as_number(value: Value) -> float:
    match value:
        case NumberValue(value=x): return x
        case StringValue(value=text):
            try:
                return float(text)
            except ValueError:
                return math.nan
    return math.nan

def _truncate(x: float) -> float:
    return x if math.isnan(x) or math.isinf(x) else float(math.trunc(x))

def format_printf(fmt: str, args: list[Value]) -> str:
    """`%s %d %i %f %o %j` consume arguments in order, `%%` is a literal percent sign,
    and leftover arguments are appended separated by spaces."""
    remaining = list(args)

    def _replace(m):
        conversion = m.group(0)
        if conversion == '%%': return '%'
        if not remaining: return conversion
        value = remaining.pop(0)
        match conversion:
            case '%d' | '%f': return format_number(_as_number(value))
            case '%i': return format_number(_truncate(_as_number(value)))
            case _: return value.to_text()

    return ' '.join([_PLACEHOLDER.sub(_replace, fmt), *(v.to_text() for v in remaining)])


def bind_path(env: Environment, path: str, value: Value) -> None:
    """Bind `value` at a dotted path like `java.util.Scanner`, creating packages along the way."""
    *packages, name = path.split('.')
    if not packages:
        env.set(name, value)
        return

    head = packages[0]
    container = env.bindings.get(head)
    if container is None:
        container = PackageValue(head)
        env.set(head, container)
    for i, segment in enumerate(packages[1:], start=1):
        if not isinstance(container, PackageValue):
            raise JawaImportError(f"Cannot bind `{path}`: `{packages[i-1]}` is not a package.", path=path.split('.'), jawa_token=packages[i-1])
        container = container.members.setdefault(segment, PackageValue('.'.join(packages[:i+1])))
    if not isinstance(container, PackageValue):
        raise JawaImportError(f"Cannot bind `{path}`: `{packages[-1]}` is not a package.", path=path.split('.'), jawa_token=packages[-1])
    container.members[name] = value


def load_standard_library(stdout=None, stdin=None) -> Environment:
    """Build a fresh root environment with `System` and `java.util.Scanner`.  Streams default to
    `sys.stdout` and `sys.stdin`, looked up at call time."""
    environment = Environment()

    def _out(): return stdout if stdout is not None else sys.stdout
    def _in(): return stdin if stdin is not None else sys.stdin

    def println(value: Value) -> Value:
        print(newlineify(value.to_text()), file=_out())
        return null

    def print_(value: Value) -> Value:
        (out := _out()).write(newlineify(value.to_text()))
        out.flush()
        return null

    def printf(*values: Value) -> Value:
        if not values: return null
        fmt, *rest = values
        (out := _out()).write(newlineify(format_printf(fmt.to_text(), rest)))
        out.flush()
        return null

    def read_line() -> str:
        return _in().readline().strip()

    out = InstanceValue({
        'println': HostMethodValue(environment, 'println', ('value',), println),
        'print': HostMethodValue(environment, 'print', ('value',), print_),
        'printf': HostMethodValue(environment, 'printf', ('format',), printf, variadic=True),
    }, class_name='PrintStream')
    system = InstanceValue({'out': out, 'in': InstanceValue({}, class_name='InputStream')}, class_name='System')
    environment.set('System', system)

    scanner = HostClassValue('Scanner', members={
        'nextLine': HostMethodValue(environment, 'nextLine', (), lambda: StringValue(read_line())),
        'nextInt': HostMethodValue(environment, 'nextInt', (), lambda: NumberValue(parse_int_prefix(read_line()))),
        'nextFloat': HostMethodValue(environment, 'nextFloat', (), lambda: NumberValue(parse_float_prefix(read_line()))),
    })
    bind_path(environment, 'java.util.Scanner', scanner)
    return environment
