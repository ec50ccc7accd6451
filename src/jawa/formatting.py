## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import sys

from .values import Value, StringValue, NumberValue, format_number
from .syntax import (
    OPERATOR_SYMBOLS, Parameter, MethodDeclaration,
    ImportStatement, ClassDeclarationStatement, ExpressionStatement, VariableDeclarationStatement, ExecuteMainStatement,
    IdentifierExpression, AssignmentExpression, BinaryExpression, DotAccessExpression, CallExpression, LiteralExpression,
)


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def format_value(value: Value) -> str:
    match value:
        case StringValue(value=text): return '"' + text.replace('"', '\\"') + '"'
        case NumberValue(value=x): return format_number(x)
    return value.to_text()


def format_node(node, indent: int = 0) -> str:
    """Print a syntax tree back as source.  Trees built by the parser re-parse to equal trees."""
    pad = ' ' * indent
    match node:
        case IdentifierExpression(identifier=tok):
            return tok.text
        case AssignmentExpression(left=left, right=right):
            return f"{format_node(left)} = {format_node(right)}"
        case BinaryExpression(left=left, right=right, operator=op):
            return f"{format_node(left)} {OPERATOR_SYMBOLS[op]} {format_node(right)}"
        case DotAccessExpression(identifier=tok, parent=parent):
            return f"{format_node(parent)}.{tok.text}"
        case CallExpression(callee=callee, args=args):
            return f"{format_node(callee)}({', '.join(format_node(a) for a in args)})"
        case LiteralExpression(value=value):
            return format_value(value)
        case ImportStatement(path=path):
            return f"{pad}import {'.'.join(path)};"
        case ExpressionStatement(expression=expr):
            return f"{pad}{format_node(expr)};"
        case VariableDeclarationStatement(type=type_, name=name, value=None):
            return f"{pad}{type_} {name.text};"
        case VariableDeclarationStatement(type=type_, name=name, value=value):
            return f"{pad}{type_} {name.text} = {format_node(value)};"
        case ClassDeclarationStatement(name=name, methods=methods):
            body = ''.join('\n' + format_node(m, indent + 4) for m in methods)
            return f"{pad}class {name.text} {{{body}\n{pad}}}"
        case MethodDeclaration():
            words = ([node.access] if node.access != 'package-private' else []) + (['static'] if node.is_static else [])
            head = ' '.join(words + [str(node.return_type), node.name.text])
            params = ', '.join(_format_parameter(p) for p in node.parameters)
            body = ''.join('\n' + format_node(s, indent + 4) for s in node.body)
            return f"{pad}{head}({params}) {{{body}\n{pad}}}"
        case ExecuteMainStatement(argument=argument):
            return f"{pad}<main \"{argument}\">"
    raise NotImplementedError(f"Cannot format node of type {type(node).__name__}.")

def _format_parameter(p: Parameter) -> str:
    return f"{p.type} {p.name.text}"


def format_tokens(tokens) -> str:
    return ' '.join(f"\033[90m{t.kind}\033[0m {t.text!r}" if t.kind in ('IDENTIFIER', 'NUMBER', 'STRING') else t.text
                    for t in tokens)


def show_statement(step: int, depth: int, statement, width=72, file=None):
    text = ' '.join(format_node(statement).split())
    if len(text) > width:
        text = text[:width-2] + ' …'
    print(f"\033[90m{step:>3} :\033[0m  {'  ' * depth}\033[36m{text}\033[0m", file=file or sys.stdout)


def load_source_lines(filename: str | None, source: str | None = None) -> list[str]:
    if source is not None: return source.splitlines()
    if filename is None or filename.startswith('<'): return []
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            return f.read().splitlines()
    except OSError:
        return []

def format_source_context(filename, line, column, token_value, source=None) -> str:
    """Render a few lines around `line`, highlighting the token found at `column`."""
    lines = load_source_lines(filename, source)
    result = [f"\033[97m  File \"{filename}\", line {line if line is not None else '?'}\033[0m"]
    if line is None or not lines:
        return '\n' + '\n'.join(result) + '\n'

    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    width = max(len(token_value or ''), 1)
    for i in range(start_line, end_line):
        line_content = lines[i]
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if column is not None and 0 < column <= len(line_content):
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+width-1]}\033[0m" +
                    line_content[column+width-1:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'
