## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# jawa — A tree-walking interpreter for a small class-based, Java-like language.
#

import os
import sys
import time
import traceback
from pathlib import Path
from dataclasses import dataclass

import click

from .errors import JawaError, JawaSyntaxError, JawaNameError, JawaImportError, JawaEntryPointError
from .formatting import write_without_ansi, format_source_context, format_tokens

from . import api


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    stats: bool
    plain: bool


@dataclass
class ExecutionItem:
    source: str
    filename: str


class JawaRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose or (2 if os.environ.get('JAWA_DEBUG') else 0)
        self.stats_enabled = config.stats
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = api._RUNTIME
        self.total_stats = {'steps': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False
        self.executed_items = 0

    def _fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '') -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        self.failure = True

    def _context(self, exc: JawaError, filename: str, source: str) -> str:
        meta = exc.jawa_meta or {}
        return format_source_context(meta.get('filename') or filename, meta.get('line'), meta.get('column'),
                                     exc.jawa_token or '', source=source)

    def _handle_exception(self, exc: Exception, filename: str, source: str) -> None:
        if isinstance(exc, JawaSyntaxError):
            context = format_source_context(filename, exc.line, exc.column, exc.token or '', source=source)
            context += f"\n\033[90m{str(exc)}\033[0m\n"
            self._fatal_error("SYNTAX ERROR.", f"Parsing `\033[97m{filename}\033[0m` caused a problem!", type(exc).__name__, context)
        elif isinstance(exc, JawaNameError):
            detail = f"Name `\033[1;97m{exc.jawa_token}\033[0m` from `\033[97m{filename}\033[0m` is not defined!"
            self._fatal_error("NAME ERROR.", detail, type(exc).__name__, self._context(exc, filename, source) + f"\n\033[90m{exc}\033[0m\n")
        elif isinstance(exc, JawaImportError):
            detail = f"Importing `\033[97m{'.'.join(exc.path)}\033[0m` failed while resolving `{exc.jawa_token}`."
            self._fatal_error("IMPORT ERROR.", detail, type(exc).__name__, self._context(exc, filename, source) + f"\n\033[90m{exc}\033[0m\n")
        elif isinstance(exc, JawaEntryPointError):
            self._fatal_error("ENTRY POINT ERROR.", f"Program `\033[97m{filename}\033[0m` has no class with `static main`.", type(exc).__name__)
        elif isinstance(exc, JawaError):
            detail = f"Evaluating `\033[1;97m{exc.jawa_token}\033[0m` caused an error!"
            self._fatal_error("RUNTIME ERROR.", detail, type(exc).__name__, self._context(exc, filename, source) + f"\n\033[90m{exc}\033[0m\n")
        else:
            print(f'\033[30;43m INTERNAL ERROR. \033[0m Running `{filename}` crashed! (Exception: \033[33m{type(exc).__name__}\033[0m)', file=sys.stderr)
            traceback.print_exc()
            self.failure = True

    def execute_items(self, items: list[ExecutionItem]) -> None:
        for item in items:
            self._execute_script(item.source, item.filename)

    def _execute_script(self, source: str, filename: str) -> None:
        try:
            self.runtime.run(source, filename=filename, verbosity=self.verbose, stats=self.total_stats)
        except Exception as exc:
            self._handle_exception(exc, filename, source)
        else:
            self.executed_items += 1

    def show_tokens(self, source: str, filename: str) -> None:
        try:
            print(format_tokens(self.runtime.tokenize(source, filename=filename)))
        except JawaError as exc:
            self._handle_exception(exc, filename, source)

    def finalize(self) -> int:
        if self.total_stats and self.executed_items > 0:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', default=0, count=True, help='Trace statements as they execute (twice for method bodies and tokens).')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of steps).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, stats: bool, plain: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, stats=stats, plain=plain)


@cli.command('run-file')
@click.argument('script', type=click.File('r', encoding='utf-8'))
@click.pass_context
def run_file(ctx: click.Context, script) -> None:
    runner = JawaRunner(ctx.obj['config'])
    runner.execute_items((ExecutionItem(script.read(), script.name or '<STDIN>'),))
    ctx.exit(runner.finalize())


@cli.command('run-tokens')
@click.argument('script', type=click.File('r', encoding='utf-8'))
@click.pass_context
def run_tokens(ctx: click.Context, script) -> None:
    runner = JawaRunner(ctx.obj['config'])
    runner.show_tokens(script.read(), script.name or '<STDIN>')
    ctx.exit(runner.finalize())


def main(argv: list[str] | None = None) -> None:
    a = list(sys.argv[1:] if argv is None else argv)
    g = [t for t in a if t in ('--verbose', '--stats', '--plain', '-p') or t.startswith('-v')]
    r = [t for t in a if t not in g]

    if len(r) == 0:
        # No args: read the program from stdin.
        cmd, tail = 'run-file', ['-']
    elif r[0] in ('run-file', 'run-tokens'):
        cmd, tail = r[0], r[1:]
    elif r == ['-']:
        cmd, tail = 'run-file', ['-']
    elif r[0] in ('-t', '--tokens'):
        cmd, tail = 'run-tokens', r[1:]
    elif len(r) == 1 and Path(r[0]).exists():
        cmd, tail = 'run-file', r
    else:
        raise SystemExit(f"Expected a source file or `-`, got: {' '.join(r)}")

    cli.main(args=[*g, cmd, *tail], prog_name='jawa')


if __name__ == "__main__":
    main()
