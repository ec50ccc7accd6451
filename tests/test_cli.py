## jawa — CLI integration tests

import os, sys
import subprocess
from pathlib import Path


def repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def run_cli(*cli_args: str | Path, stdin: str = "", env: dict | None = None) -> subprocess.CompletedProcess:
    args = [sys.executable, "-m", "jawa", "--plain", *(str(arg) for arg in cli_args)]
    merged_env = os.environ.copy()
    merged_env['PYTHONPATH'] = os.pathsep.join(filter(None, [str(repo_root() / "src"), merged_env.get('PYTHONPATH')]))
    if env:
        merged_env.update(env)
    return subprocess.run(args, input=stdin, capture_output=True, text=True, env=merged_env)


def test_cli_runs_file_with_input():
    result = run_cli(repo_root() / "tests" / "hello.java", stdin="Ada\n")
    assert result.returncode == 0, result.stdout + result.stderr
    assert result.stdout == "Name? Hello World, Ada!\n"


def test_cli_explicit_subcommand():
    result = run_cli("run-file", repo_root() / "tests" / "hello.java", stdin="Bo\n")
    assert result.returncode == 0
    assert result.stdout.endswith("Hello World, Bo!\n")


def test_cli_reads_program_from_stdin():
    result = run_cli(stdin='class A { static void main(String s) { System.out.println(6 * 7); } }')
    assert result.returncode == 0
    assert result.stdout == "42\n"


def test_cli_parser_error_shows_context():
    result = run_cli(repo_root() / "tests" / "error-parser.java")
    assert result.returncode != 0
    out = result.stdout
    assert "SYNTAX ERROR." in out
    assert "File \"" in out and "line 3" in out
    assert "int x = 1 +;" in out
    assert "\033[" not in out


def test_cli_name_error_names_the_variable():
    result = run_cli(repo_root() / "tests" / "error-name.java")
    assert result.returncode != 0
    out = result.stdout
    assert "NAME ERROR." in out
    assert "Name `missing`" in out
    assert "System.out.println(missing);" in out


def test_cli_runtime_error_shows_context():
    result = run_cli(repo_root() / "tests" / "error-runtime.java")
    assert result.returncode != 0
    out = result.stdout
    assert "RUNTIME ERROR." in out
    assert "JawaArityError" in out
    assert "Expected 1, got 2" in out


def test_cli_missing_entry_point(tmp_path):
    script = tmp_path / "library.java"
    script.write_text("class Library { static void helper() {} }\n", encoding="utf-8")
    result = run_cli(script)
    assert result.returncode != 0
    assert "ENTRY POINT ERROR." in result.stdout


def test_cli_tokens_mode():
    result = run_cli("-t", repo_root() / "tests" / "error-name.java")
    assert result.returncode == 0
    assert result.stdout.startswith("class IDENTIFIER 'Main' {")


def test_cli_verbose_traces_top_level_statements(tmp_path):
    script = tmp_path / "trace.java"
    script.write_text('int a = 1;\nclass M { static void main(String s) { int b = 2; } }\n', encoding="utf-8")
    result = run_cli("-v", script)
    assert result.returncode == 0
    assert "int a = 1;" in result.stdout
    assert '<main "Hello World">' in result.stdout
    assert result.stdout.count("int b = 2;") == 1


def test_cli_long_verbose_option_before_file(tmp_path):
    script = tmp_path / "trace.java"
    script.write_text('int a = 1;\nclass M { static void main(String s) {} }\n', encoding="utf-8")
    result = run_cli("--verbose", script)
    assert result.returncode == 0, result.stdout + result.stderr
    assert "int a = 1;" in result.stdout


def test_cli_debug_env_traces_method_bodies(tmp_path):
    script = tmp_path / "trace.java"
    script.write_text('class M { static void main(String s) { int b = 2; } }\n', encoding="utf-8")
    result = run_cli(script, env={'JAWA_DEBUG': '1'})
    assert result.returncode == 0
    assert result.stdout.count("int b = 2;") == 2


def test_cli_stats():
    result = run_cli("--stats", repo_root() / "tests" / "hello.java", stdin="x\n")
    assert result.returncode == 0
    assert "STATISTICS." in result.stdout
    assert "step\t" in result.stdout


def test_cli_rejects_unknown_arguments():
    result = run_cli("no-such-file.java")
    assert result.returncode != 0
    assert "Expected a source file" in result.stderr
