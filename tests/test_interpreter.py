## jawa — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import io
import math

import pytest

from jawa.runtime import Runtime
from jawa.environment import Environment
from jawa.interpreter import Interpreter, binary_operation
from jawa.parser import parse, parse_expression
from jawa.values import StringValue, NumberValue, ClassValue, UserClassValue, UserInstanceValue, null
from jawa.errors import (
    JawaNameError, JawaCapabilityError, JawaArityError, JawaTypeError, JawaImportError, JawaEntryPointError,
)


def run_and_output(src: str) -> str:
    out = io.StringIO()
    Runtime(stdout=out).run(src, filename="<test>")
    return out.getvalue()


def evaluate(src: str, env: Environment | None = None):
    return Interpreter().evaluate(parse_expression(src), env or Environment())


## EXPRESSIONS
def test_arithmetic_precedence():
    assert evaluate("2 + 3 * 4") == NumberValue(14)
    assert evaluate("10 - 4 - 3") == NumberValue(3)
    assert evaluate("7 % 4 * 2") == NumberValue(6)
    assert evaluate("1 / 4") == NumberValue(0.25)


def test_division_by_zero_follows_float_semantics():
    assert evaluate("1 / 0") == NumberValue(math.inf)
    assert math.isnan(evaluate("0 / 0").value)
    assert math.isnan(evaluate("5 % 0").value)


def test_remainder_is_truncated():
    assert binary_operation('PERCENT', NumberValue(-7), NumberValue(3)) == NumberValue(-1)
    assert binary_operation('MINUS', NumberValue(0), NumberValue(1)) == NumberValue(-1)


def test_string_concatenation_coerces_other_operand():
    assert evaluate('"a" + "b"') == StringValue("ab")
    assert evaluate('"x" + 1') == StringValue("x1")
    assert evaluate('1 + "x"') == StringValue("1x")
    assert evaluate('"half " + 1 / 2') == StringValue("half 0.5")
    assert evaluate('1 + 2 + "!"') == StringValue("3!")


def test_unsupported_operand_pair_is_type_error():
    env = Environment(bindings={'nothing': null})
    with pytest.raises(JawaTypeError):
        evaluate("nothing + 1", env)
    with pytest.raises(JawaTypeError):
        binary_operation('STAR', null, NumberValue(2))


def test_undefined_name():
    with pytest.raises(JawaNameError) as e:
        evaluate("ghost")
    assert e.value.jawa_token == 'ghost'


def test_assignment_is_an_expression():
    env = Environment()
    assert evaluate("a = b = 5", env) == NumberValue(5)
    assert env.get('a') == env.get('b') == NumberValue(5)


def test_assignment_to_member_is_rejected():
    rt = Runtime(stdout=io.StringIO())
    with pytest.raises(JawaCapabilityError, match="assignable"):
        rt.load("System.out = 1;")


def test_operands_evaluate_left_to_right():
    seen = []
    rt = Runtime(stdout=io.StringIO())
    rt.register_method('tag', lambda s: seen.append(s) or s)
    assert rt.evaluate('tag("a") + tag("b") * tag("c")') == StringValue("abc")
    assert seen == ['a', 'b', 'c']


def test_any_operator_with_a_string_operand_concatenates():
    assert evaluate('"3" * 2') == StringValue("32")
    assert evaluate('10 % "x"') == StringValue("10x")


## STATEMENTS
def test_variable_declaration_defaults_to_null():
    env = Interpreter().run(parse("Foo x; int y = 2 * 3;"), Environment())
    assert env.get('x') is null
    assert env.get('y') == NumberValue(6)


def test_class_declaration_partitions_statics():
    env = Interpreter().run(parse("""
    class Greeter {
        static void main(String s) {}
        void hello() {}
    }"""), Environment())
    cls = env.get('Greeter')
    assert isinstance(cls, UserClassValue)
    assert list(cls.statics) == ['main'] and list(cls.members) == ['hello']
    assert cls.has_entry_point


def test_entry_point_receives_fixed_greeting():
    out = run_and_output("""
    class Main {
        public static void main(String[] args) {
            System.out.println("got: " + args);
        }
    }""")
    assert out == "got: Hello World\n"


def test_first_class_with_entry_point_wins():
    out = run_and_output("""
    class Library { static void helper() {} }
    class App { static void main(String a) { System.out.println("App"); } }
    class Other { static void main(String a) { System.out.println("Other"); } }
    """)
    assert out == "App\n"


def test_missing_entry_point():
    with pytest.raises(JawaEntryPointError):
        run_and_output("class Library { void main(String a) {} }")


def test_non_static_main_is_not_an_entry_point():
    env = Interpreter().run(parse("class A { void main(String a) {} }"), Environment())
    assert not env.get('A').has_entry_point


def test_method_locals_do_not_leak_out():
    rt = Runtime(stdout=io.StringIO())
    rt.load("""
    class Util { static void work() { int secret = 42; } }
    Util.work();
    """)
    with pytest.raises(JawaNameError):
        rt.evaluate("secret")


def test_assignment_in_nested_frame_shadows_caller_binding():
    out = run_and_output("""
    String name = "outer";
    class Main {
        static void change(String ignored) {
            name = "inner";
            System.out.println(name);
        }
        static void main(String s) {
            Main.change(s);
            System.out.println(name);
        }
    }""")
    assert out == "inner\nouter\n"


def test_methods_close_over_declaring_scope():
    out = run_and_output("""
    String greeting = "declared";
    class Main {
        static void show() { System.out.println(greeting); }
        static void main(String greeting) { Main.show(); }
    }""")
    assert out == "declared\n"


def test_static_methods_resolve_through_class():
    out = run_and_output("""
    class Maths {
        static void add(int a, int b) { System.out.println(a + b); }
    }
    class Main {
        static void main(String s) { Maths.add(2, 3); }
    }""")
    assert out == "5\n"


def test_arity_failure_binds_nothing_and_runs_nothing():
    rt = Runtime(stdout=(out := io.StringIO()))
    rt.load("""
    class Pair {
        static void both(int a, int b) { System.out.println("ran"); }
    }""")
    with pytest.raises(JawaArityError) as e:
        rt.load("Pair.both(1);")
    assert (e.value.expected, e.value.given) == (2, 1)
    assert out.getvalue() == ""
    assert 'a' not in rt.environment


def test_user_methods_return_null():
    rt = Runtime(stdout=io.StringIO())
    rt.load("class A { static void f() { int x = 1; } }")
    assert rt.evaluate("A.f()") is null


def test_construction_and_instance_methods():
    out = run_and_output("""
    class Counter {
        void shout(String word) { System.out.println(word + "!"); }
    }
    class Main {
        static void main(String s) {
            Counter c = new Counter();
            c.shout("hey");
        }
    }""")
    assert out == "hey!\n"


def test_instances_reflect_their_class():
    rt = Runtime(stdout=io.StringIO())
    rt.load("""
    class Thing { static void make() {} void touch() {} }
    Thing t = new Thing();
    """)
    instance = rt.get('t')
    assert isinstance(instance, UserInstanceValue)
    assert rt.evaluate("t.$class") is rt.get('Thing')
    with pytest.raises(JawaNameError):
        rt.evaluate("t.make")
    with pytest.raises(JawaCapabilityError):
        rt.evaluate("t()")


def test_calling_a_string_is_a_capability_error():
    with pytest.raises(JawaCapabilityError):
        evaluate('greeting("x")', Environment(bindings={'greeting': StringValue("hi")}))


## IMPORTS
def test_import_binds_last_segment_globally():
    rt = Runtime(stdout=io.StringIO())
    rt.load("import java.util.Scanner;")
    assert isinstance(rt.get('Scanner'), ClassValue)
    assert rt.get('Scanner') is rt.get('java.util.Scanner')


def test_wildcard_import_flattens_package():
    rt = Runtime(stdout=io.StringIO())
    rt.register_method('tools.text.shout', lambda s: s.upper())
    rt.register_method('tools.text.whisper', lambda s: s.lower())
    rt.load("import tools.text.*;")
    assert rt.evaluate('shout("a") + whisper("B")') == StringValue("Ab")


def test_leading_wildcard_copies_scope_into_globals():
    rt = Runtime(stdout=io.StringIO())
    rt.load("""
    class Main { static void hoist(String s) { String local = s; import *; } }
    Main.hoist("up");
    """)
    assert rt.environment.bindings['local'] == StringValue("up")
    assert rt.environment.bindings['s'] == StringValue("up")


def test_import_through_non_package_fails():
    rt = Runtime(stdout=io.StringIO())
    with pytest.raises(JawaImportError) as e:
        rt.load("import System.out.println;")
    assert e.value.jawa_token == 'System'
    assert e.value.path == ('System', 'out', 'println')


@pytest.mark.parametrize("source, missing", [
    ("import javax.swing.JFrame;", 'javax'),
    ("import java.utl.Scanner;", 'utl'),
    ("import java.utl.*;", 'utl'),
])
def test_import_through_missing_package_fails(source, missing):
    with pytest.raises(JawaImportError) as e:
        Runtime(stdout=io.StringIO()).load(source)
    assert e.value.jawa_token == missing


def test_import_of_missing_final_name_is_a_name_error():
    with pytest.raises(JawaNameError) as e:
        Runtime(stdout=io.StringIO()).load("import java.util.Nothing;")
    assert e.value.jawa_token == 'Nothing'


def test_import_inside_method_binds_in_global_scope():
    rt = Runtime(stdout=io.StringIO())
    rt.load("""
    class Main { static void setup() { import java.util.Scanner; } }
    Main.setup();
    """)
    assert isinstance(rt.environment.bindings['Scanner'], ClassValue)


## ERRORS CARRY POSITIONS
def test_runtime_errors_are_annotated_with_innermost_token():
    with pytest.raises(JawaNameError) as e:
        Runtime(stdout=io.StringIO()).load("int a = 1;\nint b = a + missing;", filename="<test>")
    assert e.value.jawa_token == 'missing'
    assert e.value.jawa_meta['line'] == 2
    assert e.value.jawa_meta['column'] == 13


def test_step_statistics():
    stats = {}
    Interpreter(stats=stats).run(parse("int a = 1; int b = 2;"), Environment())
    assert stats['steps'] == 2


def test_verbose_trace_prints_statements():
    trace = io.StringIO()
    Interpreter(verbosity=1, file=trace).run(parse("int a = 1;"), Environment())
    assert "int a = 1;" in trace.getvalue()
