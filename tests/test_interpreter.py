import pytest

from pylox import run_program


def run(source, capsys):
    host = run_program(source)
    captured = capsys.readouterr()
    return host, captured.out.splitlines(), captured.err


@pytest.mark.parametrize('source, expected', [
    ("print 0 == false;", 'false'),
    ("print !nil;", 'true'),
    ("print !0;", 'false'),
    ('print !"";', 'false'),
    ('print "a" == "a";', 'true'),
    ("print nil == nil;", 'true'),
    ("print nil == false;", 'false'),
    ("print 1 == 1.0;", 'true'),
    ("print true == 1;", 'false'),
    ('print "1" == 1;', 'false'),
    ("print 1 != 2;", 'true'),
    ("print 10 / 3;", '3.3333333333333335'),
    ('print "hi " + 2;', 'hi 2'),
    ('print 2 + "hi";', '2hi'),
    ('print "a" + nil;', 'anil'),
    ('print "t" + true;', 'ttrue'),
    ("print 1.0;", '1'),
    ("print 2.5;", '2.5'),
    ("print 10000000000000000;", '10000000000000000'),
    ("print 1000000000000000000000;", '1000000000000000000000'),
    ("print 0.00001;", '0.00001'),
    ("print 0.000015;", '0.000015'),
    ('print "n=" + 10000000000000000;', 'n=10000000000000000'),
    ("print -0;", '-0'),
    ("print -0.5 * 4;", '-2'),
    ("print 3 > 2;", 'true'),
    ("print 3 >= 3;", 'true'),
    ("print 2 < 1;", 'false'),
    ("print 2 <= 1;", 'false'),
    ("print -(-3);", '3'),
    ("print (1 + 2) * 3;", '9'),
    ("print true ? 1 : 2;", '1'),
    ("print nil ? 1 : 2;", '2'),
    ("print false ? 1 : true ? 2 : 3;", '2'),
    ('print nil or "default";', 'default'),
    ('print 0 or "default";', '0'),
    ("print false and undefinedName;", 'false'),
    ("print 1 and 2;", '2'),
    ("print nil;", 'nil'),
    ("print clock;", '<native fn>'),
])
def test_expression_output(source, expected, capsys):
    host, out, err = run(source, capsys)
    assert err == ''
    assert out == [expected]


@pytest.mark.parametrize('source, message, line', [
    ("print 10 / 0;", "Division by zero", 1),
    ('print -"a";', "Operand must be a number.", 1),
    ('print 1 < "a";', "Operands must be numbers.", 1),
    ("print nil + 1;", "Operands must be two numbers or at least one string.", 1),
    ("print undefined;", "Undefined variable 'undefined'.", 1),
    ("x = 1;", "Undefined variable 'x'.", 1),
    ('"not a function"();', "Can only call functions and classes.", 1),
    ("fun f(a) {}\nf(1, 2);", "Expected 1 arguments but got 2.", 2),
    ("clock(1);", "Expected 0 arguments but got 1.", 1),
    ("var n = 1;\nprint n.field;", "Only instances have properties.", 2),
    ("var n = 1;\nn.field = 2;", "Only instances have fields.", 2),
    ("class C {}\nprint C().missing;", "Undefined property 'missing'.", 2),
    ("var NotClass = 1;\nclass C < NotClass {}", "Superclass must be a class.", 2),
    ("break;", "Break occurred outside loop.", 1),
    ("var g = g;", "Variable not yet initialized 'g'.", 1),
])
def test_runtime_errors(source, message, line, capsys):
    host, out, err = run(source, capsys)
    assert host.had_runtime_error
    assert not host.had_error
    assert err == f"{message}\n[line {line}]\n"


def test_runtime_error_aborts_remaining_statements(capsys):
    host, out, err = run('print "one";\nprint 1 / 0;\nprint "three";', capsys)
    assert out == ['one']
    assert err == "Division by zero\n[line 2]\n"


def test_uninitialized_variable_reads_nil(capsys):
    host, out, err = run("var a; print a; { var b; var c = b; print c; }", capsys)
    assert err == ''
    assert out == ['nil', 'nil']


def test_global_redeclaration_sees_previous_value(capsys):
    host, out, err = run("var a = 1; var a = a + 1; print a;", capsys)
    assert err == ''
    assert out == ['2']


def test_closure_captures_defining_scope(capsys):
    source = '''
    {
      var a = "outer";
      fun f() { print a; }
      {
        var a = "inner";
        f();
      }
    }
    '''
    host, out, err = run(source, capsys)
    assert out == ['outer']


def test_for_loop_variable_is_scoped(capsys):
    host, out, err = run("for (var i = 0; i < 3; i = i + 1) print i;\nprint i;", capsys)
    assert out == ['0', '1', '2']
    assert err == "Undefined variable 'i'.\n[line 2]\n"


def test_break_exits_only_the_innermost_loop(capsys):
    source = '''
    var outer = 0;
    while (outer < 2) {
      var inner = 0;
      while (true) {
        if (inner == 2) break;
        print outer + ":" + inner;
        inner = inner + 1;
      }
      outer = outer + 1;
    }
    while (true) { print "x"; break; }
    '''
    host, out, err = run(source, capsys)
    assert err == ''
    assert out == ['0:0', '0:1', '1:0', '1:1', 'x']


def test_break_inside_function_called_from_loop_is_an_error(capsys):
    source = 'fun f() { break; }\nwhile (true) {\n  f();\n}\nprint "after";'
    host, out, err = run(source, capsys)
    assert out == []
    assert err == "Break occurred outside loop.\n[line 1]\n"


def test_loop_inside_function_inside_loop(capsys):
    source = '''
    fun firstOver(limit) {
      var i = 0;
      while (true) {
        if (i > limit) break;
        i = i + 1;
      }
      return i;
    }
    var n = 0;
    while (n < 2) {
      print firstOver(n);
      n = n + 1;
    }
    print "done";
    '''
    host, out, err = run(source, capsys)
    assert err == ''
    assert out == ['1', '2', 'done']


def test_return_unwinds_out_of_loops(capsys):
    source = '''
    fun find() {
      for (var i = 0; i < 10; i = i + 1) {
        while (true) {
          if (i == 4) return i;
          break;
        }
      }
      return -1;
    }
    print find();
    fun nothing() { return; }
    print nothing();
    fun implicit() {}
    print implicit();
    '''
    host, out, err = run(source, capsys)
    assert err == ''
    assert out == ['4', 'nil', 'nil']


def test_functions_are_first_class(capsys):
    source = '''
    fun add(a, b) { return a + b; }
    fun apply(f, x, y) { return f(x, y); }
    print apply(add, 1, 2);
    print add;
    var alias = add;
    print alias == add;
    '''
    host, out, err = run(source, capsys)
    assert out == ['3', '<fn add>', 'true']


def test_recursion(capsys):
    source = '''
    fun fact(n) { return n <= 1 ? 1 : n * fact(n - 1); }
    print fact(10);
    '''
    host, out, err = run(source, capsys)
    assert out == ['3628800']


def test_arguments_evaluated_left_to_right(capsys):
    source = '''
    fun show(x) { print x; return x; }
    fun three(a, b, c) { return a + b + c; }
    print three(show(1), show(2), show(3));
    '''
    host, out, err = run(source, capsys)
    assert out == ['1', '2', '3', '6']


def test_clock_returns_seconds(capsys):
    host, out, err = run("var t = clock(); print t > 1000000000; print t - t;", capsys)
    assert out == ['true', '0']


def test_environment_restored_after_runtime_error(capsys):
    from pylox.lox import Lox
    host = Lox()
    host.run("var a = 1; { var a = 2; print 1 / 0; }")
    assert host.interpreter.environment is host.interpreter.globals
    host.had_runtime_error = False
    host.run("print a;")
    assert capsys.readouterr().out.splitlines() == ['1']


def test_deep_recursion(capsys):
    source = "fun count(n) { if (n > 0) return count(n - 1); return n; }\nprint count(500);"
    host, out, err = run(source, capsys)
    assert err == ''
    assert out == ['0']


def test_unbounded_recursion_is_a_runtime_error(capsys):
    host, out, err = run('fun f() { f(); }\nf();\nprint "unreached";', capsys)
    assert host.had_runtime_error
    assert out == []
    assert err == "Stack overflow.\n[line 1]\n"
