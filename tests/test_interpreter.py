import pytest

from lango import ast
from lango.environment import Environment
from lango.errors import LangoError
from lango.interpreter import Interpreter, run_program, run_source
from lango.tokens import Token, TokenType
from lango.types import LangoClass, LangoInstance, is_equal, is_truthy, to_string


def output_of(source, capsys):
    reporter = run_program(source)
    captured = capsys.readouterr()
    return captured.out.strip().split('\n'), captured.err, reporter


def test_concatenation_end_to_end(capsys):
    out, _, _ = output_of('var a = "1"; var b = 2; print a + b;', capsys)
    assert out == ['12']


@pytest.mark.parametrize('source, message', [
    ('print -"x";', 'Operand must be a number.'),
    ('print 1 < "2";', 'Operands must be numbers.'),
    ('print nil * 2;', 'Operands must be numbers.'),
    ('print true + 1;', 'Operands must be two numbers or at least one string.'),
    ('print undefined;', "Undefined variable 'undefined'."),
    ('missing = 1;', "Undefined variable 'missing'."),
    ('"text"();', 'Can only call functions and classes.'),
    ('fun f(a) {} f(1, 2);', 'Expected 1 arguments but got 2.'),
    ('class A { init(a, b) {} } A(1);', 'Expected 2 arguments but got 1.'),
    ('class A {} A(1);', 'Expected 0 arguments but got 1.'),
    ('print 4.x;', 'Only instances have properties.'),
    ('var s = "s"; s.x = 1;', 'Only instances have fields.'),
    ('var NotAClass = 1; class B < NotAClass {}', 'Superclass must be a class.'),
    ('class A {} print A().nothing;', "Undefined property 'nothing'."),
    ('class A {} class B < A { m() { super.nope(); } } B().m();', "Undefined property 'nope'."),
    ('print 10 / 0;', 'Attempted division by zero.'),
])
def test_runtime_errors(capsys, source, message):
    out, err, reporter = output_of(source, capsys)
    assert out == ['']
    assert reporter.had_runtime_error
    assert err.startswith(message)
    assert '[line 1]' in err


def test_runtime_error_reported_once_and_later_runs_continue(capsys):
    interpreter = Interpreter()
    run_source('print "a"; print nope; print "b";', interpreter)
    run_source('print "c";', interpreter)
    captured = capsys.readouterr()
    assert captured.out.strip().split('\n') == ['a', 'c']
    assert captured.err.count('Undefined variable') == 1


def test_globals_persist_between_runs(capsys):
    interpreter = Interpreter()
    run_source('var count = 1; fun bump() { count = count + 1; }', interpreter)
    run_source('bump(); bump(); print count;', interpreter)
    assert capsys.readouterr().out.strip() == '3'


def test_closures_capture_definition_environment(capsys):
    source = '''
    var x = "global";
    fun show() { print x; }
    fun caller() {
      var x = "local";
      show();
    }
    caller();
    '''
    out, _, _ = output_of(source, capsys)
    assert out == ['global']


def test_closure_shares_mutable_environment(capsys):
    source = '''
    fun pair() {
      var value = 0;
      class Box {
        get() { return value; }
        set(v) { value = v; }
      }
      return Box();
    }
    var box = pair();
    box.set(42);
    print box.get();
    '''
    out, _, _ = output_of(source, capsys)
    assert out == ['42']


def test_return_unwinds_through_loops_and_blocks(capsys):
    source = '''
    fun find() {
      var i = 0;
      while (true) {
        {
          if (i == 4) return i * 10;
        }
        i = i + 1;
      }
    }
    print find();
    fun nothing() { }
    print nothing();
    '''
    out, _, _ = output_of(source, capsys)
    assert out == ['40', 'nil']


def test_break_inside_function_in_loop_does_not_escape_call(capsys):
    source = '''
    fun stop() { break; print "unreachable"; }
    for (var i = 0; i < 3; i = i + 1) {
      stop();
      print i;
    }
    '''
    out, _, reporter = output_of(source, capsys)
    assert out == ['0', '1', '2']
    assert not reporter.had_runtime_error


def test_break_at_top_level_is_a_no_op(capsys):
    out, _, reporter = output_of('break; print "still runs";', capsys)
    assert out == ['still runs']
    assert not reporter.had_runtime_error


def test_methods_are_bound_on_each_access(capsys):
    source = '''
    class A { m() { return this; } }
    var a = A();
    var b = A();
    var m = a.m;
    b.m = m;
    print b.m() == a;
    print a.m == a.m;
    '''
    out, _, _ = output_of(source, capsys)
    assert out == ['true', 'false']


def test_initializer_always_returns_instance(capsys):
    source = '''
    class A {
      init() { this.n = 1; return; }
    }
    var a = A();
    print a.init();
    print a.n;
    '''
    out, _, _ = output_of(source, capsys)
    assert out == ['A instance', '1']


def test_inherited_init_sets_constructor_arity(capsys):
    source = '''
    class A { init(x) { this.x = x; } }
    class B < A {}
    print B(5).x;
    '''
    out, _, _ = output_of(source, capsys)
    assert out == ['5']


def test_class_can_refer_to_itself_in_methods(capsys):
    source = '''
    class Node {
      init(depth) { this.depth = depth; }
      child() { return Node(this.depth + 1); }
    }
    print Node(0).child().child().depth;
    '''
    out, _, _ = output_of(source, capsys)
    assert out == ['2']


def test_evaluation_order_is_left_to_right(capsys):
    source = '''
    fun show(x) { print x; return x; }
    fun three(a, b, c) { return a + b + c; }
    print three(show(1), show(2), show(3));
    print show("l") + show("r");
    '''
    out, _, _ = output_of(source, capsys)
    assert out == ['1', '2', '3', '6', 'l', 'r', 'lr']


def test_deep_recursion_is_a_runtime_error(capsys):
    out, err, reporter = output_of('fun f() { f(); } f();', capsys)
    assert reporter.had_runtime_error
    assert 'Stack overflow.' in err


def test_recursion_a_thousand_calls_deep_succeeds(capsys):
    source = 'fun sum(n) { if (n == 0) return 0; return n + sum(n - 1); } print sum(1000);'
    out, err, reporter = output_of(source, capsys)
    assert not reporter.had_runtime_error
    assert out == ['500500']
    assert err == ''


def test_clock_is_a_number(capsys):
    out, _, _ = output_of('var t = clock(); print t > 0; print clock() - t >= 0;', capsys)
    assert out == ['true', 'true']


def test_scope_distance_reads_exact_ancestor():
    name = Token('a', TokenType.IDENTIFIER, None, 1)
    interpreter = Interpreter()
    outer = Environment(interpreter.global_env)
    outer.define('a', 'outer')
    inner = Environment(outer)
    inner.define('a', 'inner')
    expr = ast.Variable(name)
    interpreter.resolve(expr, 1)
    assert interpreter.evaluate(expr, inner) == 'outer'
    interpreter.resolve(expr, 0)
    assert interpreter.evaluate(expr, inner) == 'inner'


@pytest.mark.parametrize('value, expected', [
    (None, False),
    (False, False),
    (True, True),
    (0.0, True),
    ('', True),
])
def test_truthiness(value, expected):
    assert is_truthy(value) is expected


def test_instances_are_truthy():
    assert is_truthy(LangoInstance(LangoClass('A', None, {})))


@pytest.mark.parametrize('a, b, expected', [
    (None, None, True),
    (None, False, False),
    (1.0, 1.0, True),
    (1.0, True, False),
    (0.0, False, False),
    ('1', 1.0, False),
    ('ab', 'ab', True),
])
def test_equality(a, b, expected):
    assert is_equal(a, b) is expected


@pytest.mark.parametrize('value, text', [
    (None, 'nil'),
    (True, 'true'),
    (3.0, '3'),
    (-0.5, '-0.5'),
    (1234567.0, '1234567'),
    (2.25, '2.25'),
    (1e21, '1e+21'),
    ('plain', 'plain'),
])
def test_to_string(value, text):
    assert to_string(value) == text


def test_undefined_global_raises_with_token():
    env = Environment()
    name = Token('ghost', TokenType.IDENTIFIER, None, 7)
    with pytest.raises(LangoError) as excinfo:
        env.get(name)
    assert excinfo.value.token.line == 7
    assert excinfo.value.message == "Undefined variable 'ghost'."


def test_debug_log_written_when_verbose(tmp_path, capsys):
    log = tmp_path / 'debug.txt'
    interpreter = Interpreter(debug_level=3, debug_file=str(log))
    run_source('var a = 1; if (a) print a; fun f() {} f();', interpreter)
    interpreter.close()
    text = log.read_text(encoding='utf-8')
    assert 'declare a: number = 1' in text
    assert 'if condition 1 -> True' in text
    assert 'define function f' in text
    assert 'call <fn f> with 0 arguments' in text
    assert capsys.readouterr().out.strip() == '1'


def test_unsupported_node_is_a_type_error():
    interpreter = Interpreter()
    with pytest.raises(TypeError):
        interpreter.execute(object(), interpreter.global_env)
    with pytest.raises(TypeError):
        interpreter.evaluate(object(), interpreter.global_env)
