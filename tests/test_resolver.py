import io

import pytest

from lango import ast
from lango.interpreter import Interpreter, parse_program
from lango.reporter import ErrorReporter
from lango.resolver import Resolver


def resolve(source):
    stream = io.StringIO()
    reporter = ErrorReporter(stream=stream)
    interpreter = Interpreter(reporter=reporter)
    statements = parse_program(source, reporter)
    assert not reporter.had_error, stream.getvalue()
    Resolver(interpreter, reporter).resolve(statements)
    return statements, interpreter, reporter, stream.getvalue()


def test_globals_are_left_unresolved():
    statements, interpreter, reporter, _ = resolve('var a = 1; print a;')
    assert not reporter.had_error
    assert interpreter.locals == {}


def test_block_and_function_distances():
    source = '''
    fun outer() {
      var x = 1;
      {
        var y = 2;
        fun inner() {
          print x + y;
        }
      }
    }
    '''
    statements, interpreter, reporter, _ = resolve(source)
    assert not reporter.had_error
    block = statements[0].body[1]
    inner = block.statements[1]
    binary = inner.body[0].expression
    # inner's own scope -> block -> outer's body
    assert interpreter.locals[binary.right] == 1
    assert interpreter.locals[binary.left] == 2


def test_same_name_resolves_per_occurrence():
    source = '''
    {
      var a = 1;
      {
        print a;
        var a = 2;
        print a;
      }
    }
    '''
    statements, interpreter, _, _ = resolve(source)
    inner = statements[0].statements[1]
    first, second = inner.statements[0].expression, inner.statements[2].expression
    assert interpreter.locals[first] == 1
    assert interpreter.locals[second] == 0


def test_this_and_super_distances():
    source = '''
    class A { m() {} }
    class B < A {
      m() {
        this.x = 1;
        super.m();
      }
    }
    '''
    statements, interpreter, reporter, _ = resolve(source)
    assert not reporter.had_error
    method = statements[1].methods[0]
    this_expr = method.body[0].expression.object
    super_expr = method.body[1].expression.callee
    assert isinstance(this_expr, ast.This)
    assert interpreter.locals[this_expr] == 1
    assert interpreter.locals[super_expr] == 2


@pytest.mark.parametrize('source, message', [
    ('{ var a = 1; var a = 2; }', 'Already a variable with this name in this scope.'),
    ('fun f(a, a) {}', 'Already a variable with this name in this scope.'),
    ('{ var a = a; }', "Can't read local variable in its own initializer."),
    ('return 1;', "Can't return from top-level code."),
    ('class A { init() { return 1; } }', "Can't return a value from an initializer."),
    ('class A < A {}', "A class can't inherit from itself."),
    ('print this;', "Can't use 'this' outside of a class."),
    ('fun f() { return this; }', "Can't use 'this' outside of a class."),
    ('print super.x;', "Can't use 'super' outside of a class."),
    ('class A { m() { super.m(); } }', "Can't use 'super' in a class with no superclass."),
])
def test_static_errors(source, message):
    _, _, reporter, err = resolve(source)
    assert reporter.had_error
    assert message in err


def test_allowed_forms():
    source = '''
    var a = 1;
    var a = 2;
    var b = b;
    class A { init() { return; } }
    fun f() { fun f() {} return f; }
    while (true) break;
    '''
    _, _, reporter, err = resolve(source)
    assert not reporter.had_error, err


def test_break_outside_loop_is_not_a_static_error():
    _, _, reporter, _ = resolve('break; fun f() { break; }')
    assert not reporter.had_error


def test_unsupported_node_is_a_type_error():
    resolver = Resolver(Interpreter(), ErrorReporter(io.StringIO()))
    with pytest.raises(TypeError):
        resolver.resolve_stmt(object())
    with pytest.raises(TypeError):
        resolver.resolve_expr(object())
