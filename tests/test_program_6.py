from pathlib import Path

from lango.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_6_division_by_zero(capsys):
    with open(EXAMPLES / 'program_6.lango', 'r', encoding='utf-8') as f:
        source = f.read()
    reporter = run_program(source)
    captured = capsys.readouterr()
    assert captured.out == ''
    assert 'division by zero' in captured.err
    assert '[line 1]' in captured.err
    assert reporter.had_runtime_error
    assert not reporter.had_error
