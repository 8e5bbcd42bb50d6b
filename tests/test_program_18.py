from pathlib import Path

from lango.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_18_multiline_strings_and_bare_for(capsys):
    with open(EXAMPLES / 'program_18.lango', 'r', encoding='utf-8') as f:
        source = f.read()
    run_program(source)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['multi', 'line', '5', '3']
