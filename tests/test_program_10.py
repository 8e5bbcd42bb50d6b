from pathlib import Path

from lango.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_10_elif_chains(capsys):
    with open(EXAMPLES / 'program_10.lango', 'r', encoding='utf-8') as f:
        source = f.read()
    run_program(source)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['A', 'B', 'C', 'F', 'fallback', 'inner else']
