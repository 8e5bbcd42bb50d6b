from pathlib import Path

from lango.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_17_inheritance_and_initializers(capsys):
    with open(EXAMPLES / 'program_17.lango', 'r', encoding='utf-8') as f:
        source = f.read()
    run_program(source)
    out_lines = capsys.readouterr().out.strip().split('\n')
    expected = [
        'Rex makes a sound and can roll over',
        'Rex',
        'Rex makes a sound and can roll over',
        'set',
        'false',
    ]
    assert out_lines == expected
