from pathlib import Path

from pylox.lox import Lox

LOX_DIR = Path(__file__).resolve().parent.parent / 'lox'


def test_program_blocks(capsys):
    lox = Lox()
    code = lox.run_file(str(LOX_DIR / 'blocks.lox'))
    captured = capsys.readouterr()
    assert code == 0
    assert captured.err == ''
    out_lines = captured.out.strip().split('\n')
    assert out_lines == [
        'inner a', 'outer b', 'global c',
        'outer a', 'outer b', 'global c',
        'global a', 'global b', 'global c',
    ]
