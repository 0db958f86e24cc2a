from pathlib import Path

from pylox.lox import Lox

LOX_DIR = Path(__file__).resolve().parent.parent / 'lox'


def test_program_for(capsys):
    lox = Lox()
    code = lox.run_file(str(LOX_DIR / 'for.lox'))
    captured = capsys.readouterr()
    assert code == 0
    assert captured.err == ''
    out_lines = captured.out.strip().split('\n')
    assert out_lines == ['0', '1', '2', 'reuse a', '0', 'out of loop', '0', 'partial for']
