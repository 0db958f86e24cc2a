from pathlib import Path

from pylox.lox import Lox

LOX_DIR = Path(__file__).resolve().parent.parent / 'lox'


def test_program_static_errors(capsys):
    lox = Lox()
    code = lox.run_file(str(LOX_DIR / 'staticErrors.lox'))
    captured = capsys.readouterr()
    assert code == 65
    # resolution errors suppress evaluation entirely
    assert captured.out == ''
    assert captured.err.strip().split('\n') == [
        "[line 3] Error at 'a': Can't read local variable in its own initializer.",
        "[line 5] Error at 'return': Can't return from top-level code.",
    ]
