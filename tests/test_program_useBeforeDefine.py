from pathlib import Path

from pylox.lox import Lox

LOX_DIR = Path(__file__).resolve().parent.parent / 'lox'


def test_program_use_before_define(capsys):
    """A variable declared without initializer reads as nil, but a global
    observed while its own initializer runs is a runtime error that stops
    the rest of the script."""
    lox = Lox()
    code = lox.run_file(str(LOX_DIR / 'useBeforeDefine.lox'))
    captured = capsys.readouterr()
    assert code == 70
    assert captured.out.strip().split('\n') == ['nil', 'assigned', 'nil']
    assert captured.err == "Variable not yet initialized 'c'.\n[line 11]\n"
