from pylox.ast_printer import AstPrinter
from pylox.lox import Lox


def render(source):
    printer = AstPrinter()
    return [printer.print(stmt) for stmt in Lox().parse(source)]


def test_expressions():
    assert render("-1 + (2 - 3) * 4;") == ['(+ (- 1) (* (group (- 2 3)) 4))']
    assert render("a ? b : c;") == ['(? a b c)']
    assert render("a or b and !c;") == ['(or a (and b (! c)))']
    assert render('f(1, "x").y = nil;') == ['(= (. (call f 1 "x") y) nil)']
    assert render("a = true;") == ['(= a true)']


def test_statements():
    assert render("for (var i = 0; i < 2; i = i + 1) print i;") == [
        '(block (var i 0) (while (< i 2) (block (print i) (= i (+ i 1)))))'
    ]
    assert render("fun f(a, b) { return a; }") == ['(fun f (a b) (return a))']
    assert render("while (true) break;") == ['(while true (break))']
    assert render("var x;") == ['(var x)']


def test_class():
    assert render("class B < A { m() { return super.m(this); } }") == [
        '(class B < A (method m () (return (call (super m) this))))'
    ]
