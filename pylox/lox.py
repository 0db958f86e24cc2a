"""Host side of the interpreter: error reporting, output sinks, and the
drivers that push one source string (or a file, or a REPL session) through
scan -> parse -> resolve -> interpret.

The host records errors in `had_error` / `had_runtime_error` and never
exits the process itself; the command line wrapper maps the flags to exit
codes.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .ast import Expression, Print, Stmt
from .ast_printer import AstPrinter
from .errors import LoxRuntimeError
from .interpreter import Interpreter
from .parser import Parser
from .resolver import Resolver
from .scanner import Scanner
from .tokens import Token, TokenType

EXIT_OK = 0
EXIT_USAGE = 64
EXIT_DATA_ERROR = 65
EXIT_NO_INPUT = 66
EXIT_SOFTWARE = 70

# Each Lox call costs several Python frames; the default limit of 1000
# would cap Lox recursion at roughly a hundred levels.
RECURSION_LIMIT = 10000

REPL_BANNER = (
    "pylox REPL",
    "CTRL + D to exit",
    "-f <filename> to run a file in the lox dir (no ext)",
    "-d plus your input will print out the AST",
    "",
)


class Lox:
    """Error reporter and output sink shared by every pipeline stage."""
    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)
        self.out = out
        self.err = err
        self.had_error = False
        self.had_runtime_error = False
        self.interpreter = Interpreter(self, debug_level=debug_level, debug_file=debug_file)

    # Sinks; resolved at write time so redirected sys streams are honoured

    def log_out(self, message: str) -> None:
        print(message, file=self.out if self.out is not None else sys.stdout)

    def log_err(self, message: str) -> None:
        print(message, file=self.err if self.err is not None else sys.stderr)

    # Error reporting

    def error(self, token: Token, message: str) -> None:
        if token.type == TokenType.EOF:
            self.report(token.line, " at end", message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def error_at_line(self, line: int, message: str) -> None:
        self.report(line, "", message)

    def report(self, line: int, where: str, message: str) -> None:
        self.log_err(f"[line {line}] Error{where}: {message}")
        self.had_error = True

    def runtime_error(self, error: LoxRuntimeError) -> None:
        self.log_err(f"{error.message}\n[line {error.token.line}]")
        self.had_runtime_error = True

    # Drivers

    def parse(self, source: str) -> List[Stmt]:
        tokens = Scanner(source, self).scan_tokens()
        statements = Parser(tokens, self).parse()
        return [stmt for stmt in statements if stmt is not None]

    def run(self, source: str, promote_expressions: bool = False) -> None:
        statements = self.parse(source)
        if self.had_error:
            return
        if promote_expressions:
            # REPL calculator mode: bare expressions are printed
            statements = [Print(stmt.expression) if isinstance(stmt, Expression) else stmt
                          for stmt in statements]
        Resolver(self.interpreter, self).resolve(statements)
        if self.had_error:
            return
        self.interpreter.interpret(statements)

    def run_file(self, path: str) -> int:
        source = Path(path).read_text(encoding='utf-8')
        self.run(source)
        if self.had_error:
            return EXIT_DATA_ERROR
        if self.had_runtime_error:
            return EXIT_SOFTWARE
        return EXIT_OK

    def print_ast(self, source: str) -> None:
        statements = self.parse(source)
        printer = AstPrinter()
        for stmt in statements:
            self.log_out(printer.print(stmt))

    def run_prompt(self, stdin: Optional[TextIO] = None) -> None:
        stdin = stdin if stdin is not None else sys.stdin
        out = self.out if self.out is not None else sys.stdout
        for line in REPL_BANNER:
            self.log_out(line)
        while True:
            out.write("> ")
            out.flush()
            line = stdin.readline()
            if not line:
                break
            line = line.rstrip('\n')
            if line.startswith("-f "):
                script = Path('lox') / f"{line[3:].strip()}.lox"
                try:
                    self.run_file(str(script))
                except OSError as e:
                    self.log_err(f"Could not read {script}: {e.strerror}")
                except UnicodeDecodeError:
                    self.log_err(f"Could not read {script}: not valid UTF-8")
            elif line.startswith("-d "):
                self.print_ast(line[3:])
            else:
                self.run(line, promote_expressions=True)
            # one bad line must not poison the session
            self.had_error = False
            self.had_runtime_error = False

    def close(self) -> None:
        self.interpreter.close()


def parse_program(source: str, host: Optional[Lox] = None) -> List[Stmt]:
    """Parse Lox source into a statement list; errors go to the host."""
    if host is None:
        host = Lox()
    return host.parse(source)


def run_program(source: str, debug_level: int = 0) -> Lox:
    """Convenience function to run a Lox program from a source string.

    Returns the host so callers can inspect its error flags.
    """
    host = Lox(debug_level=debug_level)
    try:
        host.run(source)
    finally:
        host.close()
    return host
