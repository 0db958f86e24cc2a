"""CLI entry point for the Lox interpreter.

Usage:
    python -m pylox [-v|-vv|-vvv] [script]

With no script an interactive prompt is started on stdin. Exit codes:
64 for bad usage, 65 when the script has a syntax or resolution error,
66 when it can't be read, 70 when it fails at runtime, 0 otherwise.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import sys

from .lox import EXIT_NO_INPUT, EXIT_OK, EXIT_USAGE, Lox


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='pylox', description="Lox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('script', nargs='*', help='Lox script (.lox) to execute')
    args = parser.parse_args(argv)

    if len(args.script) > 1:
        print("Usage: pylox [script]")
        sys.exit(EXIT_USAGE)

    lox = Lox(debug_level=args.v)
    try:
        if not args.script:
            lox.run_prompt()
            sys.exit(EXIT_OK)
        try:
            code = lox.run_file(args.script[0])
        except OSError as e:
            print(f"Error: could not read {args.script[0]}: {e.strerror}", file=sys.stderr)
            sys.exit(EXIT_NO_INPUT)
        except UnicodeDecodeError:
            print(f"Error: could not read {args.script[0]}: not valid UTF-8", file=sys.stderr)
            sys.exit(EXIT_NO_INPUT)
        sys.exit(code)
    finally:
        lox.close()


if __name__ == '__main__':
    main()
