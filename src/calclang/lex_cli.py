"""Simple CLI to lex calclang source and print tokens."""

import argparse
from pathlib import Path

from .lexer import Lexer


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Lex calclang source")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("path", type=Path, nargs="?", help="Path to a statement file")
    source.add_argument("-e", "--expr", help="Lex this text instead of a file")
    args = parser.parse_args(argv)

    if args.expr is not None:
        text = args.expr
    else:
        try:
            text = args.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            print(f"error: file not found: {args.path}")
            return 1

    for t in Lexer(text).scan():
        print(f"{t.kind.name}\t{t.text!r}\t(pos {t.pos})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
