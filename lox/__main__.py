import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .errors import LoxError, LoxRuntimeError
from .interpreter import run
from .node import pretty
from .parser import parse
from .scanner import scan

# Códigos de saída (sysexits.h)
EX_OK = 0
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lox", description="Executa programas Lox.")
    parser.add_argument("path", nargs="?", help="arquivo .lox a ser executado")
    parser.add_argument("-c", "--command", help="executa o código passado como string")
    parser.add_argument("--tokens", action="store_true", help="mostra os tokens e sai")
    parser.add_argument("--ast", action="store_true", help="mostra a árvore sintática e sai")
    parser.add_argument("--env", action="store_true", help="mostra o escopo global ao final")
    parser.add_argument("-v", "--verbose", action="store_true", help="ativa logs de depuração")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = get_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is not None:
        src = args.command
    elif args.path is not None:
        try:
            src = Path(args.path).read_text(encoding="utf-8")
        except OSError as exc:
            print(f"lox: {exc}", file=sys.stderr)
            return EX_NOINPUT
    else:
        parser.error("informe um arquivo ou use -c")

    try:
        if args.tokens:
            for token in scan(src):
                print(token)
            return EX_OK
        if args.ast:
            print(pretty(parse(src)))
            return EX_OK

        interpreter = run(src)
    except LoxRuntimeError as exc:
        print(f"Runtime error: {exc}", file=sys.stderr)
        return EX_SOFTWARE
    except LoxError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EX_DATAERR

    if args.env:
        print(interpreter.globals.pretty())
    return EX_OK


if __name__ == "__main__":
    sys.exit(main())
