"""
Interpretador Lox: scanner, parser descendente recursivo e interpretador que
percorre a árvore sintática.
"""

import logging

from .ctx import Ctx
from .errors import LoxError, LoxRuntimeError, ParseError, ScanError
from .interpreter import CapturePrint, Interpreter, run
from .parser import Parser, parse
from .scanner import Scanner, scan
from .tokens import Token, TokenType

__version__ = "0.1.0"

__all__ = [
    "CapturePrint",
    "Ctx",
    "Interpreter",
    "LoxError",
    "LoxRuntimeError",
    "ParseError",
    "Parser",
    "ScanError",
    "Scanner",
    "Token",
    "TokenType",
    "parse",
    "run",
    "scan",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
