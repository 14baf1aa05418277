"""
Hierarquia de erros do interpretador.

Erros de análise léxica e sintática abortam o pipeline antes da execução.
Erros de execução abortam a execução do programa.
"""

from typing import Optional

__all__ = [
    "LoxError",
    "ScanError",
    "ParseError",
    "LoxRuntimeError",
    "LoxTypeError",
    "UndefinedVariableError",
    "NotCallableError",
    "ArityError",
    "NotAnInstanceError",
    "UndefinedPropertyError",
    "ReservedNameError",
    "InitializerReturnError",
    "StackOverflowError",
]


class LoxError(Exception):
    """
    Classe base para todos os erros Lox.
    """

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"[line {self.line}] {self.message}"

    def at_line(self, line: int) -> "LoxError":
        """
        Associa o erro a uma linha, caso ainda não tenha uma.
        """
        if self.line is None:
            self.line = line
        return self


class ScanError(LoxError):
    """
    Erro durante a análise léxica.
    """


class ParseError(LoxError):
    """
    Erro durante a análise sintática.
    """


class LoxRuntimeError(LoxError):
    """
    Erro durante a execução.
    """


class LoxTypeError(LoxRuntimeError):
    pass


class UndefinedVariableError(LoxRuntimeError):
    pass


class NotCallableError(LoxRuntimeError):
    pass


class ArityError(LoxRuntimeError):
    pass


class NotAnInstanceError(LoxRuntimeError):
    pass


class UndefinedPropertyError(LoxRuntimeError):
    pass


class ReservedNameError(LoxRuntimeError):
    pass


class InitializerReturnError(LoxRuntimeError):
    pass


class StackOverflowError(LoxRuntimeError):
    """
    Chamadas aninhadas demais para a pilha do Python.
    """
