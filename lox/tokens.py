from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

__all__ = ["TokenType", "Token", "KEYWORDS"]


class TokenType(Enum):
    # Um caractere
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # Um ou dois caracteres
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literais
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Palavras reservadas
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS: dict[str, TokenType] = {
    "var": TokenType.VAR,
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "fun": TokenType.FUN,
    "for": TokenType.FOR,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "while": TokenType.WHILE,
}


@dataclass(frozen=True)
class Token:
    """
    Unidade léxica produzida pelo scanner.

    Ex.: Token(TokenType.NUMBER, "42", 42.0, 1)
    """

    type: TokenType
    lexeme: Optional[str]
    literal: "float | str | bool | None" = None
    line: int = 1

    def __str__(self):
        return f"{self.type.name} {self.lexeme} {self.literal}"
