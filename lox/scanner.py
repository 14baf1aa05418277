"""
Analisador léxico.

Converte o código fonte em uma lista de tokens numa única passada da esquerda
para a direita, com um caractere de lookahead.
"""

import logging
import re

from .errors import ScanError
from .tokens import KEYWORDS, Token, TokenType

__all__ = ["Scanner", "scan"]

logger = logging.getLogger(__name__)

SINGLE_CHAR_TOKENS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
}

# Operadores que podem ser seguidos por "=": (sem "=", com "=")
EQUAL_SUFFIXED_TOKENS = {
    "!": (TokenType.BANG, TokenType.BANG_EQUAL),
    "=": (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    "<": (TokenType.LESS, TokenType.LESS_EQUAL),
    ">": (TokenType.GREATER, TokenType.GREATER_EQUAL),
}

WHITESPACE = {" ", "\r", "\t"}

NUMBER_RE = re.compile(r"[0-9]+(\.[0-9]*)?")


def is_alpha(char: str) -> bool:
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


def is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def is_alphanumeric(char: str) -> bool:
    return is_alpha(char) or is_digit(char)


class Scanner:
    """
    Scanner para código Lox.

    Erros não interrompem a análise: são registrados em `errors` e o caractere
    problemático é ignorado.
    """

    def __init__(self, source: str):
        self.source = source
        self.tokens: list[Token] = []
        self.errors: list[ScanError] = []
        self._start = 0
        self._current = 0
        self._line = 1

    @property
    def had_error(self) -> bool:
        return bool(self.errors)

    def scan_tokens(self) -> list[Token]:
        """
        Retorna a lista de tokens. Chamadas repetidas retornam a mesma lista.
        """
        if self.tokens:
            return self.tokens

        while not self._at_end():
            self._start = self._current
            self._scan_token()

        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            self.tokens.append(Token(TokenType.EOF, None, None, self._line))
        return self.tokens

    def _scan_token(self):
        char = self._advance()

        if char in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[char])
        elif char in EQUAL_SUFFIXED_TOKENS:
            single, double = EQUAL_SUFFIXED_TOKENS[char]
            self._add_token(double if self._match("=") else single)
        elif char == "/":
            if self._match("/"):
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
            else:
                self._add_token(TokenType.SLASH)
        elif char == "\n":
            self._line += 1
        elif char in WHITESPACE:
            pass
        elif char == '"':
            self._string()
        elif is_digit(char):
            self._number()
        elif is_alpha(char):
            self._identifier()
        else:
            self._error(f"Unexpected character {char!r}.")

    def _string(self):
        while not self._at_end() and self._peek() != '"':
            if self._peek() == "\n":
                self._line += 1
            self._advance()

        if self._at_end():
            self._error("Unterminated string.")
            return

        # Aspas de fechamento
        self._advance()
        self._add_token(TokenType.STRING, self.source[self._start + 1 : self._current - 1])

    def _number(self):
        # As sequências são alfanuméricas de propósito: "1a" vira um único
        # lexema, que é rejeitado na conversão abaixo.
        self._consume_alphanumeric()
        if self._peek() == ".":
            self._advance()
            self._consume_alphanumeric()

        lexeme = self._lexeme()
        if NUMBER_RE.fullmatch(lexeme) is None:
            self._error(f"Invalid number literal {lexeme!r}.")
            return
        self._add_token(TokenType.NUMBER, float(lexeme))

    def _identifier(self):
        self._consume_alphanumeric()
        kind = KEYWORDS.get(self._lexeme(), TokenType.IDENTIFIER)
        if kind == TokenType.TRUE:
            self._add_token(kind, True)
        elif kind == TokenType.FALSE:
            self._add_token(kind, False)
        else:
            self._add_token(kind)

    def _consume_alphanumeric(self):
        while is_alphanumeric(self._peek()):
            self._advance()

    def _lexeme(self) -> str:
        return self.source[self._start : self._current]

    def _add_token(self, kind: TokenType, literal=None):
        self.tokens.append(Token(kind, self._lexeme(), literal, self._line))

    def _advance(self) -> str:
        char = self.source[self._current]
        self._current += 1
        return char

    def _match(self, expected: str) -> bool:
        if self._peek() != expected:
            return False
        self._current += 1
        return True

    def _peek(self) -> str:
        if self._at_end():
            return "\0"
        return self.source[self._current]

    def _at_end(self) -> bool:
        return self._current >= len(self.source)

    def _error(self, message: str):
        error = ScanError(message, self._line)
        logger.error("%s", error)
        self.errors.append(error)


def scan(source: str) -> list[Token]:
    """
    Converte código fonte em tokens, levantando o primeiro erro léxico.
    """
    scanner = Scanner(source)
    tokens = scanner.scan_tokens()
    if scanner.errors:
        raise scanner.errors[0]
    return tokens
