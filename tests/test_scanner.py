import logging

import pytest

from lox.errors import ScanError
from lox.scanner import Scanner, scan
from lox.tokens import Token, TokenType as T


def types(src: str) -> list[T]:
    return [token.type for token in Scanner(src).scan_tokens()]


def test_var_declaration():
    tokens = scan("var x = 1;")
    assert tokens == [
        Token(T.VAR, "var", None, 1),
        Token(T.IDENTIFIER, "x", None, 1),
        Token(T.EQUAL, "=", None, 1),
        Token(T.NUMBER, "1", 1.0, 1),
        Token(T.SEMICOLON, ";", None, 1),
        Token(T.EOF, None, None, 1),
    ]


def test_single_char_tokens():
    assert types("(){},.-+;*/") == [
        T.LEFT_PAREN,
        T.RIGHT_PAREN,
        T.LEFT_BRACE,
        T.RIGHT_BRACE,
        T.COMMA,
        T.DOT,
        T.MINUS,
        T.PLUS,
        T.SEMICOLON,
        T.STAR,
        T.SLASH,
        T.EOF,
    ]


def test_two_char_operators_fall_back_to_one_char():
    assert types("!= == <= >= ! = < >") == [
        T.BANG_EQUAL,
        T.EQUAL_EQUAL,
        T.LESS_EQUAL,
        T.GREATER_EQUAL,
        T.BANG,
        T.EQUAL,
        T.LESS,
        T.GREATER,
        T.EOF,
    ]


def test_keywords_and_identifiers():
    src = "var and class else false fun for if nil or print return super this true while foo _bar x1"
    kinds = types(src)
    assert kinds[:16] == [
        T.VAR,
        T.AND,
        T.CLASS,
        T.ELSE,
        T.FALSE,
        T.FUN,
        T.FOR,
        T.IF,
        T.NIL,
        T.OR,
        T.PRINT,
        T.RETURN,
        T.SUPER,
        T.THIS,
        T.TRUE,
        T.WHILE,
    ]
    assert kinds[16:] == [T.IDENTIFIER, T.IDENTIFIER, T.IDENTIFIER, T.EOF]


def test_boolean_literals():
    true, false, _ = scan("true false")
    assert true.literal is True
    assert false.literal is False


def test_comments_and_newlines():
    tokens = scan("// comment\n\tprint 1; // another\n")
    assert [t.type for t in tokens] == [T.PRINT, T.NUMBER, T.SEMICOLON, T.EOF]
    assert tokens[0].line == 2
    assert tokens[-1].line == 3


def test_numbers():
    assert scan("42")[0].literal == 42.0
    assert scan("3.14")[0].literal == 3.14
    assert scan("3.14")[0].lexeme == "3.14"


def test_multiline_string():
    token, eof = scan('"a\nb"')
    assert token == Token(T.STRING, '"a\nb"', "a\nb", 2)
    assert eof.line == 2


def test_string_without_escape_processing():
    token = scan(r'"a\nb"')[0]
    assert token.literal == "a\\nb"


def test_unterminated_string():
    scanner = Scanner('print "abc\n')
    tokens = scanner.scan_tokens()
    assert [t.type for t in tokens] == [T.PRINT, T.EOF]
    assert scanner.had_error
    assert scanner.errors[0].message == "Unterminated string."
    assert scanner.errors[0].line == 2


def test_unknown_character_is_skipped():
    scanner = Scanner("1 @ 2")
    tokens = scanner.scan_tokens()
    assert [t.type for t in tokens] == [T.NUMBER, T.NUMBER, T.EOF]
    assert [str(e) for e in scanner.errors] == ["[line 1] Unexpected character '@'."]


def test_scanning_continues_after_errors():
    scanner = Scanner("@\n#\nprint 1;")
    tokens = scanner.scan_tokens()
    assert [e.line for e in scanner.errors] == [1, 2]
    assert tokens[0] == Token(T.PRINT, "print", None, 3)


def test_alphanumeric_number_lexeme_is_rejected():
    scanner = Scanner("1a + 2")
    tokens = scanner.scan_tokens()
    assert [t.type for t in tokens] == [T.PLUS, T.NUMBER, T.EOF]
    assert scanner.errors[0].message == "Invalid number literal '1a'."


def test_scan_errors_are_logged(caplog):
    with caplog.at_level(logging.ERROR, logger="lox.scanner"):
        Scanner("$").scan_tokens()
    assert "Unexpected character" in caplog.text


def test_scan_raises_first_error():
    with pytest.raises(ScanError, match="Unterminated string"):
        scan('"abc')


def test_empty_source_has_eof():
    assert scan("") == [Token(T.EOF, None, None, 1)]


def test_eof_is_added_once():
    scanner = Scanner("print 1;")
    first = scanner.scan_tokens()
    assert scanner.scan_tokens() is first
    assert [t.type for t in first].count(T.EOF) == 1


def test_rescanning_is_deterministic():
    src = 'fun f(a) { return a * 2; } print f(21) == 42; // done\n"x"'
    assert scan(src) == scan(src)
