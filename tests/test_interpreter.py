"""
Testes do interpretador construindo a árvore sintática diretamente, sem passar
pelo scanner e pelo parser.
"""

import io

import pytest

from lox.ast import *
from lox.errors import LoxTypeError, UndefinedVariableError
from lox.interpreter import CapturePrint, Interpreter
from lox.tokens import Token, TokenType as T

LEXEMES = {
    T.PLUS: "+",
    T.MINUS: "-",
    T.STAR: "*",
    T.SLASH: "/",
    T.BANG: "!",
    T.EQUAL_EQUAL: "==",
    T.BANG_EQUAL: "!=",
    T.LESS: "<",
    T.AND: "and",
    T.OR: "or",
    T.RIGHT_PAREN: ")",
}


def tok(kind: T, lexeme: str | None = None, line: int = 1) -> Token:
    return Token(kind, lexeme or LEXEMES[kind], None, line)


def name(lexeme: str) -> Token:
    return Token(T.IDENTIFIER, lexeme, None, 1)


def lit(value) -> Literal:
    return Literal(value)


def execute(*stmts: Stmt) -> CapturePrint:
    capture = CapturePrint()
    Interpreter(stdout=io.StringIO(), capture=capture).interpret(stmts)
    return capture


def printed(expr: Expr):
    capture = execute(Print(expr))
    assert capture.captured
    return capture.value


def test_sum_vars():
    # var x = 5; print x + x;
    capture = execute(
        VarDef(name("x"), lit(5.0)),
        Print(BinOp(Var(name("x")), tok(T.PLUS), Var(name("x")))),
    )
    assert capture.value == 10.0


def test_var_decl_and_grouping():
    # var x = 2; print x * (-5 + 1);
    capture = execute(
        VarDef(name("x"), lit(2.0)),
        Print(
            BinOp(
                Var(name("x")),
                tok(T.STAR),
                Grouping(BinOp(UnaryOp(tok(T.MINUS), lit(5.0)), tok(T.PLUS), lit(1.0))),
            )
        ),
    )
    assert capture.value == -8.0


@pytest.mark.parametrize(
    "value, expected",
    [(1.0, False), (0.0, False), (-5.0, False), (True, False), (False, True), (None, True), ("", False)],
)
def test_unary_bang(value, expected):
    # print !value == true;
    expr = BinOp(UnaryOp(tok(T.BANG), lit(value)), tok(T.EQUAL_EQUAL), lit(True))
    assert printed(expr) is expected


def test_unary_minus():
    expr = BinOp(UnaryOp(tok(T.MINUS), lit(10.0)), tok(T.SLASH), lit(2.0))
    assert printed(expr) == -5.0


def test_unary_minus_requires_number():
    with pytest.raises(LoxTypeError) as info:
        printed(UnaryOp(tok(T.MINUS, line=7), lit("x")))
    assert info.value.line == 7


@pytest.mark.parametrize(
    "kind, expected",
    [(T.PLUS, 3.0), (T.MINUS, -1.0), (T.STAR, 2.0), (T.SLASH, 0.5), (T.LESS, True), (T.BANG_EQUAL, True), (T.EQUAL_EQUAL, False)],
)
def test_binary_operators(kind, expected):
    assert printed(BinOp(lit(1.0), tok(kind), lit(2.0))) == expected


def test_right_grouping():
    # 1 + (2 - 5)
    expr = BinOp(lit(1.0), tok(T.PLUS), BinOp(lit(2.0), tok(T.MINUS), lit(5.0)))
    assert printed(expr) == -2.0


def test_compare_expressions():
    # 10 + 5 == 115 - 100
    expr = BinOp(
        BinOp(lit(10.0), tok(T.PLUS), lit(5.0)),
        tok(T.EQUAL_EQUAL),
        BinOp(lit(115.0), tok(T.MINUS), lit(100.0)),
    )
    assert printed(expr) is True


@pytest.mark.parametrize("kind", [T.PLUS, T.MINUS, T.STAR, T.SLASH])
def test_number_and_nil(kind):
    with pytest.raises(LoxTypeError):
        printed(BinOp(lit(1.0), tok(kind), lit(None)))


def test_binary_evaluates_both_sides():
    # print (a = 1) == (b = 2); os dois lados são avaliados
    capture = execute(
        VarDef(name("a")),
        VarDef(name("b")),
        Print(BinOp(Assign(name("a"), lit(1.0)), tok(T.EQUAL_EQUAL), Assign(name("b"), lit(2.0)))),
        Print(Var(name("b"))),
    )
    assert capture.value == 2.0


def test_nil_equality():
    assert printed(BinOp(lit(None), tok(T.EQUAL_EQUAL), lit(None))) is True
    assert printed(BinOp(lit(None), tok(T.EQUAL_EQUAL), lit(1.0))) is False


def test_logical_short_circuit():
    # false and undefined; true or undefined
    undefined = Var(name("undefined"))
    assert printed(Logical(lit(False), tok(T.AND), undefined)) is False
    assert printed(Logical(lit(1.0), tok(T.OR), undefined)) == 1.0
    assert printed(Logical(lit(1.0), tok(T.AND), lit(5.0))) == 5.0
    assert printed(Logical(lit(None), tok(T.OR), lit("x"))) == "x"


def test_print_renders_value():
    stdout = io.StringIO()
    Interpreter(stdout=stdout).interpret(
        [Print(lit(None)), Print(lit(2.0)), Print(lit(True)), Print(lit("hi"))]
    )
    assert stdout.getvalue() == "nil\n2.0\ntrue\nhi\n"


def test_block_restores_ctx_after_error():
    interpreter = Interpreter(stdout=io.StringIO())
    block = Block((VarDef(name("x"), lit(1.0)), Print(Var(name("missing")))))
    with pytest.raises(UndefinedVariableError):
        interpreter.execute(block)
    assert interpreter.ctx is interpreter.globals
    assert "x" not in interpreter.globals


def test_while_loop():
    # var i = 0; while (i < 3) i = i + 1; print i;
    i = name("i")
    capture = execute(
        VarDef(i, lit(0.0)),
        While(BinOp(Var(i), tok(T.LESS), lit(3.0)), Expression(Assign(i, BinOp(Var(i), tok(T.PLUS), lit(1.0))))),
        Print(Var(i)),
    )
    assert capture.value == 3.0


def test_if_without_else():
    capture = execute(If(lit(False), Print(lit(1.0))))
    assert not capture.captured


def test_function_call_and_return():
    # fun double(x) { return x * 2; } print double(21);
    x = name("x")
    fn = Function(name("double"), (x,), (Return(tok(T.RETURN, "return"), BinOp(Var(x), tok(T.STAR), lit(2.0))),))
    call = Call(Var(name("double")), tok(T.RIGHT_PAREN), (lit(21.0),))
    assert execute(fn, Print(call)).value == 42.0


def test_natives_are_defined_in_globals():
    interpreter = Interpreter()
    assert "clock" in interpreter.globals
    assert "sqrt" in interpreter.globals
