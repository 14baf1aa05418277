"""
Interpretador que percorre a árvore sintática.

O interpretador mantém o contexto corrente em `self.ctx`. Blocos, chamadas de
função e chamadas de método criam contextos filhos, e o contexto anterior é
sempre restaurado ao sair do bloco, inclusive durante um `return` ou erro.
"""

import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, TextIO

from . import runtime as op
from .ast import *
from .ctx import Ctx
from .errors import (
    ArityError,
    LoxRuntimeError,
    NotAnInstanceError,
    NotCallableError,
    StackOverflowError,
)
from .parser import Parser
from .runtime import LoxCallable, LoxClass, LoxFunction, LoxInstance, LoxReturn
from .scanner import Scanner
from .tokens import Token, TokenType as T

__all__ = ["Interpreter", "CapturePrint", "run"]

logger = logging.getLogger(__name__)

# Cada chamada Lox ocupa uns 10 quadros da pilha do Python.
RECURSION_LIMIT = 8000

BINARY_OPS = {
    T.PLUS: op.add,
    T.MINUS: op.sub,
    T.STAR: op.mul,
    T.SLASH: op.truediv,
    T.GREATER: op.gt,
    T.GREATER_EQUAL: op.ge,
    T.LESS: op.lt,
    T.LESS_EQUAL: op.le,
    T.EQUAL_EQUAL: op.eq,
    T.BANG_EQUAL: op.ne,
}

UNARY_OPS = {
    T.MINUS: op.neg,
    T.BANG: op.not_,
}


@dataclass
class CapturePrint:
    """
    Guarda o último valor impresso pelo comando `print`.

    Usado pelos testes para inspecionar o valor bruto, antes da conversão para
    texto.
    """

    captured: bool = False
    value: "Value" = None

    def __call__(self, value: "Value"):
        self.captured = True
        self.value = value


class Interpreter:
    """
    Executa uma lista de comandos contra o contexto global.
    """

    def __init__(self, stdout: Optional[TextIO] = None, capture: Optional[CapturePrint] = None):
        self.stdout = stdout
        self.capture = capture
        self.globals = Ctx()
        self.ctx = self.globals
        for native in op.NATIVES:
            self.globals.define(native.name, native)

    def interpret(self, stmts: Iterable[Stmt]):
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(limit, RECURSION_LIMIT))
        try:
            for stmt in stmts:
                self.execute(stmt)
        finally:
            sys.setrecursionlimit(limit)

    def execute(self, stmt: Stmt):
        stmt.accept(self)

    def evaluate(self, expr: Expr) -> Value:
        return expr.accept(self)

    @contextmanager
    def scope(self, ctx: Ctx) -> Iterator[Ctx]:
        """
        Troca o contexto corrente durante o bloco `with`.
        """
        previous = self.ctx
        self.ctx = ctx
        try:
            yield ctx
        finally:
            self.ctx = previous

    def execute_block(self, stmts: Iterable[Stmt], ctx: Ctx):
        with self.scope(ctx):
            for stmt in stmts:
                self.execute(stmt)

    #
    # COMANDOS
    #
    def visit_expression(self, stmt: Expression):
        self.evaluate(stmt.expr)

    def visit_print(self, stmt: Print):
        value = self.evaluate(stmt.expr)
        print(op.show(value), file=self.stdout or sys.stdout)
        if self.capture is not None:
            self.capture(value)

    def visit_var_def(self, stmt: VarDef):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)
        self.ctx.define(stmt.name.lexeme, value)

    def visit_block(self, stmt: Block):
        self.execute_block(stmt.stmts, self.ctx.push())

    def visit_if(self, stmt: If):
        if op.truthy(self.evaluate(stmt.cond)):
            self.execute(stmt.then)
        elif stmt.orelse is not None:
            self.execute(stmt.orelse)

    def visit_while(self, stmt: While):
        while op.truthy(self.evaluate(stmt.cond)):
            self.execute(stmt.body)

    def visit_function(self, stmt: Function):
        self.ctx.define(stmt.name.lexeme, LoxFunction(stmt))

    def visit_return(self, stmt: Return):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)
        raise LoxReturn(value)

    def visit_class(self, stmt: Class):
        methods = {method.name.lexeme: LoxFunction(method) for method in stmt.methods}
        self.ctx.define(stmt.name.lexeme, LoxClass(stmt.name.lexeme, methods))

    #
    # EXPRESSÕES
    #
    def visit_literal(self, expr: Literal) -> Value:
        return expr.value

    def visit_grouping(self, expr: Grouping) -> Value:
        return self.evaluate(expr.expr)

    def visit_unary_op(self, expr: UnaryOp) -> Value:
        value = self.evaluate(expr.expr)
        with located(expr.op):
            return UNARY_OPS[expr.op.type](value)

    def visit_bin_op(self, expr: BinOp) -> Value:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        with located(expr.op):
            return BINARY_OPS[expr.op.type](left, right)

    def visit_logical(self, expr: Logical) -> Value:
        left = self.evaluate(expr.left)
        if expr.op.type == T.OR:
            if op.truthy(left):
                return left
        elif not op.truthy(left):
            return left
        return self.evaluate(expr.right)

    def visit_var(self, expr: Var) -> Value:
        with located(expr.name):
            return self.ctx.read(expr.name.lexeme)

    def visit_assign(self, expr: Assign) -> Value:
        value = self.evaluate(expr.value)
        with located(expr.name):
            self.ctx.assign(expr.name.lexeme, value)
        return value

    def visit_call(self, expr: Call) -> Value:
        callee = self.evaluate(expr.callee)
        args = [self.evaluate(arg) for arg in expr.args]

        if not isinstance(callee, LoxCallable):
            raise NotCallableError(f"{op.show(callee)} is not callable.", expr.paren.line)
        if len(args) != callee.arity():
            msg = f"Expected {callee.arity()} arguments but got {len(args)}."
            raise ArityError(msg, expr.paren.line)

        with located(expr.paren):
            try:
                return callee.call(self, args)
            except RecursionError:
                raise StackOverflowError("Stack overflow.", expr.paren.line) from None

    def visit_getattr(self, expr: Getattr) -> Value:
        obj = self.evaluate(expr.obj)
        if not isinstance(obj, LoxInstance):
            raise NotAnInstanceError("Only instances have properties.", expr.name.line)
        with located(expr.name):
            return obj.get(expr.name.lexeme)

    def visit_setattr(self, expr: Setattr) -> Value:
        obj = self.evaluate(expr.obj)
        if not isinstance(obj, LoxInstance):
            raise NotAnInstanceError("Only instances have fields.", expr.name.line)
        value = self.evaluate(expr.value)
        with located(expr.name):
            obj.set(expr.name.lexeme, value)
        return value

    def visit_this(self, expr: This) -> Value:
        with located(expr.keyword):
            return self.ctx.read("this")


@contextmanager
def located(token: Token) -> Iterator[None]:
    """
    Associa erros de execução sem linha à linha do token.
    """
    try:
        yield
    except LoxRuntimeError as error:
        raise error.at_line(token.line)


def run(
    source: str,
    stdout: Optional[TextIO] = None,
    capture: Optional[CapturePrint] = None,
    interpreter: Optional[Interpreter] = None,
) -> Interpreter:
    """
    Executa o pipeline completo: scanner, parser e interpretador.

    Erros léxicos são acumulados e o primeiro deles aborta o pipeline antes da
    análise sintática.
    """
    scanner = Scanner(source)
    tokens = scanner.scan_tokens()
    if scanner.errors:
        raise scanner.errors[0]
    logger.debug("scanned %d tokens", len(tokens))

    stmts = Parser(tokens).parse()
    logger.debug("parsed %d statements", len(stmts))

    if interpreter is None:
        interpreter = Interpreter(stdout=stdout, capture=capture)
    interpreter.interpret(stmts)
    return interpreter
