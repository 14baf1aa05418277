"""
Analisador sintático descendente recursivo.

Gramática (da menor para a maior precedência nas expressões):

    program     → declaration* EOF ;
    declaration → classDecl | funDecl | varDecl | statement ;
    classDecl   → "class" IDENTIFIER "{" function* "}" ;
    funDecl     → "fun" function ;
    function    → IDENTIFIER "(" parameters? ")" block ;
    parameters  → IDENTIFIER ( "," IDENTIFIER )* ;
    varDecl     → "var" IDENTIFIER ( "=" expression )? ";" ;
    statement   → exprStmt | forStmt | ifStmt | printStmt | returnStmt
                | whileStmt | block ;
    forStmt     → "for" "(" ( varDecl | exprStmt | ";" )
                  expression? ";" expression? ")" statement ;
    block       → "{" declaration* "}" ;
    expression  → assignment ;
    assignment  → ( call "." )? IDENTIFIER "=" assignment | logic_or ;
    logic_or    → logic_and ( "or" logic_and )* ;
    logic_and   → equality ( "and" equality )* ;
    equality    → comparison ( ( "!=" | "==" ) comparison )* ;
    comparison  → term ( ( ">" | ">=" | "<" | "<=" ) term )* ;
    term        → factor ( ( "-" | "+" ) factor )* ;
    factor      → unary ( ( "/" | "*" ) unary )* ;
    unary       → ( "!" | "-" ) unary | call ;
    call        → primary ( "(" arguments? ")" | "." IDENTIFIER )* ;
    primary     → NUMBER | STRING | "true" | "false" | "nil" | "this"
                | IDENTIFIER | "(" expression ")" ;
"""

import logging
from typing import Callable, Optional

from .ast import *
from .errors import ParseError
from .scanner import scan
from .tokens import Token, TokenType as T

__all__ = ["Parser", "parse", "MAX_ARGS"]

logger = logging.getLogger(__name__)

MAX_ARGS = 255

EQUALITY_OPS = (T.EQUAL_EQUAL, T.BANG_EQUAL)
COMPARISON_OPS = (T.GREATER, T.GREATER_EQUAL, T.LESS, T.LESS_EQUAL)
TERM_OPS = (T.MINUS, T.PLUS)
FACTOR_OPS = (T.SLASH, T.STAR)


class Parser:
    """
    Converte uma lista de tokens numa lista de comandos.

    O primeiro erro interrompe a análise com um ParseError.
    """

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.current = 0

    def parse(self) -> list[Stmt]:
        stmts = []
        while not self.at_end():
            stmts.append(self.declaration())
        return stmts

    #
    # DECLARAÇÕES
    #
    def declaration(self) -> Stmt:
        if self.match(T.CLASS):
            return self.class_declaration()
        if self.match(T.FUN):
            return self.function()
        if self.match(T.VAR):
            return self.var_declaration()
        return self.statement()

    def class_declaration(self) -> Class:
        name = self.consume(T.IDENTIFIER, "Expect class name.")
        self.consume(T.LEFT_BRACE, "Expect '{' before class body.")

        methods = []
        while not self.check(T.RIGHT_BRACE) and not self.at_end():
            methods.append(self.function())

        self.consume(T.RIGHT_BRACE, "Expect '}' after class body.")
        return Class(name, tuple(methods))

    def function(self) -> Function:
        name = self.consume(T.IDENTIFIER, "Expect function name.")
        self.consume(T.LEFT_PAREN, "Expect '(' after function name.")
        params = []
        if not self.check(T.RIGHT_PAREN):
            params.append(self.consume(T.IDENTIFIER, "Expect parameter name."))
            while self.match(T.COMMA):
                params.append(self.consume(T.IDENTIFIER, "Expect parameter name."))
        self.consume(T.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(T.LEFT_BRACE, "Expect '{' before function body.")
        body = self.block()
        return Function(name, tuple(params), tuple(body))

    def var_declaration(self) -> VarDef:
        name = self.consume(T.IDENTIFIER, "Expect variable name.")
        value = None
        if self.match(T.EQUAL):
            value = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after variable declaration.")
        return VarDef(name, value)

    #
    # COMANDOS
    #
    def statement(self) -> Stmt:
        if self.match(T.FOR):
            return self.for_statement()
        if self.match(T.IF):
            return self.if_statement()
        if self.match(T.PRINT):
            return self.print_statement()
        if self.match(T.RETURN):
            return self.return_statement()
        if self.match(T.WHILE):
            return self.while_statement()
        if self.match(T.LEFT_BRACE):
            return Block(tuple(self.block()))
        return self.expression_statement()

    def for_statement(self) -> Stmt:
        """
        Transforma for (init; cond; incr) body em:
        {
            init;
            while (cond) {
                body;
                incr;
            }
        }
        """
        self.consume(T.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(T.SEMICOLON):
            init = None
        elif self.match(T.VAR):
            init = self.var_declaration()
        else:
            init = self.expression_statement()

        cond = None
        if not self.check(T.SEMICOLON):
            cond = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after loop condition.")

        incr = None
        if not self.check(T.RIGHT_PAREN):
            incr = self.expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()
        return for_to_while(init, cond, incr, body)

    def if_statement(self) -> If:
        self.consume(T.LEFT_PAREN, "Expect '(' after 'if'.")
        cond = self.expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after if condition.")

        then = self.statement()
        orelse = None
        if self.match(T.ELSE):
            orelse = self.statement()
        return If(cond, then, orelse)

    def print_statement(self) -> Print:
        value = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def return_statement(self) -> Return:
        keyword = self.previous()
        value = None
        if not self.check(T.SEMICOLON):
            value = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def while_statement(self) -> While:
        self.consume(T.LEFT_PAREN, "Expect '(' after 'while'.")
        cond = self.expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after condition.")
        return While(cond, self.statement())

    def block(self) -> list[Stmt]:
        stmts = []
        while not self.check(T.RIGHT_BRACE) and not self.at_end():
            stmts.append(self.declaration())
        self.consume(T.RIGHT_BRACE, "Expect '}' after block.")
        return stmts

    def expression_statement(self) -> Expression:
        expr = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    #
    # EXPRESSÕES
    #
    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.logic_or()

        if self.match(T.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, Var):
                return Assign(expr.name, value)
            if isinstance(expr, Getattr):
                return Setattr(expr.obj, expr.name, value)
            raise ParseError("Invalid assignment target.", equals.line)

        return expr

    def logic_or(self) -> Expr:
        return self._logical(self.logic_and, T.OR)

    def logic_and(self) -> Expr:
        return self._logical(self.equality, T.AND)

    def equality(self) -> Expr:
        return self._binary(self.comparison, EQUALITY_OPS)

    def comparison(self) -> Expr:
        return self._binary(self.term, COMPARISON_OPS)

    def term(self) -> Expr:
        return self._binary(self.factor, TERM_OPS)

    def factor(self) -> Expr:
        return self._binary(self.unary, FACTOR_OPS)

    def _binary(self, operand: Callable[[], Expr], ops: tuple[T, ...]) -> Expr:
        # Associatividade à esquerda: (a - b) - c
        expr = operand()
        while self.match(*ops):
            op = self.previous()
            expr = BinOp(expr, op, operand())
        return expr

    def _logical(self, operand: Callable[[], Expr], kind: T) -> Expr:
        expr = operand()
        while self.match(kind):
            op = self.previous()
            expr = Logical(expr, op, operand())
        return expr

    def unary(self) -> Expr:
        if self.match(T.BANG, T.MINUS):
            op = self.previous()
            return UnaryOp(op, self.unary())
        return self.call()

    def call(self) -> Expr:
        expr = self.primary()
        while True:
            if self.match(T.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(T.DOT):
                name = self.consume(T.IDENTIFIER, "Expect property name after '.'.")
                expr = Getattr(expr, name)
            else:
                return expr

    def finish_call(self, callee: Expr) -> Call:
        args = []
        if not self.check(T.RIGHT_PAREN):
            args.append(self.expression())
            while self.match(T.COMMA):
                args.append(self.expression())
        paren = self.consume(T.RIGHT_PAREN, "Expect ')' after arguments.")

        if len(args) > MAX_ARGS:
            logger.warning("[line %d] Can't have more than %d arguments.", paren.line, MAX_ARGS)
        return Call(callee, paren, tuple(args))

    def primary(self) -> Expr:
        if self.match(T.FALSE, T.TRUE, T.NUMBER, T.STRING):
            return Literal(self.previous().literal)
        if self.match(T.NIL):
            return Literal(None)
        if self.match(T.THIS):
            return This(self.previous())
        if self.match(T.IDENTIFIER):
            return Var(self.previous())
        if self.match(T.LEFT_PAREN):
            expr = self.expression()
            self.consume(T.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise self.error("Expect expression.")

    #
    # FUNÇÕES AUXILIARES
    #
    def match(self, *kinds: T) -> bool:
        if any(self.check(kind) for kind in kinds):
            self.current += 1
            return True
        return False

    def check(self, kind: T) -> bool:
        if self.at_end():
            return False
        return self.tokens[self.current].type == kind

    def consume(self, kind: T, message: str) -> Token:
        if self.check(kind):
            self.current += 1
            return self.previous()
        raise self.error(message)

    def previous(self) -> Token:
        return self.tokens[self.current - 1]

    def at_end(self) -> bool:
        # Aceita listas de tokens sem EOF no final
        if self.current >= len(self.tokens):
            return True
        return self.tokens[self.current].type == T.EOF

    def error(self, message: str) -> ParseError:
        if self.at_end():
            line = self.tokens[-1].line if self.tokens else None
            return ParseError(f"Error at end: {message}", line)
        token = self.tokens[self.current]
        return ParseError(f"Error at '{token.lexeme}': {message}", token.line)


def for_to_while(
    init: Optional[Stmt], cond: Optional[Expr], incr: Optional[Expr], body: Stmt
) -> Block:
    if cond is None:
        cond = Literal(True)

    loop_body = [body]
    if incr is not None:
        loop_body.append(Expression(incr))

    stmts = []
    if init is not None:
        stmts.append(init)
    stmts.append(While(cond, Block(tuple(loop_body))))
    return Block(tuple(stmts))


def parse(src: str | list[Token]) -> list[Stmt]:
    """
    Converte código fonte (ou uma lista de tokens) em uma lista de comandos.
    """
    tokens = scan(src) if isinstance(src, str) else src
    return Parser(tokens).parse()
