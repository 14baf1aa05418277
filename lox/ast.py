from abc import ABC
from dataclasses import dataclass
from typing import Callable, Optional

from lark import Tree

from .tokens import Token

# Declaramos nossa classe base num módulo separado para esconder um pouco de
# Python relativamente avançado de quem não se interessar pelo assunto.
#
# A classe Node implementa o método `accept`, que despacha para o visitante, e
# o método `pretty`, que imprime as árvores de forma legível.
from .node import Node

__all__ = [
    "Value",
    "Expr",
    "Stmt",
    "Literal",
    "Grouping",
    "UnaryOp",
    "BinOp",
    "Logical",
    "Var",
    "Assign",
    "Call",
    "Getattr",
    "Setattr",
    "This",
    "Expression",
    "Print",
    "VarDef",
    "Block",
    "If",
    "While",
    "Function",
    "Return",
    "Class",
]

#
# TIPOS BÁSICOS
#

# Tipos de valores que podem aparecer durante a execução do programa
Value = bool | str | float | None | Callable


class Expr(Node, ABC):
    """
    Classe base para expressões.

    Expressões são nós que podem ser avaliados para produzir um valor.
    Também podem ser atribuídos a variáveis, passados como argumentos para
    funções, etc.
    """


class Stmt(Node, ABC):
    """
    Classe base para comandos.

    Comandos são associados a construtos sintáticos que alteram o fluxo de
    execução do código ou declaram elementos como classes, funções, etc.
    """


#
# EXPRESSÕES
#
@dataclass(frozen=True)
class Literal(Expr):
    """
    Representa valores literais no código, ex.: strings, booleanos,
    números, etc.

    Ex.: "Hello, world!", 42, 3.14, true, nil
    """

    value: Value

    def to_tree(self) -> Tree:
        if self.value is None:
            return Tree("Literal", ["nil"])
        return super().to_tree()


@dataclass(frozen=True)
class Grouping(Expr):
    """
    Expressão entre parênteses.

    Ex.: (1 + 2)
    """

    expr: Expr


@dataclass(frozen=True)
class UnaryOp(Expr):
    """
    Uma operação prefixa com um operando.

    Ex.: -x, !x
    """

    op: Token
    expr: Expr


@dataclass(frozen=True)
class BinOp(Expr):
    """
    Uma operação infixa com dois operandos. Os dois lados são sempre avaliados.

    Ex.: x + y, 2 * x, 3.14 > 3
    """

    left: Expr
    op: Token
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    """
    Operações lógicas com curto-circuito.

    Ex.: x and y, x or y
    """

    left: Expr
    op: Token
    right: Expr


@dataclass(frozen=True)
class Var(Expr):
    """
    Uma variável no código

    Ex.: x, y, z
    """

    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    """
    Atribuição de variável.

    Ex.: x = 42
    """

    name: Token
    value: Expr


@dataclass(frozen=True)
class Call(Expr):
    """
    Uma chamada de função.

    Ex.: fat(42)
    """

    callee: Expr
    paren: Token
    args: tuple[Expr, ...] = ()


@dataclass(frozen=True)
class Getattr(Expr):
    """
    Acesso a atributo de um objeto.

    Ex.: x.y
    """

    obj: Expr
    name: Token


@dataclass(frozen=True)
class Setattr(Expr):
    """
    Atribuição de atributo de um objeto.

    Ex.: x.y = 42
    """

    obj: Expr
    name: Token
    value: Expr


@dataclass(frozen=True)
class This(Expr):
    """
    Acesso ao `this`.

    Ex.: this
    """

    keyword: Token


#
# COMANDOS
#
@dataclass(frozen=True)
class Expression(Stmt):
    """
    Representa uma expressão usada como comando.

    Ex.: f(x);
    """

    expr: Expr


@dataclass(frozen=True)
class Print(Stmt):
    """
    Representa uma instrução de impressão.

    Ex.: print "Hello, world!";
    """

    expr: Expr


@dataclass(frozen=True)
class VarDef(Stmt):
    """
    Representa uma declaração de variável.

    Ex.: var x = 42;
    """

    name: Token
    value: Optional[Expr] = None


@dataclass(frozen=True)
class Block(Stmt):
    """
    Representa bloco de comandos.

    Ex.: { var x = 42; print x;  }
    """

    stmts: tuple[Stmt, ...] = ()


@dataclass(frozen=True)
class If(Stmt):
    """
    Representa uma instrução condicional.

    Ex.: if (x > 0) { ... } else { ... }
    """

    cond: Expr
    then: Stmt
    orelse: Optional[Stmt] = None


@dataclass(frozen=True)
class While(Stmt):
    """
    Representa um laço de repetição.

    O laço `for` não tem nó próprio: o parser o reescreve como um `While`.

    Ex.: while (x > 0) { ... }
    """

    cond: Expr
    body: Stmt


@dataclass(frozen=True)
class Function(Stmt):
    """
    Representa uma função.

    Ex.: fun f(x, y) { ... }
    """

    name: Token
    params: tuple[Token, ...]
    body: tuple[Stmt, ...]


@dataclass(frozen=True)
class Return(Stmt):
    """
    Representa uma instrução de retorno.

    Ex.: return x;
    """

    keyword: Token
    value: Optional[Expr] = None


@dataclass(frozen=True)
class Class(Stmt):
    """
    Representa uma classe.

    Ex.: class A { init(x) { this.x = x; } }
    """

    name: Token
    methods: tuple[Function, ...] = ()
