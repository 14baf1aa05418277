"""
Classe base para os nós da árvore sintática.

Cada nó sabe despachar para o método correspondente de um visitante
(`visit_<nome_do_nó>`) e consegue se representar como uma `lark.Tree`, o que
nos dá de graça a impressão da árvore de forma legível.
"""

import re
from dataclasses import fields
from typing import Any, Iterable

from lark import Tree

from .tokens import Token

__all__ = ["Node", "pretty"]


def snake_case(name: str) -> str:
    """
    Converte CamelCase para snake_case.

    Ex.: "BinOp" -> "bin_op", "VarDef" -> "var_def"
    """
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


class Node:
    """
    Classe base para expressões e comandos.
    """

    visit_name: str = "visit_node"

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.visit_name = f"visit_{snake_case(cls.__name__)}"

    def accept(self, visitor: Any) -> Any:
        """
        Chama visitor.visit_<nome_do_nó>(self).
        """
        method = getattr(visitor, self.visit_name)
        return method(self)

    def to_tree(self) -> Tree:
        children = []
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            children.append(_to_tree_child(value))
        return Tree(type(self).__name__, children)

    def pretty(self) -> str:
        return self.to_tree().pretty()


def _to_tree_child(value):
    if isinstance(value, Node):
        return value.to_tree()
    if isinstance(value, Token):
        return value.lexeme
    if isinstance(value, tuple):
        return Tree("list", [_to_tree_child(item) for item in value])
    if isinstance(value, str):
        return repr(value)
    return _show_literal(value)


def _show_literal(value) -> str:
    if value is True:
        return "true"
    if value is False:
        return "false"
    return str(value)


def pretty(stmts: Iterable[Node]) -> str:
    """
    Representa um programa (lista de comandos) como texto indentado.
    """
    return Tree("program", [stmt.to_tree() for stmt in stmts]).pretty()
