import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

from .errors import (
    InitializerReturnError,
    LoxTypeError,
    ReservedNameError,
    UndefinedPropertyError,
)

if TYPE_CHECKING:
    from .ast import Function, Value
    from .interpreter import Interpreter

__all__ = [
    "add",
    "eq",
    "ge",
    "gt",
    "le",
    "lt",
    "mul",
    "ne",
    "neg",
    "not_",
    "show",
    "sub",
    "truthy",
    "truediv",
    "is_number",
    "LoxCallable",
    "NativeFunction",
    "LoxFunction",
    "LoxInstance",
    "LoxClass",
    "LoxReturn",
    "NATIVES",
]


class LoxReturn(Exception):
    """
    Sinal de controle usado pelo comando `return`.

    Não é um erro: é capturado na chamada de função mais próxima.
    """

    value: "Value"

    def __init__(self, value: "Value"):
        self.value = value
        super().__init__()


class LoxCallable(ABC):
    """
    Classe base para todos os valores que podem ser chamados.
    """

    @abstractmethod
    def arity(self) -> int:
        """Número de argumentos esperados"""

    @abstractmethod
    def call(self, interpreter: "Interpreter", args: list["Value"]) -> "Value":
        """
        Executa a chamada. O número de argumentos já foi verificado por quem
        chama.
        """


@dataclass(eq=False)
class NativeFunction(LoxCallable):
    """
    Função implementada em Python.
    """

    name: str
    n_args: int
    impl: Callable[..., "Value"]

    def arity(self) -> int:
        return self.n_args

    def call(self, interpreter: "Interpreter", args: list["Value"]) -> "Value":
        return self.impl(*args)

    def __str__(self):
        return "<native fn>"


@dataclass(eq=False)
class LoxFunction(LoxCallable):
    """
    Representa uma função lox em tempo de execução.

    Funções obtidas a partir de uma instância carregam essa instância em
    `this`, que é injetada no escopo da chamada.
    """

    declaration: "Function"
    this: Optional["LoxInstance"] = None

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: "Interpreter", args: list["Value"]) -> "Value":
        # O escopo da chamada é filho do contexto atual do interpretador, ou
        # seja, do contexto no momento da chamada e não da declaração.
        names = [param.lexeme for param in self.declaration.params]
        scope = dict(zip(names, args, strict=True))
        if self.this is not None:
            scope["this"] = self.this

        try:
            interpreter.execute_block(self.declaration.body, interpreter.ctx.push(scope))
        except LoxReturn as ret:
            return ret.value
        return None

    def bind(self, instance: "LoxInstance") -> "LoxFunction":
        """
        Cria uma nova LoxFunction com 'this' ligado à instância especificada.
        """
        return LoxFunction(self.declaration, instance)

    def __str__(self):
        return f"<fn {self.name}>"


@dataclass(eq=False)
class LoxClass(LoxCallable):
    """
    Classe para representar classes Lox.
    """

    name: str
    methods: dict[str, LoxFunction] = field(default_factory=dict)

    def find_method(self, name: str) -> Optional[LoxFunction]:
        return self.methods.get(name)

    def arity(self) -> int:
        init = self.find_method("init")
        if init is None:
            return 0
        return init.arity()

    def call(self, interpreter: "Interpreter", args: list["Value"]) -> "LoxInstance":
        instance = LoxInstance(self)

        # Se a classe tem um método init, chama-lo automaticamente
        init = self.find_method("init")
        if init is not None:
            result = init.bind(instance).call(interpreter, args)
            if result is not None:
                raise InitializerReturnError("Can't return a value from an initializer.")
        return instance

    def __str__(self):
        return self.name


class LoxInstance:
    """
    Instância de uma classe Lox.

    Instâncias são comparadas por identidade.
    """

    def __init__(self, lox_class: LoxClass):
        self.lox_class = lox_class
        self.fields: dict[str, "Value"] = {}

    def get(self, name: str) -> "Value":
        """
        Obtém um campo ou método (já ligado à instância).
        """
        if name in self.fields:
            return self.fields[name]

        method = self.lox_class.find_method(name)
        if method is not None:
            return method.bind(self)
        raise UndefinedPropertyError(f"Undefined property '{name}'.")

    def set(self, name: str, value: "Value"):
        """
        Define um campo da instância.
        """
        if name == "this":
            raise ReservedNameError("Can't use 'this' as a property name.")
        self.fields[name] = value

    def __str__(self):
        return f"{self.lox_class.name} instance"

    def __repr__(self):
        return f"<{self}>"


#
# VALORES
#
def show(value: "Value") -> str:
    """
    Converte valor lox para string.
    """
    if value is None:
        return "nil"
    elif value is True:
        return "true"
    elif value is False:
        return "false"
    elif isinstance(value, (int, float)):
        return str(float(value))
    return str(value)


def truthy(value: "Value") -> bool:
    """
    Converte valor lox para booleano segundo a semântica do lox.
    """
    if value is None or value is False:
        return False
    return True


def is_number(value: "Value") -> bool:
    # bool é subclasse de int em Python
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_numbers(*values: "Value"):
    if not all(is_number(value) for value in values):
        if len(values) == 1:
            raise LoxTypeError("Operand must be a number.")
        raise LoxTypeError("Operands must be numbers.")


#
# OPERAÇÕES
#
def add(left: "Value", right: "Value") -> float:
    _check_numbers(left, right)
    return left + right


def sub(left: "Value", right: "Value") -> float:
    _check_numbers(left, right)
    return left - right


def mul(left: "Value", right: "Value") -> float:
    _check_numbers(left, right)
    return left * right


def truediv(left: "Value", right: "Value") -> float:
    """Divisão com semântica IEEE 754: x/0 resulta em inf, -inf ou nan"""
    _check_numbers(left, right)
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def neg(value: "Value") -> float:
    _check_numbers(value)
    return -value


def gt(left: "Value", right: "Value") -> bool:
    _check_numbers(left, right)
    return left > right


def ge(left: "Value", right: "Value") -> bool:
    _check_numbers(left, right)
    return left >= right


def lt(left: "Value", right: "Value") -> bool:
    _check_numbers(left, right)
    return left < right


def le(left: "Value", right: "Value") -> bool:
    _check_numbers(left, right)
    return left <= right


def eq(left: "Value", right: "Value") -> bool:
    """Igualdade estrita em Lox - não aceita conversões de tipo"""
    if left is None or right is None:
        return left is None and right is None
    if is_number(left) and is_number(right):
        return left == right
    # Em Lox, valores de tipos diferentes são sempre diferentes
    if type(left) != type(right):
        return False
    return left == right


def ne(left: "Value", right: "Value") -> bool:
    return not eq(left, right)


def not_(value: "Value") -> bool:
    return not truthy(value)


#
# FUNÇÕES NATIVAS
#
def _clock() -> float:
    return time.time()


def _sqrt(value: "Value") -> float:
    _check_numbers(value)
    if value < 0:
        return math.nan
    return math.sqrt(value)


NATIVES: tuple[NativeFunction, ...] = (
    NativeFunction("clock", 0, _clock),
    NativeFunction("sqrt", 1, _sqrt),
)
