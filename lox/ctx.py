from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Optional

from .errors import UndefinedVariableError

if TYPE_CHECKING:
    from .ast import Value

__all__ = ["Ctx", "ScopeDict", "pretty_scope"]

ScopeDict = dict[str, "Value"]


@dataclass(eq=False)
class Ctx:
    """
    Contexto de execução. Cada contexto guarda um dicionário com os nomes das
    variáveis e seus respectivos valores e aponta para o contexto pai.

    A cadeia de contextos termina no escopo global.
    """

    scope: ScopeDict = field(default_factory=dict)
    parent: Optional["Ctx"] = None

    @classmethod
    def from_dict(cls, env: ScopeDict, parent: Optional["Ctx"] = None) -> "Ctx":
        """
        Cria um novo contexto a partir de um dicionário.
        """
        return cls(dict(env), parent)

    def define(self, name: str, value: "Value" = None):
        """
        Define uma nova variável no escopo atual.

        Redefinir uma variável no mesmo escopo sobrescreve o valor anterior.
        """
        self.scope[name] = value

    def read(self, name: str) -> "Value":
        """Busca uma variável no escopo atual ou nos escopos pais"""
        ctx = self
        while ctx is not None:
            if name in ctx.scope:
                return ctx.scope[name]
            ctx = ctx.parent
        raise UndefinedVariableError(f"Undefined variable '{name}'.")

    def assign(self, name: str, value: "Value"):
        """
        Define o valor de uma variável existente no escopo atual ou em um escopo pai.
        Se a variável não existir em nenhum escopo, lança UndefinedVariableError.
        """
        ctx = self
        while ctx is not None:
            if name in ctx.scope:
                ctx.scope[name] = value
                return
            ctx = ctx.parent
        raise UndefinedVariableError(f"Undefined variable '{name}'.")

    def __getitem__(self, name: str) -> "Value":
        return self.read(name)

    def __setitem__(self, name: str, value: "Value"):
        self.assign(name, value)

    def __contains__(self, name: str) -> bool:
        return any(name in scope for scope in self.iter_scopes())

    def push(self, scope: Optional[ScopeDict] = None) -> "Ctx":
        """Cria um novo contexto com um novo escopo, tendo o contexto atual como pai"""
        return Ctx(scope if scope is not None else {}, self)

    def iter_scopes(self, reverse: bool = False) -> Iterator[ScopeDict]:
        """
        Percorre os escopos da cadeia, do mais interno para o global.

        Com reverse=True, começa pelo escopo global.
        """
        chain = []
        ctx: Optional[Ctx] = self
        while ctx is not None:
            chain.append(ctx.scope)
            ctx = ctx.parent
        return reversed(chain) if reverse else iter(chain)

    def to_dict(self) -> ScopeDict:
        """
        Achata a cadeia num único dicionário; nomes internos escondem os externos.
        """
        flat: ScopeDict = {}
        for scope in self.iter_scopes(reverse=True):
            flat.update(scope)
        return flat

    def pretty(self) -> str:
        """
        Um escopo por linha, com o mais interno no topo e o global (0) embaixo.
        """
        scopes = list(self.iter_scopes(reverse=True))
        depth = len(scopes)
        return "\n".join(pretty_scope(scopes[i], i) for i in reversed(range(depth)))


def pretty_scope(env: ScopeDict, index: int) -> str:
    from .runtime import show

    if not env:
        return f"{index:>2}: <empty>"
    data = "; ".join(f"{k} = {show(v)}" for k, v in sorted(env.items()))
    return f"{index:>2}: {data}"
