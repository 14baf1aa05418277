"""
Executa exemplos escritos em Lox com as saídas esperadas anotadas em
comentários:

    print 1 + 2;  // expect: 3.0
    print x;      // expect runtime error: Undefined variable 'x'.

Um exemplo com o comentário `// expect error` deve falhar durante a análise
léxica ou sintática.
"""

import io
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import LoxError, LoxRuntimeError
from .interpreter import Interpreter, run

__all__ = ["Example"]

EXPECT_RE = re.compile(r"//\s*expect:\s?(.*)$")
RUNTIME_ERROR_RE = re.compile(r"//\s*expect runtime error:\s?(.*)$")
STATIC_ERROR_RE = re.compile(r"//\s*expect error\b")


@dataclass
class Example:
    """
    Um programa Lox com as saídas esperadas.
    """

    src: str
    path: Optional[Path] = None
    outputs: list[str] = field(init=False, default_factory=list)
    expect_runtime_error: Optional[str] = field(init=False, default=None)
    error: bool = field(init=False, default=False)

    def __post_init__(self):
        for line in self.src.splitlines():
            if m := RUNTIME_ERROR_RE.search(line):
                self.expect_runtime_error = m.group(1).strip()
            elif m := EXPECT_RE.search(line):
                self.outputs.append(m.group(1).rstrip())
            elif STATIC_ERROR_RE.search(line):
                self.error = True

    @classmethod
    def from_path(cls, path: Path | str) -> "Example":
        path = Path(path)
        return cls(path.read_text(encoding="utf-8"), path=path)

    def eval(self) -> tuple[Optional[Interpreter], str, Optional[LoxError]]:
        """
        Executa o exemplo e retorna (interpretador, saída, erro).

        O interpretador é None quando o programa não chegou a ser executado.
        """
        stdout = io.StringIO()
        interpreter = Interpreter(stdout=stdout)
        try:
            run(self.src, interpreter=interpreter)
        except LoxRuntimeError as exc:
            return interpreter, stdout.getvalue(), exc
        except LoxError as exc:
            return None, stdout.getvalue(), exc
        return interpreter, stdout.getvalue(), None

    def check(self):
        """
        Executa o exemplo e levanta AssertionError se o resultado for diferente
        do esperado.
        """
        interpreter, stdout, err = self.eval()
        name = self.path or "<example>"

        if self.error:
            if interpreter is not None or err is None:
                raise AssertionError(f"{name}: expected a static error")
            return

        lines = stdout.splitlines()
        if lines != self.outputs:
            raise AssertionError(f"{name}: expected {self.outputs!r}, got {lines!r}")

        if self.expect_runtime_error is not None:
            if not isinstance(err, LoxRuntimeError):
                raise AssertionError(f"{name}: expected a runtime error, got {err!r}")
            if err.message != self.expect_runtime_error:
                raise AssertionError(f"{name}: got {err.message!r}")
        elif err is not None:
            raise AssertionError(f"{name}: unexpected error: {err}")
