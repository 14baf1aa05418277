import io

import pytest

from lox import CapturePrint, run


@pytest.fixture
def run_capture():
    """
    Executa um programa e retorna o último valor impresso.
    """

    def runner(src: str):
        capture = CapturePrint()
        run(src, stdout=io.StringIO(), capture=capture)
        return capture.value

    return runner


@pytest.fixture
def run_output():
    """
    Executa um programa e retorna a saída como lista de linhas.
    """

    def runner(src: str) -> list[str]:
        stdout = io.StringIO()
        run(src, stdout=stdout)
        return stdout.getvalue().splitlines()

    return runner
