"""Shared fixtures for the interpreter test suite."""

import pytest

from tlox.errors import ErrorReporter
from tlox.interpreter import Interpreter
from tlox.lox import Lox
from tlox.parser import Parser
from tlox.resolver import Resolver
from tlox.scanner import Scanner


@pytest.fixture
def reporter():
    return ErrorReporter()


@pytest.fixture
def lox(reporter):
    return Lox(reporter)


@pytest.fixture
def run(lox, capsys):
    """Run source in the session and return what it printed to stdout."""
    def _run(source: str) -> str:
        lox.run(source)
        return capsys.readouterr().out
    return _run


@pytest.fixture
def parse(reporter):
    def _parse(source: str):
        tokens = Scanner(source, reporter).scan_tokens()
        return Parser(tokens, reporter).parse()
    return _parse


@pytest.fixture
def resolve(parse, reporter):
    """Parse and resolve source; returns (interpreter, statements)."""
    def _resolve(source: str):
        interpreter = Interpreter(reporter)
        statements = parse(source)
        Resolver(interpreter, reporter).resolve(statements)
        return interpreter, statements
    return _resolve
