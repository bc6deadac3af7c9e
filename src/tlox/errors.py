"""Diagnostics shared by every stage of a run.

Scanning, parsing and resolution report problems and keep going, so a
single run can surface several of them. Runtime errors unwind the
evaluator and are reported once, at the top of the run.
"""
import sys
from dataclasses import dataclass
from enum import Enum, auto
from typing import Final, TextIO

from tlox.tokens import Token, TokenType as TT


class ErrorKind(Enum):
    LEX = auto()
    PARSE = auto()
    RESOLUTION = auto()
    RUNTIME = auto()


class ParseError(Exception):
    pass


class LoxRuntimeError(Exception):
    token: Final[Token | None]

    def __init__(self, token: Token | None, message: str) -> None:
        super().__init__(message)
        self.token = token

    @property
    def message(self) -> str:
        return self.args[0]


@dataclass(frozen=True)
class Diagnostic:
    kind: ErrorKind
    line: int | None
    message: str
    where: str = ""

    def __str__(self) -> str:
        if self.kind is ErrorKind.RUNTIME:
            if self.line is None:
                return self.message
            return f"{self.message}\n[line {self.line}]"
        return f"[line {self.line}] Error{self.where}: {self.message}"


class ErrorReporter:
    diagnostics: list[Diagnostic]

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream
        self.diagnostics = []

    @property
    def had_error(self) -> bool:
        return any(d.kind is not ErrorKind.RUNTIME for d in self.diagnostics)

    @property
    def had_runtime_error(self) -> bool:
        return any(d.kind is ErrorKind.RUNTIME for d in self.diagnostics)

    def error(self, where: int | Token, message: str, kind: ErrorKind = ErrorKind.PARSE) -> None:
        if isinstance(where, int):
            self.report(Diagnostic(kind, where, message))
        elif where.type == TT.EOF:
            self.report(Diagnostic(kind, where.line, message, " at end"))
        else:
            self.report(Diagnostic(kind, where.line, message, f" at '{where.lexeme}'"))

    def runtime_error(self, error: LoxRuntimeError) -> None:
        line = error.token.line if error.token is not None else None
        self.report(Diagnostic(ErrorKind.RUNTIME, line, error.message))

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        print(diagnostic, file=self.stream or sys.stderr)

    def reset(self) -> None:
        self.diagnostics.clear()
