import os
import sys

from tlox.errors import ErrorReporter
from tlox.interpreter import Interpreter
from tlox.parser import Parser
from tlox.resolver import Resolver
from tlox.scanner import Scanner

# Each call in a script nests a dozen or so Python frames.
RECURSION_LIMIT = 20_000

class Lox:
    """A session: one reporter and one interpreter shared by every run."""

    def __init__(self, reporter: ErrorReporter | None = None) -> None:
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.interpreter = Interpreter(self.reporter)

        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)

    @property
    def had_error(self) -> bool:
        return self.reporter.had_error

    @property
    def had_runtime_error(self) -> bool:
        return self.reporter.had_runtime_error

    def run_file(self, path: str | os.PathLike) -> None:
        with open(path, "r") as file:
            prog = file.read()
        self.run(prog)

    def run_prompt(self) -> None:
        try:
            while True:
                line = input("> ")
                if line.strip():
                    self.run(line)
                self.reporter.reset()
        except EOFError:
            print("Bye.")

    def run(self, source: str) -> None:
        scanner = Scanner(source, self.reporter)
        tokens = scanner.scan_tokens()

        parser = Parser(tokens, self.reporter)
        statements = parser.parse()

        if self.had_error or not statements:
            return

        resolver = Resolver(self.interpreter, self.reporter)
        resolver.resolve(statements)

        if self.had_error:
            return

        self.interpreter.interpret(statements)
