from typing import Any, Self

from tlox.errors import LoxRuntimeError
from tlox.tokens import Token

class Environment:
    values: dict[str, Any]
    enclosing: Self | None

    def __init__(self, enclosing: Self | None = None) -> None:
        self.values = {}
        self.enclosing = enclosing

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def define(self, name: Token | str, value: Any) -> None:
        if isinstance(name, Token):
            token, lexeme = name, name.lexeme
        else:
            token, lexeme = None, name

        if lexeme in self.values:
            raise LoxRuntimeError(token, f"Variable '{lexeme}' is already defined.")

        self.values[lexeme] = value

    def ancestor(self, distance: int) -> Self:
        environment = self
        for _ in range(distance):
            if environment.enclosing is None:
                raise ValueError("Invalid distance")
            environment = environment.enclosing

        return environment

    def get(self, name: Token) -> Any:
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        elif self.enclosing is not None:
            return self.enclosing.get(name)
        else:
            raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def get_at(self, distance: int, name: str) -> Any:
        return self.ancestor(distance).values[name]

    def assign(self, name: Token, value: Any) -> None:
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
        elif self.enclosing is not None:
            self.enclosing.assign(name, value)
        else:
            raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign_at(self, distance: int, name: Token, value: Any) -> None:
        self.ancestor(distance).values[name.lexeme] = value
