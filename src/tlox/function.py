import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Never, Protocol, TYPE_CHECKING, runtime_checkable

from tlox.environment import Environment
from tlox import stmt as st

if TYPE_CHECKING:
    from tlox.interpreter import Interpreter
    from tlox.loxclass import LoxInstance


@runtime_checkable
class LoxCallable(Protocol):
    def call(self, interpreter: 'Interpreter', arguments: list) -> Any:
        ...

    def arity(self) -> int:
        ...


@dataclass(frozen=True)
class Return:
    """Completion of a statement that executed ``return``.

    Normal completion is ``None``; this record travels back up through
    blocks and loops to the call that started the function body.
    """
    value: Any = None


class LoxFunction:
    declaration: st.Function
    closure: Environment
    is_initializer: bool

    def __init__(self,
                 declaration: st.Function,
                 closure: Environment,
                 is_initializer: bool = False
                 ) -> None:
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def call(self, interpreter: 'Interpreter', arguments: list) -> Any:
        environment = Environment(self.closure)

        for param, arg in zip(self.declaration.params, arguments):
            environment.define(param, arg)

        completion = interpreter.execute_block(self.declaration.body, environment)

        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if completion is not None:
            return completion.value
        return None

    def arity(self) -> int:
        return len(self.declaration.params)

    def bind(self, instance: 'LoxInstance') -> 'LoxFunction':
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def __str__(self) -> str:
        return f"<fn {self.name}>"


class NativeFunction:
    def __init__(self, name: str, arity: int, function: Callable) -> None:
        self.name = name
        self._arity = arity
        self.function = function

    def call(self, interpreter: 'Interpreter', arguments: list) -> Any:
        return self.function(interpreter, arguments)

    def arity(self) -> int:
        return self._arity

    def __str__(self) -> str:
        return f"<native fn: {self.name}>"


type LoxFunctionCall = Callable[['Interpreter', list], Any]

def native_fn(*, arity: int, name: str | None = None) -> Callable[[LoxFunctionCall], NativeFunction]:
    def native_fn_decorator(fn: LoxFunctionCall) -> NativeFunction:
        nonlocal name
        if name is None:
            name = fn.__name__

        return NativeFunction(name, arity, fn)

    return native_fn_decorator

@native_fn(arity=0)
def clock(interpreter: 'Interpreter', args: list[Never]) -> float:
    return time.time()

@native_fn(arity=0, name="read")
def read_line(interpreter: 'Interpreter', args: list[Never]) -> str | None:
    try:
        line = sys.stdin.readline()
    except (OSError, ValueError):
        return None

    if not line:
        return None
    return line.removesuffix("\n")

@native_fn(arity=1, name="printF")
def print_inline(interpreter: 'Interpreter', args: list[Any]) -> None:
    print(interpreter.stringify(args[0]), end="")

@native_fn(arity=1, name="printFLine")
def print_line(interpreter: 'Interpreter', args: list[Any]) -> None:
    print(interpreter.stringify(args[0]))

NATIVES: list[NativeFunction] = [clock, read_line, print_inline, print_line]
