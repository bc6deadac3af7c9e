from contextlib import contextmanager, nullcontext
from enum import Enum, auto
from functools import singledispatchmethod
from typing import Final, Iterator, override

from tlox.errors import ErrorKind, ErrorReporter
from tlox.tokens import Token
from tlox.expr import Node, Visitor
from tlox import interpreter as interp, stmt as st, expr as ex

class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    METHOD = auto()

class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()

class VariableState(Enum):
    DECLARED = auto()
    DEFINED = auto()

class Variable:
    name: Final[Token]
    state: VariableState

    def __init__(self, name: Token, state: VariableState) -> None:
        self.name = name
        self.state = state

class Resolver(Visitor):
    """Static pass that tells the interpreter how far away each local lives.

    The scope stack mirrors the environments the interpreter will create.
    Names not found in any local scope are globals and get no entry.
    """
    interpreter: interp.Interpreter
    scopes: list[dict[str, Variable]]
    global_names: set[str]
    initializing_global: str | None
    current_function: FunctionType
    current_class: ClassType

    def __init__(self, interpreter: interp.Interpreter, reporter: ErrorReporter | None = None) -> None:
        self.interpreter = interpreter
        self.reporter = reporter if reporter is not None else interpreter.reporter
        self.scopes = []
        self.global_names = set()
        self.initializing_global = None
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, node: list[st.Stmt] | st.Stmt | ex.Expr) -> None:
        match node:
            case list(statements):
                for statement in statements:
                    self.resolve(statement)
            case st.Stmt() | ex.Expr():
                node.accept(self)
            case _:
                raise NotImplementedError(f"'{node.__class__.__name__}' could not be handled by resolve()")

    def error(self, token: Token, message: str) -> None:
        self.reporter.error(token, message, ErrorKind.RESOLUTION)

    @contextmanager
    def scope(self, content: dict[str, Variable] | None = None) -> Iterator[dict[str, Variable]]:
        self.scopes.append(content if content is not None else {})
        try:
            yield self.scopes[-1]
        finally:
            self.scopes.pop()

    def declare(self, name: Token) -> None:
        if not self.scopes:
            self.global_names.add(name.lexeme)
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error(name, "Already a variable with this name in this scope.")

        scope[name.lexeme] = Variable(name, VariableState.DECLARED)

    def define(self, name: Token) -> None:
        if self.scopes:
            self.scopes[-1][name.lexeme].state = VariableState.DEFINED

    def is_known_global(self, name: str) -> bool:
        return name in self.global_names or name in self.interpreter.globals

    def resolve_local(self, expr: ex.Expr, name: Token, skip: int = 0) -> bool:
        for i, scope in enumerate(reversed(self.scopes)):
            if i >= skip and name.lexeme in scope:
                self.interpreter.resolve(expr, i)
                return True
        return False

    def resolve_function(self, function: st.Function, type: FunctionType) -> None:
        enclosing_function = self.current_function
        self.current_function = type

        with self.scope():
            for param in function.params:
                self.declare(param)
                self.define(param)
            self.resolve(function.body)

        self.current_function = enclosing_function

    @singledispatchmethod
    @override
    def visit(self, obj: Node) -> None:
        raise NotImplementedError(f"'{obj.__class__.__name__}' could not be dispatched by visit()")

    @visit.register
    def _(self, stmt: st.Block) -> None:
        with self.scope():
            self.resolve(stmt.statements)

    @visit.register
    def _(self, stmt: st.Class) -> None:
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        if stmt.superclass is not None:
            superclass = stmt.superclass.name
            if stmt.name.lexeme == superclass.lexeme:
                self.error(superclass, "A class can't inherit from itself.")
            # Top-level code runs in textual order; elsewhere the runtime check decides.
            elif (not self.resolve_local(stmt.superclass, superclass)
                  and not self.scopes
                  and not self.is_known_global(superclass.lexeme)):
                self.error(superclass, f"Undefined superclass '{superclass.lexeme}'.")

            self.current_class = ClassType.SUBCLASS
            super_scope = self.scope({
                "super": Variable(stmt.name, VariableState.DEFINED)
            })
        else:
            super_scope = nullcontext()

        with super_scope, self.scope({"this": Variable(stmt.name, VariableState.DEFINED)}):
            for method in stmt.methods:
                self.resolve_function(method, FunctionType.METHOD)

        self.current_class = enclosing_class

    @visit.register
    def _(self, stmt: st.Expression) -> None:
        self.resolve(stmt.expression)

    @visit.register
    def _(self, stmt: st.Function) -> None:
        self.declare(stmt.name)
        self.define(stmt.name)

        self.resolve_function(stmt, FunctionType.FUNCTION)

    @visit.register
    def _(self, stmt: st.If) -> None:
        self.resolve(stmt.condition)
        self.resolve(stmt.then_branch)

        if stmt.else_branch is not None:
            self.resolve(stmt.else_branch)

    @visit.register
    def _(self, stmt: st.Print) -> None:
        self.resolve(stmt.expression)

    @visit.register
    def _(self, stmt: st.Return) -> None:
        if self.current_function is FunctionType.NONE:
            self.error(stmt.keyword, "Can't return from top-level code.")

        if stmt.value is not None:
            self.resolve(stmt.value)

    @visit.register
    def _(self, stmt: st.Var) -> None:
        if not self.scopes and not self.is_known_global(stmt.name.lexeme):
            self.initializing_global = stmt.name.lexeme

        self.declare(stmt.name)
        if stmt.initializer is not None:
            self.resolve(stmt.initializer)
        self.define(stmt.name)

        self.initializing_global = None

    @visit.register
    def _(self, stmt: st.While) -> None:
        self.resolve(stmt.condition)
        self.resolve(stmt.body)

    @visit.register
    def _(self, expr: ex.Assign) -> None:
        self.resolve(expr.value)
        self.resolve_local(expr, expr.name)

    @visit.register
    def _(self, expr: ex.Binary) -> None:
        self.resolve(expr.left)
        self.resolve(expr.right)

    @visit.register
    def _(self, expr: ex.Call) -> None:
        self.resolve(expr.callee)

        for argument in expr.arguments:
            self.resolve(argument)

    @visit.register
    def _(self, expr: ex.Get) -> None:
        self.resolve(expr.object)

    @visit.register
    def _(self, expr: ex.Grouping) -> None:
        self.resolve(expr.expression)

    @visit.register
    def _(self, expr: ex.Literal) -> None:
        pass

    @visit.register
    def _(self, expr: ex.Logical) -> None:
        self.resolve(expr.left)
        self.resolve(expr.right)

    @visit.register
    def _(self, expr: ex.Set) -> None:
        self.resolve(expr.value)
        self.resolve(expr.object)

    @visit.register
    def _(self, expr: ex.Super) -> None:
        if self.current_class is ClassType.NONE:
            self.error(expr.keyword, "Can't use 'super' outside of a class.")
        elif self.current_class is not ClassType.SUBCLASS:
            self.error(expr.keyword, "Can't use 'super' in a class with no superclass.")

        self.resolve_local(expr, expr.keyword)

    @visit.register
    def _(self, expr: ex.This) -> None:
        if self.current_class is ClassType.NONE:
            self.error(expr.keyword, "Can't use 'this' outside of a class.")
            return

        self.resolve_local(expr, expr.keyword)

    @visit.register
    def _(self, expr: ex.Unary) -> None:
        self.resolve(expr.right)

    @visit.register
    def _(self, expr: ex.Variable) -> None:
        if not self.scopes and expr.name.lexeme == self.initializing_global:
            self.error(expr.name, "Can't read local variable in its own initializer.")
            return

        if self.scopes:
            var = self.scopes[-1].get(expr.name.lexeme)
            if var is not None and var.state is VariableState.DECLARED:
                # The initializer reads whatever binding the new name shadows.
                if (not self.resolve_local(expr, expr.name, skip=1)
                        and not self.is_known_global(expr.name.lexeme)):
                    self.error(expr.name, "Can't read local variable in its own initializer.")
                return

        self.resolve_local(expr, expr.name)
