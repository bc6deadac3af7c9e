from functools import singledispatchmethod
from typing import Any, override

from tlox.environment import Environment
import tlox.expr as ex
from tlox import function as fn
from tlox import loxclass as cl
from tlox import stmt as st
from tlox.errors import ErrorReporter, LoxRuntimeError
from tlox.tokens import Token, TokenType as TT, TokenGroup as TG
from tlox.expr import Node, Visitor

type Completion = fn.Return | None


class Interpreter(Visitor[Any]):
    """Tree-walking evaluator.

    The global environment outlives individual runs, so definitions made
    by one run are visible to the next. Expressions evaluate to values;
    statements evaluate to a completion, ``None`` or ``fn.Return``.
    """
    globals: Environment
    environment: Environment
    locals: dict[ex.Expr, int]

    def __init__(self, reporter: ErrorReporter | None = None) -> None:
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.globals = Environment()
        self.environment = self.globals
        self.locals = {}

        for native in fn.NATIVES:
            self.register_native(native)

    def register_native(self, function: fn.NativeFunction, name: str | None = None) -> None:
        if name is None:
            name = function.name

        self.globals.define(name, function)

    def interpret(self, statements: list[st.Stmt]) -> None:
        try:
            for statement in statements:
                self.execute(statement)
        except LoxRuntimeError as error:
            self.reporter.runtime_error(error)
        except RecursionError:
            self.reporter.runtime_error(LoxRuntimeError(None, "Stack overflow."))

    def resolve(self, expr: ex.Expr, depth: int) -> None:
        self.locals[expr] = depth

    @singledispatchmethod
    @override
    def visit(self, obj: Node) -> Any:
        raise NotImplementedError(f"'{obj.__class__.__name__}' could not be dispatched by visit()")

    @visit.register
    def _(self, expr: ex.Literal) -> Any:
        return expr.value

    @visit.register
    def _(self, expr: ex.Unary) -> Any:
        right = self.evaluate(expr.right)

        match expr.operator.type:
            case TT.BANG:
                return not self.is_truthy(right)
            case TT.MINUS:
                self.check_number_operands(expr.operator, right)
                return -right

            case _:
                return None

    @visit.register
    def _(self, expr: ex.Binary) -> Any:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)

        if expr.operator.type in TG.Factor | TG.Comparison | {TT.MINUS}:
            self.check_number_operands(expr.operator, left, right)

        match expr.operator.type:
            case TT.BANG_EQUAL:
                return not self.is_equal(left, right)
            case TT.EQUAL_EQUAL:
                return self.is_equal(left, right)
            case TT.GREATER:
                return left > right
            case TT.GREATER_EQUAL:
                return left >= right
            case TT.LESS:
                return left < right
            case TT.LESS_EQUAL:
                return left <= right
            case TT.MINUS:
                return left - right
            case TT.SLASH:
                if right == 0:
                    raise LoxRuntimeError(expr.operator, "Division by zero.")
                return left / right
            case TT.STAR:
                return left * right
            case TT.PLUS:
                return self.add(expr.operator, left, right)
            case _:
                return None

    @visit.register
    def _(self, expr: ex.Grouping) -> Any:
        return self.evaluate(expr.expression)

    @visit.register
    def _(self, expr: ex.Variable) -> Any:
        return self.look_up_variable(expr.name, expr)

    @visit.register
    def _(self, expr: ex.Assign) -> Any:
        value = self.evaluate(expr.value)

        distance = self.locals.get(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name, value)
        else:
            self.globals.assign(expr.name, value)

        return value

    @visit.register
    def _(self, expr: ex.Logical) -> Any:
        left = self.evaluate(expr.left)

        if expr.operator.type == TT.OR:
            if self.is_truthy(left):
                return left
        else:
            if not self.is_truthy(left):
                return left

        return self.evaluate(expr.right)

    @visit.register
    def _(self, expr: ex.Call) -> Any:
        callee = self.evaluate(expr.callee)

        arguments = []
        for argument in expr.arguments:
            arguments.append(self.evaluate(argument))

        if not isinstance(callee, fn.LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")

        function = callee

        if len(arguments) != function.arity():
            raise LoxRuntimeError(expr.paren,
            f"Expected {function.arity()} arguments but got {len(arguments)}.")

        try:
            return function.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(expr.paren, "Stack overflow.") from None

    @visit.register
    def _(self, expr: ex.Get) -> Any:
        obj = self.evaluate(expr.object)
        if isinstance(obj, cl.LoxInstance):
            return obj.get(expr.name)

        raise LoxRuntimeError(expr.name, "Only instances have properties.")

    @visit.register
    def _(self, expr: ex.Set) -> Any:
        obj = self.evaluate(expr.object)
        if not isinstance(obj, cl.LoxInstance):
            raise LoxRuntimeError(expr.name, "Only instances have fields.")

        value = self.evaluate(expr.value)
        obj.set(expr.name, value)
        return value

    @visit.register
    def _(self, expr: ex.This) -> Any:
        return self.look_up_variable(expr.keyword, expr)

    @visit.register
    def _(self, expr: ex.Super) -> Any:
        distance = self.locals[expr]
        superclass: cl.LoxClass = self.environment.get_at(distance, "super")
        # "this" lives in the frame just inside the one holding "super".
        instance = self.environment.get_at(distance - 1, "this")

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise LoxRuntimeError(expr.method, f"Undefined property '{expr.method.lexeme}'.")

        return method.bind(instance)

    @visit.register
    def _(self, stmt: st.Expression) -> Completion:
        self.evaluate(stmt.expression)
        return None

    @visit.register
    def _(self, stmt: st.Function) -> Completion:
        function = fn.LoxFunction(stmt, self.environment)
        self.environment.define(stmt.name, function)
        return None

    @visit.register
    def _(self, stmt: st.Class) -> Completion:
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, cl.LoxClass):
                raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")

        self.environment.define(stmt.name, None)

        method_env = self.environment
        if superclass is not None:
            method_env = Environment(self.environment)
            method_env.define("super", superclass)

        methods = {
            method.name.lexeme: fn.LoxFunction(method, method_env, method.name.lexeme == "init")
            for method in stmt.methods
        }

        klass = cl.LoxClass(stmt.name.lexeme, superclass, methods)
        self.environment.assign(stmt.name, klass)
        return None

    @visit.register
    def _(self, stmt: st.If) -> Completion:
        if self.is_truthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            return self.execute(stmt.else_branch)
        return None

    @visit.register
    def _(self, stmt: st.Print) -> Completion:
        value = self.evaluate(stmt.expression)
        print(self.stringify(value))
        return None

    @visit.register
    def _(self, stmt: st.Return) -> Completion:
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)

        return fn.Return(value)

    @visit.register
    def _(self, stmt: st.Var) -> Completion:
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)

        self.environment.define(stmt.name, value)
        return None

    @visit.register
    def _(self, stmt: st.While) -> Completion:
        while self.is_truthy(self.evaluate(stmt.condition)):
            completion = self.execute(stmt.body)
            if completion is not None:
                return completion
        return None

    @visit.register
    def _(self, stmt: st.Block) -> Completion:
        return self.execute_block(stmt.statements, Environment(self.environment))

    def is_truthy(self, obj: Any) -> bool:
        return obj is not None and obj is not False

    @staticmethod
    def is_equal(left: Any, right: Any) -> bool:
        # bool is an int subclass in Python, so 1 == true must be ruled out by type.
        if type(left) is not type(right):
            return False
        return left == right

    def evaluate(self, expr: ex.Expr) -> Any:
        return expr.accept(self)

    def execute(self, stmt: st.Stmt) -> Completion:
        return stmt.accept(self)

    def execute_block(self, statements: list[st.Stmt], environment: Environment) -> Completion:
        previous = self.environment

        try:
            self.environment = environment

            for statement in statements:
                completion = self.execute(statement)
                if completion is not None:
                    return completion
        finally:
            self.environment = previous

        return None

    def look_up_variable(self, name: Token, expr: ex.Expr) -> Any:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    @staticmethod
    def is_number(num: Any) -> bool:
        return isinstance(num, float)

    def check_number_operands(self, operator: Token, *operands: Any) -> None:
        if not all(map(self.is_number, operands)):
            plural = "s" if len(operands) > 1 else ""

            raise LoxRuntimeError(operator, f"Operand{plural} must be a number.")

    def add(self, operator: Token, left: Any, right: Any) -> Any:
        if isinstance(left, (float, str)) and type(left) is type(right):
            return left + right
        elif isinstance(left, str) and self.is_number(right):
            return left + self.stringify(right)
        elif self.is_number(left) and isinstance(right, str):
            return self.stringify(left) + right

        raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

    def stringify(self, obj: Any) -> str:
        match obj:
            case None:
                return "nil"
            case bool(b):
                return str(b).lower()
            case float(num) if num.is_integer():
                return str(int(num))
            case float(num):
                text = repr(num)
                return text.removesuffix(".0")
            case _:
                return str(obj)
