from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from tlox.tokens import Token


class Visitor[T](ABC):
    @abstractmethod
    def visit(self, node: "Node") -> T:
        ...


class Node:
    def accept[T](self, visitor: Visitor[T]) -> T:
        return visitor.visit(self)


# Nodes hash by identity: the resolver keys its hop counts on the node itself.
node = dataclass(frozen=True, eq=False)


@node
class Expr(Node):
    ...

@node
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr

@node
class Grouping(Expr):
    expression: Expr

@node
class Literal(Expr):
    value: Any

@node
class Unary(Expr):
    operator: Token
    right: Expr

@node
class Variable(Expr):
    name: Token

@node
class Assign(Expr):
    name: Token
    value: Expr

@node
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr

@node
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: list[Expr]

@node
class Get(Expr):
    object: Expr
    name: Token

@node
class Set(Expr):
    object: Expr
    name: Token
    value: Expr

@node
class This(Expr):
    keyword: Token

@node
class Super(Expr):
    keyword: Token
    method: Token
