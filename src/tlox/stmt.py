from tlox import expr as ex
from tlox.expr import Node, node
from tlox.tokens import Token

@node
class Stmt(Node):
    ...

@node
class Expression(Stmt):
    expression: ex.Expr

@node
class Print(Stmt):
    expression: ex.Expr

@node
class Var(Stmt):
    name: Token
    initializer: ex.Expr | None = None

@node
class Block(Stmt):
    statements: list[Stmt]

@node
class If(Stmt):
    condition: ex.Expr
    then_branch: Stmt
    else_branch: Stmt | None = None

@node
class While(Stmt):
    condition: ex.Expr
    body: Stmt

@node
class Function(Stmt):
    name: Token
    params: list[Token]
    body: list[Stmt]

@node
class Return(Stmt):
    keyword: Token
    value: ex.Expr | None = None

@node
class Class(Stmt):
    name: Token
    superclass: ex.Variable | None
    methods: list[Function]
